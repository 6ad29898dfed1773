"""Time window negotiation state machine.

    IDLE -> AWAITING_CONFIRMATION -> CONFIRMED -> ACTIVE -> IDLE

A calendar suggestion only pre-fills the end time. Any edit by the user
switches the source to USER, so user input always wins over the calendar.
"""

import logging
from datetime import datetime, timedelta
from enum import Enum
from typing import Optional, Union

from ..models.window import AdvisorySuggestion, TimeWindow, WindowSource, WindowValidationError
from ..utils.datetime_utils import minutes_between, parse_clock_input

logger = logging.getLogger(__name__)

SHORT_WINDOW_MESSAGE = "This may be a bit short to start something."


class NegotiationState(Enum):
    """States of the window negotiation."""
    
    IDLE = "idle"
    AWAITING_CONFIRMATION = "awaiting-confirmation"
    CONFIRMED = "confirmed"
    ACTIVE = "active"


class InvalidTransitionError(RuntimeError):
    """Raised when an action is not allowed in the current state."""
    
    def __init__(self, action: str, state: NegotiationState):
        super().__init__(f"Cannot {action} while {state.value}")
        self.action = action
        self.state = state


class TimeWindowNegotiator:
    """Establishes how much time is available for one session."""
    
    def __init__(self, config: dict = None):
        """Initialize negotiator with the `window` config section."""
        self.config = config or {}
        window_config = self.config.get('window', {})
        self.default_minutes = window_config.get('default_minutes', 45)
        self.minimum_minutes = window_config.get('minimum_minutes', 10)
        self.presets = tuple(window_config.get('presets', [20, 40, 60]))
        self.short_notice_minutes = window_config.get('short_notice_minutes', 15)
        self.reset()
    
    def reset(self) -> None:
        """Discard any window or suggestion and return to IDLE."""
        self.state = NegotiationState.IDLE
        self.suggestion: Optional[AdvisorySuggestion] = None
        self.end_time: Optional[datetime] = None
        self.source: Optional[WindowSource] = None
        self.validation_message = ''
        self.window: Optional[TimeWindow] = None
    
    def cancel(self) -> None:
        """User closed the dialog before confirming."""
        self.reset()
    
    def _require(self, action: str, *states: NegotiationState) -> None:
        if self.state not in states:
            raise InvalidTransitionError(action, self.state)
    
    def begin(self, suggestion: Optional[AdvisorySuggestion], now: datetime) -> None:
        """Enter AWAITING_CONFIRMATION with a default end time."""
        self._require('begin negotiation', NegotiationState.IDLE)
        
        if suggestion is not None and suggestion.start_time > now:
            self.suggestion = suggestion
            self.end_time = suggestion.start_time
            self.source = WindowSource.CALENDAR_SUGGESTED
        else:
            if suggestion is not None:
                logger.warning("Calendar suggestion %s is not in the future, using default", suggestion.start_time)
            self.suggestion = None
            self.end_time = now + timedelta(minutes=self.default_minutes)
            self.source = WindowSource.SYSTEM_DEFAULT
        
        self.validation_message = ''
        self.state = NegotiationState.AWAITING_CONFIRMATION
    
    def set_end_time(self, end_time: datetime) -> None:
        """User edited the end time."""
        self._require('edit the end time', NegotiationState.AWAITING_CONFIRMATION)
        self.end_time = end_time
        self.source = WindowSource.USER
        self.validation_message = ''
    
    def set_end_clock(self, text: str, now: datetime) -> None:
        """User typed an 'HH:MM' end time; earlier than now means tomorrow."""
        self.set_end_time(parse_clock_input(text, now))
    
    def choose_preset(self, minutes: int, now: datetime) -> None:
        """User picked one of the preset durations."""
        if minutes not in self.presets:
            raise ValueError(f"Unknown preset {minutes}; expected one of {self.presets}")
        self.set_end_time(now + timedelta(minutes=minutes))
    
    def available_minutes(self, now: datetime) -> int:
        """Minutes between now and the current end time."""
        if self.end_time is None:
            return 0
        return minutes_between(now, self.end_time)
    
    def confirm(self, now: datetime) -> Union[TimeWindow, WindowValidationError]:
        """Validate the window against the current time and confirm it.
        
        A window that is too short is returned as a validation error and the
        negotiation stays open.
        """
        self._require('confirm', NegotiationState.AWAITING_CONFIRMATION)
        
        available = self.available_minutes(now)
        if available < self.minimum_minutes:
            self.validation_message = SHORT_WINDOW_MESSAGE
            return WindowValidationError(
                code='window_too_short',
                message=SHORT_WINDOW_MESSAGE,
                available_minutes=available,
            )
        
        calendar = self.source is WindowSource.CALENDAR_SUGGESTED
        self.window = TimeWindow(
            start_time=now,
            end_time=self.end_time,
            source=self.source,
            event_name=self.suggestion.name if calendar and self.suggestion else None,
        )
        self.validation_message = ''
        self.state = NegotiationState.CONFIRMED
        return self.window
    
    def activate(self) -> TimeWindow:
        """Ranking is about to run on the confirmed window."""
        self._require('activate', NegotiationState.CONFIRMED)
        self.state = NegotiationState.ACTIVE
        return self.window
    
    def hint(self, now: datetime) -> str:
        """Short description of where the current end time came from."""
        if self.source is None:
            return ''
        
        if self.source is WindowSource.CALENDAR_SUGGESTED:
            lines = ["Based on your calendar"]
            if self.suggestion and self.suggestion.name:
                lines.append(f"Next: {self.suggestion.name}")
            if self.available_minutes(now) < self.short_notice_minutes:
                lines.append("Your next event starts soon, so you may only have a short window.")
            return "\n".join(lines)
        
        if self.source is WindowSource.SYSTEM_DEFAULT:
            return "Default suggestion"
        
        if self.source is WindowSource.USER:
            minutes = self.available_minutes(now)
            return f"You have about {minutes} {'minute' if minutes == 1 else 'minutes'}"
        
        raise ValueError(f"Unknown window source: {self.source}")
