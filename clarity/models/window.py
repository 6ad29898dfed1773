"""Time window models produced by negotiation."""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum
from typing import Optional


class WindowSource(Enum):
    """Provenance of a time window's end boundary."""
    
    USER = "user"
    CALENDAR_SUGGESTED = "calendar-suggested"
    SYSTEM_DEFAULT = "system-default"


@dataclass(frozen=True)
class AdvisorySuggestion:
    """Next upcoming calendar event, as reported by the calendar collaborator."""
    
    start_time: datetime
    name: str


@dataclass(frozen=True)
class TimeWindow:
    """Uninterrupted time available for a single session."""
    
    start_time: datetime
    end_time: datetime
    source: WindowSource
    event_name: Optional[str] = None
    
    def __post_init__(self):
        if self.end_time <= self.start_time:
            raise ValueError(
                f"Time window must end after it starts: {self.start_time} -> {self.end_time}"
            )
    
    @property
    def available_minutes(self) -> int:
        """Whole minutes between start and end, rounded."""
        return round((self.end_time - self.start_time).total_seconds() / 60)


@dataclass(frozen=True)
class WindowValidationError:
    """Recoverable validation failure returned by window confirmation."""
    
    code: str
    message: str
    available_minutes: int
    
    def to_dict(self):
        return {
            'error_code': self.code,
            'message': self.message,
            'available_minutes': self.available_minutes,
        }
