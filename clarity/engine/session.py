"""Recommendation session orchestration."""

import logging
import queue
import threading
from dataclasses import replace
from datetime import datetime
from typing import Callable, List, Optional, Union

from ..models.recommendation import Recommendation
from ..models.task import EnergyLevel, Goal, Task
from ..models.window import AdvisorySuggestion, TimeWindow, WindowValidationError
from ..utils.datetime_utils import to_local_naive
from .negotiator import InvalidTransitionError, NegotiationState, TimeWindowNegotiator
from .recommender import Recommender

logger = logging.getLogger(__name__)

AdvisoryLookup = Callable[[datetime], Optional[AdvisorySuggestion]]


class RecommendationSession:
    """Drives one ask -> confirm -> recommend cycle at a time.
    
    The only outbound call is the optional advisory lookup; anything it does
    wrong (raising, hanging, returning junk) degrades to "no suggestion".
    """
    
    def __init__(
        self,
        tasks: List[Task],
        goals: List[Goal],
        energy: EnergyLevel = EnergyLevel.MEDIUM,
        advisory_lookup: Optional[AdvisoryLookup] = None,
        config: dict = None,
        recommender: Recommender = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """Initialize session with task/goal snapshots and collaborators."""
        self.config = config or {}
        self.tasks = list(tasks)
        self.goals = list(goals)
        self.energy = energy
        self.advisory_lookup = advisory_lookup
        self.advisory_timeout = self.config.get('session', {}).get('advisory_timeout_seconds', 2.0)
        self.recommender = recommender or Recommender(config=self.config)
        self.clock = clock
        self.negotiator = TimeWindowNegotiator(self.config)
        self.window: Optional[TimeWindow] = None
        self.recommendation: Optional[Recommendation] = None
    
    @property
    def state(self) -> NegotiationState:
        return self.negotiator.state
    
    def update_snapshot(self, tasks: List[Task], goals: List[Goal]) -> None:
        """Replace the task and goal snapshots used by later rankings."""
        self.tasks = list(tasks)
        self.goals = list(goals)
    
    def _fetch_suggestion(self, now: datetime) -> Optional[AdvisorySuggestion]:
        if self.advisory_lookup is None:
            return None
        
        results: queue.Queue = queue.Queue(maxsize=1)
        
        def run_lookup():
            try:
                results.put(('ok', self.advisory_lookup(now)))
            except Exception as exc:
                results.put(('error', exc))
        
        # A late result is never read.
        threading.Thread(target=run_lookup, name='advisory-lookup', daemon=True).start()
        try:
            status, result = results.get(timeout=self.advisory_timeout)
        except queue.Empty:
            logger.warning("Calendar lookup timed out after %.1fs, using default window", self.advisory_timeout)
            return None
        
        if status == 'error':
            logger.warning("Calendar lookup failed, using default window", exc_info=result)
            return None
        if result is None:
            return None
        if not isinstance(result, AdvisorySuggestion) or not isinstance(result.start_time, datetime):
            logger.warning("Ignoring unexpected calendar lookup result: %r", result)
            return None
        if result.start_time.tzinfo is not None:
            result = replace(result, start_time=to_local_naive(result.start_time))
        return result
    
    def ask(self) -> TimeWindowNegotiator:
        """Start negotiating the time window for a new recommendation."""
        if self.negotiator.state is not NegotiationState.IDLE:
            logger.debug("Discarding previous session in state %s", self.negotiator.state.value)
            self._end_session()
        
        suggestion = self._fetch_suggestion(self.clock())
        # Recompute now; the lookup may have taken a while.
        self.negotiator.begin(suggestion, self.clock())
        return self.negotiator
    
    def confirm(
        self,
        end_time: datetime = None,
        preset_minutes: int = None,
        clock_text: str = None,
    ) -> Union[TimeWindow, WindowValidationError]:
        """Apply an optional user edit, confirm the window and recommend.
        
        Returns the confirmed window, or a validation error with the
        negotiation still awaiting confirmation.
        """
        now = self.clock()
        if end_time is not None:
            self.negotiator.set_end_time(end_time)
        elif preset_minutes is not None:
            self.negotiator.choose_preset(preset_minutes, now)
        elif clock_text is not None:
            self.negotiator.set_end_clock(clock_text, now)
        
        result = self.negotiator.confirm(now)
        if isinstance(result, WindowValidationError):
            return result
        
        self.window = self.negotiator.activate()
        self.recommendation = self._recommend()
        if self.recommendation is None:
            logger.info("No eligible tasks for a %d minute window", self.window.available_minutes)
            self._end_session()
        return result
    
    def get_recommendation(self) -> Optional[Recommendation]:
        return self.recommendation
    
    def accept_recommendation(self) -> Optional[Recommendation]:
        """End the session; accepting does not change any task."""
        accepted = self.recommendation
        self._end_session()
        return accepted
    
    def suggest_another(self) -> Optional[Recommendation]:
        """Recommend again without the current task, in the same window."""
        if self.recommendation is None:
            raise InvalidTransitionError('suggest another', self.negotiator.state)
        
        self.recommendation = self._recommend(excluded_ids=[self.recommendation.task.task_id])
        if self.recommendation is None:
            self._end_session()
        return self.recommendation
    
    def dismiss_recommendation(self) -> None:
        self._end_session()
    
    def cancel(self) -> None:
        """Close the time dialog before confirming."""
        self._end_session()
    
    def on_energy_change(self, energy: EnergyLevel) -> Optional[Recommendation]:
        """Update energy and refresh an active recommendation."""
        self.energy = energy
        if self.recommendation is None:
            return None
        
        self.recommendation = self._recommend()
        if self.recommendation is None:
            self._end_session()
        return self.recommendation
    
    def _recommend(self, excluded_ids=()) -> Optional[Recommendation]:
        return self.recommender.recommend(
            self.tasks,
            self.goals,
            self.energy,
            self.window,
            now=self.clock(),
            excluded_ids=excluded_ids,
        )
    
    def _end_session(self) -> None:
        self.window = None
        self.recommendation = None
        self.negotiator.reset()
