"""Ranking telemetry observers."""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime
from typing import Dict, List, Optional

from ..models.trace import RankingTrace, ScoredCandidate

logger = logging.getLogger(__name__)


class RankingObserver(ABC):
    """Receives score breakdowns from the ranker."""
    
    @abstractmethod
    def on_ranking_started(self, context: Dict) -> None:
        """Called once per ranking run, before any candidate is scored."""
        pass
    
    @abstractmethod
    def on_candidate_scored(self, candidate: ScoredCandidate) -> None:
        """Called for every candidate that passed the filters."""
        pass
    
    @abstractmethod
    def on_selection(self, selected: Optional[ScoredCandidate]) -> None:
        """Called with the winning candidate, or None if nothing was eligible."""
        pass


class NullObserver(RankingObserver):
    """Discards all telemetry."""
    
    def on_ranking_started(self, context: Dict) -> None:
        pass
    
    def on_candidate_scored(self, candidate: ScoredCandidate) -> None:
        pass
    
    def on_selection(self, selected: Optional[ScoredCandidate]) -> None:
        pass


class LoggingObserver(RankingObserver):
    """Writes score breakdowns to a logger at debug level."""
    
    def __init__(self, log: logging.Logger = None):
        self.log = log or logger
    
    def on_ranking_started(self, context: Dict) -> None:
        self.log.debug(
            "Ranking for energy=%s available_minutes=%s excluded=%s",
            context.get('energy'),
            context.get('available_minutes'),
            context.get('excluded_ids'),
        )
    
    def on_candidate_scored(self, candidate: ScoredCandidate) -> None:
        days = candidate.days_until_due
        self.log.debug(
            "Task %r: type=%s days=%s pressure=%.2f energy_fit=%.2f duration_fit=%.2f score=%.2f reason=%s",
            candidate.task.title,
            candidate.task.task_type.value,
            'none' if days is None else f"{days:.2f}",
            candidate.pressure,
            candidate.energy_fit,
            candidate.duration_fit,
            candidate.score,
            candidate.reason_type.value,
        )
    
    def on_selection(self, selected: Optional[ScoredCandidate]) -> None:
        if selected is None:
            self.log.debug("No eligible tasks")
            return
        self.log.debug("Selected %r with score %.2f", selected.task.title, selected.score)


class TraceRecorder(RankingObserver):
    """Builds a RankingTrace for every ranking run."""
    
    def __init__(self):
        self.traces: List[RankingTrace] = []
    
    @property
    def latest(self) -> Optional[RankingTrace]:
        return self.traces[-1] if self.traces else None
    
    def on_ranking_started(self, context: Dict) -> None:
        self.traces.append(RankingTrace(
            run_id=str(uuid.uuid4())[:8],
            timestamp=context.get('now') or datetime.now(),
            energy=context['energy'],
            available_minutes=context['available_minutes'],
            window_source=context.get('window_source'),
            excluded_ids=list(context.get('excluded_ids', [])),
            weights=dict(context.get('weights', {})),
        ))
    
    def on_candidate_scored(self, candidate: ScoredCandidate) -> None:
        self.traces[-1].candidates.append(candidate)
    
    def on_selection(self, selected: Optional[ScoredCandidate]) -> None:
        self.traces[-1].selected_task_id = selected.task.task_id if selected else None


class CompositeObserver(RankingObserver):
    """Fans telemetry out to several observers."""
    
    def __init__(self, observers: List[RankingObserver]):
        self.observers = list(observers)
    
    def on_ranking_started(self, context: Dict) -> None:
        for observer in self.observers:
            observer.on_ranking_started(context)
    
    def on_candidate_scored(self, candidate: ScoredCandidate) -> None:
        for observer in self.observers:
            observer.on_candidate_scored(candidate)
    
    def on_selection(self, selected: Optional[ScoredCandidate]) -> None:
        for observer in self.observers:
            observer.on_selection(selected)
