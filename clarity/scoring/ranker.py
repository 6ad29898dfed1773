"""Composite ranker: filters, scores and selects one candidate task."""

import math
from datetime import datetime
from typing import Iterable, List, Optional

from ..models.recommendation import ReasonType
from ..models.task import EnergyLevel, Task, TaskType
from ..models.trace import ScoredCandidate
from .fit import compute_duration_fit, compute_energy_fit
from .observers import NullObserver, RankingObserver
from .pressure import DeadlinePressureModel

DEFAULT_WEIGHTS = {
    'pressure': 0.5,
    'energy_fit': 0.3,
    'duration_fit': 0.2,
}


def is_candidate(task: Task, excluded_ids: Iterable[str] = ()) -> bool:
    """Whether a task is eligible for ranking."""
    return not (
        task.completed
        or task.in_progress
        or task.task_id in excluded_ids
        or task.is_reminder()
    )


def reminder_tasks(tasks: List[Task]) -> List[Task]:
    """Open reminder tasks, for display as a passive list."""
    return [task for task in tasks if task.is_reminder() and not task.completed]


class CompositeRanker:
    """Ranks candidate tasks by weighted pressure, energy fit and duration fit."""
    
    def __init__(
        self,
        config: dict = None,
        observer: RankingObserver = None,
        pressure_model: DeadlinePressureModel = None,
    ):
        """Initialize ranker with configuration and an optional telemetry observer."""
        self.config = config or {}
        scoring_config = self.config.get('scoring', {})
        # Partial weight overrides are layered over the defaults.
        self.weights = {**DEFAULT_WEIGHTS, **scoring_config.get('weights', {})}
        total = sum(self.weights.values())
        if not math.isclose(total, 1.0, abs_tol=1e-9):
            raise ValueError(f"Scoring weights must sum to 1.0, got {total}")
        self.core_pressure_threshold = scoring_config.get('core_pressure_threshold', 50)
        self.observer = observer or NullObserver()
        self.pressure_model = pressure_model or DeadlinePressureModel(self.config)
    
    def score_task(
        self,
        task: Task,
        energy: EnergyLevel,
        available_minutes: float,
        now: datetime,
    ) -> ScoredCandidate:
        """Compute all score components for a single task."""
        days_until_due = self.pressure_model.parse_deadline(task.deadline, now)
        pressure = self.pressure_model.compute_pressure(task, now)
        energy_fit = compute_energy_fit(task, energy)
        duration_fit = compute_duration_fit(task, available_minutes)
        
        score = (
            pressure * self.weights['pressure']
            + energy_fit * self.weights['energy_fit']
            + duration_fit * self.weights['duration_fit']
        )
        
        return ScoredCandidate(
            task=task,
            pressure=pressure,
            energy_fit=energy_fit,
            duration_fit=duration_fit,
            score=score,
            days_until_due=days_until_due,
            reason_type=self.reason_type(task, pressure),
        )
    
    def reason_type(self, task: Task, pressure: float) -> ReasonType:
        """Label by pressure alone, independent of the composite score."""
        if task.task_type is TaskType.CORE_OBLIGATION and pressure > self.core_pressure_threshold:
            return ReasonType.CORE_PRESSURE
        return ReasonType.GROWTH_OPPORTUNITY
    
    def rank(
        self,
        tasks: List[Task],
        energy: EnergyLevel,
        available_minutes: float,
        now: datetime,
        excluded_ids: Iterable[str] = (),
        window_source: Optional[str] = None,
    ) -> List[ScoredCandidate]:
        """Score eligible tasks and order them best first.
        
        Equal scores keep their input order.
        """
        excluded = set(excluded_ids)
        self.observer.on_ranking_started({
            'now': now,
            'energy': energy.value,
            'available_minutes': available_minutes,
            'window_source': window_source,
            'excluded_ids': sorted(excluded),
            'weights': self.weights,
        })
        
        scored = []
        for task in tasks:
            if not is_candidate(task, excluded):
                continue
            candidate = self.score_task(task, energy, available_minutes, now)
            self.observer.on_candidate_scored(candidate)
            scored.append(candidate)
        
        # sorted() is stable, including with reverse=True
        return sorted(scored, key=lambda candidate: candidate.score, reverse=True)
    
    def select(
        self,
        tasks: List[Task],
        energy: EnergyLevel,
        available_minutes: float,
        now: datetime,
        excluded_ids: Iterable[str] = (),
        window_source: Optional[str] = None,
    ) -> Optional[ScoredCandidate]:
        """Return the single best candidate, or None if nothing is eligible."""
        ranked = self.rank(tasks, energy, available_minutes, now, excluded_ids, window_source)
        best = ranked[0] if ranked else None
        self.observer.on_selection(best)
        return best
