"""Core recommendation engine."""

from datetime import datetime, timedelta
from typing import Iterable, List, Optional

from ..models.recommendation import Recommendation
from ..models.task import EnergyLevel, Goal, Task
from ..models.window import TimeWindow, WindowSource
from ..scoring.ranker import CompositeRanker
from .explanation import ExplanationGenerator, find_goal


class Recommender:
    """Selects one task for a time window and explains the choice."""
    
    def __init__(
        self,
        ranker: CompositeRanker = None,
        explainer: ExplanationGenerator = None,
        config: dict = None,
    ):
        """Initialize recommender with a ranker and explanation generator."""
        self.config = config or {}
        self.ranker = ranker or CompositeRanker(self.config)
        self.explainer = explainer or ExplanationGenerator()
    
    def recommend(
        self,
        tasks: List[Task],
        goals: List[Goal],
        energy: EnergyLevel,
        window: TimeWindow,
        now: datetime = None,
        excluded_ids: Iterable[str] = (),
    ) -> Optional[Recommendation]:
        """Recommend exactly one task, or None when no task is eligible."""
        now = now or window.start_time
        available_minutes = window.available_minutes
        
        best = self.ranker.select(
            tasks,
            energy,
            available_minutes,
            now,
            excluded_ids=excluded_ids,
            window_source=window.source.value,
        )
        if best is None:
            return None
        
        explanation = self.explainer.explain(
            best.task,
            best.reason_type,
            find_goal(best.task, goals),
            best.days_until_due,
            window.end_time,
            window.source,
            now,
        )
        
        return Recommendation(
            task=best.task,
            reason_type=best.reason_type,
            explanation=explanation,
            duration=min(best.task.estimated_minutes, available_minutes),
        )
    
    def recommend_for_minutes(
        self,
        tasks: List[Task],
        goals: List[Goal],
        energy: EnergyLevel,
        available_minutes: int,
        now: datetime = None,
        excluded_ids: Iterable[str] = (),
    ) -> Optional[Recommendation]:
        """Recommend for a user-stated number of minutes starting now."""
        now = now or datetime.now()
        window = TimeWindow(
            start_time=now,
            end_time=now + timedelta(minutes=available_minutes),
            source=WindowSource.USER,
        )
        return self.recommend(tasks, goals, energy, window, now=now, excluded_ids=excluded_ids)
