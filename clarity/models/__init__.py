"""Data contracts for the recommendation engine."""

from .recommendation import ReasonType, Recommendation
from .task import EnergyLevel, Goal, Task, TaskType
from .trace import RankingTrace, ScoredCandidate
from .window import AdvisorySuggestion, TimeWindow, WindowSource, WindowValidationError

__all__ = [
    'AdvisorySuggestion',
    'EnergyLevel',
    'Goal',
    'RankingTrace',
    'ReasonType',
    'Recommendation',
    'ScoredCandidate',
    'Task',
    'TaskType',
    'TimeWindow',
    'WindowSource',
    'WindowValidationError',
]
