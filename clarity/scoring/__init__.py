"""Scoring components: pressure, fit and composite ranking."""

from .fit import compute_duration_fit, compute_energy_fit
from .observers import CompositeObserver, LoggingObserver, NullObserver, RankingObserver, TraceRecorder
from .pressure import DeadlinePressureModel, compute_pressure, parse_deadline
from .ranker import CompositeRanker, is_candidate, reminder_tasks

__all__ = [
    'CompositeObserver',
    'CompositeRanker',
    'DeadlinePressureModel',
    'LoggingObserver',
    'NullObserver',
    'RankingObserver',
    'TraceRecorder',
    'compute_duration_fit',
    'compute_energy_fit',
    'compute_pressure',
    'is_candidate',
    'parse_deadline',
    'reminder_tasks',
]
