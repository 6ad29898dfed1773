"""Deadline pressure model.

Turns free-text deadlines into a days-until-due estimate and combines that
with the task category into a 0-100 pressure score. Core obligations follow
a continuous inverse-square curve,

    pressure = minimum + (100 - minimum) / (1 + steepness * days^2)

so pressure rises smoothly as the deadline approaches instead of jumping at
day boundaries.
"""

import re
from datetime import datetime
from typing import Optional

from ..models.task import Task, TaskType
from ..utils.datetime_utils import days_between, end_of_day, safe_date, sunday_based_weekday

_DUE_DATE_PATTERN = re.compile(r'due\s+(\d{1,2})/(\d{1,2})/(\d{4})', re.IGNORECASE)

# Days are floored here before entering the curve.
_MIN_DAYS = 0.1
_FRIDAY = 5


class DeadlinePressureModel:
    """Parses deadlines and scores deadline pressure."""
    
    def __init__(self, config: dict = None):
        """Initialize model with the `pressure` config section."""
        self.config = config or {}
        pressure_config = self.config.get('pressure', {})
        self.minimum = pressure_config.get('minimum', 20)
        self.steepness = pressure_config.get('steepness', 2.0)
        self.growth_pressure = pressure_config.get('growth', 10)
        self.general_pressure = pressure_config.get('general', 5)
        self.default_days = pressure_config.get('default_days', 7)
    
    def parse_deadline(self, text: str, now: datetime) -> Optional[float]:
        """Estimate days until due from deadline text; None means no deadline."""
        text = text or ''
        lower = text.lower()
        
        match = _DUE_DATE_PATTERN.search(text)
        if match:
            month, day, year = (int(part) for part in match.groups())
            due = safe_date(year, month, day)
            if due is not None:
                return days_between(now, end_of_day(due))
        
        if 'today' in lower:
            return 0.5
        
        if 'tomorrow' in lower:
            return 1
        
        if 'friday' in lower:
            days_until_friday = (_FRIDAY - sunday_based_weekday(now)) % 7
            return 7 if days_until_friday == 0 else days_until_friday
        
        if 'this week' in lower:
            return max(1, 7 - sunday_based_weekday(now))
        
        if 'when you have time' in lower or 'someday' in lower:
            return None
        
        return self.default_days
    
    def compute_pressure(self, task: Task, now: datetime) -> float:
        """Compute 0-100 pressure for a task."""
        if task.task_type is TaskType.GROWTH:
            return self.growth_pressure
        
        if task.task_type is TaskType.GENERAL:
            return self.general_pressure
        
        if task.task_type is TaskType.CORE_OBLIGATION:
            return self.pressure_for_days(self.parse_deadline(task.deadline, now))
        
        raise ValueError(f"Unknown task type: {task.task_type}")
    
    def pressure_for_days(self, days_until_due: Optional[float]) -> float:
        """Pressure curve for a core obligation."""
        if days_until_due is None:
            return self.minimum
        
        days = max(days_until_due, _MIN_DAYS)
        pressure = self.minimum + (100 - self.minimum) / (1 + self.steepness * days * days)
        return max(self.minimum, min(100, pressure))


_default_model = DeadlinePressureModel()


def parse_deadline(text: str, now: datetime) -> Optional[float]:
    """Parse deadline text with the default model."""
    return _default_model.parse_deadline(text, now)


def compute_pressure(task: Task, now: datetime) -> float:
    """Compute pressure with the default model."""
    return _default_model.compute_pressure(task, now)
