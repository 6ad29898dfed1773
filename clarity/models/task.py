"""Task and goal data models."""

from dataclasses import dataclass
from enum import Enum
from typing import Optional


class TaskType(Enum):
    """Category of a task, used by the pressure model."""
    
    CORE_OBLIGATION = "core-obligation"
    GROWTH = "growth"
    GENERAL = "general"


class EnergyLevel(Enum):
    """Energy level declared by the user for the current session."""
    
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


REMINDER_DEADLINES = ("reminder", "when you have time")


@dataclass
class Task:
    """Represents a task snapshot handed to the engine."""
    
    task_id: str
    title: str
    estimated_minutes: int
    deadline: str
    task_type: TaskType = TaskType.GENERAL
    goal_id: Optional[str] = None
    completed: bool = False
    # Session-local, never persisted.
    in_progress: bool = False
    
    def __post_init__(self):
        """Validate estimate and coerce task type."""
        if self.estimated_minutes is None or self.estimated_minutes <= 0:
            raise ValueError(
                f"Task {self.task_id}: estimated_minutes must be positive, got {self.estimated_minutes}"
            )
        if not isinstance(self.task_type, TaskType):
            self.task_type = TaskType(self.task_type)
        if self.deadline is None:
            self.deadline = ""
    
    def is_reminder(self) -> bool:
        """Reminder tasks carry no actionable deadline and are never recommended."""
        return self.deadline.strip().lower() in REMINDER_DEADLINES


@dataclass
class Goal:
    """A long-term goal that tasks may point at."""
    
    goal_id: str
    title: str
    description: Optional[str] = None
