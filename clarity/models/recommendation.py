"""Recommendation output model."""

from dataclasses import dataclass
from enum import Enum

from .task import Task


class ReasonType(Enum):
    """Why a task was recommended."""
    
    CORE_PRESSURE = "core-pressure"
    GROWTH_OPPORTUNITY = "growth-opportunity"


@dataclass(frozen=True)
class Recommendation:
    """A single recommended task with its rationale."""
    
    task: Task
    reason_type: ReasonType
    explanation: str
    duration: int
