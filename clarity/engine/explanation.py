"""Natural-language rationale for a recommendation.

Explanations talk about time and opportunity, never urgency. When the window
came from the calendar the event itself is never named; the boundary is
always "your next commitment".
"""

from datetime import datetime
from typing import List, Optional

from ..models.recommendation import ReasonType
from ..models.task import Goal, Task
from ..models.window import WindowSource
from ..utils.datetime_utils import format_clock_time

NEXT_COMMITMENT = "your next commitment"


def find_goal(task: Task, goals: List[Goal]) -> Optional[Goal]:
    """Resolve a task's goal reference; dangling references resolve to None."""
    if not task.goal_id:
        return None
    return next((goal for goal in goals if goal.goal_id == task.goal_id), None)


def _boundary(end_time: datetime, window_source: WindowSource, now: datetime) -> str:
    if window_source is WindowSource.CALENDAR_SUGGESTED:
        return NEXT_COMMITMENT
    if window_source in (WindowSource.USER, WindowSource.SYSTEM_DEFAULT):
        return format_clock_time(end_time, now)
    raise ValueError(f"Unknown window source: {window_source}")


def _from_calendar(window_source: WindowSource) -> bool:
    return window_source is WindowSource.CALENDAR_SUGGESTED


def explain_core_pressure(
    days_until_due: Optional[float],
    end_time: datetime,
    window_source: WindowSource,
    now: datetime,
) -> str:
    """Rationale for a core obligation, bucketed by how close its deadline is."""
    boundary = _boundary(end_time, window_source, now)
    calendar = _from_calendar(window_source)
    
    if days_until_due is None:
        span = f"the time before {boundary}" if calendar else f"time until {boundary}"
        return f"This core obligation aligns with your available {span} and energy right now."
    
    if days_until_due < 0.5:
        return f"This fits comfortably before {boundary}, and addressing it now preserves your options for later."
    
    if days_until_due <= 1:
        span = f"the time you have before {boundary}" if calendar else f"the time you have until {boundary}"
        return f"You have space now, before this becomes more constrained. This fits well in {span}."
    
    if days_until_due <= 3:
        span = f"the time before {boundary}" if calendar else f"time until {boundary}"
        return (
            "This is approaching its deadline. "
            f"Addressing it now while you have {span} prevents future constraints."
        )
    
    if days_until_due <= 7:
        span = f"your time before {boundary}" if calendar else f"your time until {boundary}"
        return f"This core commitment is coming up. Starting now aligns well with {span} and current energy."
    
    span = f"the time before {boundary}" if calendar else f"time until {boundary}"
    return f"This core obligation fits well with your available {span} and current energy."


def explain_growth_opportunity(
    goal: Optional[Goal],
    end_time: datetime,
    window_source: WindowSource,
    now: datetime,
) -> str:
    """Rationale for a growth or general task."""
    boundary = _boundary(end_time, window_source, now)
    span = f"the time before {boundary}" if _from_calendar(window_source) else f"space right now until {boundary}"
    
    if goal is not None:
        return f'You have {span} to make progress toward "{goal.title}". This time aligns well with your energy.'
    return f"You have {span} for this growth task, and it fits well with your current energy."


class ExplanationGenerator:
    """Produces the rationale shown alongside a recommendation."""
    
    def explain(
        self,
        task: Task,
        reason_type: ReasonType,
        goal: Optional[Goal],
        days_until_due: Optional[float],
        end_time: datetime,
        window_source: WindowSource,
        now: datetime,
    ) -> str:
        """Generate the explanation text for a selected task."""
        if reason_type is ReasonType.CORE_PRESSURE:
            return explain_core_pressure(days_until_due, end_time, window_source, now)
        if reason_type is ReasonType.GROWTH_OPPORTUNITY:
            return explain_growth_opportunity(goal, end_time, window_source, now)
        raise ValueError(f"Unknown reason type: {reason_type}")
