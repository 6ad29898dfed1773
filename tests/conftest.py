from datetime import datetime, timedelta

import pytest

from clarity.models.task import Goal, Task, TaskType

# Wednesday
NOW = datetime(2026, 10, 14, 9, 0)


class FakeClock:
    def __init__(self, start=NOW):
        self.current = start

    def __call__(self):
        return self.current

    def advance(self, minutes):
        self.current += timedelta(minutes=minutes)


def make_task(task_id, minutes=30, deadline="", task_type=TaskType.GENERAL, **kwargs):
    return Task(
        task_id=task_id,
        title=kwargs.pop("title", f"Task {task_id}"),
        estimated_minutes=minutes,
        deadline=deadline,
        task_type=task_type,
        **kwargs,
    )


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def goals():
    return [Goal("g1", "Learn Spanish", "Conversational by summer")]
