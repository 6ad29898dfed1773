import threading
from datetime import timedelta, timezone

import pytest

from clarity.engine.negotiator import InvalidTransitionError, NegotiationState
from clarity.engine.session import RecommendationSession
from clarity.models.recommendation import ReasonType
from clarity.models.task import EnergyLevel, TaskType
from clarity.models.window import AdvisorySuggestion, TimeWindow, WindowSource, WindowValidationError

from .conftest import NOW, make_task

CORE = TaskType.CORE_OBLIGATION
GROWTH = TaskType.GROWTH


def sample_tasks():
    return [
        make_task("core", 20, "today if possible", CORE, title="Submit expense report"),
        make_task("growth", 25, "someday", GROWTH, goal_id="g1", title="Spanish flashcards"),
        make_task("reminder", 10, "reminder", title="Renew library books"),
    ]


def make_session(clock, goals, tasks=None, lookup=None, energy=EnergyLevel.LOW, config=None):
    return RecommendationSession(
        sample_tasks() if tasks is None else tasks,
        goals,
        energy=energy,
        advisory_lookup=lookup,
        config=config,
        clock=clock,
    )


def test_calendar_suggestion_confirmed_untouched(clock, goals):
    lookup = lambda now: AdvisorySuggestion(now + timedelta(minutes=15), "Standup")
    session = make_session(clock, goals, lookup=lookup)

    negotiator = session.ask()
    assert negotiator.state is NegotiationState.AWAITING_CONFIRMATION
    window = session.confirm()

    assert window.source is WindowSource.CALENDAR_SUGGESTED
    assert window.available_minutes == 15
    assert window.event_name == "Standup"
    recommendation = session.get_recommendation()
    assert recommendation.task.task_id == "core"
    assert recommendation.duration == 15
    assert "before your next commitment" in recommendation.explanation
    assert "Standup" not in recommendation.explanation
    assert session.state is NegotiationState.ACTIVE


def test_user_override_after_calendar_suggestion(clock, goals):
    lookup = lambda now: AdvisorySuggestion(now + timedelta(minutes=15), "Standup")
    session = make_session(clock, goals, lookup=lookup)
    session.ask()

    window = session.confirm(end_time=NOW + timedelta(minutes=15))

    assert window.source is WindowSource.USER
    assert window.event_name is None
    assert "9:15 AM" in session.get_recommendation().explanation


def test_short_window_keeps_negotiation_open(clock, goals):
    session = make_session(clock, goals)
    session.ask()

    result = session.confirm(end_time=NOW + timedelta(minutes=5))

    assert isinstance(result, WindowValidationError)
    assert session.state is NegotiationState.AWAITING_CONFIRMATION
    assert session.get_recommendation() is None

    window = session.confirm(preset_minutes=40)
    assert isinstance(window, TimeWindow)
    assert session.get_recommendation() is not None


def test_no_calendar_uses_system_default(clock, goals):
    session = make_session(clock, goals)
    session.ask()
    window = session.confirm()
    assert window.source is WindowSource.SYSTEM_DEFAULT
    assert window.available_minutes == 45


def test_failing_lookup_degrades_silently(clock, goals):
    def lookup(now):
        raise ConnectionError("calendar unreachable")

    session = make_session(clock, goals, lookup=lookup)
    session.ask()
    assert session.negotiator.source is WindowSource.SYSTEM_DEFAULT


def test_unexpected_lookup_result_is_ignored(clock, goals):
    session = make_session(clock, goals, lookup=lambda now: {"start": now})
    session.ask()
    assert session.negotiator.source is WindowSource.SYSTEM_DEFAULT


def test_slow_lookup_times_out(clock, goals):
    release = threading.Event()

    def lookup(now):
        release.wait(5)
        return AdvisorySuggestion(now + timedelta(minutes=30), "Late answer")

    config = {'session': {'advisory_timeout_seconds': 0.05}}
    session = make_session(clock, goals, lookup=lookup, config=config)
    try:
        session.ask()
        assert session.negotiator.source is WindowSource.SYSTEM_DEFAULT
        assert session.negotiator.suggestion is None
    finally:
        release.set()


def test_suggest_another_with_single_candidate_ends_session(clock, goals):
    tasks = [make_task("only", 20, "tomorrow", CORE), make_task("r", 10, "reminder")]
    session = make_session(clock, goals, tasks=tasks)
    session.ask()
    session.confirm()
    assert session.get_recommendation().task.task_id == "only"

    assert session.suggest_another() is None
    assert session.get_recommendation() is None
    assert session.state is NegotiationState.IDLE


def test_suggest_another_excludes_current_task(clock, goals):
    session = make_session(clock, goals)
    session.ask()
    session.confirm(preset_minutes=60)

    second = session.suggest_another()

    assert second.task.task_id == "growth"
    assert second.reason_type is ReasonType.GROWTH_OPPORTUNITY
    assert 'progress toward "Learn Spanish"' in second.explanation


def test_suggest_another_without_recommendation_raises(clock, goals):
    session = make_session(clock, goals)
    with pytest.raises(InvalidTransitionError):
        session.suggest_another()


def test_no_eligible_tasks_ends_session(clock, goals):
    session = make_session(clock, goals, tasks=[make_task("r", 10, "reminder")])
    session.ask()
    window = session.confirm()

    assert isinstance(window, TimeWindow)
    assert session.get_recommendation() is None
    assert session.state is NegotiationState.IDLE


def test_accept_does_not_mutate_tasks(clock, goals):
    tasks = sample_tasks()
    session = make_session(clock, goals, tasks=tasks)
    session.ask()
    session.confirm()

    accepted = session.accept_recommendation()

    assert accepted.task.task_id == "core"
    assert not any(task.completed or task.in_progress for task in tasks)
    assert session.get_recommendation() is None
    assert session.state is NegotiationState.IDLE


def test_dismiss_and_cancel_return_to_idle(clock, goals):
    session = make_session(clock, goals)
    session.ask()
    session.cancel()
    assert session.state is NegotiationState.IDLE

    session.ask()
    session.confirm()
    session.dismiss_recommendation()
    assert session.state is NegotiationState.IDLE
    assert session.window is None


def test_energy_change_recomputes_active_recommendation(clock, goals):
    tasks = [
        make_task("short", 15, "whenever"),
        make_task("long", 50, "whenever"),
    ]
    session = make_session(clock, goals, tasks=tasks, energy=EnergyLevel.LOW)
    session.ask()
    session.confirm(preset_minutes=60)
    assert session.get_recommendation().task.task_id == "short"

    updated = session.on_energy_change(EnergyLevel.HIGH)

    assert updated.task.task_id == "long"
    assert session.get_recommendation() is updated
    assert session.window.available_minutes == 60


def test_energy_change_drops_previous_exclusion(clock, goals):
    session = make_session(clock, goals)
    session.ask()
    session.confirm(preset_minutes=60)
    session.suggest_another()

    assert session.on_energy_change(EnergyLevel.LOW).task.task_id == "core"


def test_energy_change_without_recommendation_only_updates_energy(clock, goals):
    session = make_session(clock, goals)
    assert session.on_energy_change(EnergyLevel.HIGH) is None
    assert session.energy is EnergyLevel.HIGH
    assert session.state is NegotiationState.IDLE


def test_asking_again_starts_fresh(clock, goals):
    lookup_results = [AdvisorySuggestion(NOW + timedelta(minutes=30), "Lunch"), None]
    session = make_session(clock, goals, lookup=lambda now: lookup_results.pop(0))
    session.ask()
    session.ask()
    assert session.negotiator.source is WindowSource.SYSTEM_DEFAULT
    assert session.negotiator.suggestion is None


def test_confirm_uses_time_of_confirmation(clock, goals):
    lookup = lambda now: AdvisorySuggestion(now + timedelta(minutes=15), "Standup")
    session = make_session(clock, goals, lookup=lookup)
    session.ask()
    clock.advance(8)

    result = session.confirm()

    assert isinstance(result, WindowValidationError)
    assert result.available_minutes == 7
    assert session.state is NegotiationState.AWAITING_CONFIRMATION


def test_aware_calendar_start_is_read_as_local_time(clock, goals):
    start = (NOW + timedelta(minutes=30)).astimezone(timezone.utc)
    session = make_session(clock, goals, lookup=lambda now: AdvisorySuggestion(start, "Standup"))

    session.ask()
    assert session.negotiator.suggestion.start_time.tzinfo is None
    window = session.confirm()

    assert window.source is WindowSource.CALENDAR_SUGGESTED
    assert window.end_time == NOW + timedelta(minutes=30)
    assert window.available_minutes == 30


def test_calendar_suggestion_without_start_time_is_ignored(clock, goals):
    session = make_session(clock, goals, lookup=lambda now: AdvisorySuggestion(None, "Standup"))
    session.ask()
    assert session.negotiator.suggestion is None
    assert session.confirm().source is WindowSource.SYSTEM_DEFAULT


def test_lookup_runs_on_daemon_thread(clock, goals):
    seen = {}

    def lookup(now):
        seen['daemon'] = threading.current_thread().daemon
        return None

    session = make_session(clock, goals, lookup=lookup)
    session.ask()

    assert seen == {'daemon': True}


def test_core_obligation_wins_over_when_you_have_time_growth_task(clock, goals):
    tasks = [
        make_task("core", 20, "today if possible", CORE),
        make_task("growth", 45, "when you have time", GROWTH, goal_id="g1"),
    ]
    session = make_session(clock, goals, tasks=tasks, energy=EnergyLevel.LOW)
    session.ask()

    window = session.confirm(preset_minutes=60)

    assert window.available_minutes == 60
    recommendation = session.get_recommendation()
    assert recommendation.task.task_id == "core"
    assert recommendation.reason_type is ReasonType.CORE_PRESSURE
    # The growth task reads as a reminder, so nothing else is left to offer.
    assert session.suggest_another() is None
    assert session.state is NegotiationState.IDLE
