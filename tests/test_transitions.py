import pytest

from daily_sweat.models.session_state import CompletionKind, SessionPhase
from daily_sweat.models.workout_plan import Exercise
from daily_sweat.session.transitions import SessionAction, TransitionKind, decide_transition

EXERCISES = [
    Exercise(name="Plank", sets=1, reps="Hold", rest=30, duration=45),
    Exercise(name="Push-ups", sets=3, reps="10", rest=0),
    Exercise(name="Squats", sets=3, reps="12", rest=60),
]


def test_start_enters_first_exercise():
    result = decide_transition(SessionPhase.LOADING, EXERCISES, 0, False, SessionAction.START)

    assert result.kind == TransitionKind.ENTER_EXERCISE
    assert result.index == 0


def test_start_without_exercises_is_noop():
    result = decide_transition(SessionPhase.LOADING, [], 0, False, SessionAction.START)

    assert result.kind == TransitionKind.NOOP


def test_start_outside_loading_is_noop():
    result = decide_transition(SessionPhase.EXERCISE, EXERCISES, 1, False, SessionAction.START)

    assert result.kind == TransitionKind.NOOP


@pytest.mark.parametrize("action", [SessionAction.ADVANCE, SessionAction.EXERCISE_TIMER_EXPIRED])
def test_rest_is_served_before_moving_on(action):
    result = decide_transition(SessionPhase.EXERCISE, EXERCISES, 0, False, action)

    assert result.kind == TransitionKind.ENTER_REST
    assert result.rest_duration == 30
    assert result.index == 0


def test_rest_is_served_once_per_visit():
    result = decide_transition(SessionPhase.EXERCISE, EXERCISES, 0, True, SessionAction.ADVANCE)

    assert result.kind == TransitionKind.ENTER_EXERCISE
    assert result.index == 1


def test_exercise_without_rest_moves_on():
    result = decide_transition(SessionPhase.EXERCISE, EXERCISES, 1, False, SessionAction.ADVANCE)

    assert result.kind == TransitionKind.ENTER_EXERCISE
    assert result.index == 2


def test_rest_is_served_after_last_exercise():
    result = decide_transition(SessionPhase.EXERCISE, EXERCISES, 2, False, SessionAction.ADVANCE)

    assert result.kind == TransitionKind.ENTER_REST
    assert result.rest_duration == 60


def test_rest_finished_after_last_exercise_completes():
    result = decide_transition(SessionPhase.REST, EXERCISES, 2, True, SessionAction.REST_FINISHED)

    assert result.kind == TransitionKind.COMPLETE
    assert result.completion_kind == CompletionKind.FINISHED


def test_advance_during_rest_acts_like_skip():
    result = decide_transition(SessionPhase.REST, EXERCISES, 0, True, SessionAction.ADVANCE)

    assert result.kind == TransitionKind.ENTER_EXERCISE
    assert result.index == 1


def test_timer_expiry_outside_exercise_phase_is_noop():
    result = decide_transition(SessionPhase.REST, EXERCISES, 0, True, SessionAction.EXERCISE_TIMER_EXPIRED)

    assert result.kind == TransitionKind.NOOP


def test_rest_finished_outside_rest_is_noop():
    result = decide_transition(SessionPhase.EXERCISE, EXERCISES, 0, False, SessionAction.REST_FINISHED)

    assert result.kind == TransitionKind.NOOP


def test_previous_on_first_exercise_is_noop():
    result = decide_transition(SessionPhase.EXERCISE, EXERCISES, 0, False, SessionAction.PREVIOUS)

    assert result.kind == TransitionKind.NOOP


@pytest.mark.parametrize("phase", [SessionPhase.EXERCISE, SessionPhase.REST])
def test_previous_goes_back_one(phase):
    result = decide_transition(phase, EXERCISES, 2, False, SessionAction.PREVIOUS)

    assert result.kind == TransitionKind.ENTER_EXERCISE
    assert result.index == 1


@pytest.mark.parametrize("phase", [SessionPhase.EXERCISE, SessionPhase.REST])
def test_end_completes_early_from_active_phases(phase):
    result = decide_transition(phase, EXERCISES, 0, False, SessionAction.END)

    assert result.kind == TransitionKind.COMPLETE
    assert result.completion_kind == CompletionKind.ENDED_EARLY


@pytest.mark.parametrize("action", list(SessionAction))
def test_completed_is_terminal(action):
    result = decide_transition(SessionPhase.COMPLETED, EXERCISES, 2, True, action)

    assert result.kind == TransitionKind.NOOP


def test_out_of_range_index_is_noop():
    result = decide_transition(SessionPhase.EXERCISE, EXERCISES, 7, False, SessionAction.ADVANCE)

    assert result.kind == TransitionKind.NOOP


@pytest.mark.parametrize("phase", [SessionPhase.LOADING, SessionPhase.ERROR])
def test_end_before_session_ran_is_noop(phase):
    result = decide_transition(phase, EXERCISES, 0, False, SessionAction.END)

    assert result.kind == TransitionKind.NOOP


def test_rest_requires_eligibility():
    result = decide_transition(
        SessionPhase.EXERCISE, EXERCISES, 0, False, SessionAction.ADVANCE, rest_eligible=False
    )

    assert result.kind == TransitionKind.ENTER_EXERCISE
    assert result.index == 1
