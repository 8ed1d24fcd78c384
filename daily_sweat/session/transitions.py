"""Phase transition rules for a workout session.

``decide_transition`` is a pure function: given the current phase, the plan's
exercises, the active index, whether rest was already served for this visit,
and the triggering action, it returns what the controller should do next.
The controller applies the result and owns all side effects (timers,
scheduling, events).

Rest is served before the index increments, including after the last
exercise, and at most once per visit of an exercise. A timed exercise only
becomes rest-eligible once its timer expires or the user cuts it short.
"""

from enum import Enum
from typing import Optional, Sequence

from pydantic import BaseModel

from daily_sweat.models.session_state import CompletionKind, SessionPhase
from daily_sweat.models.workout_plan import Exercise


class SessionAction(str, Enum):
    START = "start"
    ADVANCE = "advance"
    EXERCISE_TIMER_EXPIRED = "exercise_timer_expired"
    REST_FINISHED = "rest_finished"
    PREVIOUS = "previous"
    END = "end"


class TransitionKind(str, Enum):
    ENTER_EXERCISE = "enter_exercise"
    ENTER_REST = "enter_rest"
    COMPLETE = "complete"
    NOOP = "noop"


class Transition(BaseModel):
    kind: TransitionKind
    index: Optional[int] = None
    rest_duration: int = 0
    completion_kind: Optional[CompletionKind] = None


NOOP = Transition(kind=TransitionKind.NOOP)

_ACTIVE_PHASES = (SessionPhase.EXERCISE, SessionPhase.REST)


def _forward(exercises: Sequence[Exercise], index: int) -> Transition:
    next_index = index + 1
    if next_index < len(exercises):
        return Transition(kind=TransitionKind.ENTER_EXERCISE, index=next_index)
    return Transition(kind=TransitionKind.COMPLETE, completion_kind=CompletionKind.FINISHED)


def decide_transition(
    phase: SessionPhase,
    exercises: Sequence[Exercise],
    index: int,
    rest_served: bool,
    action: SessionAction,
    rest_eligible: bool = True,
) -> Transition:
    """
    Decide the next step of the session.

    Args:
        phase: Current session phase
        exercises: Exercises of the active plan
        index: Active exercise index
        rest_served: Whether rest was already entered for this exercise visit
        action: Triggering user action or timer event
        rest_eligible: Whether the exercise may enter rest (a timed exercise
            only after its timer expired or was cut short)

    Returns:
        Transition to apply (NOOP when the action is not valid right now)
    """
    if action == SessionAction.START:
        if phase != SessionPhase.LOADING or not exercises:
            return NOOP
        return Transition(kind=TransitionKind.ENTER_EXERCISE, index=0)

    if action == SessionAction.END:
        # error and loading never ran, there is nothing to end
        if phase not in _ACTIVE_PHASES:
            return NOOP
        return Transition(kind=TransitionKind.COMPLETE, completion_kind=CompletionKind.ENDED_EARLY)

    if phase not in _ACTIVE_PHASES or not 0 <= index < len(exercises):
        return NOOP

    if action == SessionAction.PREVIOUS:
        if index <= 0:
            return NOOP
        return Transition(kind=TransitionKind.ENTER_EXERCISE, index=index - 1)

    if action == SessionAction.REST_FINISHED:
        if phase != SessionPhase.REST:
            return NOOP
        return _forward(exercises, index)

    if action == SessionAction.EXERCISE_TIMER_EXPIRED and phase != SessionPhase.EXERCISE:
        return NOOP

    # ADVANCE, or EXERCISE_TIMER_EXPIRED in the exercise phase
    rest = exercises[index].rest
    if phase == SessionPhase.EXERCISE and rest > 0 and rest_eligible and not rest_served:
        return Transition(kind=TransitionKind.ENTER_REST, index=index, rest_duration=rest)
    return _forward(exercises, index)
