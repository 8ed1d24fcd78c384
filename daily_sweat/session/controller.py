"""Workout session controller.

Single-threaded state machine sequencing exercises, per-exercise timers,
rest periods, pause/resume, skip and completion. Every mutation happens
synchronously inside a user action or a scheduler tick. The controller owns at
most one scheduled tick at a time and swaps it through ``_reschedule``.
"""

import logging
from datetime import datetime
from typing import Any, Callable, Dict, List, Optional, Union

from daily_sweat.errors import InvalidPlanError
from daily_sweat.models.session_state import (
    CompletionKind,
    SessionEvent,
    SessionEventKind,
    SessionPhase,
    SessionState,
)
from daily_sweat.models.workout_plan import WorkoutPlan
from daily_sweat.session.scheduler import TickScheduler
from daily_sweat.session.stats import ENERGY_UNITS_PER_SECOND, compute_completion_stats
from daily_sweat.session.transitions import (
    SessionAction,
    Transition,
    TransitionKind,
    decide_transition,
)
from daily_sweat.utils.plan_helpers import validate_plan_for_session

logger = logging.getLogger(__name__)

SessionListener = Callable[[SessionEvent], None]


class WorkoutSessionController:
    """Run one workout session from start to completion."""

    ENERGY_UNITS_PER_SECOND = ENERGY_UNITS_PER_SECOND

    def __init__(
        self,
        scheduler: Optional[TickScheduler] = None,
        now: Callable[[], datetime] = datetime.now,
        energy_units_per_second: Optional[float] = None,
    ) -> None:
        """
        Initialize controller in the loading phase.

        Args:
            scheduler: Tick scheduler driving the timers (default: wall clock)
            now: Wall clock used for session statistics
            energy_units_per_second: Override for the energy estimate ratio
        """
        self.scheduler = scheduler or TickScheduler()
        self._now = now
        if energy_units_per_second is not None:
            self.ENERGY_UNITS_PER_SECOND = energy_units_per_second
        self.state = SessionState()
        self._listeners: List[SessionListener] = []
        self._pending_events: List[SessionEvent] = []
        self._closed = False

    # ------------------------------------------------------------------
    # Host interface
    # ------------------------------------------------------------------

    @property
    def phase(self) -> SessionPhase:
        return self.state.phase

    @property
    def is_closed(self) -> bool:
        return self._closed

    def add_listener(self, listener: SessionListener) -> None:
        self._listeners.append(listener)

    def pop_events(self) -> List[SessionEvent]:
        """Return events emitted since the last call and clear the buffer."""
        events, self._pending_events = self._pending_events, []
        return events

    def snapshot(self) -> SessionState:
        """Detached copy of the current state for rendering."""
        return self.state.model_copy(deep=True)

    def poll(self) -> int:
        """Fire due timer ticks. Hosts call this from their event loop."""
        if self._closed:
            return 0
        return self.scheduler.run_due()

    def close(self) -> None:
        """Tear down the session: cancel the pending tick, ignore further input."""
        self._cancel_tick()
        self._closed = True
        logger.info("Workout session closed")

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def start(self, plan: Union[WorkoutPlan, Dict[str, Any]]) -> SessionState:
        """
        Load a plan and enter the first exercise.

        Invalid plans put the session in the terminal error phase instead of
        raising.

        Args:
            plan: Plan model or its dict representation

        Returns:
            Current session state
        """
        if self._closed or self.state.phase != SessionPhase.LOADING:
            logger.warning(f"Ignoring start in phase {self.state.phase.value}")
            return self.state

        try:
            workout = validate_plan_for_session(plan)
        except InvalidPlanError as e:
            logger.warning(f"Cannot start workout: {e}")
            self.state.phase = SessionPhase.ERROR
            self.state.error_message = e.message
            return self.state

        self.state.plan = workout
        self.state.session_started_at = self._now()
        logger.info(f"Starting workout '{workout.name}' with {len(workout.exercises)} exercises")
        self._dispatch(SessionAction.START)
        return self.state

    def advance(self) -> SessionState:
        """Move forward one step: into rest, to the next exercise, or to completion."""
        if self._closed:
            return self.state
        timer = self.state.exercise_timer
        if self.state.phase == SessionPhase.EXERCISE and timer.time_left:
            # cut a running timed exercise short
            timer.stop()
            self.state.rest_eligible = True
        self._dispatch(SessionAction.ADVANCE)
        return self.state

    def previous(self) -> SessionState:
        if self._closed:
            return self.state
        self._dispatch(SessionAction.PREVIOUS)
        return self.state

    def toggle_exercise_pause(self) -> SessionState:
        """Pause or resume a timed exercise. No-op for rep-based exercises and rest."""
        if self._closed or self.state.phase != SessionPhase.EXERCISE:
            return self.state
        timer = self.state.exercise_timer
        if not self.state.is_current_exercise_timed or not timer.time_left:
            return self.state

        if timer.toggle_pause():
            self._cancel_tick()
            logger.info(f"Exercise timer paused at {timer.time_left}s")
        else:
            self._reschedule(self._on_exercise_tick)
            logger.info(f"Exercise timer resumed at {timer.time_left}s")
        return self.state

    def toggle_rest(self) -> SessionState:
        """Pause or resume the rest countdown."""
        if self._closed or self.state.phase != SessionPhase.REST:
            return self.state
        if self.state.rest_timer.toggle():
            self._reschedule(self._on_rest_tick)
        else:
            self._cancel_tick()
        return self.state

    def reset_rest(self) -> SessionState:
        """Restart the rest countdown from its full duration."""
        if self._closed or self.state.phase != SessionPhase.REST:
            return self.state
        rest_timer = self.state.rest_timer
        rest_timer.reset()
        if rest_timer.is_running:
            self._reschedule(self._on_rest_tick)
        return self.state

    def skip_rest(self) -> SessionState:
        if self._closed or self.state.phase != SessionPhase.REST:
            return self.state
        self.state.rest_timer.skip()
        logger.info("Rest skipped")
        self._dispatch(SessionAction.REST_FINISHED)
        return self.state

    def end_workout(self) -> SessionState:
        """End the session early, keeping the statistics gathered so far."""
        if self._closed:
            return self.state
        self._dispatch(SessionAction.END)
        return self.state

    # ------------------------------------------------------------------
    # Timer ticks
    # ------------------------------------------------------------------

    def _on_exercise_tick(self) -> None:
        if self._closed or self.state.phase != SessionPhase.EXERCISE:
            logger.debug("Stale exercise tick ignored")
            return
        if not self.state.exercise_timer.tick():
            return

        self.state.rest_eligible = True
        self._emit(SessionEventKind.EXERCISE_TIME_UP)
        self._dispatch(SessionAction.EXERCISE_TIMER_EXPIRED)

    def _on_rest_tick(self) -> None:
        if self._closed or self.state.phase != SessionPhase.REST:
            logger.debug("Stale rest tick ignored")
            return
        if not self.state.rest_timer.tick():
            return

        self._emit(SessionEventKind.REST_OVER)
        self._dispatch(SessionAction.REST_FINISHED)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _dispatch(self, action: SessionAction) -> None:
        exercises = self.state.plan.exercises if self.state.plan else []
        transition = decide_transition(
            self.state.phase,
            exercises,
            self.state.active_index,
            self.state.rest_served,
            action,
            rest_eligible=self.state.rest_eligible,
        )
        if transition.kind == TransitionKind.NOOP:
            logger.debug(f"Action {action.value} ignored in phase {self.state.phase.value}")
            return
        self._apply(transition)

    def _apply(self, transition: Transition) -> None:
        if transition.kind == TransitionKind.ENTER_EXERCISE:
            self._enter_exercise(transition.index)
        elif transition.kind == TransitionKind.ENTER_REST:
            self._enter_rest(transition.rest_duration)
        elif transition.kind == TransitionKind.COMPLETE:
            self._complete(transition.completion_kind)

    def _enter_exercise(self, index: int) -> None:
        state = self.state
        state.active_index = index
        state.phase = SessionPhase.EXERCISE
        state.rest_served = False
        state.rest_timer.clear()

        exercise = state.plan.exercises[index]
        if exercise.is_timed:
            state.exercise_timer.start(exercise.duration)
            state.rest_eligible = False
            self._reschedule(self._on_exercise_tick)
        else:
            state.exercise_timer.clear()
            state.rest_eligible = True
            self._cancel_tick()

        logger.info(
            f"Exercise {index + 1}/{state.exercise_count}: {exercise.name} "
            f"({'timed ' + str(exercise.duration) + 's' if exercise.is_timed else 'rep-based'})"
        )

    def _enter_rest(self, duration: int) -> None:
        state = self.state
        state.phase = SessionPhase.REST
        state.rest_served = True
        state.exercise_timer.stop()
        state.rest_timer.start(duration)
        self._reschedule(self._on_rest_tick)
        logger.info(f"Resting {duration}s after exercise {state.active_index + 1}")

    def _complete(self, kind: CompletionKind) -> None:
        state = self.state
        self._cancel_tick()
        state.exercise_timer.stop()
        state.rest_timer.clear()
        state.completion_stats = compute_completion_stats(
            state.session_started_at,
            self._now(),
            self.ENERGY_UNITS_PER_SECOND,
        )
        state.completion_kind = kind
        state.phase = SessionPhase.COMPLETED

        stats = state.completion_stats
        logger.info(
            f"Workout {kind.value}: {stats.total_duration_seconds}s, "
            f"~{stats.estimated_energy_units} energy units"
        )
        if kind == CompletionKind.FINISHED:
            self._emit(SessionEventKind.WORKOUT_COMPLETE)
        else:
            self._emit(SessionEventKind.WORKOUT_ENDED_EARLY)

    def _reschedule(self, callback: Optional[Callable[[], None]]) -> None:
        """Cancel the current tick and, if given, schedule the new one."""
        self.scheduler.cancel(self.state.timer_handle)
        self.state.timer_handle = None
        if callback is not None:
            self.state.timer_handle = self.scheduler.schedule_repeating(callback)

    def _cancel_tick(self) -> None:
        self._reschedule(None)

    def _emit(self, kind: SessionEventKind) -> None:
        exercise = self.state.current_exercise
        event = SessionEvent(
            kind=kind,
            exercise_index=self.state.active_index,
            exercise_name=exercise.name if exercise else None,
            stats=self.state.completion_stats,
        )
        self._pending_events.append(event)
        for listener in list(self._listeners):
            try:
                listener(event)
            except Exception as e:
                logger.error(f"Session listener failed on {kind.value}: {e}", exc_info=True)
