"""Workout session state models."""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field

from daily_sweat.models.workout_plan import Exercise, WorkoutPlan
from daily_sweat.session.timers import ExerciseTimer, RestTimer


class SessionPhase(str, Enum):
    LOADING = "loading"
    EXERCISE = "exercise"
    REST = "rest"
    COMPLETED = "completed"
    ERROR = "error"


class CompletionKind(str, Enum):
    FINISHED = "finished"
    ENDED_EARLY = "ended_early"


class CompletionStats(BaseModel):
    """Statistics computed when a session enters the completed phase."""

    total_duration_seconds: int = Field(..., ge=0, description="Wall clock time since start")
    estimated_energy_units: int = Field(..., ge=0, description="Estimated kcal burned")


class SessionEventKind(str, Enum):
    EXERCISE_TIME_UP = "exercise_time_up"
    REST_OVER = "rest_over"
    WORKOUT_COMPLETE = "workout_complete"
    WORKOUT_ENDED_EARLY = "workout_ended_early"


class SessionEvent(BaseModel):
    """Notification emitted by the controller for the host UI."""

    kind: SessionEventKind
    exercise_index: int
    exercise_name: Optional[str] = None
    stats: Optional[CompletionStats] = None


class SessionState(BaseModel):
    """Mutable state of one workout session, owned by the session controller."""

    phase: SessionPhase = SessionPhase.LOADING
    plan: Optional[WorkoutPlan] = None
    active_index: int = Field(0, ge=0)
    exercise_timer: ExerciseTimer = Field(default_factory=ExerciseTimer)
    rest_timer: RestTimer = Field(default_factory=RestTimer)
    rest_eligible: bool = False
    rest_served: bool = False
    session_started_at: Optional[datetime] = None
    completion_stats: Optional[CompletionStats] = None
    completion_kind: Optional[CompletionKind] = None
    error_message: Optional[str] = None
    timer_handle: Optional[int] = Field(
        None, description="Handle of the single tick callback the controller owns"
    )

    @property
    def current_exercise(self) -> Optional[Exercise]:
        if self.plan is None or not self.plan.exercises:
            return None
        if self.active_index >= len(self.plan.exercises):
            return None
        return self.plan.exercises[self.active_index]

    @property
    def exercise_count(self) -> int:
        return len(self.plan.exercises) if self.plan else 0

    @property
    def is_last_exercise(self) -> bool:
        return self.exercise_count > 0 and self.active_index == self.exercise_count - 1

    @property
    def is_current_exercise_timed(self) -> bool:
        exercise = self.current_exercise
        return exercise is not None and exercise.is_timed

    @property
    def exercise_time_left(self) -> Optional[int]:
        return self.exercise_timer.time_left

    @property
    def is_exercise_timer_running(self) -> bool:
        return self.exercise_timer.is_running

    @property
    def is_exercise_timer_paused(self) -> bool:
        return self.exercise_timer.is_paused

    @property
    def rest_duration(self) -> int:
        return self.rest_timer.duration

    @property
    def rest_time_left(self) -> int:
        return self.rest_timer.time_left

    @property
    def is_rest_timer_running(self) -> bool:
        return self.rest_timer.is_running
