"""Shared fixtures for the test suite."""

import json
from datetime import datetime, timedelta

import pytest

from daily_sweat.models.workout_plan import Difficulty, Exercise, WorkoutPlan
from daily_sweat.session.controller import WorkoutSessionController
from daily_sweat.session.scheduler import TickScheduler


class FakeClock:
    """Monotonic seconds and wall clock advanced together."""

    def __init__(self):
        self.seconds = 1000.0
        self.wall = datetime(2025, 1, 15, 18, 0, 0)

    def monotonic(self) -> float:
        return self.seconds

    def now(self) -> datetime:
        return self.wall

    def advance(self, seconds: float) -> None:
        self.seconds += seconds
        self.wall += timedelta(seconds=seconds)


class FakeLLMClient:
    """Returns canned responses from generate_structured_output and records prompts."""

    def __init__(self, *responses):
        self.responses = list(responses)
        self.prompts = []

    def generate_structured_output(self, prompt, system_instruction, temperature=0.3):
        self.prompts.append(prompt)
        response = self.responses.pop(0)
        if isinstance(response, str):
            return response
        return json.dumps(response)


def make_plan(*exercises, **overrides) -> WorkoutPlan:
    data = {
        "id": "1717430400000",
        "name": "Test Workout",
        "description": "Test plan",
        "muscle_groups": "Full Body",
        "available_time": 30,
        "equipment": "None / Bodyweight",
        "difficulty": Difficulty.BEGINNER,
        "exercises": list(exercises),
        "generated_at": datetime(2025, 1, 15, 18, 0, 0),
    }
    data.update(overrides)
    return WorkoutPlan(**data)


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def scheduler(clock):
    return TickScheduler(clock=clock.monotonic)


@pytest.fixture
def controller(scheduler, clock):
    return WorkoutSessionController(scheduler=scheduler, now=clock.now)


@pytest.fixture
def run_seconds(clock, controller):
    """Advance the clock one second at a time, polling the controller after each."""

    def _run(seconds: int) -> None:
        for _ in range(seconds):
            clock.advance(1)
            controller.poll()

    return _run


@pytest.fixture
def timed_plan():
    """Timed exercise with rest, then a rep-based one with rest."""
    return make_plan(
        Exercise(name="Plank", sets=1, reps="Hold", rest=3, duration=5),
        Exercise(name="Push-ups", sets=3, reps="10", rest=2),
    )


@pytest.fixture
def rep_plan():
    return make_plan(
        Exercise(name="Squats", sets=3, reps="12", rest=0),
        Exercise(name="Lunges", sets=3, reps="10", rest=0),
        Exercise(name="Burpees", sets=2, reps="8", rest=0),
    )


@pytest.fixture
def plan_factory():
    return make_plan
