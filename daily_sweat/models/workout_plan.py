"""Workout plan data models."""

from datetime import datetime
from enum import Enum
from typing import List, Optional, Union

from pydantic import BaseModel, Field, field_validator


class Difficulty(str, Enum):
    """Difficulty level used to generate a plan."""

    BEGINNER = "beginner"
    INTERMEDIATE = "intermediate"
    ADVANCED = "advanced"


class DifficultyFeedback(str, Enum):
    """User perception of a finished plan, used to adjust the next one."""

    TOO_EASY = "too easy"
    JUST_RIGHT = "just right"
    TOO_HARD = "too hard"


class Exercise(BaseModel):
    """Single exercise with parameters."""

    name: str = Field(..., min_length=1, description="Exercise display name")
    sets: Union[int, str] = Field(..., description="Number of sets, e.g. 3 or '3-4'")
    reps: str = Field(..., description="Reps per set, e.g. '10-12' or 'AMRAP'")
    rest: int = Field(0, ge=0, description="Rest after this exercise in seconds")
    duration: Optional[int] = Field(
        None, ge=0, description="Work time in seconds for timed exercises (plank, wall sit)"
    )
    description: Optional[str] = Field(None, description="Technique tips")

    @field_validator("reps", mode="before")
    @classmethod
    def _reps_as_text(cls, value):
        if isinstance(value, (int, float)) and not isinstance(value, bool):
            return str(value)
        return value

    @property
    def is_timed(self) -> bool:
        """Timed exercises count down on their own; rep-based ones advance manually."""
        return self.duration is not None and self.duration > 0

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "name": "Plank",
                "sets": 3,
                "reps": "Hold",
                "rest": 30,
                "duration": 45,
                "description": "Keep hips level and squeeze glutes",
            }
        }


class GenerateWorkoutInput(BaseModel):
    """Parameters the user picks in the generator form."""

    muscle_groups: str = Field(..., min_length=1, description="Focus, e.g. 'Full Body'")
    available_time: int = Field(30, ge=5, le=180, description="Available time in minutes")
    equipment: str = Field(..., min_length=1, description="Equipment or 'Bodyweight'")
    difficulty: Difficulty = Field(Difficulty.BEGINNER)

    class Config:
        json_schema_extra = {
            "example": {
                "muscle_groups": "Full Body",
                "available_time": 30,
                "equipment": "Bodyweight",
                "difficulty": "beginner",
            }
        }


class AIParsedWorkoutOutput(BaseModel):
    """Core workout returned by the model for generation, adjustment and translation."""

    name: Optional[str] = None
    description: Optional[str] = None
    exercises: List[Exercise] = Field(default_factory=list)


class WorkoutPlan(BaseModel):
    """Complete workout plan ready to be started as a session."""

    id: str = Field(..., description="Unique plan ID (millisecond timestamp)")
    name: str = Field(..., description="Plan display name")
    description: Optional[str] = Field(None, description="General focus of the workout")
    muscle_groups: str = Field(..., description="Muscle groups used for generation")
    available_time: int = Field(..., ge=0, description="Available time in minutes")
    equipment: str = Field(..., description="Equipment used for generation")
    difficulty: Difficulty = Field(Difficulty.BEGINNER)
    exercises: List[Exercise] = Field(default_factory=list)
    generated_at: datetime = Field(default_factory=datetime.now)
    original_plan_id: Optional[str] = Field(
        None, description="Plan this one was adjusted from"
    )
    feedback_given: Optional[str] = Field(
        None, description="Difficulty feedback that produced this plan"
    )

    @property
    def generation_params(self) -> GenerateWorkoutInput:
        return GenerateWorkoutInput(
            muscle_groups=self.muscle_groups,
            available_time=max(5, min(180, self.available_time)),
            equipment=self.equipment,
            difficulty=self.difficulty,
        )

    class Config:
        frozen = True
        json_schema_extra = {
            "example": {
                "id": "1717430400000",
                "name": "Beginner Full Body Blast",
                "description": "Quick bodyweight circuit",
                "muscle_groups": "Full Body",
                "available_time": 30,
                "equipment": "Bodyweight",
                "difficulty": "beginner",
                "exercises": [
                    {"name": "Push-ups", "sets": 3, "reps": "10-12", "rest": 60},
                    {"name": "Plank", "sets": 1, "reps": "Hold", "rest": 0, "duration": 45},
                ],
                "generated_at": "2025-01-15T18:00:00",
            }
        }
