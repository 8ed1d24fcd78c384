"""Models for free-text workout requests and history insights."""

from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field, field_validator

from .workout_plan import Difficulty, GenerateWorkoutInput


class MuscleGroupKey(str, Enum):
    FULL_BODY = "full_body"
    UPPER_BODY = "upper_body"
    LOWER_BODY = "lower_body"
    CORE = "core"


class EquipmentKey(str, Enum):
    NONE = "none"
    DUMBBELLS = "dumbbells"
    RESISTANCE_BANDS = "resistance_bands"


MUSCLE_GROUP_LABELS = {
    MuscleGroupKey.FULL_BODY: "Full Body",
    MuscleGroupKey.UPPER_BODY: "Upper Body",
    MuscleGroupKey.LOWER_BODY: "Lower Body",
    MuscleGroupKey.CORE: "Core",
}

EQUIPMENT_LABELS = {
    EquipmentKey.NONE: "None / Bodyweight",
    EquipmentKey.DUMBBELLS: "Dumbbells",
    EquipmentKey.RESISTANCE_BANDS: "Resistance Bands",
}


class ParsedWorkoutRequest(BaseModel):
    """Canonical generator parameters extracted from a natural language request.

    Keys stay language independent so the form can bind to them whatever
    language the user typed in.
    """

    muscle_group_key: MuscleGroupKey = Field(MuscleGroupKey.FULL_BODY)
    equipment_key: EquipmentKey = Field(EquipmentKey.NONE)
    available_time: int = Field(30, description="Minutes, clamped to 5..180")
    difficulty: Difficulty = Field(Difficulty.BEGINNER)

    @field_validator("available_time", mode="before")
    @classmethod
    def _clamp_time(cls, value):
        try:
            minutes = int(round(float(value)))
        except (TypeError, ValueError):
            return 30
        return max(5, min(180, minutes))

    def to_generate_input(self) -> GenerateWorkoutInput:
        return GenerateWorkoutInput(
            muscle_groups=MUSCLE_GROUP_LABELS[self.muscle_group_key],
            available_time=self.available_time,
            equipment=EQUIPMENT_LABELS[self.equipment_key],
            difficulty=self.difficulty,
        )

    class Config:
        json_schema_extra = {
            "example": {
                "muscle_group_key": "lower_body",
                "equipment_key": "none",
                "available_time": 20,
                "difficulty": "beginner",
            }
        }


class WeeklyInsights(BaseModel):
    """Coach summary generated from the workout history."""

    title: str = Field(..., description="Short headline")
    summary: str = Field(..., description="3-5 sentences about volume, variety and focus")
    suggestions: List[str] = Field(default_factory=list, description="Actionable next steps")
    next_suggested_params: Optional[GenerateWorkoutInput] = Field(
        None, description="Parameters to prefill the generator with"
    )
