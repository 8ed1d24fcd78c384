"""Helper functions turning model output and stored data into workout plans."""

import json
import logging
import re
import time
from datetime import datetime
from typing import Any, Dict, List, Optional, Union

from pydantic import ValidationError

from daily_sweat.errors import EMPTY_PLAN, INVALID_FORMAT, MALFORMED_EXERCISE, InvalidPlanError
from daily_sweat.models.workout_plan import (
    AIParsedWorkoutOutput,
    DifficultyFeedback,
    Exercise,
    GenerateWorkoutInput,
    WorkoutPlan,
)

logger = logging.getLogger(__name__)

_CODE_FENCE = re.compile(r"^```(?:json)?\s*(.*?)\s*```$", re.DOTALL)


_last_plan_id = 0


def new_plan_id() -> str:
    """Millisecond timestamp, bumped when two plans are created in the same millisecond."""
    global _last_plan_id
    plan_id = max(int(time.time() * 1000), _last_plan_id + 1)
    _last_plan_id = plan_id
    return str(plan_id)


def extract_json(text: str) -> Any:
    """
    Parse JSON returned by the model, tolerating markdown code fences.

    Raises:
        InvalidPlanError: If the text is not JSON
    """
    cleaned = (text or "").strip()
    match = _CODE_FENCE.match(cleaned)
    if match:
        cleaned = match.group(1)
    try:
        return json.loads(cleaned)
    except json.JSONDecodeError as e:
        raise InvalidPlanError(
            INVALID_FORMAT, "Received an invalid workout plan format from AI."
        ) from e


def parse_ai_workout_output(text: str) -> AIParsedWorkoutOutput:
    """
    Parse a generated or adjusted workout from model text.

    Malformed exercise entries are skipped with a warning. A plan left without
    exercises is rejected.

    Raises:
        InvalidPlanError: If the output is not JSON or has no usable exercises
    """
    data = extract_json(text)
    if not isinstance(data, dict):
        raise InvalidPlanError(INVALID_FORMAT, "Received an invalid workout plan format from AI.")

    exercises: List[Exercise] = []
    raw_exercises = data.get("exercises", [])
    if isinstance(raw_exercises, list):
        for i, ex in enumerate(raw_exercises):
            if not isinstance(ex, dict):
                logger.warning(f"Skipping exercise #{i + 1}: not an object")
                continue
            try:
                exercises.append(Exercise(**ex))
            except ValidationError as e:
                logger.warning(f"Skipping malformed exercise #{i + 1}: {e.error_count()} errors")
                continue

    if not exercises:
        raise InvalidPlanError(EMPTY_PLAN, "The AI generated an empty workout plan.")

    name = data.get("name")
    description = data.get("description")
    return AIParsedWorkoutOutput(
        name=name if isinstance(name, str) and name.strip() else None,
        description=description if isinstance(description, str) and description.strip() else None,
        exercises=exercises,
    )


def create_workout_plan_from_ai_output(
    parsed: AIParsedWorkoutOutput, params: GenerateWorkoutInput
) -> WorkoutPlan:
    return WorkoutPlan(
        id=new_plan_id(),
        name=parsed.name or f"{params.difficulty.value} {params.muscle_groups} Workout",
        description=parsed.description,
        muscle_groups=params.muscle_groups,
        available_time=params.available_time,
        equipment=params.equipment,
        difficulty=params.difficulty,
        exercises=parsed.exercises,
        generated_at=datetime.now(),
    )


def create_adjusted_plan(
    original: WorkoutPlan,
    parsed: AIParsedWorkoutOutput,
    feedback: Union[DifficultyFeedback, str],
) -> WorkoutPlan:
    """Build the adjusted plan, linked back to the plan it was derived from."""
    feedback_text = feedback.value if isinstance(feedback, DifficultyFeedback) else str(feedback)
    return original.model_copy(
        update={
            "id": new_plan_id(),
            "name": parsed.name or original.name,
            "description": parsed.description or original.description,
            "exercises": parsed.exercises,
            "original_plan_id": original.id,
            "feedback_given": feedback_text,
            "generated_at": datetime.now(),
        }
    )


def create_translated_plan(original: WorkoutPlan, parsed: AIParsedWorkoutOutput) -> WorkoutPlan:
    """
    Apply translated text to a plan, keeping every number from the original.

    Falls back to the original plan when the exercise count changed.
    """
    if len(parsed.exercises) != len(original.exercises):
        logger.warning(
            f"Translation returned {len(parsed.exercises)} exercises, "
            f"expected {len(original.exercises)}; keeping original text"
        )
        return original

    exercises = [
        source.model_copy(
            update={
                "name": translated.name or source.name,
                "description": translated.description or source.description,
            }
        )
        for source, translated in zip(original.exercises, parsed.exercises)
    ]
    return original.model_copy(
        update={
            "name": parsed.name or original.name,
            "description": parsed.description or original.description,
            "exercises": exercises,
        }
    )


def plan_to_ai_json(plan: WorkoutPlan) -> str:
    """Serialize the user-facing part of a plan for prompts."""
    return json.dumps(
        {
            "name": plan.name,
            "description": plan.description,
            "exercises": [
                ex.model_dump(mode="json", exclude_none=True) for ex in plan.exercises
            ],
        },
        ensure_ascii=False,
    )


def validate_plan_for_session(plan: Optional[Union[WorkoutPlan, Dict[str, Any]]]) -> WorkoutPlan:
    """
    Check that a plan can be started as a session.

    Args:
        plan: Plan model or its dict representation

    Returns:
        Validated WorkoutPlan

    Raises:
        InvalidPlanError: If the plan is missing, malformed, or has no exercises
    """
    if plan is None:
        raise InvalidPlanError(INVALID_FORMAT, "No workout plan was provided.")

    if isinstance(plan, dict):
        try:
            plan = WorkoutPlan(**plan)
        except ValidationError as e:
            exercise_errors = [err for err in e.errors() if err["loc"][:1] == ("exercises",)]
            if exercise_errors:
                loc = exercise_errors[0]["loc"]
                position = loc[1] + 1 if len(loc) > 1 and isinstance(loc[1], int) else "?"
                raise InvalidPlanError(
                    MALFORMED_EXERCISE,
                    f"Exercise #{position} is malformed: {exercise_errors[0]['msg']}",
                ) from e
            raise InvalidPlanError(INVALID_FORMAT, f"Invalid workout plan: {e.errors()[0]['msg']}") from e

    if not isinstance(plan, WorkoutPlan):
        raise InvalidPlanError(INVALID_FORMAT, "Invalid workout plan.")

    if not plan.exercises:
        raise InvalidPlanError(EMPTY_PLAN, "This workout plan has no exercises.")

    return plan
