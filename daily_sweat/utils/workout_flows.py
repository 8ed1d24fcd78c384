"""LLM flows: generate, adjust, parse, translate and summarize workouts.

Each flow fills a prompt template, asks the model for JSON through
``generate_structured_output`` and turns the answer into models. Flows run
before a session starts or after it ends, never during one.
"""

import json
import logging
from typing import List, Optional, Sequence, Union

from pydantic import ValidationError

from daily_sweat.errors import INVALID_FORMAT, InvalidPlanError
from daily_sweat.models.workout_plan import DifficultyFeedback, GenerateWorkoutInput, WorkoutPlan
from daily_sweat.models.workout_request import ParsedWorkoutRequest, WeeklyInsights
from daily_sweat.utils.plan_helpers import (
    create_adjusted_plan,
    create_translated_plan,
    create_workout_plan_from_ai_output,
    extract_json,
    parse_ai_workout_output,
    plan_to_ai_json,
)
from daily_sweat.utils.prompts import (
    ADJUST_WORKOUT_PROMPT,
    EXERCISE_SCHEMA,
    GENERATE_WORKOUT_PROMPT,
    PARSE_REQUEST_PROMPT,
    PLANNER_INSTRUCTION,
    SUGGEST_DESCRIPTIONS_PROMPT,
    TRANSLATE_PLAN_PROMPT,
    WEEKLY_INSIGHTS_PROMPT,
)

logger = logging.getLogger(__name__)


class WorkoutFlows:
    """Workout-specific LLM calls on top of a structured-output client."""

    def __init__(self, client, language: str = "en") -> None:
        """
        Initialize flows.

        Args:
            client: Object exposing generate_structured_output(prompt, system_instruction)
            language: Default language code for user-facing text
        """
        self.client = client
        self.language = language

    def _ask(self, prompt: str) -> str:
        return self.client.generate_structured_output(
            prompt=prompt,
            system_instruction=PLANNER_INSTRUCTION,
        )

    def generate_workout(self, params: GenerateWorkoutInput, language: Optional[str] = None) -> WorkoutPlan:
        """
        Generate a new plan from generator parameters.

        Raises:
            InvalidPlanError: If the model output is not a usable plan
        """
        language = language or self.language
        logger.info(
            f"Generating {params.difficulty.value} workout: {params.muscle_groups}, "
            f"{params.available_time} min, {params.equipment}"
        )
        text = self._ask(
            GENERATE_WORKOUT_PROMPT.format(
                muscle_groups=params.muscle_groups,
                available_time=params.available_time,
                equipment=params.equipment,
                difficulty=params.difficulty.value,
                language=language,
                schema=EXERCISE_SCHEMA,
            )
        )
        parsed = parse_ai_workout_output(text)
        plan = create_workout_plan_from_ai_output(parsed, params)
        logger.info(f"Generated plan {plan.id} '{plan.name}' with {len(plan.exercises)} exercises")
        return plan

    def adjust_workout_difficulty(
        self,
        plan: WorkoutPlan,
        feedback: Union[DifficultyFeedback, str],
        language: Optional[str] = None,
    ) -> WorkoutPlan:
        """
        Adjust a plan to the user's difficulty feedback.

        Raises:
            InvalidPlanError: If the model output is not a usable plan
        """
        language = language or self.language
        feedback_text = feedback.value if isinstance(feedback, DifficultyFeedback) else feedback
        logger.info(f"Adjusting plan {plan.id} for feedback '{feedback_text}'")
        text = self._ask(
            ADJUST_WORKOUT_PROMPT.format(
                workout_plan=plan_to_ai_json(plan),
                feedback=feedback_text,
                language=language,
                schema=EXERCISE_SCHEMA,
            )
        )
        parsed = parse_ai_workout_output(text)
        adjusted = create_adjusted_plan(plan, parsed, feedback_text)
        logger.info(f"Adjusted plan {plan.id} -> {adjusted.id}")
        return adjusted

    def parse_workout_request(self, request: str) -> ParsedWorkoutRequest:
        """
        Turn a free-text request into canonical generator parameters.

        Unknown or missing values fall back to the defaults of ParsedWorkoutRequest.
        """
        text = self._ask(PARSE_REQUEST_PROMPT.format(request=request))
        data = extract_json(text)
        if not isinstance(data, dict):
            raise InvalidPlanError(INVALID_FORMAT, "Could not understand the workout request.")

        defaults = ParsedWorkoutRequest()
        values = {}
        for field in ("muscle_group_key", "equipment_key", "available_time", "difficulty"):
            if field in data:
                try:
                    ParsedWorkoutRequest(**{field: data[field]})
                    values[field] = data[field]
                except ValidationError:
                    logger.warning(f"Ignoring invalid {field}={data[field]!r} from request parser")
        parsed = ParsedWorkoutRequest(**values) if values else defaults
        logger.info(f"Parsed workout request: {parsed.model_dump(mode='json')}")
        return parsed

    def translate_workout_plan(self, plan: WorkoutPlan, language: str) -> WorkoutPlan:
        """Translate user-facing text, keeping numbers and structure."""
        text = self._ask(
            TRANSLATE_PLAN_PROMPT.format(language=language, workout_plan=plan_to_ai_json(plan))
        )
        parsed = parse_ai_workout_output(text)
        return create_translated_plan(plan, parsed)

    def weekly_insights(self, history: Sequence[WorkoutPlan], language: Optional[str] = None) -> WeeklyInsights:
        """Summarize recent history and suggest what to do next."""
        language = language or self.language
        history_json = json.dumps(
            [
                {
                    "name": plan.name,
                    "difficulty": plan.difficulty.value,
                    "muscle_groups": plan.muscle_groups,
                    "available_time": plan.available_time,
                    "exercises": [ex.name for ex in plan.exercises],
                    "generated_at": plan.generated_at.isoformat(),
                    "feedback_given": plan.feedback_given,
                }
                for plan in history
            ],
            ensure_ascii=False,
        )
        data = extract_json(
            self._ask(WEEKLY_INSIGHTS_PROMPT.format(history_json=history_json, language=language))
        )
        if not isinstance(data, dict):
            raise InvalidPlanError(INVALID_FORMAT, "Received invalid insights from AI.")

        params = data.get("next_suggested_params")
        if params is not None:
            try:
                GenerateWorkoutInput(**params)
            except (TypeError, ValidationError):
                logger.warning("Dropping invalid next_suggested_params from insights")
                data = {**data, "next_suggested_params": None}

        try:
            return WeeklyInsights(**data)
        except ValidationError as e:
            raise InvalidPlanError(INVALID_FORMAT, "Received invalid insights from AI.") from e

    def suggest_workout_descriptions(self, count: int = 6, language: Optional[str] = None) -> List[str]:
        """Example requests to show in the describe-your-workout box."""
        language = language or self.language
        data = extract_json(
            self._ask(SUGGEST_DESCRIPTIONS_PROMPT.format(count=count, language=language))
        )
        suggestions = data.get("suggestions", []) if isinstance(data, dict) else []
        return [s.strip() for s in suggestions if isinstance(s, str) and s.strip()][:count]
