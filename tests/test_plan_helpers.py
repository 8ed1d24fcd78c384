import json

import pytest

from daily_sweat.errors import EMPTY_PLAN, INVALID_FORMAT, MALFORMED_EXERCISE, InvalidPlanError
from daily_sweat.models.workout_plan import (
    AIParsedWorkoutOutput,
    Difficulty,
    DifficultyFeedback,
    Exercise,
    GenerateWorkoutInput,
)
from daily_sweat.utils.plan_helpers import (
    create_adjusted_plan,
    create_translated_plan,
    create_workout_plan_from_ai_output,
    extract_json,
    new_plan_id,
    parse_ai_workout_output,
    plan_to_ai_json,
    validate_plan_for_session,
)

AI_OUTPUT = {
    "name": "Leg Day Express",
    "description": "Quick lower body circuit",
    "exercises": [
        {"name": "Squats", "sets": 3, "reps": 12, "rest": 45},
        {"name": "Wall sit", "sets": 1, "reps": "Hold", "rest": 0, "duration": 40},
    ],
}

PARAMS = GenerateWorkoutInput(
    muscle_groups="Lower Body",
    available_time=20,
    equipment="None / Bodyweight",
    difficulty=Difficulty.INTERMEDIATE,
)


class TestExtractJson:
    def test_plain_json(self):
        assert extract_json('{"a": 1}') == {"a": 1}

    def test_code_fence(self):
        assert extract_json('```json\n{"a": 1}\n```') == {"a": 1}

    def test_invalid_json(self):
        with pytest.raises(InvalidPlanError) as exc_info:
            extract_json("Sure! Here is your workout.")

        assert exc_info.value.reason == INVALID_FORMAT


class TestParseAiWorkoutOutput:
    def test_parses_exercises(self):
        parsed = parse_ai_workout_output(json.dumps(AI_OUTPUT))

        assert parsed.name == "Leg Day Express"
        assert [ex.name for ex in parsed.exercises] == ["Squats", "Wall sit"]
        assert parsed.exercises[0].reps == "12"
        assert parsed.exercises[1].is_timed

    def test_skips_malformed_exercises(self):
        data = dict(AI_OUTPUT, exercises=AI_OUTPUT["exercises"] + [{"name": ""}, "jumping jacks"])

        parsed = parse_ai_workout_output(json.dumps(data))

        assert len(parsed.exercises) == 2

    def test_empty_plan_is_rejected(self):
        with pytest.raises(InvalidPlanError) as exc_info:
            parse_ai_workout_output('{"name": "Nothing", "exercises": []}')

        assert exc_info.value.reason == EMPTY_PLAN
        assert exc_info.value.message == "The AI generated an empty workout plan."

    def test_non_object_is_rejected(self):
        with pytest.raises(InvalidPlanError) as exc_info:
            parse_ai_workout_output("[1, 2, 3]")

        assert exc_info.value.reason == INVALID_FORMAT


class TestPlanCreation:
    def test_plan_from_ai_output(self):
        plan = create_workout_plan_from_ai_output(parse_ai_workout_output(json.dumps(AI_OUTPUT)), PARAMS)

        assert plan.name == "Leg Day Express"
        assert plan.muscle_groups == "Lower Body"
        assert plan.available_time == 20
        assert plan.difficulty == Difficulty.INTERMEDIATE
        assert plan.original_plan_id is None

    def test_plan_name_fallback(self):
        parsed = AIParsedWorkoutOutput(exercises=[Exercise(name="Squats", sets=3, reps="12")])

        plan = create_workout_plan_from_ai_output(parsed, PARAMS)

        assert plan.name == "intermediate Lower Body Workout"

    def test_adjusted_plan_links_to_original(self):
        original = create_workout_plan_from_ai_output(parse_ai_workout_output(json.dumps(AI_OUTPUT)), PARAMS)
        parsed = AIParsedWorkoutOutput(exercises=[Exercise(name="Jump squats", sets=4, reps="15", rest=30)])

        adjusted = create_adjusted_plan(original, parsed, DifficultyFeedback.TOO_EASY)

        assert adjusted.id != original.id
        assert adjusted.original_plan_id == original.id
        assert adjusted.feedback_given == "too easy"
        assert adjusted.name == original.name
        assert adjusted.muscle_groups == original.muscle_groups
        assert [ex.name for ex in adjusted.exercises] == ["Jump squats"]

    def test_translated_plan_keeps_numbers(self):
        original = create_workout_plan_from_ai_output(parse_ai_workout_output(json.dumps(AI_OUTPUT)), PARAMS)
        parsed = AIParsedWorkoutOutput(
            name="Día de piernas",
            exercises=[
                Exercise(name="Sentadillas", sets=9, reps="99", rest=999),
                Exercise(name="Sentadilla en pared", sets=1, reps="Hold"),
            ],
        )

        translated = create_translated_plan(original, parsed)

        assert translated.name == "Día de piernas"
        assert translated.exercises[0].name == "Sentadillas"
        assert translated.exercises[0].sets == 3
        assert translated.exercises[0].rest == 45
        assert translated.exercises[1].duration == 40

    def test_translation_with_different_exercise_count_keeps_original(self):
        original = create_workout_plan_from_ai_output(parse_ai_workout_output(json.dumps(AI_OUTPUT)), PARAMS)
        parsed = AIParsedWorkoutOutput(exercises=[Exercise(name="Sentadillas", sets=3, reps="12")])

        assert create_translated_plan(original, parsed) is original

    def test_plan_ids_are_unique(self):
        ids = [new_plan_id() for _ in range(50)]

        assert len(set(ids)) == 50
        assert ids == sorted(ids, key=int)

    def test_plan_to_ai_json_omits_empty_fields(self):
        plan = create_workout_plan_from_ai_output(parse_ai_workout_output(json.dumps(AI_OUTPUT)), PARAMS)

        data = json.loads(plan_to_ai_json(plan))

        assert data["name"] == "Leg Day Express"
        assert "duration" not in data["exercises"][0]
        assert data["exercises"][1]["duration"] == 40


class TestValidatePlanForSession:
    def test_valid_plan(self, timed_plan):
        assert validate_plan_for_session(timed_plan) is timed_plan

    def test_missing_plan(self):
        with pytest.raises(InvalidPlanError) as exc_info:
            validate_plan_for_session(None)

        assert exc_info.value.reason == INVALID_FORMAT

    def test_empty_plan(self, plan_factory):
        with pytest.raises(InvalidPlanError) as exc_info:
            validate_plan_for_session(plan_factory())

        assert exc_info.value.reason == EMPTY_PLAN
        assert str(exc_info.value) == "empty_plan: This workout plan has no exercises."

    def test_malformed_exercise(self, timed_plan):
        data = timed_plan.model_dump(mode="json")
        data["exercises"][0]["rest"] = -10

        with pytest.raises(InvalidPlanError) as exc_info:
            validate_plan_for_session(data)

        assert exc_info.value.reason == MALFORMED_EXERCISE
        assert exc_info.value.message.startswith("Exercise #1 is malformed")

    def test_dict_missing_fields(self):
        with pytest.raises(InvalidPlanError) as exc_info:
            validate_plan_for_session({"name": "No id", "exercises": []})

        assert exc_info.value.reason == INVALID_FORMAT

    def test_wrong_type(self):
        with pytest.raises(InvalidPlanError) as exc_info:
            validate_plan_for_session(["Squats"])

        assert exc_info.value.reason == INVALID_FORMAT
