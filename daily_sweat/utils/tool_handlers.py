"""Handlers for tool function calls using LangChain."""

import logging
from typing import List, Optional

from langchain_core.tools import tool

from daily_sweat.memory.workout_history import WorkoutHistoryStorage

logger = logging.getLogger(__name__)

# Global history store (will be set by app.py)
_history: Optional[WorkoutHistoryStorage] = None


def set_history_context(history: Optional[WorkoutHistoryStorage]) -> None:
    """Set the workout history the chat tools read from."""
    global _history
    _history = history


@tool
def get_workout_history(limit: int = 5) -> str:
    """Load the user's most recent workout plans.

    Use this when the user asks about their past workouts, progress or what
    to train next.

    Args:
        limit: Maximum number of plans to list (default 5)

    Returns:
        Summary of the latest plans, newest first
    """
    if not _history:
        return "ERROR: History not initialized"

    try:
        logger.info(f"Loading workout history for chat, limit={limit}")
        plans = _history.load()[: max(1, limit)]

        if not plans:
            return "No workouts in history yet. Generate the first one!"

        output = f"**Last {len(plans)} workouts:**\n"
        for plan in plans:
            output += (
                f"\n📅 {plan.generated_at:%Y-%m-%d} | {plan.name} (id {plan.id})\n"
                f"  {plan.difficulty.value}, {plan.available_time} min, "
                f"{plan.muscle_groups}, {plan.equipment}, {len(plan.exercises)} exercises"
            )
            if plan.feedback_given:
                output += f"\n  💬 Feedback: {plan.feedback_given}"
        return output

    except Exception as e:
        error_msg = f"❌ Error loading workout history: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return error_msg


@tool
def get_workout_plan(plan_id: str) -> str:
    """Show every exercise of one plan from the history.

    Args:
        plan_id: Plan ID as listed by get_workout_history

    Returns:
        Exercises with sets, reps, rest and duration
    """
    if not _history:
        return "ERROR: History not initialized"

    try:
        plan = _history.get(plan_id)
        if plan is None:
            return f"❌ Error: plan '{plan_id}' not found in history"

        lines = [f"**{plan.name}**"]
        if plan.description:
            lines.append(plan.description)
        for i, ex in enumerate(plan.exercises, start=1):
            line = f"{i}. {ex.name}: {ex.sets} x {ex.reps}, rest {ex.rest}s"
            if ex.is_timed:
                line += f", {ex.duration}s timed"
            lines.append(line)
        return "\n".join(lines)

    except Exception as e:
        error_msg = f"❌ Error loading plan: {str(e)}"
        logger.error(error_msg, exc_info=True)
        return error_msg


def get_all_tools() -> List:
    """Get all tool functions for LangChain."""
    return [
        get_workout_history,
        get_workout_plan,
    ]
