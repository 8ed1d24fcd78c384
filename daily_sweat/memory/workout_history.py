"""Workout history storage in a local JSON file."""

import json
import logging
from pathlib import Path
from typing import Any, List, Optional, Union

from pydantic import ValidationError

from daily_sweat.models.workout_plan import WorkoutPlan

logger = logging.getLogger(__name__)


class WorkoutHistoryStorage:
    """Keep the most recent generated and adjusted plans, newest first."""

    MAX_ITEMS = 20
    DEFAULT_FILENAME = "workout_history.json"

    def __init__(self, path: Union[str, Path]) -> None:
        """
        Initialize history storage.

        Args:
            path: JSON file path, or a directory to hold workout_history.json
        """
        path = Path(path).expanduser()
        if path.suffix != ".json":
            path = path / self.DEFAULT_FILENAME
        self.path = path
        self._history: Optional[List[WorkoutPlan]] = None

    def _load_json(self) -> Optional[Any]:
        if not self.path.exists():
            return None
        with self.path.open("r", encoding="utf-8") as fh:
            return json.load(fh)

    def _save_json(self, data: Any) -> None:
        self.path.parent.mkdir(parents=True, exist_ok=True)
        json_data = json.dumps(data, ensure_ascii=False, indent=2)
        tmp_path = self.path.with_suffix(".json.tmp")
        tmp_path.write_text(json_data, encoding="utf-8")
        tmp_path.replace(self.path)

    def load(self) -> List[WorkoutPlan]:
        """
        Load history from disk.

        Unreadable files and invalid entries are logged and skipped, so a
        corrupt history never blocks the app.

        Returns:
            Plans, newest first
        """
        if self._history is not None:
            return list(self._history)

        history: List[WorkoutPlan] = []
        try:
            data = self._load_json()
        except (OSError, json.JSONDecodeError) as e:
            logger.error(f"Failed to load workout history from {self.path}: {e}")
            data = None

        if isinstance(data, dict):
            data = data.get("plans", [])

        if isinstance(data, list):
            for item in data:
                try:
                    history.append(WorkoutPlan(**item))
                except (TypeError, ValidationError) as e:
                    logger.warning(f"Skipping invalid history entry: {e}")

        self._history = history
        logger.info(f"Loaded {len(history)} plans from workout history")
        return list(history)

    def _persist(self, history: List[WorkoutPlan]) -> None:
        try:
            self._save_json([plan.model_dump(mode="json") for plan in history])
        except OSError as e:
            logger.error(f"Failed to save workout history to {self.path}: {e}", exc_info=True)
            raise
        self._history = history

    def add(self, plan: WorkoutPlan) -> List[WorkoutPlan]:
        """
        Add a plan, replacing an existing entry with the same ID in place.

        New plans go to the front; the history is capped at MAX_ITEMS.
        """
        history = self.load()
        for i, existing in enumerate(history):
            if existing.id == plan.id:
                history[i] = plan
                break
        else:
            history = [plan] + history
            history = history[: self.MAX_ITEMS]

        self._persist(history)
        logger.info(f"Saved plan {plan.id} to history ({len(history)} items)")
        return list(history)

    def remove(self, plan_id: str) -> List[WorkoutPlan]:
        history = [plan for plan in self.load() if plan.id != plan_id]
        self._persist(history)
        return list(history)

    def clear(self) -> None:
        self._persist([])
        logger.info("Workout history cleared")

    def get(self, plan_id: str) -> Optional[WorkoutPlan]:
        for plan in self.load():
            if plan.id == plan_id:
                return plan
        return None
