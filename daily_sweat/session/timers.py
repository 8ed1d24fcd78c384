"""Countdown timers used by the workout session.

Both timers are plain state holders advanced one second per tick by the
controller. They never schedule anything themselves; ``tick`` returns True
exactly once, on the tick that reaches zero.
"""

import logging
from typing import Optional

from pydantic import BaseModel, Field

logger = logging.getLogger(__name__)


class ExerciseTimer(BaseModel):
    """Countdown for a timed exercise. Paused means not running and vice versa."""

    time_left: Optional[int] = Field(None, ge=0)
    is_running: bool = False
    is_paused: bool = False

    @property
    def is_counting(self) -> bool:
        return self.is_running and not self.is_paused and bool(self.time_left)

    def start(self, duration: int) -> None:
        self.time_left = duration
        self.is_running = True
        self.is_paused = False

    def clear(self) -> None:
        """Reset for a rep-based exercise."""
        self.time_left = None
        self.is_running = False
        self.is_paused = False

    def stop(self) -> None:
        """Stop counting but keep the remaining time for display."""
        self.is_running = False
        self.is_paused = False

    def toggle_pause(self) -> bool:
        """Flip paused/running together. Returns True if the timer is now paused."""
        self.is_paused = not self.is_paused
        self.is_running = not self.is_paused
        return self.is_paused

    def tick(self) -> bool:
        if not self.is_counting:
            logger.debug("Exercise tick ignored: timer not counting")
            return False
        self.time_left -= 1
        if self.time_left <= 0:
            self.time_left = 0
            self.is_running = False
            return True
        return False


class RestTimer(BaseModel):
    """Countdown served after an exercise. Supports toggle, reset and skip."""

    duration: int = Field(0, ge=0)
    time_left: int = Field(0, ge=0)
    is_running: bool = False

    def start(self, duration: int) -> None:
        self.duration = duration
        self.time_left = duration
        self.is_running = duration > 0

    def clear(self) -> None:
        self.duration = 0
        self.time_left = 0
        self.is_running = False

    def toggle(self) -> bool:
        """Pause or resume. Returns True if the timer is now running."""
        if self.time_left <= 0:
            return False
        self.is_running = not self.is_running
        return self.is_running

    def reset(self) -> None:
        """Restart the countdown from the full duration."""
        self.time_left = self.duration

    def skip(self) -> None:
        self.time_left = 0
        self.is_running = False

    def tick(self) -> bool:
        if not self.is_running or self.time_left <= 0:
            logger.debug("Rest tick ignored: timer not running")
            return False
        self.time_left -= 1
        if self.time_left == 0:
            self.is_running = False
            return True
        return False
