"""Cooperative tick scheduler for session timers.

Nothing runs in the background. The host calls ``run_due()`` from its event
loop (a Streamlit fragment rerunning every second, or a test advancing a fake
clock) and every due callback fires synchronously in time order.
"""

import logging
import time
from typing import Callable, Dict, Optional

logger = logging.getLogger(__name__)

TICK_INTERVAL_SECONDS = 1.0
# Catch-up budget per poll: three hours of 1 s ticks
MAX_CATCH_UP_TICKS = 3 * 60 * 60


class _ScheduledTick:
    """Repeating callback registered under an integer handle."""

    def __init__(self, handle: int, callback: Callable[[], None], interval: float, next_due: float):
        self.handle = handle
        self.callback = callback
        self.interval = interval
        self.next_due = next_due


class TickScheduler:
    """Fire repeating callbacks from an injectable monotonic clock."""

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """
        Initialize scheduler.

        Args:
            clock: Monotonic time source in seconds (default: time.monotonic)
        """
        self._clock = clock
        self._ticks: Dict[int, _ScheduledTick] = {}
        self._next_handle = 1
        self._firing_at: Optional[float] = None

    @property
    def active_count(self) -> int:
        return len(self._ticks)

    def is_active(self, handle: Optional[int]) -> bool:
        return handle is not None and handle in self._ticks

    def schedule_repeating(
        self, callback: Callable[[], None], interval: float = TICK_INTERVAL_SECONDS
    ) -> int:
        """
        Register a callback firing every ``interval`` seconds.

        Callbacks scheduled from inside a firing callback are anchored to the
        instant being fired, so catch-up after a late poll keeps 1 s spacing.

        Returns:
            Handle to pass to cancel()
        """
        handle = self._next_handle
        self._next_handle += 1
        base = self._firing_at if self._firing_at is not None else self._clock()
        self._ticks[handle] = _ScheduledTick(handle, callback, interval, base + interval)
        logger.debug(f"Scheduled tick handle {handle} every {interval}s")
        return handle

    def cancel(self, handle: Optional[int]) -> bool:
        """Cancel a handle. Unknown or already cancelled handles are ignored."""
        if handle is None:
            return False
        removed = self._ticks.pop(handle, None)
        if removed is not None:
            logger.debug(f"Cancelled tick handle {handle}")
        return removed is not None

    def cancel_all(self) -> None:
        self._ticks.clear()

    def run_due(self, max_fires: int = MAX_CATCH_UP_TICKS) -> int:
        """
        Fire every callback that is due, oldest first.

        Session timers cancel their tick when the countdown ends, so a late
        poll fires at most the remaining countdown. Anything left after
        ``max_fires`` is dropped and re-anchored to the current time.

        Args:
            max_fires: Upper bound on callbacks fired in one call

        Returns:
            Number of callbacks fired
        """
        now = self._clock()
        fired = 0
        while True:
            if fired >= max_fires:
                self._drop_backlog(now)
                break
            due = [tick for tick in self._ticks.values() if tick.next_due <= now]
            if not due:
                break
            tick = min(due, key=lambda item: (item.next_due, item.handle))
            firing_at = tick.next_due
            tick.next_due += tick.interval
            self._firing_at = firing_at
            try:
                tick.callback()
            finally:
                self._firing_at = None
            fired += 1
        return fired

    def _drop_backlog(self, now: float) -> None:
        dropped = [tick for tick in self._ticks.values() if tick.next_due <= now]
        for tick in dropped:
            tick.next_due = now + tick.interval
        if dropped:
            logger.warning(f"Tick backlog exceeded, skipped missed ticks up to {now:.1f}")
