"""Session statistics computed when a workout ends."""

import math
from datetime import datetime
from typing import Optional

from daily_sweat.models.session_state import CompletionStats

# Rough energy estimate: 0.1 kcal per second of session time (about 6 kcal/minute).
ENERGY_UNITS_PER_SECOND = 0.1


def compute_completion_stats(
    started_at: Optional[datetime],
    ended_at: datetime,
    energy_units_per_second: float = ENERGY_UNITS_PER_SECOND,
) -> CompletionStats:
    """
    Compute duration and energy estimate for a session.

    Duration is wall clock time between start and end, including rests and
    pauses. A session that never started reports zero.

    Args:
        started_at: When the session began (None if it never started)
        ended_at: When the session finished or was ended
        energy_units_per_second: Linear energy ratio

    Returns:
        CompletionStats with whole seconds and whole energy units
    """
    if started_at is None:
        return CompletionStats(total_duration_seconds=0, estimated_energy_units=0)

    elapsed = (ended_at - started_at).total_seconds()
    total_seconds = max(0, math.floor(elapsed))
    # half-up rounding, so 4.5 becomes 5
    energy = math.floor(total_seconds * energy_units_per_second + 0.5)

    return CompletionStats(
        total_duration_seconds=total_seconds,
        estimated_energy_units=max(0, energy),
    )


def format_duration(seconds: Optional[int]) -> str:
    """Format seconds as MM:SS for timers and the completion summary."""
    if seconds is None or seconds < 0:
        return "00:00"
    minutes, remaining = divmod(seconds, 60)
    return f"{minutes:02d}:{remaining:02d}"
