"""Input validation applied before values reach the optimizer."""

from __future__ import annotations

from datetime import datetime, timedelta

from study_scheduler.timeutils import MIN_LEAD_TIME, ensure_utc

MIN_ENERGY_LEVEL = 1
MAX_ENERGY_LEVEL = 10
DEFAULT_ENERGY_LEVEL = 5

MAX_STUDY_MINUTES = 480


def parse_bounded(value, minimum: int, maximum: int, default: int) -> int:
    """Parse ``value`` as an int clamped into ``[minimum, maximum]``.

    Missing or non-numeric input yields ``default``; numeric input is
    truncated toward zero before clamping.
    """

    if value is None or isinstance(value, bool):
        return default
    if isinstance(value, str):
        value = value.strip()
        if not value:
            return default
    try:
        number = int(float(value))
    except (TypeError, ValueError, OverflowError):
        return default
    return max(minimum, min(maximum, number))


def clamp_energy_level(value) -> int:
    return parse_bounded(value, MIN_ENERGY_LEVEL, MAX_ENERGY_LEVEL, DEFAULT_ENERGY_LEVEL)


def validate_study_duration(minutes) -> int:
    """Return ``minutes`` if it is a whole number of minutes in 1..480."""

    if isinstance(minutes, bool) or not isinstance(minutes, int):
        raise ValueError(f"Study duration must be an integer number of minutes, got {minutes!r}")
    if minutes <= 0 or minutes > MAX_STUDY_MINUTES:
        raise ValueError(f"Study duration must be between 1 and {MAX_STUDY_MINUTES} minutes")
    return minutes


def validate_start_time(start: datetime, now: datetime, lead: timedelta = MIN_LEAD_TIME) -> datetime:
    """Reject start times in the past or inside the minimum lead time."""

    start = ensure_utc(start)
    now = ensure_utc(now)
    if start <= now:
        raise ValueError("Start time is in the past")
    if start <= now + lead:
        raise ValueError(f"Start time must be more than {int(lead.total_seconds())} seconds from now")
    return start
