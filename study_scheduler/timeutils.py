"""Time helpers shared by the optimizer and the reminder scheduler."""

from __future__ import annotations

from datetime import datetime, timedelta, timezone

MIN_LEAD_TIME = timedelta(seconds=60)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


def ensure_utc(value: datetime) -> datetime:
    """Return an aware UTC instant; naive values are taken to be UTC already."""

    if value.tzinfo is None:
        return value.replace(tzinfo=timezone.utc)
    return value.astimezone(timezone.utc)


def minimum_fire_time(now: datetime, lead: timedelta = MIN_LEAD_TIME) -> datetime:
    return ensure_utc(now) + lead


def respects_lead_time(fire_time: datetime, now: datetime, lead: timedelta = MIN_LEAD_TIME) -> bool:
    """True when ``fire_time`` is strictly later than ``now + lead``."""

    return ensure_utc(fire_time) > minimum_fire_time(now, lead)


def add_minutes(value: datetime, minutes: float) -> datetime:
    return value + timedelta(minutes=minutes)


def format_duration(minutes: int) -> str:
    """Format minutes as ``45m``, ``2h`` or ``1h 30m``."""

    if minutes < 60:
        return f"{minutes}m"
    hours, rest = divmod(int(minutes), 60)
    return f"{hours}h" if rest == 0 else f"{hours}h {rest}m"


def seconds_to_minutes(seconds: float) -> int:
    return int(round(seconds / 60))
