"""Energy-aware study plan optimization."""

from __future__ import annotations

import logging
from datetime import datetime, timedelta, timezone, tzinfo
from math import floor
from typing import Optional

from study_scheduler.schema import StudyPlan
from study_scheduler.timeutils import MIN_LEAD_TIME, ensure_utc, minimum_fire_time, utc_now

logger = logging.getLogger(__name__)

ENERGY_MULTIPLIERS = {
    1: 0.5,
    2: 0.6,
    3: 0.7,
    4: 0.8,
    5: 0.9,
    6: 1.0,
    7: 1.1,
    8: 1.2,
    9: 1.3,
    10: 1.4,
}

# Preferred local hours of day; low energy avoids early mornings.
OPTIMAL_HOURS = {
    1: [10, 14, 16],
    2: [9, 13, 15],
    3: [9, 12, 14],
    4: [8, 11, 13],
    5: [8, 10, 12, 14],
    6: [7, 9, 11, 13, 15],
    7: [7, 8, 10, 12, 14, 16],
    8: [6, 8, 10, 12, 14, 16],
    9: [6, 7, 9, 11, 13, 15, 17],
    10: [6, 7, 8, 10, 12, 14, 16, 18],
}

MINUTES_PER_ENERGY_POINT = 25
SESSION_CAP_PER_ENERGY_POINT = 30
BASE_BREAK_RATIO = 0.25
BREAK_RATIO_PER_ENERGY_DEFICIT = 0.02
MIN_BREAK_MINUTES = 5


def energy_multiplier(energy_level: int) -> float:
    return ENERGY_MULTIPLIERS.get(energy_level, 1.0)


def optimal_study_duration(energy_level: int, available_time: int) -> int:
    """Cap the available time by what the energy level can sustain."""

    multiplier = energy_multiplier(energy_level)
    return min(available_time, floor(energy_level * MINUTES_PER_ENERGY_POINT * multiplier))


def optimal_break_duration(study_duration: int, energy_level: int) -> int:
    """Break length grows by two points of ratio per point of energy below 10."""

    ratio = BASE_BREAK_RATIO + (10 - energy_level) * BREAK_RATIO_PER_ENERGY_DEFICIT
    return max(MIN_BREAK_MINUTES, floor(study_duration * ratio))


def session_intervals(study_duration: int, energy_level: int) -> list[int]:
    """Split the study duration into sessions no longer than ``energy_level * 30``."""

    cap = min(study_duration, energy_level * SESSION_CAP_PER_ENERGY_POINT)
    sessions: list[int] = []
    remaining = study_duration
    while remaining > 0:
        length = min(cap, remaining)
        sessions.append(length)
        remaining -= length
    return sessions


def optimal_start_time(
    energy_level: int,
    now: datetime,
    tz: tzinfo = timezone.utc,
    lead: timedelta = MIN_LEAD_TIME,
) -> datetime:
    """Next preferred hour for this energy level, rolling over to tomorrow."""

    hours = OPTIMAL_HOURS.get(energy_level, OPTIMAL_HOURS[5])
    local_now = ensure_utc(now).astimezone(tz)

    upcoming = [hour for hour in hours if hour > local_now.hour]
    if upcoming:
        start = local_now.replace(hour=upcoming[0], minute=0, second=0, microsecond=0)
    else:
        tomorrow = local_now + timedelta(days=1)
        start = tomorrow.replace(hour=hours[0], minute=0, second=0, microsecond=0)

    return max(ensure_utc(start), minimum_fire_time(now, lead))


def compute_plan(
    energy_level: int,
    available_time: int,
    preferred_start_time: Optional[datetime] = None,
    *,
    now: Optional[datetime] = None,
    tz: tzinfo = timezone.utc,
    lead: timedelta = MIN_LEAD_TIME,
) -> StudyPlan:
    """Build a study plan for a clamped energy level (1-10) and positive minutes.

    An explicit start time keeps ``available_time`` as the study duration; it
    is only pulled forward to ``now + lead`` when it is too close. Without one,
    the duration is optimized for the energy level and the start time comes
    from ``OPTIMAL_HOURS``.
    """

    now = ensure_utc(now or utc_now())
    multiplier = energy_multiplier(energy_level)

    if preferred_start_time is not None:
        study_duration = available_time
        start = max(ensure_utc(preferred_start_time), minimum_fire_time(now, lead))
    else:
        study_duration = optimal_study_duration(energy_level, available_time)
        start = optimal_start_time(energy_level, now, tz, lead)

    plan = StudyPlan(
        study_duration=study_duration,
        break_duration=optimal_break_duration(study_duration, energy_level),
        recommended_start_time=start,
        session_intervals=session_intervals(study_duration, energy_level),
        energy_multiplier=multiplier,
    )
    logger.debug(
        "Computed plan: %s min in %d sessions starting %s",
        plan.study_duration,
        len(plan.session_intervals),
        plan.recommended_start_time.isoformat(),
    )
    return plan
