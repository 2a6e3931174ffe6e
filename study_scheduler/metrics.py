"""Study-session analytics."""

from __future__ import annotations

from collections import Counter
from datetime import date, datetime, timedelta, timezone, tzinfo

from study_scheduler.schema import StudySessionRecord


def _local_date(value: datetime, tz: tzinfo) -> date:
    return value.astimezone(tz).date()


def _minutes_by_subject(sessions: list[StudySessionRecord], start: date, end: date, tz: tzinfo) -> dict[str, int]:
    totals = Counter()
    for session in sessions:
        if start <= _local_date(session.start_time, tz) <= end:
            totals[session.subject] += session.duration
    return dict(totals)


def study_time_by_subject(
    sessions: list[StudySessionRecord], day: date, tz: tzinfo = timezone.utc
) -> dict[str, int]:
    """Minutes studied per subject on ``day``."""

    return _minutes_by_subject(sessions, day, day, tz)


def weekly_study_time_by_subject(
    sessions: list[StudySessionRecord], day: date, tz: tzinfo = timezone.utc
) -> dict[str, int]:
    """Minutes studied per subject in the Monday-to-Sunday week containing ``day``."""

    week_start = day - timedelta(days=day.weekday())
    return _minutes_by_subject(sessions, week_start, week_start + timedelta(days=6), tz)


def focus_quality(sessions: list[StudySessionRecord]) -> dict:
    """Completed vs abandoned sessions with a completion percentage."""

    total = len(sessions)
    completed = sum(1 for session in sessions if session.completed)
    return {
        "total": total,
        "completed": completed,
        "abandoned": total - completed,
        "completion_rate": (completed / total) * 100.0 if total else 0.0,
    }


def peak_productivity_hours(sessions: list[StudySessionRecord], tz: tzinfo = timezone.utc) -> list[dict]:
    """Hours of day ranked by minutes studied, busiest first."""

    by_hour = Counter()
    for session in sessions:
        by_hour[session.start_time.astimezone(tz).hour] += session.duration
    ranked = sorted(by_hour.items(), key=lambda item: (-item[1], item[0]))
    return [{"hour": hour, "duration": minutes} for hour, minutes in ranked]


def study_streak(sessions: list[StudySessionRecord], tz: tzinfo = timezone.utc) -> dict:
    """Longest run of consecutive study days and the run ending on the last day."""

    days = sorted({_local_date(session.start_time, tz) for session in sessions})
    if not days:
        return {"current": 0, "longest": 0}

    current = longest = 1
    for previous, day in zip(days, days[1:]):
        if (day - previous).days == 1:
            current += 1
            longest = max(longest, current)
        else:
            current = 1
    return {"current": current, "longest": longest}
