from datetime import date, datetime, timezone

from study_scheduler.metrics import (
    focus_quality,
    peak_productivity_hours,
    study_streak,
    study_time_by_subject,
    weekly_study_time_by_subject,
)
from study_scheduler.schema import StudySessionRecord


def at(day, hour):
    return datetime(2025, 1, day, hour, 0, tzinfo=timezone.utc)


def sample_sessions():
    return [
        StudySessionRecord("math", at(6, 9), 25, True),
        StudySessionRecord("math", at(6, 14), 50, False),
        StudySessionRecord("physics", at(7, 9), 30, True),
        StudySessionRecord("physics", at(8, 20), 45, True),
        StudySessionRecord("math", at(13, 9), 60, True),
    ]


def test_study_time_by_subject():
    sessions = sample_sessions()
    assert study_time_by_subject(sessions, date(2025, 1, 6)) == {"math": 75}
    assert weekly_study_time_by_subject(sessions, date(2025, 1, 9)) == {"math": 75, "physics": 75}


def test_focus_quality():
    result = focus_quality(sample_sessions())
    assert result["total"] == 5
    assert result["abandoned"] == 1
    assert round(result["completion_rate"], 2) == 80.0
    assert focus_quality([])["completion_rate"] == 0.0


def test_peak_productivity_hours():
    ranked = peak_productivity_hours(sample_sessions())
    assert ranked[0] == {"hour": 9, "duration": 115}
    assert [entry["hour"] for entry in ranked] == [9, 14, 20]


def test_study_streak():
    assert study_streak(sample_sessions()) == {"current": 1, "longest": 3}
    assert study_streak([]) == {"current": 0, "longest": 0}
