from datetime import datetime, timedelta, timezone

import pytest

from study_scheduler.schema import ReminderEvent
from study_scheduler.scheduling import (
    compute_plan,
    energy_multiplier,
    optimal_break_duration,
    optimal_start_time,
    session_intervals,
)

NOW = datetime(2025, 1, 6, 9, 30, tzinfo=timezone.utc)


def test_plan_intervals_sum_to_study_duration():
    for energy in range(1, 11):
        for available in (1, 25, 59, 120, 300, 480):
            plan = compute_plan(energy, available, now=NOW)
            assert sum(plan.session_intervals) == plan.study_duration
            assert plan.session_intervals
            assert all(length > 0 for length in plan.session_intervals)
            assert all(length <= energy * 30 for length in plan.session_intervals)
            assert plan.recommended_start_time >= NOW + timedelta(seconds=60)


def test_auto_plan_for_medium_energy():
    plan = compute_plan(5, 120, now=NOW)
    assert plan.energy_multiplier == 0.9
    assert plan.study_duration == 112
    assert plan.break_duration == 39
    assert plan.session_intervals == (112,)
    assert plan.recommended_start_time == datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)


def test_preferred_start_keeps_requested_duration():
    preferred = NOW + timedelta(minutes=30)
    plan = compute_plan(3, 90, preferred, now=NOW)
    assert plan.study_duration == 90
    assert plan.recommended_start_time == preferred
    assert plan.break_duration == 35
    assert plan.session_intervals == (90,)


def test_preferred_start_too_close_is_pulled_forward():
    plan = compute_plan(6, 60, NOW + timedelta(seconds=10), now=NOW)
    assert plan.recommended_start_time == NOW + timedelta(seconds=60)
    assert plan.study_duration == 60


def test_energy_multiplier_outside_table_defaults_to_one():
    assert energy_multiplier(1) == 0.5
    assert energy_multiplier(10) == 1.4
    assert energy_multiplier(0) == 1.0
    assert energy_multiplier(11) == 1.0


def test_break_duration_has_five_minute_floor():
    assert optimal_break_duration(10, 10) == 5
    assert optimal_break_duration(100, 10) == 25
    assert optimal_break_duration(100, 1) == 43


def test_session_intervals_last_chunk_is_shorter():
    assert session_intervals(100, 1) == [30, 30, 30, 10]
    assert session_intervals(60, 2) == [60]
    assert session_intervals(0, 5) == []


def test_optimal_start_rolls_over_to_tomorrow():
    evening = datetime(2025, 1, 6, 17, 0, tzinfo=timezone.utc)
    assert optimal_start_time(1, evening) == datetime(2025, 1, 7, 10, 0, tzinfo=timezone.utc)


def test_optimal_start_respects_lead_time():
    almost_ten = datetime(2025, 1, 6, 9, 59, 30, tzinfo=timezone.utc)
    assert optimal_start_time(5, almost_ten) == almost_ten + timedelta(seconds=60)


def test_optimal_start_uses_local_hours():
    plus_two = timezone(timedelta(hours=2))
    start = optimal_start_time(5, NOW, tz=plus_two)
    assert start == datetime(2025, 1, 6, 10, 0, tzinfo=timezone.utc)
    assert start.astimezone(plus_two).hour == 12


def test_plan_and_reminder_records_are_immutable():
    plan = compute_plan(1, 100, now=NOW)
    assert plan.session_intervals == (12,)
    assert isinstance(plan.session_intervals, tuple)
    hash(plan)

    event = ReminderEvent("r1", "Study", "Focus", NOW, "study", extra={"subject": "math"})
    hash(event)
    with pytest.raises(TypeError):
        event.extra["subject"] = "art"
    assert event.extra == {"subject": "math"}
