"""Deadline-based escalation rules."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta

from study_scheduler.schema import DeadlineSpec
from study_scheduler.timeutils import MIN_LEAD_TIME, ensure_utc, respects_lead_time

DEADLINE_OFFSETS: list[tuple[timedelta, str]] = [
    (timedelta(days=7), '1 week until "{title}" deadline'),
    (timedelta(days=3), '3 days until "{title}" deadline'),
    (timedelta(days=1), '24 hours until "{title}" deadline'),
    (timedelta(hours=6), '6 hours until "{title}" deadline'),
]


@dataclass(frozen=True)
class DeadlineAlert:
    offset: timedelta
    alert_time: datetime
    message: str


def deadline_alerts(deadline: DeadlineSpec, now: datetime, lead: timedelta = MIN_LEAD_TIME) -> list[DeadlineAlert]:
    """Return the alerts still schedulable before a deadline, farthest first."""

    deadline_time = ensure_utc(deadline.date)
    if deadline_time <= ensure_utc(now):
        return []

    alerts = []
    for offset, template in DEADLINE_OFFSETS:
        alert_time = deadline_time - offset
        if respects_lead_time(alert_time, now, lead):
            alerts.append(DeadlineAlert(offset, alert_time, template.format(title=deadline.title)))
    return alerts
