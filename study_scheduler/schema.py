"""Core data schema for study plans and reminder events."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime
from types import MappingProxyType
from typing import Mapping, Optional

STUDY = "study"
BREAK = "break"
DEADLINE = "deadline"

REMINDER_TYPES = (STUDY, BREAK, DEADLINE)


@dataclass(frozen=True)
class StudyPlan:
    """Work/break plan produced by the schedule optimizer."""

    study_duration: int
    break_duration: int
    recommended_start_time: datetime
    session_intervals: tuple[int, ...]
    energy_multiplier: float

    def __post_init__(self) -> None:
        object.__setattr__(self, "session_intervals", tuple(self.session_intervals))


@dataclass(frozen=True)
class ReminderEvent:
    """A reminder accepted by the delivery backend."""

    id: str
    title: str
    body: str
    fire_time: datetime
    type: str
    session_number: Optional[int] = None
    extra: Mapping = field(default_factory=dict, hash=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "extra", MappingProxyType(dict(self.extra)))


@dataclass(frozen=True)
class DeadlineSpec:
    title: str
    date: datetime


@dataclass(frozen=True)
class SchedulerStats:
    """Snapshot of the locally recorded reminders."""

    total: int
    by_type: dict[str, int]
    next_event: Optional[ReminderEvent]


@dataclass
class StudySessionRecord:
    """A finished or abandoned focus session from the study log."""

    subject: str
    start_time: datetime
    duration: int
    completed: bool
