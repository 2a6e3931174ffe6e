"""CSV adapter for study-session logs."""

from __future__ import annotations

import csv
from datetime import datetime

from study_scheduler.schema import StudySessionRecord
from study_scheduler.timeutils import ensure_utc

_REQUIRED_FIELDS = {"subject", "start_time", "duration"}
_TRUE_VALUES = {"1", "true", "yes", "y"}
_FALSE_VALUES = {"", "0", "false", "no", "n"}


def _parse_row(row: dict, row_number: int) -> StudySessionRecord:
    missing = [field for field in sorted(_REQUIRED_FIELDS) if not row.get(field)]
    if missing:
        raise ValueError(f"Row {row_number}: missing required fields {missing}")

    try:
        start_time = ensure_utc(datetime.fromisoformat(row["start_time"].strip()))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: malformed timestamp") from exc

    try:
        duration = int(row["duration"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Row {row_number}: invalid duration") from exc
    if duration < 0:
        raise ValueError(f"Row {row_number}: duration must not be negative")

    completed_raw = (row.get("completed") or "").strip().lower()
    if completed_raw in _TRUE_VALUES:
        completed = True
    elif completed_raw in _FALSE_VALUES:
        completed = False
    else:
        raise ValueError(f"Row {row_number}: invalid completed flag '{completed_raw}'")

    return StudySessionRecord(
        subject=row["subject"].strip(),
        start_time=start_time,
        duration=duration,
        completed=completed,
    )


def parse(file_path: str) -> list[StudySessionRecord]:
    """Parse CSV file into a list of study-session records."""

    with open(file_path, newline="", encoding="utf-8") as handle:
        reader = csv.DictReader(handle)
        if not reader.fieldnames:
            return []

        sessions: list[StudySessionRecord] = []
        for row_number, row in enumerate(reader, start=2):
            sessions.append(_parse_row(row, row_number))
        return sessions
