"""JSON adapter for persisted reminders and study-session logs."""

from __future__ import annotations

import json
from datetime import datetime

from study_scheduler.schema import REMINDER_TYPES, ReminderEvent, StudySessionRecord
from study_scheduler.timeutils import ensure_utc

_REMINDER_FIELDS = {"id", "title", "fire_time", "type"}
_SESSION_FIELDS = {"subject", "start_time", "duration"}


def _parse_time(raw, label: str) -> datetime:
    try:
        return ensure_utc(datetime.fromisoformat(str(raw)))
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"{label}: malformed timestamp") from exc


def _parse_reminder(item: dict, index: int) -> ReminderEvent:
    if not isinstance(item, dict):
        raise ValueError(f"Item {index}: expected an object")
    missing = sorted(
        field for field in _REMINDER_FIELDS if item.get(field) is None or (field != "id" and not item.get(field))
    )
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    reminder_type = str(item["type"]).strip()
    if reminder_type not in REMINDER_TYPES:
        raise ValueError(f"Item {index}: invalid type '{reminder_type}'")

    session_number = item.get("session_number")
    if session_number is not None:
        try:
            session_number = int(session_number)
        except Exception as exc:  # noqa: BLE001
            raise ValueError(f"Item {index}: invalid session_number") from exc

    extra = item.get("extra") or {}
    if not isinstance(extra, dict):
        raise ValueError(f"Item {index}: extra must be an object")

    return ReminderEvent(
        id=item["id"],
        title=str(item["title"]),
        body=str(item.get("body") or ""),
        fire_time=_parse_time(item["fire_time"], f"Item {index}"),
        type=reminder_type,
        session_number=session_number,
        extra=extra,
    )


def dump_reminders(events) -> str:
    """Serialize reminder events to the JSON list kept in the store."""

    return json.dumps(
        [
            {
                "id": event.id,
                "title": event.title,
                "body": event.body,
                "fire_time": event.fire_time.isoformat(),
                "type": event.type,
                "session_number": event.session_number,
                "extra": dict(event.extra),
            }
            for event in events
        ]
    )


def load_reminders(payload: str) -> list[ReminderEvent]:
    """Parse the stored JSON list back into reminder events."""

    try:
        items = json.loads(payload)
    except json.JSONDecodeError as exc:
        raise ValueError("Stored reminders are not valid JSON") from exc

    if not isinstance(items, list):
        raise ValueError("JSON payload must be a list of objects")

    return [_parse_reminder(item, i) for i, item in enumerate(items, start=1)]


def _parse_session(item: dict, index: int) -> StudySessionRecord:
    missing = [field for field in sorted(_SESSION_FIELDS) if item.get(field) in (None, "")]
    if missing:
        raise ValueError(f"Item {index}: missing required fields {missing}")

    try:
        duration = int(item["duration"])
    except Exception as exc:  # noqa: BLE001
        raise ValueError(f"Item {index}: invalid duration") from exc
    if duration < 0:
        raise ValueError(f"Item {index}: duration must not be negative")

    return StudySessionRecord(
        subject=str(item["subject"]).strip(),
        start_time=_parse_time(item["start_time"], f"Item {index}"),
        duration=duration,
        completed=bool(item.get("completed", False)),
    )


def parse(file_path: str) -> list[StudySessionRecord]:
    """Parse a JSON study-session log."""

    with open(file_path, encoding="utf-8") as handle:
        payload = json.load(handle)

    if not isinstance(payload, list):
        raise ValueError("JSON payload must be a list of objects")

    return [_parse_session(item, i) for i, item in enumerate(payload, start=1)]
