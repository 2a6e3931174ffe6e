"""Reminder scheduling on top of a delivery backend.

``ReminderScheduler`` turns plans, deadlines and one-off requests into
notifications with absolute fire times. Every fire time must be strictly
later than ``now + lead``; requests that are too close are rejected by
returning ``None`` (or an empty list) without touching the backend.

Delivery failures are logged and reported as ``None`` so that multi-event
loops keep going. Persistence failures never undo the in-memory record,
which stays authoritative for the running process.
"""

from __future__ import annotations

import asyncio
import json
import logging
from datetime import datetime, timedelta
from typing import Callable, Optional

from study_scheduler.adapters.json_adapter import dump_reminders, load_reminders
from study_scheduler.config import NotificationPreferences, SchedulerSettings, get_settings
from study_scheduler.delivery import DeliveryBackend
from study_scheduler.escalation import deadline_alerts
from study_scheduler.schema import (
    BREAK,
    DEADLINE,
    REMINDER_TYPES,
    STUDY,
    DeadlineSpec,
    ReminderEvent,
    SchedulerStats,
    StudyPlan,
)
from study_scheduler.storage import PREFERENCES_KEY, REMINDERS_KEY, KeyValueStore
from study_scheduler.timeutils import add_minutes, ensure_utc, minimum_fire_time, respects_lead_time, utc_now

logger = logging.getLogger(__name__)


class ReminderScheduler:
    def __init__(
        self,
        delivery: DeliveryBackend,
        store: Optional[KeyValueStore] = None,
        *,
        clock: Callable[[], datetime] = utc_now,
        settings: Optional[SchedulerSettings] = None,
        on_warning: Optional[Callable[[str], None]] = None,
    ) -> None:
        self.delivery = delivery
        self.store = store
        self.clock = clock
        self.lead: timedelta = (settings or get_settings()).lead_time
        self.on_warning = on_warning
        self._record: dict[str, ReminderEvent] = {}
        self._lock = asyncio.Lock()

    def _now(self) -> datetime:
        return ensure_utc(self.clock())

    def _warn(self, message: str) -> None:
        logger.warning(message)
        if self.on_warning is not None:
            self.on_warning(message)

    async def _persist(self) -> None:
        if self.store is None:
            return
        try:
            await self.store.set(REMINDERS_KEY, dump_reminders(self._record.values()))
        except Exception as exc:  # noqa: BLE001
            self._warn(f"Could not save scheduled reminders: {exc}")

    async def schedule_single(
        self,
        title: str,
        body: str,
        fire_time: datetime,
        reminder_type: str,
        extra: Optional[dict] = None,
        session_number: Optional[int] = None,
    ) -> Optional[str]:
        """Schedule one reminder and return its id, or ``None`` if it was not created."""

        if reminder_type not in REMINDER_TYPES:
            raise ValueError(f"Unknown reminder type '{reminder_type}'")

        fire_time = ensure_utc(fire_time)
        now = self._now()
        if not respects_lead_time(fire_time, now, self.lead):
            logger.info(
                "Rejected %s reminder %r at %s: must be after %s",
                reminder_type,
                title,
                fire_time.isoformat(),
                minimum_fire_time(now, self.lead).isoformat(),
            )
            return None

        content = {"title": title, "body": body, "data": {**(extra or {}), "type": reminder_type}}
        if session_number is not None:
            content["data"]["session_number"] = session_number

        try:
            reminder_id = await self.delivery.schedule(content, fire_time)
        except Exception:  # noqa: BLE001
            logger.exception("Delivery backend failed to schedule %r", title)
            return None
        if reminder_id is None:
            logger.error("Delivery backend returned no id for %r", title)
            return None

        event = ReminderEvent(
            id=reminder_id,
            title=title,
            body=body,
            fire_time=fire_time,
            type=reminder_type,
            session_number=session_number,
            extra=dict(extra or {}),
        )
        async with self._lock:
            self._record[reminder_id] = event
            await self._persist()

        logger.info("Scheduled %s reminder %s at %s", reminder_type, reminder_id, fire_time.isoformat())
        return reminder_id

    async def schedule_break_following(
        self,
        break_minutes: int,
        study_minutes: int,
        session_start: datetime,
    ) -> Optional[str]:
        """Remind the user to take a break once a study session ends."""

        break_time = add_minutes(ensure_utc(session_start), study_minutes)
        if break_time <= self._now():
            logger.info("Break time %s is already in the past", break_time.isoformat())
            return None

        return await self.schedule_single(
            "Time for a Break!",
            f"You've been studying for {study_minutes} minutes. "
            f"Take a {break_minutes}-minute break to maintain focus and energy.",
            break_time,
            BREAK,
        )

    async def schedule_deadline_alerts(self, deadline: DeadlineSpec) -> list[str]:
        """Schedule the 7d/3d/1d/6h alerts that are still far enough away."""

        scheduled_ids = []
        for alert in deadline_alerts(deadline, self._now(), self.lead):
            reminder_id = await self.schedule_single(
                f"Deadline Alert: {deadline.title}",
                alert.message,
                alert.alert_time,
                DEADLINE,
            )
            if reminder_id is not None:
                scheduled_ids.append(reminder_id)
        return scheduled_ids

    async def schedule_recurring_chain(self, plan: StudyPlan) -> list[str]:
        """Schedule a start reminder and a break reminder for every session.

        Sessions follow each other at ``session + break`` minutes whether or
        not the individual reminders could be created.
        """

        scheduled_ids = []
        current_time = max(ensure_utc(plan.recommended_start_time), minimum_fire_time(self._now(), self.lead))

        for number, session_length in enumerate(plan.session_intervals, start=1):
            study_id = await self.schedule_single(
                f"Study Session {number} Starting",
                f"Time to focus! Your {session_length}-minute study session is about to begin.",
                current_time,
                STUDY,
                session_number=number,
            )
            if study_id is not None:
                scheduled_ids.append(study_id)

            break_time = add_minutes(current_time, session_length)
            break_id = await self.schedule_break_following(plan.break_duration, session_length, current_time)
            if break_id is not None:
                scheduled_ids.append(break_id)

            current_time = add_minutes(break_time, plan.break_duration)

        return scheduled_ids

    async def cancel(self, reminder_id: str) -> bool:
        try:
            await self.delivery.cancel(reminder_id)
        except Exception:  # noqa: BLE001
            logger.exception("Delivery backend failed to cancel %s", reminder_id)
            return False

        async with self._lock:
            self._record.pop(reminder_id, None)
            await self._persist()
        return True

    async def cancel_all(self) -> bool:
        try:
            await self.delivery.cancel_all()
        except Exception:  # noqa: BLE001
            logger.exception("Delivery backend failed to cancel all reminders")
            return False

        async with self._lock:
            self._record.clear()
            await self._persist()
        return True

    def events(self) -> tuple[ReminderEvent, ...]:
        return tuple(self._record.values())

    def get(self, reminder_id: str) -> Optional[ReminderEvent]:
        return self._record.get(reminder_id)

    def stats(self) -> SchedulerStats:
        by_type = {reminder_type: 0 for reminder_type in REMINDER_TYPES}
        next_event = None
        for event in self._record.values():
            by_type[event.type] = by_type.get(event.type, 0) + 1
            if next_event is None or event.fire_time < next_event.fire_time:
                next_event = event
        return SchedulerStats(total=len(self._record), by_type=by_type, next_event=next_event)

    async def list_scheduled(self) -> list[dict]:
        """Notifications the delivery backend still reports as pending."""

        try:
            return await self.delivery.list_scheduled()
        except Exception:  # noqa: BLE001
            logger.exception("Delivery backend failed to list scheduled reminders")
            return []

    async def restore(self) -> int:
        """Reload the cached record, keeping only reminders still pending."""

        if self.store is None:
            return 0
        try:
            payload = await self.store.get(REMINDERS_KEY)
            events = load_reminders(payload) if payload else []
        except Exception as exc:  # noqa: BLE001
            self._warn(f"Could not load scheduled reminders: {exc}")
            return 0

        try:
            pending = {item["id"] for item in await self.delivery.list_scheduled()}
        except Exception:  # noqa: BLE001
            logger.exception("Delivery backend failed to list scheduled reminders")
            pending = None

        restored = 0
        async with self._lock:
            for event in events:
                if pending is None or event.id in pending:
                    self._record[event.id] = event
                    restored += 1
        logger.info("Restored %d of %d cached reminders", restored, len(events))
        return restored

    async def save_preferences(self, preferences: NotificationPreferences) -> bool:
        if self.store is None:
            return False
        try:
            await self.store.set(PREFERENCES_KEY, preferences.model_dump_json())
        except Exception as exc:  # noqa: BLE001
            self._warn(f"Could not save notification preferences: {exc}")
            return False
        return True

    async def load_preferences(self) -> Optional[NotificationPreferences]:
        if self.store is None:
            return None
        try:
            payload = await self.store.get(PREFERENCES_KEY)
            if not payload:
                return None
            return NotificationPreferences.model_validate(json.loads(payload))
        except Exception as exc:  # noqa: BLE001
            self._warn(f"Could not load notification preferences: {exc}")
            return None
