"""Notification delivery backends."""

from __future__ import annotations

from datetime import datetime
from typing import Protocol
from uuid import uuid4

from study_scheduler.timeutils import ensure_utc


class DeliveryBackend(Protocol):
    """Platform capability that fires notifications at absolute times."""

    async def schedule(self, content: dict, fire_time: datetime) -> str:
        ...

    async def cancel(self, notification_id: str) -> None:
        ...

    async def cancel_all(self) -> None:
        ...

    async def list_scheduled(self) -> list[dict]:
        ...


class InMemoryDelivery:
    """Delivery backend that only records what it was asked to fire."""

    def __init__(self) -> None:
        self._pending: dict[str, dict] = {}

    async def schedule(self, content: dict, fire_time: datetime) -> str:
        notification_id = uuid4().hex
        self._pending[notification_id] = {
            "id": notification_id,
            "content": dict(content),
            "fire_time": ensure_utc(fire_time),
        }
        return notification_id

    async def cancel(self, notification_id: str) -> None:
        if notification_id not in self._pending:
            raise KeyError(f"Unknown notification id {notification_id!r}")
        del self._pending[notification_id]

    async def cancel_all(self) -> None:
        self._pending.clear()

    async def list_scheduled(self) -> list[dict]:
        return [dict(item) for item in self._pending.values()]
