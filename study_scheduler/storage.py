"""Key to JSON-string persistence used to cache reminders and preferences."""

from __future__ import annotations

import asyncio
import json
from pathlib import Path
from typing import Optional, Protocol

REMINDERS_KEY = "scheduledNotifications"
PREFERENCES_KEY = "notificationPreferences"


class KeyValueStore(Protocol):
    async def get(self, key: str) -> Optional[str]:
        ...

    async def set(self, key: str, value: str) -> None:
        ...


class MemoryStore:
    def __init__(self) -> None:
        self._data: dict[str, str] = {}

    async def get(self, key: str) -> Optional[str]:
        return self._data.get(key)

    async def set(self, key: str, value: str) -> None:
        self._data[key] = value


class JsonFileStore:
    """All keys live in a single JSON object on disk."""

    def __init__(self, path: str | Path) -> None:
        self.path = Path(path)

    def _read(self) -> dict:
        if not self.path.exists():
            return {}
        payload = json.loads(self.path.read_text(encoding="utf-8") or "{}")
        if not isinstance(payload, dict):
            raise ValueError(f"{self.path}: store must contain a JSON object")
        return payload

    def _write(self, key: str, value: str) -> None:
        payload = self._read()
        payload[key] = value
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(json.dumps(payload, indent=2), encoding="utf-8")

    async def get(self, key: str) -> Optional[str]:
        payload = await asyncio.to_thread(self._read)
        value = payload.get(key)
        return None if value is None else str(value)

    async def set(self, key: str, value: str) -> None:
        await asyncio.to_thread(self._write, key, value)
