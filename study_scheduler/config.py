"""Runtime settings and notification preferences."""

from __future__ import annotations

from datetime import timedelta, timezone, tzinfo
from functools import lru_cache
from zoneinfo import ZoneInfo, ZoneInfoNotFoundError

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class SchedulerSettings(BaseSettings):
    """Scheduler configuration, overridable through ``STUDY_*`` variables."""

    min_lead_seconds: int = Field(
        default=60,
        ge=1,
        description="Reminders must fire strictly later than now plus this many seconds",
    )
    timezone: str = Field(
        default="UTC",
        description="IANA timezone used to interpret preferred hours of day",
    )
    store_path: str = Field(
        default="study_scheduler_store.json",
        description="JSON file caching scheduled reminders and preferences",
    )
    log_level: str = Field(default="INFO", description="Logging level name")

    model_config = SettingsConfigDict(
        env_prefix="STUDY_",
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @field_validator("timezone")
    @classmethod
    def _known_timezone(cls, value: str) -> str:
        if value.upper() == "UTC":
            return "UTC"
        try:
            ZoneInfo(value)
        except (ZoneInfoNotFoundError, ValueError) as exc:
            raise ValueError(f"Unknown timezone {value!r}") from exc
        return value

    @field_validator("log_level")
    @classmethod
    def _upper_level(cls, value: str) -> str:
        return value.upper()

    @property
    def lead_time(self) -> timedelta:
        return timedelta(seconds=self.min_lead_seconds)

    @property
    def tzinfo(self) -> tzinfo:
        if self.timezone == "UTC":
            return timezone.utc
        return ZoneInfo(self.timezone)


class NotificationPreferences(BaseModel):
    """Which reminder kinds the user wants; unknown keys are rejected."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    study_reminders: bool = True
    break_reminders: bool = True
    deadline_alerts: bool = True
    energy_based_suggestions: bool = True
    smart_scheduling: bool = True

    def with_changes(self, **changes) -> "NotificationPreferences":
        return NotificationPreferences.model_validate({**self.model_dump(), **changes})


@lru_cache()
def get_settings() -> SchedulerSettings:
    return SchedulerSettings()


def reload_settings() -> SchedulerSettings:
    get_settings.cache_clear()
    return get_settings()
