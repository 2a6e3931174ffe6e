"""Compute a study plan and optionally schedule its reminder chain."""

from __future__ import annotations

import argparse
import asyncio
import json
import sys
from datetime import datetime
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from study_scheduler.config import get_settings
from study_scheduler.delivery import InMemoryDelivery
from study_scheduler.logger import setup_logger
from study_scheduler.reminders import ReminderScheduler
from study_scheduler.scheduling import compute_plan
from study_scheduler.storage import JsonFileStore
from study_scheduler.timeutils import format_duration, utc_now
from study_scheduler.validation import clamp_energy_level, validate_study_duration


def _plan_report(plan) -> dict:
    return {
        "study_duration": plan.study_duration,
        "study_duration_label": format_duration(plan.study_duration),
        "break_duration": plan.break_duration,
        "recommended_start_time": plan.recommended_start_time.isoformat(),
        "session_intervals": list(plan.session_intervals),
        "energy_multiplier": plan.energy_multiplier,
    }


async def _schedule(plan, settings) -> dict:
    scheduler = ReminderScheduler(InMemoryDelivery(), JsonFileStore(settings.store_path), settings=settings)
    ids = await scheduler.schedule_recurring_chain(plan)
    stats = scheduler.stats()
    return {
        "scheduled_ids": ids,
        "total": stats.total,
        "by_type": stats.by_type,
        "next_event": stats.next_event.fire_time.isoformat() if stats.next_event else None,
    }


def main() -> None:
    parser = argparse.ArgumentParser(description="Plan a study session from energy level and available time")
    parser.add_argument("--energy", default="5", help="Energy level 1-10 (invalid values fall back to 5)")
    parser.add_argument("--minutes", type=int, required=True, help="Available study time in minutes")
    parser.add_argument("--start", help="Preferred start time, ISO 8601")
    parser.add_argument("--schedule", action="store_true", help="Schedule the reminder chain")
    args = parser.parse_args()

    settings = get_settings()
    logger = setup_logger(level=settings.log_level)

    try:
        minutes = validate_study_duration(args.minutes)
    except ValueError as exc:
        parser.error(str(exc))
    energy = clamp_energy_level(args.energy)
    preferred = datetime.fromisoformat(args.start) if args.start else None

    plan = compute_plan(
        energy,
        minutes,
        preferred,
        now=utc_now(),
        tz=settings.tzinfo,
        lead=settings.lead_time,
    )
    report = {"energy_level": energy, "plan": _plan_report(plan)}

    if args.schedule:
        report["reminders"] = asyncio.run(_schedule(plan, settings))
        if not report["reminders"]["scheduled_ids"]:
            logger.warning("Could not schedule any reminders for this plan")

    print(json.dumps(report, indent=2))


if __name__ == "__main__":
    main()
