"""Demo script for study-scheduler."""

import asyncio
import sys
from datetime import timedelta
from pathlib import Path

sys.path.insert(0, str(Path(__file__).resolve().parents[1]))

from study_scheduler.delivery import InMemoryDelivery
from study_scheduler.reminders import ReminderScheduler
from study_scheduler.schema import DeadlineSpec
from study_scheduler.scheduling import compute_plan
from study_scheduler.storage import MemoryStore
from study_scheduler.timeutils import utc_now


async def main() -> None:
    now = utc_now()
    plan = compute_plan(7, 180, now=now)
    print("Plan:", plan)

    scheduler = ReminderScheduler(InMemoryDelivery(), MemoryStore())
    print("Chain:", await scheduler.schedule_recurring_chain(plan))
    print("Deadline:", await scheduler.schedule_deadline_alerts(DeadlineSpec("Essay", now + timedelta(days=4))))
    print("Stats:", scheduler.stats())


if __name__ == "__main__":
    asyncio.run(main())
