"""SM-2 review scheduling for flashcards."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Optional

from study_scheduler.timeutils import ensure_utc, utc_now
from study_scheduler.validation import parse_bounded

DEFAULT_EASINESS = 2.5
MIN_EASINESS = 1.3


@dataclass(frozen=True)
class ReviewResult:
    easiness: float
    interval: int
    repetitions: int
    next_review: datetime


class SM2Scheduler:
    """SuperMemo-2 with recall quality graded 0 (blackout) to 5 (perfect)."""

    @staticmethod
    def easiness(quality: int, previous_easiness: float) -> float:
        updated = previous_easiness + (0.1 - (5 - quality) * (0.08 + (5 - quality) * 0.02))
        return max(MIN_EASINESS, updated)

    @staticmethod
    def repetitions(quality: int, previous_repetitions: int) -> int:
        if quality < 3:
            return 0
        return previous_repetitions + 1

    @staticmethod
    def interval(repetitions: int, previous_interval: int, easiness: float) -> int:
        if repetitions == 0:
            return 1
        if repetitions == 1:
            return 6
        return round(previous_interval * easiness)

    def next_review(
        self,
        quality,
        easiness: float = DEFAULT_EASINESS,
        interval: int = 1,
        repetitions: int = 0,
        now: Optional[datetime] = None,
    ) -> ReviewResult:
        quality = parse_bounded(quality, 0, 5, 0)
        new_easiness = self.easiness(quality, easiness)
        new_repetitions = self.repetitions(quality, repetitions)
        new_interval = self.interval(new_repetitions, interval, new_easiness)
        return ReviewResult(
            easiness=new_easiness,
            interval=new_interval,
            repetitions=new_repetitions,
            next_review=ensure_utc(now or utc_now()) + timedelta(days=new_interval),
        )
