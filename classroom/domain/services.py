"""Pure domain rules shared by controllers and analytics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import datetime, timedelta
from typing import Iterable, Optional, Sequence

URGENT_WINDOW = timedelta(hours=12)


def _round_half_up(value: float) -> int:
    return math.floor(value + 0.5)


def is_urgent(
    due_date: datetime,
    now: datetime,
    window: timedelta = URGENT_WINDOW,
) -> bool:
    """A deadline is urgent when it falls in ``(now, now + window]``."""

    return now < due_date <= now + window


def percentage(numerator: int, denominator: int) -> int:
    """Rounded integer percentage; 0 when there is nothing to divide by."""

    if denominator <= 0:
        return 0
    return _round_half_up(numerator / denominator * 100)


def average_score(scores: Sequence[Optional[int]]) -> int:
    """Rounded mean of graded scores; ungraded (None) entries are ignored."""

    graded = [score for score in scores if score is not None]
    if not graded:
        return 0
    return _round_half_up(sum(graded) / len(graded))


@dataclass(frozen=True, slots=True)
class RateSample:
    """Submissions observed against the submissions that were possible."""

    submissions: int
    task_count: int
    member_count: int

    @property
    def expected(self) -> int:
        return self.task_count * self.member_count

    @property
    def rate(self) -> int:
        return percentage(self.submissions, self.expected)


def combined_rate(samples: Iterable[RateSample]) -> int:
    """Submission rate across several groups, weighted by roster size."""

    samples = list(samples)
    return percentage(
        sum(sample.submissions for sample in samples),
        sum(sample.expected for sample in samples),
    )


__all__ = [
    "URGENT_WINDOW",
    "RateSample",
    "average_score",
    "combined_rate",
    "is_urgent",
    "percentage",
]
