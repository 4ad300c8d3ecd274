"""SM-2 scheduling math.

Everything here is pure: the caller passes in the record state, the rating
and the current date, and gets a new state back. Nothing is read from the
clock or the database, so the same inputs always give the same result.
"""
import math
from dataclasses import dataclass
from datetime import date, datetime, timedelta

from ..config import (
    FIRST_INTERVAL_DAYS,
    INITIAL_EASE_FACTOR,
    MAX_QUALITY,
    MIN_EASE_FACTOR,
    QUALITY_OFFSET,
    SECOND_INTERVAL_DAYS,
    SUCCESS_THRESHOLD,
)


@dataclass(frozen=True)
class SchedulerState:
    ease_factor: float
    interval: int
    repetitions: int

    @classmethod
    def initial(cls) -> "SchedulerState":
        return cls(ease_factor=INITIAL_EASE_FACTOR, interval=0, repetitions=0)


@dataclass(frozen=True)
class ScheduleResult:
    ease_factor: float
    interval: int
    repetitions: int
    next_review_date: date

    @property
    def state(self) -> SchedulerState:
        return SchedulerState(self.ease_factor, self.interval, self.repetitions)


def round_half_up(value: float) -> int:
    # Ties round up (16.5 -> 17), not to even as the builtin round() does.
    return int(math.floor(value + 0.5))


def next_interval(state: SchedulerState, rating: int) -> int:
    if rating < SUCCESS_THRESHOLD:
        return FIRST_INTERVAL_DAYS
    if state.repetitions == 0:
        return FIRST_INTERVAL_DAYS
    if state.repetitions == 1:
        return SECOND_INTERVAL_DAYS
    return round_half_up(state.interval * state.ease_factor)


def next_ease_factor(ease_factor: float, rating: int) -> float:
    """Ease update from SM-2, applied on every rating including lapses."""
    miss = MAX_QUALITY - (rating + QUALITY_OFFSET)
    updated = ease_factor + (0.1 - miss * (0.08 + miss * 0.02))
    return max(MIN_EASE_FACTOR, updated)


def advance(state: SchedulerState, rating: int, now: date) -> ScheduleResult:
    """Apply one rating to a review state.

    ``rating`` must already be validated (see ``Rating.parse``). ``now`` is
    the review date; a datetime is reduced to its calendar date so the
    interval is always counted in whole days.
    """
    if isinstance(now, datetime):
        now = now.date()

    interval = next_interval(state, rating)
    if rating < SUCCESS_THRESHOLD:
        repetitions = 0
    else:
        repetitions = state.repetitions + 1

    return ScheduleResult(
        ease_factor=next_ease_factor(state.ease_factor, rating),
        interval=interval,
        repetitions=repetitions,
        next_review_date=now + timedelta(days=interval),
    )


def is_due(next_review_date, today: date) -> bool:
    # No record yet means the card is new, and new cards are always studyable.
    if next_review_date is None:
        return True
    return next_review_date <= today
