"""
SM-2 scheduler.

Maps (MemoryRecord, ReviewResponse, now) to a new MemoryRecord. Every function
here is pure: `now` is always passed in and records are never mutated.

Day-granularity reviews are anchored at midnight of `now`'s calendar day in
`now`'s own timezone (naive datetimes stay naive).
"""

import logging
import math
from dataclasses import replace
from datetime import datetime, timedelta

from repetita.domain.constants import (
    AGAIN_EASE_PENALTY,
    DEVELOPING_MAX_EASE,
    DEVELOPING_MAX_REVIEWS,
    EASE_PRECISION,
    EASY_EASE_BONUS,
    EASY_INTERVAL_MULTIPLIER,
    FIRST_EASY_INTERVAL,
    FIRST_GOOD_INTERVAL,
    INTERVAL_PRECISION,
    MAX_EASE,
    MAX_INTERVAL_DAYS,
    MIN_EASE,
    PROFICIENT_MAX_EASE,
    PROFICIENT_MAX_REVIEWS,
    RELEARN_DELAY,
)
from repetita.domain.models import Classification, MasteryLevel, MemoryRecord, ReviewResponse

logger = logging.getLogger(__name__)


def apply_review(
    record: MemoryRecord,
    response: ReviewResponse,
    now: datetime,
    *,
    max_interval_days: int = MAX_INTERVAL_DAYS,
) -> MemoryRecord:
    """
    Apply one review to a record and return the updated record.

    Out-of-range ease factors and negative intervals coming from upstream
    storage are clamped, never rejected. Every ease change is rounded to two
    decimals so repeated bonuses and penalties don't accumulate float drift;
    an ease stored with more precision snaps to that grid (2.517 plus Easy
    gives 2.67).

    Args:
        record: Current memory state.
        response: Learner's grade.
        now: Instant of the review.
        max_interval_days: Upper bound on interval growth. A stored interval
            already at or above it still advances by one day.

    Returns:
        A new MemoryRecord; `record` is left untouched.
    """
    response = ReviewResponse(response)
    ease = _clamp_ease(record.ease_factor)
    interval = max(record.interval_days, 0)
    first_review = record.review_count <= 0

    lapses = record.lapse_count
    correct = record.correct_count
    perfect = record.perfect_count

    if response == ReviewResponse.AGAIN:
        ease = _round_ease(max(MIN_EASE, ease - AGAIN_EASE_PENALTY))
        new_interval = 0
        next_review_at = now + RELEARN_DELAY
        lapses += 1
    else:
        if response == ReviewResponse.EASY:
            ease = _round_ease(min(MAX_EASE, ease + EASY_EASE_BONUS))
            first_interval, multiplier = FIRST_EASY_INTERVAL, EASY_INTERVAL_MULTIPLIER
            perfect += 1
        else:
            first_interval, multiplier = FIRST_GOOD_INTERVAL, 1.0
            correct += 1

        if first_review or interval == 0:
            # New card, or relearning right after a lapse
            new_interval = min(first_interval, max(max_interval_days, 1))
        else:
            new_interval = _grow_interval(interval, ease * multiplier, max_interval_days)
        next_review_at = _add_days(start_of_day(now), new_interval)

    logger.debug(
        "review %s: ease %.2f -> %.2f, interval %d -> %d",
        response.value,
        record.ease_factor,
        ease,
        record.interval_days,
        new_interval,
    )

    return replace(
        record,
        ease_factor=ease,
        interval_days=new_interval,
        next_review_at=next_review_at,
        review_count=record.review_count + 1,
        lapse_count=lapses,
        correct_count=correct,
        perfect_count=perfect,
        last_reviewed_at=now,
    )


def _grow_interval(interval: int, factor: float, ceiling: int) -> int:
    """
    Multiply an interval, rounding up, and always advance by at least a day.

    Growth stops at `ceiling`, but an interval already at or past it still
    advances by one day.
    """
    grown = math.ceil(round(interval * factor, INTERVAL_PRECISION))
    return max(min(grown, ceiling), interval + 1)


def _clamp_ease(ease: float) -> float:
    return min(MAX_EASE, max(MIN_EASE, ease))


def _round_ease(ease: float) -> float:
    return round(ease, EASE_PRECISION)


def start_of_day(now: datetime) -> datetime:
    """Midnight of `now`'s calendar day, keeping its tzinfo."""
    return now.replace(hour=0, minute=0, second=0, microsecond=0)


def _add_days(anchor: datetime, days: int) -> datetime:
    try:
        return anchor + timedelta(days=days)
    except OverflowError:
        return datetime.max.replace(tzinfo=anchor.tzinfo)


# ---------- Derived queries ----------


def is_new(record: MemoryRecord) -> bool:
    return record.review_count == 0


def is_due(record: MemoryRecord, now: datetime) -> bool:
    return record.review_count > 0 and record.next_review_at <= now


def classify(record: MemoryRecord, now: datetime) -> Classification:
    if is_new(record):
        return Classification.NEW
    if is_due(record, now):
        return Classification.DUE
    return Classification.SCHEDULED


def success_rate(record: MemoryRecord) -> float:
    """Share of reviews graded Good or Easy; 0.0 for an unreviewed card."""
    if record.review_count <= 0:
        return 0.0
    return (record.correct_count + record.perfect_count) / record.review_count


def preview_next_review(
    record: MemoryRecord,
    response: ReviewResponse,
    now: datetime,
    *,
    max_interval_days: int = MAX_INTERVAL_DAYS,
) -> datetime:
    """When the card would be due if it were graded `response` at `now`."""
    return apply_review(record, response, now, max_interval_days=max_interval_days).next_review_at


def preview_intervals(
    record: MemoryRecord,
    now: datetime,
    *,
    max_interval_days: int = MAX_INTERVAL_DAYS,
) -> dict[ReviewResponse, int]:
    """Resulting interval in days for every possible grade."""
    return {
        response: apply_review(
            record, response, now, max_interval_days=max_interval_days
        ).interval_days
        for response in ReviewResponse
    }


# ---------- Mastery ----------


def mastery_level(record: MemoryRecord) -> MasteryLevel:
    if record.review_count == 0:
        return MasteryLevel.LEARNING
    if record.review_count < DEVELOPING_MAX_REVIEWS or record.ease_factor < DEVELOPING_MAX_EASE:
        return MasteryLevel.DEVELOPING
    if record.review_count < PROFICIENT_MAX_REVIEWS or record.ease_factor < PROFICIENT_MAX_EASE:
        return MasteryLevel.PROFICIENT
    return MasteryLevel.MASTERED


def mastery_progress(record: MemoryRecord) -> float:
    """
    Progress towards the next mastery level, in [0.0, 1.0].

    Half of the progress comes from the review count and half from the ease factor.
    """
    level = mastery_level(record)
    if level is MasteryLevel.LEARNING:
        return 0.0
    if level is MasteryLevel.MASTERED:
        return 1.0

    if level is MasteryLevel.DEVELOPING:
        reviews = record.review_count / DEVELOPING_MAX_REVIEWS
        ease = (record.ease_factor - 2.0) / (DEVELOPING_MAX_EASE - 2.0)
    else:
        reviews = (record.review_count - DEVELOPING_MAX_REVIEWS) / (
            PROFICIENT_MAX_REVIEWS - DEVELOPING_MAX_REVIEWS
        )
        ease = (record.ease_factor - DEVELOPING_MAX_EASE) / (
            PROFICIENT_MAX_EASE - DEVELOPING_MAX_EASE
        )

    progress = min(reviews, 1.0) * 0.5 + min(ease, 1.0) * 0.5
    return min(1.0, max(0.0, progress))
