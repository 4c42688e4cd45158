"""
Metrics calculator for deriving rollups and insights from memory records.

This is a pure computation module with no I/O.
"""

from collections.abc import Iterable
from datetime import datetime

from repetita.application.scheduler import (
    classify,
    is_due,
    is_new,
    mastery_level,
    mastery_progress,
    success_rate,
)
from repetita.domain.constants import DEFAULT_EASE, MINUTES_PER_CARD
from repetita.domain.models import Classification, MemoryRecord
from repetita.domain.stats.models import CardInsight, SetStatistics


def _reviewed(records: Iterable[MemoryRecord]) -> list[MemoryRecord]:
    return [r for r in records if r.review_count > 0]


def set_success_rate(records: Iterable[MemoryRecord]) -> float:
    """Mean success rate over reviewed cards; 0.0 if none were reviewed."""
    reviewed = _reviewed(records)
    if not reviewed:
        return 0.0
    return sum(success_rate(r) for r in reviewed) / len(reviewed)


def total_reviews(records: Iterable[MemoryRecord]) -> int:
    return sum(r.review_count for r in records)


def average_ease(records: Iterable[MemoryRecord]) -> float:
    """Mean ease factor over reviewed cards; the default ease if none were reviewed."""
    reviewed = _reviewed(records)
    if not reviewed:
        return DEFAULT_EASE
    return sum(r.ease_factor for r in reviewed) / len(reviewed)


def estimate_study_minutes(due_count: int) -> float:
    return due_count * MINUTES_PER_CARD


class MetricsCalculator:
    """
    Computes rollups and per-card metrics from MemoryRecord objects.

    Stateless and side-effect free.
    """

    def summarize(self, records: Iterable[MemoryRecord], now: datetime) -> SetStatistics:
        """
        Roll a collection of records up into SetStatistics.
        """
        records = list(records)
        due = sum(1 for r in records if is_due(r, now))
        new = sum(1 for r in records if is_new(r))
        last_reviews = [r.last_reviewed_at for r in records if r.last_reviewed_at is not None]

        return SetStatistics(
            total_cards=len(records),
            due_cards=due,
            new_cards=new,
            scheduled_cards=len(records) - due - new,
            total_reviews=total_reviews(records),
            success_rate=set_success_rate(records),
            average_ease=average_ease(records),
            estimated_minutes=estimate_study_minutes(due),
            last_reviewed_at=max(last_reviews) if last_reviews else None,
        )

    def enrich(self, card_id: str, record: MemoryRecord, now: datetime) -> CardInsight:
        """
        Enrich a card's record with computed metrics.
        """
        return CardInsight(
            card_id=card_id,
            classification=classify(record, now),
            ease_factor=record.ease_factor,
            interval_days=record.interval_days,
            review_count=record.review_count,
            success_rate=success_rate(record),
            lapse_rate=self._compute_lapse_rate(record),
            mastery_level=mastery_level(record),
            mastery_progress=mastery_progress(record),
            days_overdue=self._compute_days_overdue(record, now),
        )

    def _compute_lapse_rate(self, record: MemoryRecord) -> float | None:
        """
        Compute lapse rate as lapses / total reviews.
        """
        if record.review_count == 0:
            return None
        return record.lapse_count / record.review_count

    def _compute_days_overdue(self, record: MemoryRecord, now: datetime) -> int | None:
        """
        Compute whole days overdue, truncated toward zero (negative if not yet due).

        Unreviewed cards have no schedule yet and return None.
        """
        if classify(record, now) is Classification.NEW:
            return None
        return int((now - record.next_review_at).total_seconds() / 86400)
