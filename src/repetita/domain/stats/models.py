"""
Domain models for study statistics.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime

from repetita.domain.models import Classification, MasteryLevel


@dataclass(frozen=True)
class SetStatistics:
    """
    Rollup over a collection of memory records.

    Attributes:
        total_cards: Number of records in the collection.
        due_cards: Previously reviewed cards whose review instant has passed.
        new_cards: Cards never reviewed.
        scheduled_cards: Reviewed cards not yet due.
        total_reviews: Sum of review counts.
        success_rate: Mean per-card success rate over reviewed cards.
        average_ease: Mean ease factor over reviewed cards.
        estimated_minutes: Study time estimate for the due cards.
        last_reviewed_at: Latest review across the collection, if any.
    """

    total_cards: int
    due_cards: int
    new_cards: int
    scheduled_cards: int
    total_reviews: int
    success_rate: float
    average_ease: float
    estimated_minutes: float
    last_reviewed_at: datetime | None = None


@dataclass(frozen=True)
class CardInsight:
    """
    A single card's record enriched with derived metrics.
    """

    card_id: str
    classification: Classification
    ease_factor: float
    interval_days: int
    review_count: int
    success_rate: float
    lapse_rate: float | None  # lapses / reviews
    mastery_level: MasteryLevel
    mastery_progress: float
    days_overdue: int | None  # Negative if not yet due
