"""
Domain models for the scheduler.

These are pure data structures with no I/O or external dependencies.
"""

from dataclasses import dataclass
from datetime import datetime
from enum import Enum

from .constants import DEFAULT_EASE


class ReviewResponse(str, Enum):
    """Grade supplied by the learner at review time."""

    AGAIN = "again"  # failed recall
    GOOD = "good"  # recalled with effort
    EASY = "easy"  # trivial recall

    @property
    def display_name(self) -> str:
        return self.value.capitalize()

    @property
    def description(self) -> str:
        return _RESPONSE_DESCRIPTIONS[self]

    @classmethod
    def parse(cls, text: str) -> "ReviewResponse":
        """Look up a response by name, ignoring case and surrounding whitespace."""
        return cls(text.strip().lower())


_RESPONSE_DESCRIPTIONS = {
    ReviewResponse.AGAIN: "I didn't recall this. Show it again soon.",
    ReviewResponse.GOOD: "I recalled it with effort. Normal interval.",
    ReviewResponse.EASY: "Perfect recall! Extend the interval.",
}


class Classification(str, Enum):
    """Derived scheduling state of a card at a given instant."""

    NEW = "new"
    DUE = "due"
    SCHEDULED = "scheduled"


class MasteryLevel(str, Enum):
    LEARNING = "learning"
    DEVELOPING = "developing"
    PROFICIENT = "proficient"
    MASTERED = "mastered"


@dataclass(frozen=True)
class MemoryRecord:
    """
    Per-card memory state manipulated by the scheduler.

    Attributes:
        next_review_at: Instant the card becomes due.
        ease_factor: Interval growth multiplier, kept within [1.3, 3.0].
        interval_days: Days until the next review; 0 means same-day retry.
        review_count: Total completed reviews.
        lapse_count: Reviews graded Again.
        correct_count: Reviews graded Good.
        perfect_count: Reviews graded Easy.
        last_reviewed_at: Instant of the latest review, None until the first.
    """

    next_review_at: datetime
    ease_factor: float = DEFAULT_EASE
    interval_days: int = 0
    review_count: int = 0
    lapse_count: int = 0
    correct_count: int = 0
    perfect_count: int = 0
    last_reviewed_at: datetime | None = None

    @classmethod
    def create(cls, now: datetime) -> "MemoryRecord":
        """A fresh record for a card introduced at `now`, immediately available."""
        return cls(next_review_at=now)
