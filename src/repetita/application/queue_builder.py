"""
Queue builder for study sessions.

Builds ordered study queues by:
1. Splitting the collection into due and new cards
2. Ordering due cards by how long they have been overdue
3. Capping each group and putting due cards ahead of new ones
"""

import logging
from collections.abc import Iterable, Mapping
from dataclasses import dataclass, field
from datetime import datetime

from repetita.application.scheduler import is_due, is_new
from repetita.domain.constants import DEFAULT_MAX_NEW, DEFAULT_MAX_REVIEW
from repetita.domain.models import MemoryRecord

logger = logging.getLogger(__name__)

RecordCollection = Mapping[str, MemoryRecord] | Iterable[tuple[str, MemoryRecord]]


@dataclass
class SessionPlan:
    """Result of session building."""

    due_queue: list[str]  # Due cards, earliest-overdue first (capped)
    new_queue: list[str]  # New cards in creation order (capped)
    due_available: int = 0  # Due cards before capping
    new_available: int = 0  # New cards before capping
    cards: list[str] = field(init=False)

    def __post_init__(self):
        self.cards = self.due_queue + self.new_queue

    @property
    def is_empty(self) -> bool:
        return not self.cards


def _iter_records(records: RecordCollection) -> list[tuple[str, MemoryRecord]]:
    if isinstance(records, Mapping):
        return list(records.items())
    return list(records)


def _sorted_due(pairs: list[tuple[str, MemoryRecord]], now: datetime) -> list[str]:
    due = [(card_id, record) for card_id, record in pairs if is_due(record, now)]
    # sort() is stable: equal due instants keep collection order
    due.sort(key=lambda pair: pair[1].next_review_at)
    return [card_id for card_id, _ in due]


def build_session_plan(
    records: RecordCollection,
    now: datetime,
    max_new: int = DEFAULT_MAX_NEW,
    max_review: int = DEFAULT_MAX_REVIEW,
) -> SessionPlan:
    """
    Plan a bounded study session mixing due and new cards.

    Args:
        records: Card id to record mapping, or (card_id, record) pairs in creation order.
        now: Reference instant for due classification.
        max_new: Maximum new cards (negative behaves as 0).
        max_review: Maximum due cards (negative behaves as 0).

    Returns:
        SessionPlan with the capped queues and the uncapped availability counts.
    """
    pairs = _iter_records(records)

    due = _sorted_due(pairs, now)
    new = [card_id for card_id, record in pairs if is_new(record)]

    plan = SessionPlan(
        due_queue=due[: max(max_review, 0)],
        new_queue=new[: max(max_new, 0)],
        due_available=len(due),
        new_available=len(new),
    )
    logger.debug(
        "Session plan: %d/%d due, %d/%d new",
        len(plan.due_queue),
        plan.due_available,
        len(plan.new_queue),
        plan.new_available,
    )
    return plan


def build_session(
    records: RecordCollection,
    max_new: int,
    max_review: int,
    now: datetime,
) -> list[str]:
    """
    Ordered card ids for a study session: due cards first, then new cards.

    An empty list means there is nothing to study now.
    """
    return build_session_plan(records, now, max_new=max_new, max_review=max_review).cards


def daily_review_queue(records: RecordCollection, now: datetime) -> list[str]:
    """Every due card, earliest due first. New cards are never included."""
    return _sorted_due(_iter_records(records), now)
