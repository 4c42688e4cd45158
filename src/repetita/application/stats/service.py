"""
Study Stats Service: Application layer orchestrator.

Coordinates fetching records from the repository and running them through the
scheduler, the session builder and the metrics calculator.
"""

import logging
from datetime import datetime

from repetita.application.queue_builder import SessionPlan, build_session_plan, daily_review_queue
from repetita.application.scheduler import apply_review
from repetita.domain.constants import DEFAULT_MAX_NEW, DEFAULT_MAX_REVIEW, MAX_INTERVAL_DAYS
from repetita.domain.models import MemoryRecord, ReviewResponse
from repetita.domain.stats.models import CardInsight, SetStatistics
from repetita.domain.stats.ports import RecordRepository

from .metrics_calculator import MetricsCalculator

logger = logging.getLogger(__name__)


class StudyStatsService:
    """
    Application service for sessions, review queues and statistics.

    Follows Dependency Inversion: depends on the RecordRepository abstraction,
    not concrete adapter implementations. It never writes records back;
    persisting the result of `review_card` is the caller's job.
    """

    def __init__(
        self,
        record_repo: RecordRepository,
        calculator: MetricsCalculator | None = None,
        max_interval_days: int = MAX_INTERVAL_DAYS,
    ):
        """
        Args:
            record_repo: The repository (port) for fetching records.
            calculator: Optional custom calculator; uses default if not provided.
            max_interval_days: Interval cap passed to the scheduler.
        """
        self._repo = record_repo
        self._calc = calculator or MetricsCalculator()
        self._max_interval_days = max_interval_days

    async def get_session(
        self,
        now: datetime,
        deck: str | None = None,
        max_new: int = DEFAULT_MAX_NEW,
        max_review: int = DEFAULT_MAX_REVIEW,
    ) -> SessionPlan:
        records = await self._repo.get_records(deck)
        return build_session_plan(records, now, max_new=max_new, max_review=max_review)

    async def get_review_queue(self, now: datetime, deck: str | None = None) -> list[str]:
        records = await self._repo.get_records(deck)
        return daily_review_queue(records, now)

    async def get_statistics(self, now: datetime, deck: str | None = None) -> SetStatistics:
        records = await self._repo.get_records(deck)
        return self._calc.summarize(records.values(), now)

    async def get_insights(self, now: datetime, deck: str | None = None) -> list[CardInsight]:
        """
        Per-card metrics for every record of the deck, in collection order.
        """
        records = await self._repo.get_records(deck)
        return [self._calc.enrich(card_id, record, now) for card_id, record in records.items()]

    async def get_record(self, card_id: str, deck: str | None = None) -> MemoryRecord:
        """
        Raises:
            KeyError: If the card is not in the deck.
        """
        records = await self._repo.get_records(deck)
        return records[card_id]

    async def review_card(
        self,
        card_id: str,
        response: ReviewResponse,
        now: datetime,
        deck: str | None = None,
    ) -> MemoryRecord:
        """
        Apply a review to a stored card and return the updated record.

        Raises:
            KeyError: If the card is not in the deck.
        """
        record = await self.get_record(card_id, deck)
        updated = apply_review(record, response, now, max_interval_days=self._max_interval_days)
        logger.info(
            f"Reviewed {card_id} as {ReviewResponse(response).display_name}: "
            f"next review {updated.next_review_at.isoformat()}"
        )
        return updated
