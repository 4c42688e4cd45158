"""
YAML Record Repository: Infrastructure adapter for deck snapshot files.

Implements RecordRepository by reading a YAML file owned by the card collection.
The adapter is read-only; persisting reviewed records is the caller's job.
"""

import logging
from collections.abc import Callable
from datetime import datetime, timezone
from pathlib import Path
from typing import Any

import yaml  # type: ignore
from pydantic import BaseModel, ConfigDict, ValidationError, field_validator

from repetita.domain.constants import DEFAULT_EASE
from repetita.domain.models import MemoryRecord
from repetita.domain.stats.ports import RecordRepository, RecordSourceError

logger = logging.getLogger(__name__)

DEFAULT_DECK = "default"


class RecordRow(BaseModel):
    """One card entry of a snapshot file. Unknown keys (question, answer, ...) are ignored."""

    model_config = ConfigDict(extra="ignore")

    id: str
    ease_factor: float = DEFAULT_EASE
    interval_days: int = 0
    next_review_at: datetime | None = None
    review_count: int = 0
    lapse_count: int = 0
    correct_count: int = 0
    perfect_count: int = 0
    last_reviewed_at: datetime | None = None

    @field_validator("id", mode="before")
    @classmethod
    def stringify_id(cls, v: Any) -> Any:
        if isinstance(v, int):
            return str(v)
        return v

    @field_validator("next_review_at", "last_reviewed_at")
    @classmethod
    def assume_utc(cls, v: datetime | None) -> datetime | None:
        # Naive timestamps in the file are read as UTC
        if v is not None and v.tzinfo is None:
            return v.replace(tzinfo=timezone.utc)
        return v

    def to_record(self, loaded_at: datetime) -> MemoryRecord:
        return MemoryRecord(
            next_review_at=self.next_review_at or loaded_at,
            ease_factor=self.ease_factor,
            interval_days=self.interval_days,
            review_count=self.review_count,
            lapse_count=self.lapse_count,
            correct_count=self.correct_count,
            perfect_count=self.perfect_count,
            last_reviewed_at=self.last_reviewed_at,
        )


def _utc_now() -> datetime:
    return datetime.now(timezone.utc)


class YamlRecordRepository(RecordRepository):
    """
    Reads memory records from a YAML snapshot.

    Accepted layouts:
        decks: {<deck name>: [<card>, ...], ...}
        cards: [<card>, ...]              (single deck named "default")
    """

    def __init__(self, path: Path, clock: Callable[[], datetime] = _utc_now):
        self.path = Path(path)
        self._clock = clock

    async def get_records(self, deck: str | None = None) -> dict[str, MemoryRecord]:
        """
        Fetch the records of a deck (or of every deck), keyed by card id in file order.
        """
        decks = self._load_decks()

        if deck is not None:
            if deck not in decks:
                logger.warning(f"Deck '{deck}' not found in {self.path}")
                return {}
            selected = {deck: decks[deck]}
        else:
            selected = decks

        loaded_at = self._clock()
        records: dict[str, MemoryRecord] = {}
        for deck_name, rows in selected.items():
            for index, raw in enumerate(rows):
                row = self._parse_row(raw, deck_name, index)
                if row.id in records:
                    logger.warning(f"Duplicate card id '{row.id}' in deck '{deck_name}'")
                records[row.id] = row.to_record(loaded_at)

        logger.info(f"Loaded {len(records)} records from {self.path}")
        return records

    def _load_decks(self) -> dict[str, list[Any]]:
        try:
            text = self.path.read_text(encoding="utf-8")
        except OSError as e:
            raise RecordSourceError(f"Cannot read {self.path}: {e}") from e

        try:
            data = yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise RecordSourceError(f"Invalid YAML in {self.path}: {e}") from e

        if data is None:
            return {}
        if not isinstance(data, dict):
            raise RecordSourceError(f"{self.path}: expected a mapping at the top level")

        decks: dict[str, list[Any]] = {}
        if "cards" in data:
            decks[DEFAULT_DECK] = self._as_list(data["cards"], DEFAULT_DECK)

        raw_decks = data.get("decks") or {}
        if not isinstance(raw_decks, dict):
            raise RecordSourceError(f"{self.path}: 'decks' must be a mapping of deck names")
        for name, rows in raw_decks.items():
            decks[str(name)] = self._as_list(rows, str(name))

        return decks

    def _as_list(self, rows: Any, deck_name: str) -> list[Any]:
        if rows is None:
            return []
        if not isinstance(rows, list):
            raise RecordSourceError(f"{self.path}: deck '{deck_name}' must be a list of cards")
        return rows

    def _parse_row(self, raw: Any, deck_name: str, index: int) -> RecordRow:
        try:
            return RecordRow.model_validate(raw)
        except ValidationError as e:
            raise RecordSourceError(
                f"{self.path}: invalid card #{index + 1} in deck '{deck_name}': {e}"
            ) from e
