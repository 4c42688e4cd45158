"""
Ports (interfaces) for record retrieval.

These define the contract that infrastructure adapters must implement.
Application services depend on these abstractions, not concrete implementations.
"""

from abc import ABC, abstractmethod

from repetita.domain.models import MemoryRecord


class RecordSourceError(Exception):
    """Raised when a record source cannot be read or contains invalid rows."""


class RecordRepository(ABC):
    """
    Port for fetching memory records owned by the card collection.

    Implementations:
        - YamlRecordRepository: Reads a YAML deck snapshot.
    """

    @abstractmethod
    async def get_records(self, deck: str | None = None) -> dict[str, MemoryRecord]:
        """
        Fetch the records of a deck, keyed by card id in creation order.

        Args:
            deck: Deck name, or None for every deck.

        Returns:
            Mapping of card id to MemoryRecord. Empty if the deck has no cards.

        Raises:
            RecordSourceError: If the underlying source is unreadable.
        """
        pass
