from datetime import datetime, timedelta, timezone

import pytest

from repetita.domain.models import MemoryRecord

NOW = datetime(2026, 3, 15, 14, 30, tzinfo=timezone.utc)


@pytest.fixture
def now():
    """Fixed reference instant; nothing in the scheduler reads the clock."""
    return NOW


@pytest.fixture
def fresh_record(now):
    return MemoryRecord.create(now)


@pytest.fixture
def make_record(now):
    """Factory for reviewed records due `due_in` from the fixed instant."""

    def _make(due_in=timedelta(0), **fields):
        fields.setdefault("review_count", 1)
        fields.setdefault("correct_count", fields["review_count"])
        return MemoryRecord(next_review_at=now + due_in, **fields)

    return _make


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks HOME to a temp dir and clears REPETITA_* variables."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config files
    monkeypatch.setenv("HOME", str(home))
    for var in ("RECORDS_PATH", "DEFAULT_DECK", "MAX_NEW", "MAX_REVIEW", "MAX_INTERVAL_DAYS"):
        monkeypatch.delenv(f"REPETITA_{var}", raising=False)
    return home
