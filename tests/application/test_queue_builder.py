"""Tests for the session builder and daily review queue."""

from datetime import timedelta

import pytest

from repetita.application.queue_builder import (
    SessionPlan,
    build_session,
    build_session_plan,
    daily_review_queue,
)
from repetita.domain.models import MemoryRecord


@pytest.fixture
def deck(now, make_record):
    """Collection in creation order: mixed due, new and scheduled cards."""
    return {
        "new-1": MemoryRecord.create(now - timedelta(days=9)),
        "due-recent": make_record(due_in=-timedelta(hours=1)),
        "scheduled": make_record(due_in=timedelta(days=2)),
        "new-2": MemoryRecord.create(now - timedelta(days=5)),
        "due-oldest": make_record(due_in=-timedelta(days=3)),
        "due-middle": make_record(due_in=-timedelta(days=1)),
        "new-3": MemoryRecord.create(now),
    }


class TestDailyReviewQueue:
    def test_sorted_by_due_instant(self, deck, now):
        assert daily_review_queue(deck, now) == ["due-oldest", "due-middle", "due-recent"]

    def test_new_cards_never_included(self, deck, now):
        # New cards created in the past are still not "due"
        queue = daily_review_queue(deck, now + timedelta(days=30))
        assert not any(card_id.startswith("new") for card_id in queue)
        assert "scheduled" in queue

    def test_equal_instants_keep_collection_order(self, now, make_record):
        pairs = [("b", make_record()), ("a", make_record()), ("c", make_record())]
        assert daily_review_queue(pairs, now) == ["b", "a", "c"]

    def test_empty(self, now):
        assert daily_review_queue({}, now) == []
        assert daily_review_queue([], now) == []


class TestBuildSession:
    def test_due_first_then_new(self, deck, now):
        session = build_session(deck, max_new=5, max_review=20, now=now)
        assert session == [
            "due-oldest",
            "due-middle",
            "due-recent",
            "new-1",
            "new-2",
            "new-3",
        ]

    def test_caps_respected(self, deck, now):
        session = build_session(deck, max_new=2, max_review=1, now=now)
        assert session == ["due-oldest", "new-1", "new-2"]

    def test_fewer_available_than_caps(self, deck, now):
        session = build_session(deck, max_new=50, max_review=50, now=now)
        assert len(session) == 6
        assert "scheduled" not in session

    @pytest.mark.parametrize("max_new,max_review", [(0, 0), (-1, -4)])
    def test_zero_or_negative_caps(self, deck, now, max_new, max_review):
        assert build_session(deck, max_new=max_new, max_review=max_review, now=now) == []

    def test_accepts_pairs_and_generators(self, deck, now):
        expected = build_session(deck, 5, 20, now)
        assert build_session(list(deck.items()), 5, 20, now) == expected
        assert build_session(((k, v) for k, v in deck.items()), 5, 20, now) == expected

    def test_empty_collection(self, now):
        assert build_session({}, max_new=5, max_review=20, now=now) == []


class TestSessionPlan:
    def test_plan_counts(self, deck, now):
        plan = build_session_plan(deck, now, max_new=1, max_review=2)

        assert isinstance(plan, SessionPlan)
        assert plan.due_queue == ["due-oldest", "due-middle"]
        assert plan.new_queue == ["new-1"]
        assert plan.due_available == 3
        assert plan.new_available == 3
        assert plan.cards == ["due-oldest", "due-middle", "new-1"]
        assert not plan.is_empty

    def test_empty_plan(self, now, make_record):
        plan = build_session_plan({"later": make_record(due_in=timedelta(days=1))}, now)
        assert plan.is_empty
        assert plan.cards == []
