"""repetita: SM-2 spaced-repetition scheduling engine."""

from repetita.application.queue_builder import (
    SessionPlan,
    build_session,
    build_session_plan,
    daily_review_queue,
)
from repetita.application.scheduler import (
    apply_review,
    classify,
    is_due,
    is_new,
    mastery_level,
    mastery_progress,
    preview_intervals,
    preview_next_review,
    success_rate,
)
from repetita.application.stats import (
    MetricsCalculator,
    average_ease,
    estimate_study_minutes,
    set_success_rate,
    total_reviews,
)
from repetita.consts import VERSION
from repetita.domain.models import Classification, MasteryLevel, MemoryRecord, ReviewResponse

__version__ = VERSION

__all__ = [
    "Classification",
    "MasteryLevel",
    "MemoryRecord",
    "MetricsCalculator",
    "ReviewResponse",
    "SessionPlan",
    "apply_review",
    "average_ease",
    "build_session",
    "build_session_plan",
    "classify",
    "daily_review_queue",
    "estimate_study_minutes",
    "is_due",
    "is_new",
    "mastery_level",
    "mastery_progress",
    "preview_intervals",
    "preview_next_review",
    "set_success_rate",
    "success_rate",
    "total_reviews",
]
