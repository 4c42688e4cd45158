# Application Stats Package
from .metrics_calculator import (
    MetricsCalculator,
    average_ease,
    estimate_study_minutes,
    set_success_rate,
    total_reviews,
)
from .service import StudyStatsService

__all__ = [
    "MetricsCalculator",
    "StudyStatsService",
    "average_ease",
    "estimate_study_minutes",
    "set_success_rate",
    "total_reviews",
]
