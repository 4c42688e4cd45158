"""Centralized constants for the repetita scheduler.

All magic numbers and defaults live here so every layer
imports from a single source of truth.
"""

from datetime import timedelta

# ---------- SM-2 ease factor ----------
DEFAULT_EASE = 2.5
MIN_EASE = 1.3
MAX_EASE = 3.0
AGAIN_EASE_PENALTY = 0.2
EASY_EASE_BONUS = 0.15
EASE_PRECISION = 2  # decimal places kept after each update

# ---------- SM-2 intervals ----------
FIRST_GOOD_INTERVAL = 1  # days
FIRST_EASY_INTERVAL = 4  # days
EASY_INTERVAL_MULTIPLIER = 1.3
RELEARN_DELAY = timedelta(minutes=10)
MAX_INTERVAL_DAYS = 36500  # 100 years
INTERVAL_PRECISION = 6  # rounding applied before ceil()

# ---------- Session builder ----------
DEFAULT_MAX_NEW = 5
DEFAULT_MAX_REVIEW = 20

# ---------- Statistics ----------
MINUTES_PER_CARD = 0.5  # 30 seconds per card

# ---------- Mastery thresholds ----------
DEVELOPING_MAX_REVIEWS = 5
DEVELOPING_MAX_EASE = 2.2
PROFICIENT_MAX_REVIEWS = 10
PROFICIENT_MAX_EASE = 2.7
