"""Centralized constants for lexirep.

All magic numbers and configuration defaults live here so every layer
imports from a single source of truth.
"""

# ---------- SM-2 ----------
DEFAULT_INITIAL_EFACTOR = 2.5
DEFAULT_MINIMUM_EFACTOR = 1.3
DEFAULT_MAXIMUM_INTERVAL = 36525  # ~100 years
EASE_SCALE = 100
FIRST_INTERVAL = 1
SECOND_INTERVAL = 6

# ---------- Load Balancing ----------
DEFAULT_LOAD_BALANCE = True
DEFAULT_MAX_FUZZING_DAYS = 3
SHORT_INTERVAL_LIMIT = 21
MEDIUM_INTERVAL_LIMIT = 180
MEDIUM_FUZZ_RATIO = 0.05
LONG_FUZZ_RATIO = 0.025

# ---------- Statistics ----------
MATURE_INTERVAL_DAYS = 21
DEFAULT_MAX_NEW_PER_DAY = 20
DEFAULT_MAX_REVIEW_PER_DAY = 100

# ---------- Sessions ----------
DEFAULT_SESSION_SIZE = 20
SESSION_ID_PREFIX = "session_"
