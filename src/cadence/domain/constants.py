"""Centralized constants for the cadence scheduling engine.

All magic numbers and host defaults live here so every layer
imports from a single source of truth.
"""

# ---------- Scheduler ----------
SEARCH_HORIZON_DAYS = 14
FALLBACK_JITTER_DAYS = 3  # fallback adds random(0..2)
DEFAULT_MAX_DAILY_REVIEWS = 15

# ---------- Stage / lapse rules ----------
LEECH_STAGE_CEILING = 3
SUCCESS_STREAK_FORGIVENESS = 3

# ---------- Host defaults (supplied by the host, never by the engine) ----------
DEFAULT_GROWTH_FACTOR = 2.0
DEFAULT_MAX_INTERVAL = 40.0
DEFAULT_MAX_STAGE = 8
DEFAULT_BASE_INTERVAL = 1.0
DEFAULT_LEECH_THRESHOLD = 3
# Sunday first, Sunday off
DEFAULT_STUDY_DAYS = (False, True, True, True, True, True, True)
DEFAULT_TIME_THRESHOLDS = {
    "easy": {"mastered": 5, "high": 15, "medium": 30},
    "medium": {"mastered": 10, "high": 25, "medium": 45},
    "hard": {"mastered": 20, "high": 40, "medium": 60},
}

# ---------- Storage ----------
PROBLEMS_KEY = "problems"
SETTINGS_KEY = "settings"
