# Scheduling engine
from .calendar import count_reviews_on, find_slot, interval_days, next_study_date
from .classifier import DEFAULT_CONFIDENCE, classify
from .pipeline import apply_attempt, is_leech, recalculate, reset_problem, resolve_confidence
from .stages import next_stage

__all__ = [
    "DEFAULT_CONFIDENCE",
    "apply_attempt",
    "classify",
    "count_reviews_on",
    "find_slot",
    "interval_days",
    "is_leech",
    "next_stage",
    "next_study_date",
    "recalculate",
    "reset_problem",
    "resolve_confidence",
]
