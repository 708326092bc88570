# Domain Package
from .errors import (
    AttemptIndexError,
    CadenceError,
    ConfigError,
    ProblemNotFoundError,
    StoreError,
)
from .models import (
    Attempt,
    Confidence,
    Difficulty,
    Problem,
    ProblemStatus,
    SrsSettings,
    TimeThresholds,
    normalize_study_days,
    normalize_url,
    weekday_index,
)
from .ports import ProblemStore

__all__ = [
    "Attempt",
    "AttemptIndexError",
    "CadenceError",
    "ConfigError",
    "Confidence",
    "Difficulty",
    "Problem",
    "ProblemNotFoundError",
    "ProblemStatus",
    "ProblemStore",
    "SrsSettings",
    "StoreError",
    "TimeThresholds",
    "normalize_study_days",
    "normalize_url",
    "weekday_index",
]
