"""
Domain models for the scheduling engine.

These are pure, immutable data structures with no I/O or external dependencies.
Engine operations return new instances via ``dataclasses.replace``.
"""

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from datetime import date, datetime
from enum import Enum
from typing import Any


class Confidence(str, Enum):
    """How easily a problem was solved on an attempt."""

    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"
    MASTERED = "mastered"


class Difficulty(str, Enum):
    EASY = "easy"
    MEDIUM = "medium"
    HARD = "hard"


class ProblemStatus(str, Enum):
    NOT_STARTED = "Not Started"
    SOLVED = "Solved"


@dataclass(frozen=True)
class TimeThresholds:
    """
    Minute boundaries for one difficulty, ascending.

    Attributes:
        mastered: Solves faster than this are ``mastered``.
        high: Solves faster than this are ``high``.
        medium: Solves faster than this are ``medium``; anything slower is ``low``.
    """

    mastered: float
    high: float
    medium: float


@dataclass(frozen=True)
class SrsSettings:
    """
    Scheduling configuration, immutable for the duration of a run.

    Constructed by the host and passed explicitly to every engine call.
    ``study_days`` is indexed Sunday=0 .. Saturday=6.
    """

    growth_factor: float
    max_stage: int
    base_interval: float
    max_interval: float
    leech_threshold: int
    max_daily_reviews: int
    study_days: tuple[bool, ...]
    time_thresholds: Mapping[str, TimeThresholds] = field(default_factory=dict)


@dataclass(frozen=True)
class Attempt:
    """
    A single recorded solve.

    Attributes:
        date: When the attempt was recorded.
        time: Elapsed solve time in seconds.
        confidence: Tier of the result; None means "derive from time".
        stage: Stage written by the engine when this attempt was processed.
        interval: Interval (days) written by the engine when this attempt was processed.
    """

    date: datetime
    time: int = 0
    confidence: Confidence | None = None
    stage: int = 0
    interval: int = 0


@dataclass(frozen=True)
class Problem:
    """
    A practice problem and its scheduling state.

    Identity is the URL, compared with ``normalize_url``.
    """

    url: str
    title: str = ""
    difficulty: Difficulty | str | None = None
    topic: str | None = None
    pattern: str | None = None
    status: ProblemStatus = ProblemStatus.NOT_STARTED
    srs_stage: int = 0
    lapses: int = 0
    consecutive_successes: int = 0
    is_leech: bool = False
    last_confidence: Confidence | None = None
    next_review_date: date | None = None
    attempts: tuple[Attempt, ...] = ()
    # Host fields the engine does not interpret, carried through unchanged
    extras: Mapping[str, Any] = field(default_factory=dict)

    def same_problem(self, url: str) -> bool:
        return normalize_url(self.url) == normalize_url(url)


def normalize_url(url: str) -> str:
    """Strip a single trailing slash. Query strings and fragments are left alone."""
    return url[:-1] if url.endswith("/") else url


def weekday_index(day: date) -> int:
    """Weekday with Sunday=0 .. Saturday=6, the indexing used by study-day masks."""
    return (day.weekday() + 1) % 7


def normalize_study_days(study_days: Sequence[bool | int] | None) -> tuple[bool, ...]:
    """
    Coerce a study-day mask to seven booleans.

    An absent mask, or one with no enabled day, means every day is a study day.
    """
    days = tuple(bool(d) for d in (study_days or ()))[:7]
    days = days + (False,) * (7 - len(days))
    if not any(days):
        return (True,) * 7
    return days
