"""
Review date placement.

Turns a stage into an interval, then finds a concrete study day with spare
review capacity. Pure computation: ``today`` and ``rng`` are injectable so
results are reproducible.
"""

import logging
import math
import random
from collections.abc import Iterable, Sequence
from datetime import date, timedelta

from cadence.domain.constants import (
    FALLBACK_JITTER_DAYS,
    SEARCH_HORIZON_DAYS,
)
from cadence.domain.models import (
    Problem,
    SrsSettings,
    normalize_study_days,
    normalize_url,
    weekday_index,
)

logger = logging.getLogger(__name__)


def interval_days(stage: int, settings: SrsSettings) -> int:
    """
    ``min(base * growth^stage, max_interval)`` rounded half-up to whole days.
    """
    exponential = settings.base_interval * settings.growth_factor**stage
    capped = min(exponential, settings.max_interval)
    return math.floor(capped + 0.5)


def next_study_date(
    days_from_now: int,
    study_days: Sequence[bool | int] | None,
    *,
    today: date | None = None,
) -> date:
    """
    First study day on or after ``today + days_from_now``.

    Advances at most 14 days; an empty mask means every day is a study day.
    """
    mask = normalize_study_days(study_days)
    candidate = (today or date.today()) + timedelta(days=days_from_now)

    advances = 0
    while not mask[weekday_index(candidate)] and advances < SEARCH_HORIZON_DAYS:
        candidate += timedelta(days=1)
        advances += 1

    return candidate


def count_reviews_on(day: date, problems: Iterable[Problem], exclude_url: str | None) -> int:
    """Problems due on ``day``, not counting ``exclude_url`` (trailing slash ignored)."""
    excluded = normalize_url(exclude_url) if exclude_url else None
    return sum(
        1
        for p in problems
        if p.next_review_date == day and normalize_url(p.url) != excluded
    )


def find_slot(
    interval: int,
    study_days: Sequence[bool | int] | None,
    all_problems: Iterable[Problem],
    exclude_url: str | None,
    max_daily_reviews: int,
    *,
    today: date | None = None,
    rng: random.Random | None = None,
) -> date:
    """
    Find a study day near ``interval`` days out that still has review capacity.

    Tries ``interval + 0 .. interval + 13``; the first permitted day holding
    fewer than ``max_daily_reviews`` other problems wins. When every candidate
    is full, falls back to ``interval + random(0..2)`` so a saturated calendar
    does not pile every problem onto the same day.
    """
    today = today or date.today()
    mask = normalize_study_days(study_days)
    problems = list(all_problems)

    for offset in range(SEARCH_HORIZON_DAYS):
        candidate = next_study_date(interval + offset, mask, today=today)
        if not mask[weekday_index(candidate)]:
            continue

        load = count_reviews_on(candidate, problems, exclude_url)
        if load < max_daily_reviews:
            logger.debug(f"Slot {candidate} for {exclude_url} (load {load}/{max_daily_reviews})")
            return candidate

    jitter = (rng or random).randrange(FALLBACK_JITTER_DAYS)
    fallback = next_study_date(interval + jitter, mask, today=today)
    logger.info(
        f"No free slot within {SEARCH_HORIZON_DAYS} days for {exclude_url}; "
        f"falling back to {fallback}"
    )
    return fallback
