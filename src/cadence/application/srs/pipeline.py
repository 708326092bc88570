"""
Single-attempt pipeline and full-history replay.

Main workflow:
1. Derive confidence from solve time when the attempt has none
2. Move the stage (``next_stage``)
3. Update lapses and the success streak
4. Turn the stage into an interval and place it on the calendar (``find_slot``)
5. Return a new Problem with the annotated attempt

Nothing here mutates its inputs.
"""

import logging
import random
from collections.abc import Iterable
from dataclasses import replace
from datetime import date

from cadence.domain.constants import LEECH_STAGE_CEILING, SUCCESS_STREAK_FORGIVENESS
from cadence.domain.models import (
    Attempt,
    Confidence,
    Problem,
    ProblemStatus,
    SrsSettings,
)

from .calendar import find_slot, interval_days
from .classifier import classify
from .stages import next_stage

logger = logging.getLogger(__name__)


def is_leech(problem: Problem, settings: SrsSettings) -> bool:
    """Persistent lapses at a low stage."""
    return problem.lapses >= settings.leech_threshold and problem.srs_stage < LEECH_STAGE_CEILING


def resolve_confidence(
    attempt: Attempt, problem: Problem, settings: SrsSettings | None
) -> Confidence | None:
    """The attempt's own confidence, else one derived from its solve time."""
    if attempt.confidence is not None:
        return attempt.confidence
    if attempt.time is not None and problem.difficulty is not None:
        return classify(attempt.time, problem.difficulty, settings)
    return None


def _process(
    problem: Problem,
    attempt: Attempt,
    prior_attempts: int,
    settings: SrsSettings,
    all_problems: Iterable[Problem],
    today: date | None,
    rng: random.Random | None,
) -> tuple[Problem, Attempt]:
    """
    Run one attempt through the pipeline.

    Returns the updated problem (attempt list untouched) and the annotated attempt.
    """
    confidence = attempt.confidence
    stage = next_stage(problem.srs_stage, confidence, settings.max_stage)

    lapses = problem.lapses
    streak = problem.consecutive_successes
    if confidence == Confidence.LOW:
        # A failure on the very first attempt is not a lapse
        if prior_attempts > 0:
            lapses += 1
        streak = 0
    elif confidence == Confidence.MEDIUM:
        streak = 0
    else:
        streak += 1
        if streak >= SUCCESS_STREAK_FORGIVENESS:
            lapses = 0
            streak = 0

    interval = interval_days(stage, settings)
    review_date = find_slot(
        interval,
        settings.study_days,
        all_problems,
        problem.url,
        settings.max_daily_reviews,
        today=today,
        rng=rng,
    )

    updated = replace(
        problem,
        status=ProblemStatus.SOLVED,
        srs_stage=stage,
        lapses=lapses,
        consecutive_successes=streak,
        last_confidence=confidence,
        next_review_date=review_date,
    )
    updated = replace(updated, is_leech=is_leech(updated, settings))

    logger.debug(
        f"{problem.url}: {confidence.value if confidence else None} "
        f"stage {problem.srs_stage} -> {stage}, interval {interval}d, next {review_date}"
    )
    return updated, replace(attempt, stage=stage, interval=interval)


def apply_attempt(
    problem: Problem,
    attempt: Attempt,
    settings: SrsSettings,
    all_problems: Iterable[Problem],
    *,
    today: date | None = None,
    rng: random.Random | None = None,
) -> Problem:
    """
    Record a new attempt on ``problem``.

    Confidence is derived from the solve time when absent. The returned
    problem carries the annotated attempt appended to its history.
    """
    confidence = resolve_confidence(attempt, problem, settings)
    attempt = replace(attempt, confidence=confidence)

    updated, annotated = _process(
        problem, attempt, len(problem.attempts), settings, all_problems, today, rng
    )
    return replace(updated, attempts=problem.attempts + (annotated,))


def reset_problem(problem: Problem, *, keep_attempts: bool = False) -> Problem:
    """
    Return ``problem`` in the NotStarted zero state.

    Attempts are discarded unless ``keep_attempts`` is set (used by replay).
    """
    return replace(
        problem,
        status=ProblemStatus.NOT_STARTED,
        srs_stage=0,
        lapses=0,
        consecutive_successes=0,
        is_leech=False,
        last_confidence=None,
        next_review_date=None,
        attempts=problem.attempts if keep_attempts else (),
    )


def recalculate(
    problem: Problem,
    settings: SrsSettings,
    all_problems: Iterable[Problem],
    *,
    today: date | None = None,
    rng: random.Random | None = None,
) -> Problem:
    """
    Rebuild every derived field of ``problem`` by replaying its attempts in order.

    This is the only way historical edits (inserting, deleting or changing an
    attempt) should be applied. Attempts keep their order; each one gets its
    stage and interval re-annotated. Missing confidences are derived from time
    and stored on the attempt.
    """
    siblings = list(all_problems)
    state = reset_problem(problem, keep_attempts=True)
    if not problem.attempts:
        return state

    replayed: list[Attempt] = []
    for index, attempt in enumerate(problem.attempts):
        confidence = resolve_confidence(attempt, state, settings)
        attempt = replace(attempt, confidence=confidence)
        state, annotated = _process(state, attempt, index, settings, siblings, today, rng)
        replayed.append(annotated)

    logger.debug(f"Replayed {len(replayed)} attempts for {problem.url}")
    return replace(state, attempts=tuple(replayed))
