"""
Problem Service: Application layer orchestrator.

Loads problems from the store, runs them through the scheduling engine and
writes the results back. Every change to past attempts goes through a full
replay so stored state never disagrees with its own history.
"""

import logging
import random
from dataclasses import replace
from datetime import date, datetime
from typing import Any

from pydantic import ValidationError

from cadence.application.config import AppConfig
from cadence.application.srs import apply_attempt, classify, recalculate, reset_problem
from cadence.domain.errors import AttemptIndexError, ProblemNotFoundError, StoreError
from cadence.domain.models import (
    Attempt,
    Confidence,
    Difficulty,
    Problem,
    SrsSettings,
    normalize_url,
)
from cadence.domain.ports import ProblemStore

logger = logging.getLogger(__name__)

# Marks "argument not given" where None is a meaningful value
_UNSET: Any = object()


class ProblemService:
    """
    Application service for recording and editing problem attempts.

    Depends on the ProblemStore port, not on a concrete adapter.
    """

    def __init__(
        self,
        store: ProblemStore,
        config: AppConfig | None = None,
        *,
        today: date | None = None,
        rng: random.Random | None = None,
    ):
        """
        Args:
            store: The repository (port) holding problems and stored settings.
            config: Host configuration supplying default settings.
            today: Fixed "today" for scheduling; defaults to the current date per call.
            rng: Random source for the saturated-calendar fallback.
        """
        self._store = store
        self._config = config or AppConfig()
        self._today = today
        self._rng = rng

    # ---- Lookups ----

    def settings(self) -> SrsSettings:
        """Stored settings over config defaults."""
        try:
            return self._config.srs_settings(self._store.load_settings())
        except ValidationError as e:
            raise StoreError(f"Stored settings are invalid: {e}") from e

    def list_problems(self) -> list[Problem]:
        return self._store.load_problems()

    def get_problem(self, url: str) -> Problem:
        problems = self._store.load_problems()
        return problems[self._index_of(problems, url)]

    def suggest_confidence(self, url: str, elapsed_seconds: int) -> Confidence:
        """Preview the tier a solve time would earn, without recording anything."""
        problem = self.get_problem(url)
        return classify(elapsed_seconds, problem.difficulty, self.settings())

    # ---- Live recording ----

    def add_problem(
        self,
        url: str,
        title: str = "",
        difficulty: Difficulty | str | None = None,
        topic: str | None = None,
        pattern: str | None = None,
    ) -> Problem:
        """Register a NotStarted problem; returns the existing one if the URL is known."""
        problems = self._store.load_problems()
        for existing in problems:
            if existing.same_problem(url):
                logger.info(f"{url} already tracked")
                return existing

        problem = Problem(url=url, title=title, difficulty=difficulty, topic=topic, pattern=pattern)
        problems.append(problem)
        self._store.save_problems(problems)
        logger.info(f"Added {url}")
        return problem

    def record_attempt(
        self,
        url: str,
        elapsed_seconds: int,
        confidence: Confidence | None = None,
        when: datetime | None = None,
    ) -> Problem:
        """Record a fresh attempt and schedule the next review."""
        problems = self._store.load_problems()
        index = self._index_of(problems, url)

        attempt = Attempt(date=when or datetime.now(), time=elapsed_seconds, confidence=confidence)
        updated = apply_attempt(
            problems[index],
            attempt,
            self.settings(),
            problems,
            today=self._today,
            rng=self._rng,
        )
        return self._save_at(problems, index, updated)

    # ---- Historical edits (always replayed) ----

    def add_attempt(
        self,
        url: str,
        elapsed_seconds: int,
        when: datetime | None = None,
        confidence: Confidence | None = None,
    ) -> Problem:
        """Append an attempt to the history, then replay."""
        attempt = Attempt(date=when or datetime.now(), time=elapsed_seconds, confidence=confidence)
        return self._edit_history(url, lambda attempts: attempts + [attempt])

    def edit_attempt(
        self,
        url: str,
        index: int,
        *,
        when: datetime | None = None,
        elapsed_seconds: int | None = None,
        confidence: Confidence | None = _UNSET,
    ) -> Problem:
        """
        Change the date, time or confidence of one past attempt, then replay.

        A new solve time without an explicit confidence clears the stored
        confidence so the replay derives it from the new time.
        """

        def change(attempts: list[Attempt]) -> list[Attempt]:
            self._check_index(index, attempts)
            attempt = attempts[index]
            if when is not None:
                attempt = replace(attempt, date=when)
            if elapsed_seconds is not None:
                attempt = replace(attempt, time=elapsed_seconds)
                if confidence is _UNSET:
                    attempt = replace(attempt, confidence=None)
            if confidence is not _UNSET:
                attempt = replace(attempt, confidence=confidence)
            attempts[index] = attempt
            return attempts

        return self._edit_history(url, change)

    def delete_attempt(self, url: str, index: int) -> Problem:
        """Remove one past attempt, then replay."""

        def change(attempts: list[Attempt]) -> list[Attempt]:
            self._check_index(index, attempts)
            del attempts[index]
            return attempts

        return self._edit_history(url, change)

    def reset(self, url: str) -> Problem:
        """Back to NotStarted; attempts are discarded."""
        problems = self._store.load_problems()
        index = self._index_of(problems, url)
        logger.info(f"Resetting {problems[index].url}")
        return self._save_at(problems, index, reset_problem(problems[index]))

    def recalculate(self, url: str) -> Problem:
        """Replay one problem's full history."""
        return self._edit_history(url, lambda attempts: attempts)

    def recalculate_all(self) -> list[Problem]:
        """
        Replay every stored problem in stored order.

        Each replay sees the siblings as already rebuilt before it.
        """
        problems = self._store.load_problems()
        settings = self.settings()

        for i, problem in enumerate(problems):
            problems[i] = recalculate(
                problem, settings, problems, today=self._today, rng=self._rng
            )

        self._store.save_problems(problems)
        logger.info(f"Recalculated {len(problems)} problems")
        return problems

    # ---- Helpers ----

    def _edit_history(self, url: str, change) -> Problem:
        problems = self._store.load_problems()
        index = self._index_of(problems, url)
        problem = problems[index]

        attempts = change(list(problem.attempts))
        rebuilt = recalculate(
            replace(problem, attempts=tuple(attempts)),
            self.settings(),
            problems,
            today=self._today,
            rng=self._rng,
        )
        return self._save_at(problems, index, rebuilt)

    def _save_at(self, problems: list[Problem], index: int, problem: Problem) -> Problem:
        problems[index] = problem
        self._store.save_problems(problems)
        return problem

    @staticmethod
    def _index_of(problems: list[Problem], url: str) -> int:
        target = normalize_url(url)
        for i, problem in enumerate(problems):
            if normalize_url(problem.url) == target:
                return i
        raise ProblemNotFoundError(url)

    @staticmethod
    def _check_index(index: int, attempts: list[Attempt]) -> None:
        if not 0 <= index < len(attempts):
            raise AttemptIndexError(index, len(attempts))
