"""
Stored record shapes for problems and attempts.

The host stores camelCase keys (``srsStage``, ``nextReviewDate``); these
models translate between that blob and the domain dataclasses.
"""

from datetime import date, datetime
from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator
from pydantic.alias_generators import to_camel

from cadence.domain.models import Attempt, Confidence, Difficulty, Problem, ProblemStatus


class _Record(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class AttemptRecord(_Record):
    date: datetime
    time: int = 0
    confidence: Confidence | None = None
    stage: int = 0
    interval: int = 0

    @field_validator("time", "stage", "interval", mode="before")
    @classmethod
    def missing_as_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("confidence", mode="before")
    @classmethod
    def blank_confidence(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) and v else None

    def to_domain(self) -> Attempt:
        return Attempt(
            date=self.date,
            time=self.time,
            confidence=self.confidence,
            stage=self.stage,
            interval=self.interval,
        )

    @classmethod
    def from_domain(cls, attempt: Attempt) -> "AttemptRecord":
        return cls(
            date=attempt.date,
            time=attempt.time,
            confidence=attempt.confidence,
            stage=attempt.stage,
            interval=attempt.interval,
        )


class ProblemRecord(_Record):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

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
    attempts: list[AttemptRecord] = []

    @field_validator("difficulty", mode="before")
    @classmethod
    def parse_difficulty(cls, v: Any) -> Any:
        if not v:
            return None
        name = (v.value if isinstance(v, Difficulty) else str(v)).lower()
        try:
            return Difficulty(name)
        except ValueError:
            return name

    @field_validator("srs_stage", "lapses", "consecutive_successes", mode="before")
    @classmethod
    def missing_as_zero(cls, v: Any) -> Any:
        return 0 if v is None else v

    @field_validator("last_confidence", mode="before")
    @classmethod
    def blank_confidence(cls, v: Any) -> Any:
        return v.lower() if isinstance(v, str) and v else None

    @field_validator("status", mode="before")
    @classmethod
    def default_status(cls, v: Any) -> Any:
        return v or ProblemStatus.NOT_STARTED

    @field_validator("attempts", mode="before")
    @classmethod
    def missing_attempts(cls, v: Any) -> Any:
        return v or []

    def to_domain(self) -> Problem:
        return Problem(
            url=self.url,
            title=self.title,
            difficulty=self.difficulty,
            topic=self.topic,
            pattern=self.pattern,
            status=self.status,
            srs_stage=self.srs_stage,
            lapses=self.lapses,
            consecutive_successes=self.consecutive_successes,
            is_leech=self.is_leech,
            last_confidence=self.last_confidence,
            next_review_date=self.next_review_date,
            attempts=tuple(a.to_domain() for a in self.attempts),
            extras=dict(self.model_extra or {}),
        )

    @classmethod
    def from_domain(cls, problem: Problem) -> "ProblemRecord":
        return cls(
            url=problem.url,
            title=problem.title,
            difficulty=problem.difficulty,
            topic=problem.topic,
            pattern=problem.pattern,
            status=problem.status,
            srs_stage=problem.srs_stage,
            lapses=problem.lapses,
            consecutive_successes=problem.consecutive_successes,
            is_leech=problem.is_leech,
            last_confidence=problem.last_confidence,
            next_review_date=problem.next_review_date,
            attempts=[AttemptRecord.from_domain(a) for a in problem.attempts],
            **dict(problem.extras),
        )

    def dump(self) -> dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)
