"""Tests for the ProblemService orchestration over a store."""

import random
from datetime import datetime, timedelta

import pytest

from cadence.application.config import AppConfig
from cadence.application.service import ProblemService
from cadence.domain.errors import AttemptIndexError, ProblemNotFoundError, StoreError
from cadence.domain.models import Attempt, Confidence, Difficulty, Problem, ProblemStatus
from cadence.domain.ports import ProblemStore

URL = "https://leetcode.com/problems/two-sum/"


class InMemoryStore(ProblemStore):
    def __init__(self, problems=None, settings=None):
        self.problems = list(problems or [])
        self.settings = settings
        self.saves = 0

    def load_problems(self):
        return list(self.problems)

    def save_problems(self, problems):
        self.problems = list(problems)
        self.saves += 1

    def load_settings(self):
        return self.settings


@pytest.fixture
def config(mock_home):
    return AppConfig(study_days=[True] * 7)


@pytest.fixture
def store():
    return InMemoryStore([Problem(url=URL, title="Two Sum", difficulty=Difficulty.EASY)])


@pytest.fixture
def service(store, config, today):
    return ProblemService(store, config, today=today, rng=random.Random(0))


def _with_history(service, minutes_list):
    for minutes in minutes_list:
        service.add_attempt(URL, minutes * 60, when=datetime(2026, 10, 1))
    return service.get_problem(URL)


def test_add_problem_ignores_known_url(service, store):
    existing = service.add_problem("https://leetcode.com/problems/two-sum", "Dup")

    assert existing.title == "Two Sum"
    assert len(store.problems) == 1
    assert store.saves == 0


def test_add_problem_appends_not_started(service, store):
    added = service.add_problem("https://leetcode.com/problems/3sum/", "3Sum", Difficulty.MEDIUM)

    assert added.status == ProblemStatus.NOT_STARTED
    assert store.problems[-1] == added


def test_record_attempt_persists_schedule(service, store, today):
    result = service.record_attempt(URL, 10 * 60, Confidence.HIGH)

    assert result.srs_stage == 1
    assert result.next_review_date == today + timedelta(days=2)
    assert store.problems[0] == result
    assert len(result.attempts) == 1


def test_record_attempt_derives_confidence(service):
    result = service.record_attempt("https://leetcode.com/problems/two-sum", 2 * 60)
    assert result.last_confidence == Confidence.MASTERED


def test_record_attempt_unknown_problem(service):
    with pytest.raises(ProblemNotFoundError):
        service.record_attempt("https://leetcode.com/problems/nope", 60)


def test_suggest_confidence_does_not_save(service, store):
    assert service.suggest_confidence(URL, 20 * 60) == Confidence.MEDIUM
    assert store.saves == 0


def test_edit_time_rederives_confidence(service):
    before = _with_history(service, [3, 3])
    assert before.attempts[1].confidence == Confidence.MASTERED
    assert before.srs_stage == 2

    after = service.edit_attempt(URL, 1, elapsed_seconds=40 * 60)

    assert after.attempts[1].confidence == Confidence.LOW
    assert after.attempts[1].time == 40 * 60
    assert after.srs_stage == 1
    assert after.lapses == 1


def test_edit_with_explicit_confidence_wins(service):
    _with_history(service, [3])

    after = service.edit_attempt(URL, 0, elapsed_seconds=40 * 60, confidence=Confidence.HIGH)

    assert after.attempts[0].confidence == Confidence.HIGH


def test_edit_date_only_keeps_confidence(service):
    _with_history(service, [3])
    when = datetime(2026, 9, 1, 8, 30)

    after = service.edit_attempt(URL, 0, when=when)

    assert after.attempts[0].date == when
    assert after.attempts[0].confidence == Confidence.MASTERED


def test_delete_attempt_replays(service):
    _with_history(service, [3, 40, 3])

    after = service.delete_attempt(URL, 1)

    assert len(after.attempts) == 2
    assert after.lapses == 0
    assert [a.stage for a in after.attempts] == [1, 2]


def test_attempt_index_out_of_range(service):
    _with_history(service, [3])

    with pytest.raises(AttemptIndexError):
        service.delete_attempt(URL, 3)
    with pytest.raises(AttemptIndexError):
        service.edit_attempt(URL, -1, elapsed_seconds=60)


def test_reset_clears_everything(service, store):
    _with_history(service, [3, 3])

    result = service.reset(URL)

    assert result.attempts == ()
    assert result.status == ProblemStatus.NOT_STARTED
    assert store.problems[0] == result


def test_recalculate_all_rebuilds_each_problem(config, today):
    stale = Problem(
        url=URL,
        difficulty=Difficulty.EASY,
        srs_stage=6,
        attempts=(Attempt(date=datetime(2026, 10, 1), time=60),),
    )
    untouched = Problem(url="https://leetcode.com/problems/3sum")
    store = InMemoryStore([stale, untouched])
    service = ProblemService(store, config, today=today)

    problems = service.recalculate_all()

    assert problems[0].srs_stage == 1
    assert problems[0].attempts[0].confidence == Confidence.MASTERED
    assert problems[1] == untouched
    assert store.saves == 1


def test_stored_settings_override_config(config, today):
    store = InMemoryStore([Problem(url=URL)], settings={"maxStage": 1, "studyDays": [1] * 7})
    service = ProblemService(store, config, today=today)

    assert service.settings().max_stage == 1
    for _ in range(3):
        result = service.record_attempt(URL, 60, Confidence.HIGH)
    assert result.srs_stage == 1


def test_invalid_stored_settings(config):
    store = InMemoryStore([], settings={"growthFactor": 0.5})
    service = ProblemService(store, config)

    with pytest.raises(StoreError):
        service.settings()
