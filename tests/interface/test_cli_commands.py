"""Tests for CLI commands against a temporary store."""

import json
import logging

import pytest
from typer.testing import CliRunner

from cadence.interface.cli import app

runner = CliRunner()

URL = "https://leetcode.com/problems/two-sum/"


@pytest.fixture
def invoke(mock_home, store_path):
    def _invoke(*args, **kwargs):
        return runner.invoke(app, ["--store", str(store_path), *args], **kwargs)

    return _invoke


@pytest.fixture
def tracked(invoke):
    result = invoke("add", URL, "--title", "Two Sum", "--difficulty", "easy")
    assert result.exit_code == 0
    return URL


def _stored(store_path):
    return json.loads(store_path.read_text())["problems"]


def test_cli_help():
    result = runner.invoke(app, ["--help"])
    assert result.exit_code == 0
    assert "spaced-repetition" in result.stdout
    assert "record" in result.stdout
    assert "attempt" in result.stdout


def test_add_writes_store(tracked, store_path):
    problems = _stored(store_path)
    assert problems[0]["url"] == URL
    assert problems[0]["status"] == "Not Started"


def test_suggest(invoke, tracked):
    result = invoke("suggest", tracked, "20")
    assert result.exit_code == 0
    assert "MEDIUM" in result.stdout


def test_record_and_show(invoke, tracked, store_path):
    result = invoke("record", tracked, "3")
    assert result.exit_code == 0
    assert "stage 1" in result.stdout

    shown = invoke("show", tracked, "--json")
    data = json.loads(shown.stdout)
    assert data["srsStage"] == 1
    assert data["lastConfidence"] == "mastered"
    assert data["attempts"][0]["interval"] == 2


def test_record_with_confidence(invoke, tracked, store_path):
    result = invoke("record", tracked, "50", "--confidence", "high")
    assert result.exit_code == 0
    assert _stored(store_path)[0]["lastConfidence"] == "high"


def test_attempt_edit_and_delete(invoke, tracked, store_path):
    invoke("record", tracked, "3")
    invoke("record", tracked, "3")

    edited = invoke("attempt", "edit", tracked, "1", "--minutes", "40")
    assert edited.exit_code == 0
    problem = _stored(store_path)[0]
    assert problem["attempts"][1]["confidence"] == "low"
    assert problem["lapses"] == 1

    deleted = invoke("attempt", "delete", tracked, "1", "--force")
    assert deleted.exit_code == 0
    problem = _stored(store_path)[0]
    assert len(problem["attempts"]) == 1
    assert problem["lapses"] == 0


def test_attempt_add_with_date(invoke, tracked, store_path):
    result = invoke("attempt", "add", tracked, "10", "--when", "2026-09-01")
    assert result.exit_code == 0
    assert _stored(store_path)[0]["attempts"][0]["date"].startswith("2026-09-01")


def test_reset_requires_confirmation(invoke, tracked, store_path):
    invoke("record", tracked, "3")

    aborted = invoke("reset", tracked, input="n\n")
    assert aborted.exit_code != 0
    assert len(_stored(store_path)[0]["attempts"]) == 1

    result = invoke("reset", tracked, "--force")
    assert result.exit_code == 0
    assert _stored(store_path)[0]["attempts"] == []


def test_recalc_all(invoke, tracked):
    result = invoke("recalc", "--all")
    assert result.exit_code == 0
    assert "Recalculated 1 problems" in result.stdout


def test_recalc_needs_target(invoke, tracked):
    result = invoke("recalc")
    assert result.exit_code == 2


def test_unknown_problem_exits_with_error(invoke, tracked):
    result = invoke("record", "https://leetcode.com/problems/nope", "5")
    assert result.exit_code == 1
    assert "No problem stored" in result.output


def test_config_show(invoke, store_path):
    result = invoke("config", "show")
    assert result.exit_code == 0
    data = json.loads(result.stdout)
    assert data["store_path"] == str(store_path)
    assert data["effective"]["max_stage"] == 8


@pytest.fixture
def cadence_logger():
    logger = logging.getLogger("cadence")
    level = logger.level
    yield logger
    logger.setLevel(level)


def test_invalid_env_config_is_reported(invoke, monkeypatch):
    monkeypatch.setenv("CADENCE_MAX_STAGE", "-1")

    result = invoke("show", URL)

    assert result.exit_code == 1
    assert isinstance(result.exception, SystemExit)
    assert "Invalid configuration" in result.output


def test_invalid_config_on_config_show(invoke, monkeypatch):
    monkeypatch.setenv("CADENCE_GROWTH_FACTOR", "0.5")

    result = invoke("config", "show")

    assert result.exit_code == 1
    assert "Invalid configuration" in result.output


def test_verbose_flag_sets_debug(invoke, tracked, cadence_logger):
    result = invoke("-v", "show", tracked)

    assert result.exit_code == 0
    assert cadence_logger.level == logging.DEBUG


def test_configured_verbosity_without_flag(invoke, tracked, monkeypatch, cadence_logger):
    monkeypatch.setenv("CADENCE_VERBOSE", "0")

    result = invoke("show", tracked)

    assert result.exit_code == 0
    assert cadence_logger.level == logging.WARNING
