import random
from datetime import date

import pytest

from cadence.domain.models import SrsSettings, TimeThresholds

# A Monday
TODAY = date(2026, 10, 19)


def _make_settings(**overrides) -> SrsSettings:
    values = dict(
        growth_factor=2.0,
        max_stage=8,
        base_interval=1.0,
        max_interval=40.0,
        leech_threshold=3,
        max_daily_reviews=15,
        study_days=(True,) * 7,
        time_thresholds={
            "easy": TimeThresholds(mastered=5, high=15, medium=30),
            "medium": TimeThresholds(mastered=10, high=25, medium=45),
            "hard": TimeThresholds(mastered=20, high=40, medium=60),
        },
    )
    values.update(overrides)
    return SrsSettings(**values)


@pytest.fixture
def today():
    return TODAY


@pytest.fixture
def make_settings():
    """Factory for engine settings with selected fields overridden."""
    return _make_settings


@pytest.fixture
def settings():
    return _make_settings()


@pytest.fixture
def rng():
    return random.Random(1234)


@pytest.fixture
def mock_home(tmp_path, monkeypatch):
    """Mocks Path.home() to point to a temp dir."""
    home = tmp_path / "home"
    home.mkdir()

    # Mocking HOME to a temp directory to isolate config and stores
    monkeypatch.setenv("HOME", str(home))
    for var in (
        "CADENCE_STORE_PATH",
        "CADENCE_MAX_STAGE",
        "CADENCE_GROWTH_FACTOR",
        "CADENCE_VERBOSE",
    ):
        monkeypatch.delenv(var, raising=False)
    return home


@pytest.fixture
def store_path(tmp_path):
    return tmp_path / "problems.json"
