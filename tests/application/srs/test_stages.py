import pytest

from cadence.application.srs.stages import next_stage
from cadence.domain.models import Confidence

MAX_STAGE = 8


@pytest.mark.parametrize("stage", range(MAX_STAGE + 1))
def test_high_advances_and_caps(stage):
    assert next_stage(stage, Confidence.HIGH, MAX_STAGE) == min(stage + 1, MAX_STAGE)


def test_max_stage_is_fixed_point_for_high():
    assert next_stage(MAX_STAGE, Confidence.HIGH, MAX_STAGE) == MAX_STAGE


@pytest.mark.parametrize("stage", range(MAX_STAGE + 1))
def test_mastered_advances_like_high(stage):
    assert next_stage(stage, Confidence.MASTERED, MAX_STAGE) == next_stage(
        stage, Confidence.HIGH, MAX_STAGE
    )


@pytest.mark.parametrize("stage", range(MAX_STAGE + 1))
def test_low_always_drops_to_one(stage):
    assert next_stage(stage, Confidence.LOW, MAX_STAGE) == 1


@pytest.mark.parametrize(
    "stage, expected",
    [(0, 1), (1, 1), (2, 1), (3, 2), (8, 7)],
)
def test_medium(stage, expected):
    assert next_stage(stage, Confidence.MEDIUM, MAX_STAGE) == expected


def test_missing_stage_counts_as_zero():
    assert next_stage(None, Confidence.MEDIUM, MAX_STAGE) == 1
    assert next_stage(None, Confidence.HIGH, MAX_STAGE) == 1


def test_zero_max_stage_pins_strong_results():
    assert next_stage(0, Confidence.HIGH, 0) == 0
