"""Stage transitions: a bounded up/down walk driven by confidence."""

from cadence.domain.models import Confidence


def next_stage(current_stage: int | None, confidence: Confidence | None, max_stage: int) -> int:
    """
    Compute the stage after an attempt.

    - low: drop to exactly 1.
    - medium: 0 -> 1, 1 stays, >= 2 steps down by one.
    - high / mastered: step up by one, capped at ``max_stage``.

    High and mastered advance identically here.
    """
    stage = current_stage or 0

    if confidence == Confidence.LOW:
        return 1
    if confidence == Confidence.MEDIUM:
        if stage == 0:
            return 1
        if stage >= 2:
            return stage - 1
        return stage
    return min(stage + 1, max_stage)
