"""Confidence classification from elapsed solve time."""

from cadence.domain.models import Confidence, Difficulty, SrsSettings

DEFAULT_CONFIDENCE = Confidence.MEDIUM


def classify(
    elapsed_seconds: float,
    difficulty: Difficulty | str | None,
    settings: SrsSettings | None,
) -> Confidence:
    """
    Map a solve time to a confidence tier using the difficulty's thresholds.

    Total on all inputs: missing settings, a missing threshold table, or an
    unknown difficulty all degrade to ``medium``.
    """
    if settings is None or not settings.time_thresholds or difficulty is None:
        return DEFAULT_CONFIDENCE

    key = difficulty.value if isinstance(difficulty, Difficulty) else str(difficulty)
    thresholds = settings.time_thresholds.get(key.lower())
    if thresholds is None:
        return DEFAULT_CONFIDENCE

    minutes = (elapsed_seconds or 0) / 60
    if minutes < thresholds.mastered:
        return Confidence.MASTERED
    if minutes < thresholds.high:
        return Confidence.HIGH
    if minutes < thresholds.medium:
        return Confidence.MEDIUM
    return Confidence.LOW
