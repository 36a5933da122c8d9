"""Timing-based speech metrics derived from a timed transcript."""
from __future__ import annotations

from decimal import ROUND_HALF_UP, Decimal
from typing import List, Sequence

from .errors import MetricsError
from .types import Pause, PauseStatistics, TechnicalMetrics, TimedWord


def _round_half_up(value: float, places: str) -> float:
    # Exact halves round away from zero, not to the even digit.
    return float(Decimal(str(value)).quantize(Decimal(places), rounding=ROUND_HALF_UP))


def _round_1dp(value: float) -> float:
    return _round_half_up(value, "0.1")


def calculate_pauses(words: Sequence[TimedWord], threshold: float) -> List[Pause]:
    """Return every gap between consecutive words longer than ``threshold`` seconds."""

    if threshold < 0:
        raise MetricsError("Pause threshold must not be negative")
    pauses: List[Pause] = []
    for current, following in zip(words, words[1:]):
        gap = following.start - current.end
        if gap > threshold:
            pauses.append(Pause(start=current.end, end=following.start, duration=gap))
    return pauses


def pause_statistics(pauses: Sequence[Pause]) -> PauseStatistics:
    if not pauses:
        return PauseStatistics()
    return PauseStatistics(
        total_pause_time=sum(pause.duration for pause in pauses),
        pause_count=len(pauses),
        longest_pause=max(pause.duration for pause in pauses),
    )


def words_per_minute(word_count: int, duration_seconds: float) -> float:
    if duration_seconds <= 0:
        return 0.0
    return _round_1dp(word_count / (duration_seconds / 60))


def pause_percentage(total_pause_time: float, duration_seconds: float) -> float:
    if duration_seconds <= 0:
        return 0.0
    return _round_1dp(total_pause_time / duration_seconds * 100)


def derive_metrics(
    words: Sequence[TimedWord],
    duration_seconds: float,
    confidence: float,
    *,
    threshold: float,
) -> TechnicalMetrics:
    """Compute the technical metrics for one answer.

    ``duration_seconds`` and ``confidence`` come from the transcription
    provider and are used as reported.
    """

    if duration_seconds < 0:
        raise MetricsError(f"Duration must not be negative (got {duration_seconds})")
    stats = pause_statistics(calculate_pauses(words, threshold))
    return TechnicalMetrics(
        duration_seconds=duration_seconds,
        word_count=len(words),
        wpm=words_per_minute(len(words), duration_seconds),
        pause_percentage=pause_percentage(stats.total_pause_time, duration_seconds),
        average_confidence=_round_half_up(confidence, "0.01"),
    )


__all__ = [
    "calculate_pauses",
    "derive_metrics",
    "pause_percentage",
    "pause_statistics",
    "words_per_minute",
]
