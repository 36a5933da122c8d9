import pytest

from analysis.errors import MetricsError
from analysis.metrics import (
    calculate_pauses,
    derive_metrics,
    pause_percentage,
    pause_statistics,
    words_per_minute,
)
from analysis.types import TimedWord
from conftest import answer_words


def _word(start: float, end: float) -> TimedWord:
    return TimedWord(word="w", start=start, end=end, confidence=0.8)


def test_caching_answer_scenario():
    metrics = derive_metrics(answer_words(), 12.0, 0.9342, threshold=0.5)

    assert metrics.duration_seconds == 12.0
    assert metrics.word_count == 8
    assert metrics.wpm == 40.0
    assert metrics.pause_percentage == 16.7
    assert metrics.average_confidence == 0.93


@pytest.mark.parametrize(
    "word_count, duration, expected",
    [(0, 30.0, 0.0), (1, 60.0, 1.0), (130, 61.0, 127.9), (7, 3.3, 127.3), (25, 0.0, 0.0)],
)
def test_words_per_minute(word_count, duration, expected):
    assert words_per_minute(word_count, duration) == expected


def test_zero_duration_zeroes_rates():
    metrics = derive_metrics([_word(0.0, 0.2), _word(3.0, 3.2)], 0.0, 0.5, threshold=0.5)

    assert metrics.wpm == 0
    assert metrics.pause_percentage == 0
    assert metrics.word_count == 2


def test_negative_duration_rejected():
    with pytest.raises(MetricsError):
        derive_metrics([_word(0.0, 0.2)], -1.0, 0.9, threshold=0.5)


def test_negative_threshold_rejected():
    with pytest.raises(MetricsError):
        calculate_pauses([_word(0.0, 0.2)], -0.1)


def test_pauses_only_above_threshold():
    words = [_word(0.0, 1.0), _word(1.5, 2.0), _word(2.6, 3.0), _word(5.0, 5.5)]

    pauses = calculate_pauses(words, 0.5)

    assert [(p.start, p.end) for p in pauses] == [(2.0, 2.6), (3.0, 5.0)]
    stats = pause_statistics(pauses)
    assert stats.pause_count == 2
    assert stats.total_pause_time == pytest.approx(2.6)
    assert stats.longest_pause == pytest.approx(2.0)


def test_no_words_means_no_pauses():
    assert calculate_pauses([], 0.5) == []
    assert pause_statistics([]).pause_count == 0


def test_pause_percentage_bounded_by_duration():
    words = [_word(0.0, 0.5), _word(4.5, 5.0), _word(9.0, 10.0)]
    stats = pause_statistics(calculate_pauses(words, 0.5))

    value = pause_percentage(stats.total_pause_time, 10.0)

    assert value == 80.0
    assert 0.0 <= value <= 100.0


def test_exact_halves_round_up():
    assert words_per_minute(3, 720.0) == 0.3
    assert pause_percentage(1.0, 80.0) == 1.3

    metrics = derive_metrics([_word(0.0, 0.2)], 10.0, 0.125, threshold=0.5)

    assert metrics.average_confidence == 0.13
