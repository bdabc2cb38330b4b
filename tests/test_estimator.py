"""Tests for timestamp and heuristic line estimation"""
import pytest

from lyrics import (
    LyricLine,
    estimate_heuristic_index,
    estimate_line_index,
    find_synced_index,
    heuristic_progress,
)

LINES = [LyricLine("a", 0), LyricLine("b", 1000), LyricLine("c", 2000)]


@pytest.mark.parametrize("elapsed, expected", [(1500, 1), (0, 0), (5000, 2), (1000, 1), (999, 0)])
def test_synced_index(elapsed, expected):
    assert find_synced_index(LINES, elapsed) == expected


def test_before_first_line_shows_first_line():
    lines = [LyricLine("late", 5000), LyricLine("later", 8000)]
    assert find_synced_index(lines, 100) == 0


def test_empty_lines_give_zero():
    assert find_synced_index([], 1234) == 0
    assert estimate_line_index([], 1234, 100000, True) == 0
    assert estimate_line_index([], 1234, 100000, False) == 0


def test_synced_index_monotonic_in_elapsed():
    previous = 0
    for elapsed in range(0, 3000, 50):
        index = find_synced_index(LINES, elapsed)
        assert index >= previous
        previous = index


def test_heuristic_intro():
    assert heuristic_progress(0.05) == pytest.approx(0.015)
    assert estimate_heuristic_index(5000, 100000, 10) == 0


def test_heuristic_body_and_outro():
    assert heuristic_progress(0.5) == pytest.approx(0.3 + (0.38 / 0.8) * 0.55)
    assert heuristic_progress(1.0) == pytest.approx(0.97)
    assert estimate_heuristic_index(100000, 100000, 10) == 9


def test_heuristic_continuous_at_outro():
    below = heuristic_progress(0.92)
    above = heuristic_progress(0.92 + 1e-9)
    assert below == pytest.approx(0.85)
    assert above == pytest.approx(below, abs=1e-6)


def test_heuristic_monotonic_and_clamped():
    previous = -1.0
    for step in range(0, 151):
        value = heuristic_progress(step / 100)
        assert 0.0 <= value <= 1.0
        assert value >= previous
        previous = value


def test_heuristic_without_duration():
    assert estimate_heuristic_index(5000, 0, 10) == 0


def test_index_in_range_for_any_elapsed():
    plain = [LyricLine(str(i)) for i in range(7)]
    for elapsed in (-500, 0, 1, 60000, 10 ** 9):
        assert 0 <= estimate_line_index(plain, elapsed, 200000, False) < 7
        assert 0 <= estimate_line_index(LINES, elapsed, 200000, True) < 3
