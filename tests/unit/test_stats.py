"""Unit tests for the statistics toolkit"""

import pytest
import numpy as np

from streamcheck.analysis.stats import (
    SampleWindow,
    mean,
    std_dev,
    percentile,
    median,
    trend_slope,
    mean_absolute_deviation,
    round_half_up
)


def test_window_rejects_non_positive_capacity():
    """Test that a window needs room for at least one value"""
    with pytest.raises(ValueError):
        SampleWindow(0)


def test_window_evicts_oldest_when_full():
    """Test FIFO eviction at capacity"""
    window = SampleWindow(3)
    for value in [1, 2, 3, 4, 5]:
        window.push(value)

    assert len(window) == 3
    assert window.values() == [3.0, 4.0, 5.0]
    assert window.is_full
    assert window.latest() == 5.0


def test_window_latest_default_and_clear():
    window = SampleWindow(4)
    assert window.latest() == 0.0
    assert window.latest(default=-1.0) == -1.0

    window.push(2.5)
    window.clear()
    assert len(window) == 0
    assert not window.is_full
    assert window.capacity == 4


def test_window_values_is_a_copy():
    window = SampleWindow(2)
    window.push(1)
    values = window.values()
    values.append(99)
    assert window.values() == [1.0]


def test_mean_handles_empty_and_single():
    assert mean([]) == 0.0
    assert mean([7.0]) == 7.0
    assert mean([1, 2, 3, 4]) == pytest.approx(2.5)


def test_std_dev_is_population():
    """Test population (divide by N) standard deviation"""
    assert std_dev([2, 4, 4, 4, 5, 5, 7, 9]) == pytest.approx(2.0)
    assert std_dev([]) == 0.0
    assert std_dev([42]) == 0.0


def test_std_dev_accepts_window():
    window = SampleWindow(5)
    for value in [10, 10, 10]:
        window.push(value)
    assert std_dev(window) == 0.0


def test_percentile_nearest_rank():
    values = list(range(100))
    assert percentile(values, 5) == 5.0
    assert percentile(values, 0) == 0.0
    assert percentile(values, 100) == 99.0
    assert percentile([], 50) == 0.0


def test_percentile_sorts_input():
    assert percentile([9, 1, 5, 3, 7], 0) == 1.0
    assert percentile([9, 1, 5, 3, 7], 40) == 5.0


def test_median():
    assert median([3, 1, 2]) == 2.0
    assert median([4, 1, 2, 3]) == 2.5
    assert median([]) == 0.0


def test_trend_slope_whole_window():
    assert trend_slope([0, 1, 2, 3]) == pytest.approx(1.0)
    assert trend_slope([6, 4, 2]) == pytest.approx(-2.0)


def test_trend_slope_with_span():
    """Test that span looks only at the trailing points"""
    assert trend_slope([100, 0, 1, 3], span=3) == pytest.approx(1.5)


def test_trend_slope_degenerate():
    assert trend_slope([]) == 0.0
    assert trend_slope([5.0]) == 0.0
    assert trend_slope([1.0, 2.0], span=3) == 0.0


def test_mean_absolute_deviation():
    assert mean_absolute_deviation([1, 3]) == pytest.approx(1.0)
    assert mean_absolute_deviation([5, 5, 5]) == 0.0
    assert mean_absolute_deviation([5]) == 0.0


def test_helpers_accept_numpy_arrays():
    arr = np.array([[1.0, 2.0], [3.0, 4.0]])
    assert mean(arr) == pytest.approx(2.5)
    assert std_dev(arr) == pytest.approx(np.std([1.0, 2.0, 3.0, 4.0]))


@pytest.mark.parametrize("value, expected", [
    (98.5, 99),
    (2.5, 3),
    (0.5, 1),
    (98.49, 98),
    (0.0, 0),
])
def test_round_half_up(value, expected):
    assert round_half_up(value) == expected
