"""Statistics Toolkit

Pure numeric helpers shared by the analyzers, plus the fixed-capacity
rolling window every analyzer keeps its history in.

All helpers are total: degenerate windows yield 0 instead of NaN, so a
missing or just-started signal never poisons a downstream score.
"""

import math
from collections import deque
from typing import Iterable, Iterator, List, Optional, Union
import numpy as np


Values = Union[Iterable[float], np.ndarray, "SampleWindow"]


class SampleWindow:
    """Fixed-capacity FIFO of the most recent observations for one metric.

    Pushing onto a full window evicts the oldest value; ``len(window)`` never
    exceeds ``capacity``.

    Usage:
        window = SampleWindow(capacity=10)
        window.push(latency_ms)
        jitter = std_dev(window)
    """

    def __init__(self, capacity: int):
        if capacity < 1:
            raise ValueError(f"Window capacity must be positive, got {capacity}")
        self._values: deque = deque(maxlen=capacity)

    def push(self, value: float) -> None:
        """Append a value, evicting the oldest one when full."""
        self._values.append(float(value))

    def values(self) -> List[float]:
        """Copy of the window contents, oldest first."""
        return list(self._values)

    def latest(self, default: float = 0.0) -> float:
        """Most recent value, or ``default`` for an empty window."""
        return self._values[-1] if self._values else default

    def clear(self) -> None:
        self._values.clear()

    @property
    def capacity(self) -> int:
        return self._values.maxlen

    @property
    def is_full(self) -> bool:
        return len(self._values) == self._values.maxlen

    def __len__(self) -> int:
        return len(self._values)

    def __iter__(self) -> Iterator[float]:
        return iter(self._values)

    def __repr__(self) -> str:
        return f"SampleWindow(capacity={self.capacity}, values={self.values()})"


def _as_array(xs: Values) -> np.ndarray:
    if isinstance(xs, np.ndarray):
        return xs.astype(np.float64, copy=False).ravel()
    return np.fromiter((float(x) for x in xs), dtype=np.float64)


def mean(xs: Values) -> float:
    """Arithmetic mean; 0 for an empty window."""
    arr = _as_array(xs)
    if arr.size == 0:
        return 0.0
    return float(np.mean(arr))


def std_dev(xs: Values) -> float:
    """Population standard deviation (divides by N).

    Returns 0 for windows with fewer than 2 points.
    """
    arr = _as_array(xs)
    if arr.size < 2:
        return 0.0
    return float(np.std(arr))


def percentile(xs: Values, p: float) -> float:
    """Nearest-rank percentile on a sorted copy.

    The rank is ``floor(N * p / 100)`` clamped to the last index, so p=0
    is the minimum and p=100 the maximum.

    Args:
        xs: Observations
        p: Percentile in [0, 100]

    Returns:
        The observation at that rank, or 0 for an empty window
    """
    arr = _as_array(xs)
    if arr.size == 0:
        return 0.0
    ordered = np.sort(arr)
    index = min(int(arr.size * p / 100.0), arr.size - 1)
    return float(ordered[max(index, 0)])


def median(xs: Values) -> float:
    """Median (mean of the two middle values for even N); 0 when empty."""
    arr = _as_array(xs)
    if arr.size == 0:
        return 0.0
    return float(np.median(arr))


def trend_slope(xs: Values, span: Optional[int] = None) -> float:
    """Slope between the latest point and a reference point earlier in the window.

    ``(xs[-1] - xs[-span]) / (span - 1)``. Positive means the underlying
    quantity is increasing.

    Args:
        xs: Observations, oldest first
        span: Number of trailing points the slope covers; defaults to the whole window

    Returns:
        Slope per sample, or 0 when fewer than 2 (or fewer than ``span``) points exist
    """
    arr = _as_array(xs)
    n = arr.size if span is None else span
    if n < 2 or arr.size < n:
        return 0.0
    return float((arr[-1] - arr[-n]) / (n - 1))


def mean_absolute_deviation(xs: Values) -> float:
    """Mean absolute deviation from the window's own mean; 0 below 2 points."""
    arr = _as_array(xs)
    if arr.size < 2:
        return 0.0
    return float(np.mean(np.abs(arr - arr.mean())))


def round_half_up(x: float) -> int:
    """Round to the nearest integer with halves going up (98.5 -> 99)."""
    return int(math.floor(x + 0.5))
