"""Causal rolling-window statistics.

A ``RollingWindow`` receives one value per bar and returns the statistic of the
trailing ``min(length, pushes)`` values. Nothing is padded during warm-up: the
first outputs are computed over the partial window.

Sums are maintained incrementally with Neumaier compensation. They are recomputed
from the stored values with ``math.fsum`` at a fixed push interval, and at once
whenever an evicted value dwarfs what remains in the window. Min and max use
monotonic deques. Variance uses a sliding Welford update over the window,
or, in external-mean mode, the trailing average of squared deviations from a mean
supplied with each push.
"""

from __future__ import annotations

import math
from collections import deque
from enum import StrEnum
from typing import Any

import numpy as np
import pandas as pd

from ta_engine.core.errors import ConfigurationError
from ta_engine.utils.series_utils import as_array, ensure_same_length, to_series


class WindowMode(StrEnum):
    """Statistic maintained by a rolling window."""

    SUM = "sum"
    AVERAGE = "average"
    MIN = "min"
    MAX = "max"
    VARIANCE = "variance"


class RollingWindow:
    """Trailing-window accumulator fed one value at a time."""

    RESYNC_INTERVAL = 1024
    # An eviction this many times larger than the remaining statistic forces a resync.
    CANCELLATION_RATIO = 1e6

    def __init__(
        self,
        length: int,
        mode: WindowMode | str = WindowMode.AVERAGE,
        *,
        external_mean: bool = False,
    ) -> None:
        """Create an empty window.

        Args:
            length: Number of trailing values the statistic covers
            mode: Statistic to maintain
            external_mean: Variance mode only; square deviations from the mean
                passed to ``push`` instead of the window's own mean

        Raises:
            ConfigurationError: If length is not positive or the mode is unknown
        """
        if isinstance(length, bool) or not isinstance(length, (int, np.integer)) or length <= 0:
            raise ConfigurationError(
                f"Window length must be a positive integer, got {length!r}", component="rolling"
            )
        try:
            self.mode = WindowMode(mode)
        except ValueError as exc:
            raise ConfigurationError(f"Unknown window mode: {mode!r}", component="rolling") from exc
        if external_mean and self.mode is not WindowMode.VARIANCE:
            raise ConfigurationError(
                "external_mean is only supported in variance mode", component="rolling"
            )

        self.length = int(length)
        self.external_mean = external_mean
        self.reset()

    def reset(self) -> None:
        """Drop every stored value."""
        self._values: deque[float] = deque()
        self._extremes: deque[tuple[int, float]] = deque()
        self._pushes = 0
        self._sum = 0.0
        self._compensation = 0.0
        self._mean = 0.0
        self._m2 = 0.0

    @property
    def count(self) -> int:
        """Number of values currently inside the window."""
        return len(self._values)

    @property
    def is_full(self) -> bool:
        return len(self._values) == self.length

    def values(self) -> list[float]:
        """Return the window contents, oldest first."""
        return list(self._values)

    def push(self, value: float, mean: float | None = None) -> float:
        """Add the next value and return the updated statistic.

        Args:
            value: Next observation
            mean: Mean to measure the deviation from (external-mean variance only)

        Returns:
            Statistic over the trailing ``min(length, pushes)`` values
        """
        value = float(value)
        if self.mode in (WindowMode.MIN, WindowMode.MAX):
            return self._push_extreme(value)
        if self.mode is WindowMode.VARIANCE and not self.external_mean:
            return self._push_welford(value)

        if self.external_mean:
            if mean is None:
                raise ConfigurationError(
                    "External-mean variance requires a mean for every push", component="rolling"
                )
            value = (value - float(mean)) ** 2

        evicted = self._append(value)
        self._accumulate(value)
        self._accumulate(-evicted)
        total = self._sum + self._compensation
        if (
            self._pushes % self.RESYNC_INTERVAL == 0
            or abs(evicted) > self.CANCELLATION_RATIO * abs(total)
        ):
            self._sum = math.fsum(self._values)
            self._compensation = 0.0
            total = self._sum

        if self.mode is WindowMode.SUM:
            return total
        result = total / len(self._values)
        if self.external_mean:
            return max(result, 0.0)
        return result

    def _append(self, value: float) -> float:
        evicted = 0.0
        if len(self._values) == self.length:
            evicted = self._values.popleft()
        self._values.append(value)
        self._pushes += 1
        return evicted

    def _accumulate(self, value: float) -> None:
        total = self._sum + value
        if abs(self._sum) >= abs(value):
            self._compensation += (self._sum - total) + value
        else:
            self._compensation += (value - total) + self._sum
        self._sum = total

    def _push_extreme(self, value: float) -> float:
        position = self._pushes
        self._append(value)
        if self.mode is WindowMode.MIN:
            while self._extremes and self._extremes[-1][1] >= value:
                self._extremes.pop()
        else:
            while self._extremes and self._extremes[-1][1] <= value:
                self._extremes.pop()
        self._extremes.append((position, value))
        while self._extremes[0][0] <= position - self.length:
            self._extremes.popleft()
        return self._extremes[0][1]

    def _push_welford(self, value: float) -> float:
        if len(self._values) < self.length:
            self._append(value)
            count = len(self._values)
            delta = value - self._mean
            self._mean += delta / count
            self._m2 += delta * (value - self._mean)
            if self._pushes % self.RESYNC_INTERVAL == 0:
                self._resync_moments()
        else:
            evicted = self._append(value)
            old_mean = self._mean
            old_m2 = self._m2
            self._mean += (value - evicted) / self.length
            self._m2 += (value - evicted) * (value - self._mean + evicted - old_mean)
            dominant = max(old_m2, (evicted - old_mean) ** 2)
            if (
                self._pushes % self.RESYNC_INTERVAL == 0
                or dominant > self.CANCELLATION_RATIO * self._m2
                or abs(evicted) > self.CANCELLATION_RATIO * abs(self._mean)
            ):
                self._resync_moments()

        self._m2 = max(self._m2, 0.0)
        return self._m2 / len(self._values)

    def _resync_moments(self) -> None:
        self._mean = math.fsum(self._values) / len(self._values)
        self._m2 = math.fsum((item - self._mean) ** 2 for item in self._values)


def _run(
    series: Any,
    length: int,
    mode: WindowMode,
    name: str | None = None,
) -> pd.Series:
    values, index = as_array(series)
    window = RollingWindow(length, mode)
    output = np.empty(len(values), dtype=np.float64)
    for position, value in enumerate(values):
        output[position] = window.push(value)
    return to_series(output, index, name)


def rolling_sum(series: Any, length: int) -> pd.Series:
    """Trailing sum of the last ``min(length, i+1)`` values."""
    return _run(series, length, WindowMode.SUM, 'sum')


def rolling_mean(series: Any, length: int) -> pd.Series:
    """Trailing mean of the last ``min(length, i+1)`` values."""
    return _run(series, length, WindowMode.AVERAGE, 'mean')


def rolling_min(series: Any, length: int) -> pd.Series:
    return _run(series, length, WindowMode.MIN, 'min')


def rolling_max(series: Any, length: int) -> pd.Series:
    return _run(series, length, WindowMode.MAX, 'max')


def rolling_variance(series: Any, length: int, mean: Any | None = None) -> pd.Series:
    """Trailing population variance.

    Args:
        series: Input values
        length: Window length
        mean: Optional per-bar mean series; when given, the result is the trailing
            average of ``(value - mean)^2`` instead of the window's own variance

    Returns:
        Non-negative variance series aligned with ``series``
    """
    if mean is None:
        return _run(series, length, WindowMode.VARIANCE, 'variance')

    ensure_same_length('rolling', series=series, mean=mean)
    values, index = as_array(series)
    means, _ = as_array(mean)
    window = RollingWindow(length, WindowMode.VARIANCE, external_mean=True)
    output = np.empty(len(values), dtype=np.float64)
    for position, value in enumerate(values):
        output[position] = window.push(value, means[position])
    return to_series(output, index, 'variance')


def rolling_std(series: Any, length: int, mean: Any | None = None) -> pd.Series:
    """Square root of ``rolling_variance``."""
    variance = rolling_variance(series, length, mean)
    return to_series(np.sqrt(variance.to_numpy()), variance.index, 'std')


def highest_lowest(high: Any, low: Any, length: int) -> tuple[pd.Series, pd.Series]:
    """Return the trailing highest high and lowest low over ``length`` bars."""
    ensure_same_length('rolling', high=high, low=low)
    return rolling_max(high, length), rolling_min(low, length)
