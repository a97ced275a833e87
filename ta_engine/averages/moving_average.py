"""Moving average engine.

Every variant is a causal recursive transform: ``result[i]`` reads only
``x[0..=i]`` and ``result[0..i]``, the output has the input's length, and the
first output is seeded from the first input. Composite variants (DEMA, TEMA,
triangular, Hull, T3) are built by feeding the engine its own output.
"""

from __future__ import annotations

import math
from collections import deque
from collections.abc import Callable
from enum import StrEnum
from typing import Any

import numpy as np
import pandas as pd
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from ta_engine.core.errors import ConfigurationError
from ta_engine.rolling.window import RollingWindow, WindowMode
from ta_engine.utils.series_utils import as_array, to_series


class MovingAverageType(StrEnum):
    """Supported moving average variants."""

    SIMPLE = "simple"
    EXPONENTIAL = "exponential"
    WEIGHTED = "weighted"
    WILDERS = "wilders"
    KAUFMAN_ADAPTIVE = "kaufman_adaptive"
    DOUBLE_EXPONENTIAL = "double_exponential"
    TRIPLE_EXPONENTIAL = "triple_exponential"
    TRIANGULAR = "triangular"
    HULL = "hull"
    T3 = "t3"


class MovingAverageDescriptor(BaseModel):
    """Immutable description of one moving-average stage."""

    model_config = ConfigDict(frozen=True, extra='forbid')

    ma_type: MovingAverageType = Field(description="Moving average variant")
    length: int = Field(gt=0, description="Lookback length")
    fast_length: int = Field(default=2, gt=0, description="KAMA fast smoothing length")
    slow_length: int = Field(default=30, gt=0, description="KAMA slow smoothing length")
    v_factor: float = Field(default=0.7, ge=0.0, le=1.0, description="T3 volume factor")

    @classmethod
    def build(
        cls, ma_type: MovingAverageType | str, length: int, **params: Any
    ) -> MovingAverageDescriptor:
        """Construct a descriptor, reporting bad input as ``ConfigurationError``."""
        try:
            return cls(ma_type=ma_type, length=length, **params)
        except ValidationError as exc:
            raise ConfigurationError(
                f"Invalid moving average {ma_type!r} with length {length!r}",
                component="moving_average",
                errors=[error['msg'] for error in exc.errors()],
            ) from exc

    def apply(self, series: Any) -> pd.Series:
        """Run this stage over ``series``."""
        values, index = as_array(series)
        kernel = _KERNELS[self.ma_type]
        return to_series(kernel(values, self), index, self.ma_type.value)


Kernel = Callable[[np.ndarray, MovingAverageDescriptor], np.ndarray]
_KERNELS: dict[MovingAverageType, Kernel] = {}


def _kernel(ma_type: MovingAverageType) -> Callable[[Kernel], Kernel]:
    def decorator(func: Kernel) -> Kernel:
        _KERNELS[ma_type] = func
        return func

    return decorator


def exponential_smoothing(values: np.ndarray, alpha: float) -> np.ndarray:
    """EMA recurrence with an arbitrary smoothing factor, seeded from ``values[0]``."""
    output = np.empty(len(values), dtype=np.float64)
    if len(values) == 0:
        return output
    previous = values[0]
    output[0] = previous
    for position in range(1, len(values)):
        previous = previous + alpha * (values[position] - previous)
        output[position] = previous
    return output


def _windowed(values: np.ndarray, length: int, mode: WindowMode) -> np.ndarray:
    window = RollingWindow(length, mode)
    output = np.empty(len(values), dtype=np.float64)
    for position, value in enumerate(values):
        output[position] = window.push(value)
    return output


def simple(values: np.ndarray, length: int) -> np.ndarray:
    return _windowed(values, length, WindowMode.AVERAGE)


def exponential(values: np.ndarray, length: int) -> np.ndarray:
    return exponential_smoothing(values, 2.0 / (length + 1))


def wilders(values: np.ndarray, length: int) -> np.ndarray:
    return exponential_smoothing(values, 1.0 / length)


def weighted(values: np.ndarray, length: int) -> np.ndarray:
    """Linearly weighted average, newest weighted ``length`` and oldest 1.

    The weighted numerator is updated incrementally: every push lowers each
    stored weight by one, which subtracts the window sum taken before the push.
    Partial windows divide by the weights actually in use.
    """
    output = np.empty(len(values), dtype=np.float64)
    window: deque[float] = deque()
    numerator = 0.0
    window_sum = 0.0
    for position, value in enumerate(values):
        numerator += length * value - window_sum
        window_sum += value
        if len(window) == length:
            window_sum -= window.popleft()
        window.append(value)

        count = len(window)
        if (position + 1) % RollingWindow.RESYNC_INTERVAL == 0:
            window_sum = math.fsum(window)
            numerator = math.fsum(
                (length - count + 1 + offset) * item for offset, item in enumerate(window)
            )
        denominator = count * length - count * (count - 1) / 2
        output[position] = numerator / denominator
    return output


def kaufman_adaptive(
    values: np.ndarray, length: int, fast_length: int = 2, slow_length: int = 30
) -> np.ndarray:
    """Kaufman adaptive moving average driven by the efficiency ratio."""
    output = np.empty(len(values), dtype=np.float64)
    if len(values) == 0:
        return output
    fast_alpha = 2.0 / (fast_length + 1)
    slow_alpha = 2.0 / (slow_length + 1)
    noise = RollingWindow(length, WindowMode.SUM)

    previous = values[0]
    output[0] = previous
    noise.push(0.0)
    for position in range(1, len(values)):
        value = values[position]
        volatility = noise.push(abs(value - values[position - 1]))
        change = abs(value - values[max(0, position - length)])
        efficiency = change / volatility if volatility > 0 else 0.0
        smoothing = (efficiency * (fast_alpha - slow_alpha) + slow_alpha) ** 2
        previous = previous + smoothing * (value - previous)
        output[position] = previous
    return output


@_kernel(MovingAverageType.SIMPLE)
def _simple_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    return simple(values, descriptor.length)


@_kernel(MovingAverageType.EXPONENTIAL)
def _exponential_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    return exponential(values, descriptor.length)


@_kernel(MovingAverageType.WILDERS)
def _wilders_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    return wilders(values, descriptor.length)


@_kernel(MovingAverageType.WEIGHTED)
def _weighted_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    return weighted(values, descriptor.length)


@_kernel(MovingAverageType.KAUFMAN_ADAPTIVE)
def _kama_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    return kaufman_adaptive(
        values, descriptor.length, descriptor.fast_length, descriptor.slow_length
    )


@_kernel(MovingAverageType.DOUBLE_EXPONENTIAL)
def _dema_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    first = exponential(values, descriptor.length)
    second = exponential(first, descriptor.length)
    return 2 * first - second


@_kernel(MovingAverageType.TRIPLE_EXPONENTIAL)
def _tema_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    first = exponential(values, descriptor.length)
    second = exponential(first, descriptor.length)
    third = exponential(second, descriptor.length)
    return 3 * first - 3 * second + third


@_kernel(MovingAverageType.TRIANGULAR)
def _triangular_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    return simple(simple(values, descriptor.length), descriptor.length)


@_kernel(MovingAverageType.HULL)
def _hull_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    length = descriptor.length
    half = weighted(values, max(1, math.ceil(length / 2)))
    full = weighted(values, length)
    return weighted(2 * half - full, max(1, math.ceil(math.sqrt(length))))


@_kernel(MovingAverageType.T3)
def _t3_kernel(values: np.ndarray, descriptor: MovingAverageDescriptor) -> np.ndarray:
    v = descriptor.v_factor
    c1 = -v**3
    c2 = 3 * v**2 + 3 * v**3
    c3 = -6 * v**2 - 3 * v - 3 * v**3

    stages = []
    current = values
    for _ in range(6):
        current = exponential(current, descriptor.length)
        stages.append(current)
    e3, e4, e5, e6 = stages[2], stages[3], stages[4], stages[5]
    # c4 = 1 - c1 - c2 - c3, folded in as offsets from e3
    return e3 + c3 * (e4 - e3) + c2 * (e5 - e3) + c1 * (e6 - e3)


def apply_moving_average(
    ma_type: MovingAverageType | str,
    length: int,
    series: Any,
    **params: Any,
) -> pd.Series:
    """Apply a moving average variant to ``series``.

    Args:
        ma_type: Variant name or ``MovingAverageType``
        length: Lookback length, must be positive
        series: Input series (pandas Series or 1-D sequence)
        **params: Variant parameters (``fast_length``/``slow_length`` for KAMA,
            ``v_factor`` for T3)

    Returns:
        Series of the same length and index as ``series``

    Raises:
        ConfigurationError: If the variant is unknown or a parameter is invalid
    """
    return MovingAverageDescriptor.build(ma_type, length, **params).apply(series)


def available_moving_averages() -> list[str]:
    """Return the names of every registered variant."""
    return [ma_type.value for ma_type in _KERNELS]
