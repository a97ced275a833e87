"""Per-bar signal classification rules.

Each rule is a pure step function of the current and previous bar's values.
The series runners thread the previous observation and the previous signal
through a reducer ``(state, observation) -> (state, signal)`` so a single pass
over the bars produces the whole signal series. At the first bar the previous
observation is the current one, so no crossing or extension can fire there.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Sequence
from dataclasses import dataclass
from typing import Any

import numpy as np
import pandas as pd

from ta_engine.signal.signal_types import SignalList, SignalType
from ta_engine.utils.series_utils import as_array, ensure_same_length

Observation = tuple[float, ...]
StepRule = Callable[[Observation, Observation, SignalType], SignalType]


@dataclass(frozen=True, slots=True)
class ClassifierState:
    """Reducer state carried from one bar to the next."""

    signal: SignalType = SignalType.HOLD
    previous: Observation | None = None


def advance(
    state: ClassifierState, observation: Observation, rule: StepRule
) -> tuple[ClassifierState, SignalType]:
    """Apply ``rule`` to one observation and return the next state and signal."""
    previous = observation if state.previous is None else state.previous
    signal = rule(observation, previous, state.signal)
    return ClassifierState(signal=signal, previous=observation), signal


def reduce_signals(
    observations: Iterable[Observation],
    rule: StepRule,
    initial: ClassifierState | None = None,
) -> SignalList:
    """Run ``rule`` over ``observations`` in order."""
    state = initial or ClassifierState()
    signals: SignalList = []
    for observation in observations:
        state, signal = advance(state, observation, rule)
        signals.append(signal)
    return signals


# ----------------------------------------------------------------------#
# Step functions
# ----------------------------------------------------------------------#
def trend_compare(
    delta: float,
    prev_delta: float,
    prior: SignalType = SignalType.HOLD,
    *,
    graded: bool = False,
) -> SignalType:
    """Classify the sign of ``value - reference``.

    A zero delta keeps ``prior`` so flat inputs never flip the signal. In graded
    mode a delta that keeps extending beyond the previous one on the same side is
    reported as a strong signal.
    """
    if delta > 0:
        if graded and prev_delta > 0 and delta > prev_delta:
            return SignalType.STRONG_BUY
        return SignalType.BUY
    if delta < 0:
        if graded and prev_delta < 0 and delta < prev_delta:
            return SignalType.STRONG_SELL
        return SignalType.SELL
    return prior


def band_threshold(
    hist: float,
    prev_hist: float,
    value: float,
    prev_value: float,
    upper: float,
    lower: float,
    prior: SignalType = SignalType.HOLD,
) -> SignalType:
    """Oscillator rule with overbought/oversold warnings.

    Crossing above ``upper`` while rising warns of a bearish extreme; crossing
    below ``lower`` while falling warns of a bullish extreme. Otherwise the
    histogram is classified with ``trend_compare``.
    """
    if prev_value <= upper < value:
        return SignalType.STRONG_SELL
    if prev_value >= lower > value:
        return SignalType.STRONG_BUY
    return trend_compare(hist, prev_hist, prior)


def volatility_breakout(
    delta: float,
    prev_delta: float,
    magnitude: float,
    breakout: float,
    *,
    graded: bool = False,
) -> SignalType:
    """Directional signal that only fires while volatility is at or above ``breakout``."""
    if magnitude < breakout:
        return SignalType.HOLD
    return trend_compare(delta, prev_delta, SignalType.HOLD, graded=graded)


def dual_band(
    value: float,
    prev_value: float,
    upper: float,
    prev_upper: float,
    lower: float,
    prev_lower: float,
) -> SignalType:
    """Breakout bias relative to an upper and a lower envelope."""
    if value > upper:
        if prev_value > prev_upper and value - upper > prev_value - prev_upper:
            return SignalType.STRONG_BUY
        return SignalType.BUY
    if value < lower:
        if prev_value < prev_lower and lower - value > prev_lower - prev_value:
            return SignalType.STRONG_SELL
        return SignalType.SELL
    return SignalType.HOLD


def condition(bullish: bool, bearish: bool) -> SignalType:
    """BUY when ``bullish`` holds, else SELL when ``bearish`` holds, else HOLD."""
    if bullish:
        return SignalType.BUY
    if bearish:
        return SignalType.SELL
    return SignalType.HOLD


# ----------------------------------------------------------------------#
# Series runners
# ----------------------------------------------------------------------#
def _columns(component: str, **series: Any) -> tuple[list[np.ndarray], pd.Index]:
    ensure_same_length(component, **series)
    arrays = []
    index: pd.Index | None = None
    for values in series.values():
        array, values_index = as_array(values)
        arrays.append(array)
        if index is None:
            index = values_index
    return arrays, index if index is not None else pd.RangeIndex(0)


def _signal_series(signals: Sequence[SignalType], index: pd.Index) -> pd.Series:
    return pd.Series(list(signals), index=index, dtype=object, name='signal')


def run_trend_compare(delta: Any, *, graded: bool = False) -> pd.Series:
    """Classify a delta series (``value - reference``) bar by bar."""
    (deltas,), index = _columns('trend_compare', delta=delta)

    def rule(current: Observation, previous: Observation, prior: SignalType) -> SignalType:
        return trend_compare(current[0], previous[0], prior, graded=graded)

    return _signal_series(reduce_signals(((d,) for d in deltas), rule), index)


def run_band_threshold(
    hist: Any,
    value: Any,
    upper: float,
    lower: float,
) -> pd.Series:
    """Classify an oscillator and its histogram against fixed bands."""
    (hists, values), index = _columns('band_threshold', hist=hist, value=value)

    def rule(current: Observation, previous: Observation, prior: SignalType) -> SignalType:
        return band_threshold(
            current[0], previous[0], current[1], previous[1], upper, lower, prior
        )

    return _signal_series(reduce_signals(zip(hists, values), rule), index)


def run_volatility_breakout(
    delta: Any,
    magnitude: Any,
    breakout: Any,
    *,
    graded: bool = False,
) -> pd.Series:
    """Classify price-vs-average direction gated by a volatility breakout level.

    ``breakout`` may be a scalar or a series aligned with ``magnitude``.
    """
    if np.ndim(breakout) == 0:
        breakout = np.full(len(magnitude), float(breakout))
    (deltas, magnitudes, levels), index = _columns(
        'volatility_breakout', delta=delta, magnitude=magnitude, breakout=breakout
    )

    def rule(current: Observation, previous: Observation, prior: SignalType) -> SignalType:
        return volatility_breakout(current[0], previous[0], current[1], current[2], graded=graded)

    return _signal_series(reduce_signals(zip(deltas, magnitudes, levels), rule), index)


def run_dual_band(value: Any, upper: Any, lower: Any) -> pd.Series:
    """Classify a value series against upper and lower envelope series."""
    (values, uppers, lowers), index = _columns('dual_band', value=value, upper=upper, lower=lower)

    def rule(current: Observation, previous: Observation, prior: SignalType) -> SignalType:
        return dual_band(current[0], previous[0], current[1], previous[1], current[2], previous[2])

    return _signal_series(reduce_signals(zip(values, uppers, lowers), rule), index)


def run_condition(bullish: Any, bearish: Any) -> pd.Series:
    """Classify two boolean series bar by bar."""
    ensure_same_length('condition', bullish=bullish, bearish=bearish)
    index = bullish.index if isinstance(bullish, pd.Series) else pd.RangeIndex(len(bullish))
    signals = [
        condition(bool(bull), bool(bear))
        for bull, bear in zip(np.asarray(bullish), np.asarray(bearish))
    ]
    return _signal_series(signals, index)
