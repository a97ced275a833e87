"""Tests for the per-bar classification rules and their series runners."""

import pandas as pd
import pytest

from ta_engine.core.errors import ConfigurationError
from ta_engine.signal.classifiers import (
    ClassifierState,
    advance,
    band_threshold,
    condition,
    dual_band,
    reduce_signals,
    run_band_threshold,
    run_condition,
    run_dual_band,
    run_trend_compare,
    run_volatility_breakout,
    trend_compare,
    volatility_breakout,
)
from ta_engine.signal.signal_types import SignalType

S = SignalType


class TestStepRules:
    """Single-bar behaviour of each rule."""

    def test_trend_compare_sign(self) -> None:
        assert trend_compare(0.5, 0.0) is S.BUY
        assert trend_compare(-0.5, 0.0) is S.SELL

    def test_trend_compare_zero_keeps_prior(self) -> None:
        assert trend_compare(0.0, 1.0, S.SELL) is S.SELL
        assert trend_compare(0.0, 0.0) is S.HOLD

    def test_trend_compare_graded(self) -> None:
        assert trend_compare(2.0, 1.0, graded=True) is S.STRONG_BUY
        assert trend_compare(1.0, 2.0, graded=True) is S.BUY
        assert trend_compare(-2.0, -1.0, graded=True) is S.STRONG_SELL
        assert trend_compare(-2.0, 1.0, graded=True) is S.SELL
        assert trend_compare(2.0, 1.0) is S.BUY

    def test_band_threshold_crossings(self) -> None:
        assert band_threshold(1.0, 0.0, 75.0, 65.0, 70.0, 30.0) is S.STRONG_SELL
        assert band_threshold(-1.0, 0.0, 25.0, 35.0, 70.0, 30.0) is S.STRONG_BUY

    def test_band_threshold_staying_outside_falls_back(self) -> None:
        assert band_threshold(1.0, 0.0, 80.0, 75.0, 70.0, 30.0) is S.BUY
        assert band_threshold(0.0, 0.0, 80.0, 75.0, 70.0, 30.0, S.SELL) is S.SELL

    def test_volatility_breakout_gate(self) -> None:
        assert volatility_breakout(1.0, 0.0, 0.5, 1.0) is S.HOLD
        assert volatility_breakout(1.0, 0.0, 1.0, 1.0) is S.BUY
        assert volatility_breakout(-2.0, -1.0, 3.0, 1.0, graded=True) is S.STRONG_SELL

    def test_dual_band(self) -> None:
        assert dual_band(5.0, 3.0, 4.0, 4.0, 0.0, 0.0) is S.BUY
        assert dual_band(7.0, 5.0, 4.0, 4.0, 0.0, 0.0) is S.STRONG_BUY
        assert dual_band(2.0, 5.0, 4.0, 4.0, 0.0, 0.0) is S.HOLD
        assert dual_band(-1.0, 1.0, 4.0, 4.0, 0.0, 0.0) is S.SELL
        assert dual_band(-3.0, -1.0, 4.0, 4.0, 0.0, 0.0) is S.STRONG_SELL

    def test_condition(self) -> None:
        assert condition(True, True) is S.BUY
        assert condition(False, True) is S.SELL
        assert condition(False, False) is S.HOLD


class TestReducer:
    """The reducer threads the previous observation and signal."""

    def test_first_bar_uses_itself_as_previous(self) -> None:
        seen = []

        def rule(current, previous, prior):
            seen.append((current, previous, prior))
            return S.BUY

        state, signal = advance(ClassifierState(), (3.0,), rule)

        assert signal is S.BUY
        assert seen == [((3.0,), (3.0,), S.HOLD)]
        assert state == ClassifierState(signal=S.BUY, previous=(3.0,))

    def test_reduce_signals_carries_prior(self) -> None:
        def rule(current, previous, prior):
            return trend_compare(current[0], previous[0], prior)

        assert reduce_signals([(1.0,), (0.0,), (0.0,), (-1.0,)], rule) == [
            S.BUY,
            S.BUY,
            S.BUY,
            S.SELL,
        ]

    def test_initial_state(self) -> None:
        def rule(current, previous, prior):
            return trend_compare(current[0], previous[0], prior)

        initial = ClassifierState(signal=S.SELL, previous=(2.0,))
        assert reduce_signals([(0.0,)], rule, initial) == [S.SELL]


class TestRunners:
    """Series runners align signals with their inputs."""

    def test_trend_compare_series(self) -> None:
        deltas = [1.0, 2.0, 3.0, 2.0, 0.0, -1.0, -2.0]

        plain = run_trend_compare(deltas)
        graded = run_trend_compare(deltas, graded=True)

        assert list(plain) == [S.BUY] * 5 + [S.SELL, S.SELL]
        assert list(graded) == [
            S.BUY,
            S.STRONG_BUY,
            S.STRONG_BUY,
            S.BUY,
            S.BUY,
            S.SELL,
            S.STRONG_SELL,
        ]

    def test_runner_keeps_index_and_name(self) -> None:
        index = pd.date_range("2024-01-01", periods=3)
        result = run_trend_compare(pd.Series([1.0, -1.0, 0.0], index=index))

        assert result.index.equals(index)
        assert result.name == "signal"
        assert result.dtype == object

    def test_band_threshold_series(self) -> None:
        result = run_band_threshold(
            [0.0, 1.0, 1.0, -1.0, -1.0], [50.0, 75.0, 80.0, 60.0, 25.0], 70.0, 30.0
        )
        assert list(result) == [S.HOLD, S.STRONG_SELL, S.BUY, S.SELL, S.STRONG_BUY]

    def test_volatility_breakout_scalar_level(self) -> None:
        result = run_volatility_breakout([1.0, 1.0, -1.0, -1.0], [0.5, 2.0, 2.0, 1.0], 1.5)
        assert list(result) == [S.HOLD, S.BUY, S.SELL, S.HOLD]

    def test_volatility_breakout_series_level(self) -> None:
        result = run_volatility_breakout([1.0, 1.0], [1.0, 1.0], [2.0, 0.5])
        assert list(result) == [S.HOLD, S.BUY]

    def test_dual_band_series(self) -> None:
        values = [1.0, 5.0, 7.0, 3.0, -2.0, -5.0]
        result = run_dual_band(values, [4.0] * 6, [0.0] * 6)
        assert list(result) == [S.HOLD, S.BUY, S.STRONG_BUY, S.HOLD, S.SELL, S.STRONG_SELL]

    def test_condition_series(self) -> None:
        result = run_condition([True, False, False], [False, True, False])
        assert list(result) == [S.BUY, S.SELL, S.HOLD]

    def test_empty_inputs(self) -> None:
        assert run_trend_compare([]).empty
        assert run_dual_band([], [], []).empty

    def test_length_mismatch(self) -> None:
        with pytest.raises(ConfigurationError, match="lengths differ"):
            run_band_threshold([1.0, 2.0], [1.0], 70.0, 30.0)
