"""Tests for the stochastic and Williams %R oscillators."""

import numpy as np
import pandas as pd
import pytest

from ta_engine.data.bars import BarSeries, ingest
from ta_engine.indicators import IndicatorConfig, IndicatorFactory
from ta_engine.indicators.stochastic import stochastic_position
from ta_engine.signal.signal_types import SignalType


@pytest.fixture
def ranged_bars() -> BarSeries:
    return ingest(
        pd.DataFrame(
            {
                "open": [9.0, 11.0, 8.0],
                "high": [10.0, 12.0, 11.0],
                "low": [8.0, 9.0, 7.0],
                "close": [9.0, 11.0, 8.0],
                "volume": [1.0, 1.0, 1.0],
            }
        )
    )


def test_stochastic_position() -> None:
    position = stochastic_position(
        np.array([9.0, 5.0, 13.0, 4.0]),
        np.array([10.0, 10.0, 12.0, 4.0]),
        np.array([8.0, 6.0, 8.0, 4.0]),
        flat_default=50.0,
    )
    np.testing.assert_allclose(position, [50.0, 0.0, 100.0, 50.0])


class TestStochasticOscillator:
    """Test suite for StochasticOscillator."""

    def test_hand_computed(self, ranged_bars: BarSeries) -> None:
        config = IndicatorConfig(indicator_name="stochastic", period=2, smooth_period=3)
        result = IndicatorFactory.create("stochastic", config).calculate(ranged_bars)

        np.testing.assert_allclose(result.channel("FastK").to_numpy(), [50.0, 75.0, 20.0])
        np.testing.assert_allclose(
            result.channel("FastD").to_numpy(), [50.0, 62.5, 145.0 / 3]
        )

    def test_slow_d_smooths_fast_d(self, bars: BarSeries) -> None:
        result = IndicatorFactory.create("stochastic").calculate(bars)
        fast_d = result.channel("FastD")
        expected = fast_d.rolling(3, min_periods=1).mean()
        np.testing.assert_allclose(result.channel("SlowD").to_numpy(), expected.to_numpy())

    def test_bounded(self, bars: BarSeries) -> None:
        result = IndicatorFactory.create("stochastic").calculate(bars)
        for channel in result.channels().values():
            assert channel.between(-1e-9, 100.0 + 1e-9).all()

    def test_flat_range_reads_midpoint(self, constant_bars: BarSeries) -> None:
        result = IndicatorFactory.create("stochastic").calculate(constant_bars)
        np.testing.assert_allclose(result.primary().to_numpy(), 50.0)
        assert set(result.signals()) == {SignalType.HOLD}

    def test_chained_source_is_clipped(self, bars: BarSeries) -> None:
        source = bars.close * 10
        result = IndicatorFactory.create("stochastic").calculate(bars, source=source)
        np.testing.assert_allclose(result.primary().to_numpy(), 100.0)

    def test_default_thresholds(self) -> None:
        config = IndicatorFactory.default_config("stochastic")
        assert (config.overbought_threshold, config.oversold_threshold) == (80.0, 20.0)


class TestWilliamsROscillator:
    """Test suite for WilliamsROscillator."""

    def test_hand_computed(self, ranged_bars: BarSeries) -> None:
        config = IndicatorFactory.default_config("williams_r").with_overrides(period=2)
        result = IndicatorFactory.create("williams_r", config).calculate(ranged_bars)
        np.testing.assert_allclose(result.primary().to_numpy(), [-50.0, -25.0, -80.0])

    def test_bounded(self, bars: BarSeries) -> None:
        williams_r = IndicatorFactory.create("williams_r").calculate(bars).primary()
        assert williams_r.between(-100.0, 0.0).all()

    def test_mirrors_stochastic_fast_k(self, bars: BarSeries) -> None:
        williams_r = IndicatorFactory.create("williams_r").calculate(bars).primary()
        fast_k = IndicatorFactory.create("stochastic").calculate(bars).channel("FastK")
        np.testing.assert_allclose(williams_r.to_numpy(), fast_k.to_numpy() - 100.0)

    def test_flat_range(self, constant_bars: BarSeries) -> None:
        result = IndicatorFactory.create("williams_r").calculate(constant_bars)
        np.testing.assert_allclose(result.primary().to_numpy(), -50.0)
        assert set(result.signals()) == {SignalType.HOLD}

    def test_crossing_into_overbought(self) -> None:
        bars = ingest(
            pd.DataFrame(
                {
                    "open": [10.0, 10.0, 10.0],
                    "high": [12.0, 12.0, 12.0],
                    "low": [8.0, 8.0, 8.0],
                    "close": [10.0, 10.0, 11.8],
                    "volume": [1.0, 1.0, 1.0],
                }
            )
        )
        result = IndicatorFactory.create("williams_r").calculate(bars)
        assert result.signals().tolist() == [
            SignalType.HOLD,
            SignalType.HOLD,
            SignalType.STRONG_SELL,
        ]
