"""Tests for the RSI indicator."""

import numpy as np
import pytest

from ta_engine.data.bars import BarSeries
from ta_engine.indicators import IndicatorConfig, IndicatorFactory, RSIIndicator
from ta_engine.indicators.rsi import relative_strength
from ta_engine.signal.signal_types import SignalType


class TestRelativeStrength:
    """Degenerate averages resolve to fixed readings."""

    def test_no_movement(self) -> None:
        assert relative_strength(0.0, 0.0) == 50.0

    def test_no_losses(self) -> None:
        assert relative_strength(1.5, 0.0) == 100.0

    def test_no_gains(self) -> None:
        assert relative_strength(0.0, 2.0) == 0.0

    def test_overflowing_ratio_reads_overbought(self) -> None:
        assert relative_strength(1e308, 1e-10) == 100.0

    def test_equal_averages(self) -> None:
        assert relative_strength(1.0, 1.0) == pytest.approx(50.0)


class TestRSIIndicator:
    """Test suite for RSIIndicator."""

    def test_default_config(self) -> None:
        config = RSIIndicator.default_config()
        assert config.period == 14
        assert config.ma_type.value == "wilders"
        assert (config.overbought_threshold, config.oversold_threshold) == (70.0, 30.0)

    def test_channels(self, bars: BarSeries) -> None:
        result = IndicatorFactory.create("rsi").calculate(bars)
        channels = result.channels()

        assert result.channel_names == ["Rsi", "Signal", "Histogram"]
        np.testing.assert_allclose(
            channels["Histogram"].to_numpy(),
            (channels["Rsi"] - channels["Signal"]).to_numpy(),
        )

    def test_bounded(self, bars: BarSeries) -> None:
        rsi = IndicatorFactory.create("rsi").calculate(bars).primary()
        assert rsi.between(0.0, 100.0).all()

    def test_hand_computed(self, bars_from_closes) -> None:
        config = IndicatorConfig(indicator_name="rsi", period=2, signal_period=1)
        result = IndicatorFactory.create("rsi", config).calculate(bars_from_closes([1.0, 2.0, 1.0]))

        # gains [0, 0.5, 0.25], losses [0, 0, 0.5] after Wilder smoothing
        np.testing.assert_allclose(result.primary().to_numpy(), [50.0, 100.0, 100.0 - 100.0 / 1.5])

    def test_constant_prices(self, constant_bars: BarSeries) -> None:
        result = IndicatorFactory.create("rsi").calculate(constant_bars)

        np.testing.assert_allclose(result.primary().to_numpy(), 50.0)
        assert set(result.signals()) == {SignalType.HOLD}

    def test_rising_prices_warn_overbought(self, bars_from_closes) -> None:
        result = IndicatorFactory.create("rsi").calculate(bars_from_closes(list(range(1, 21))))
        rsi = result.primary().to_numpy()
        signals = result.signals().tolist()

        assert rsi[0] == 50.0
        np.testing.assert_allclose(rsi[1:], 100.0)
        assert signals[1] is SignalType.STRONG_SELL
        assert SignalType.STRONG_SELL not in signals[2:]

    def test_falling_prices_warn_oversold(self, bars_from_closes) -> None:
        result = IndicatorFactory.create("rsi").calculate(bars_from_closes(list(range(20, 0, -1))))
        rsi = result.primary().to_numpy()

        np.testing.assert_allclose(rsi[1:], 0.0)
        assert result.signals().iloc[1] is SignalType.STRONG_BUY

    def test_custom_thresholds(self, bars_from_closes) -> None:
        closes = [10.0, 10.5, 10.2, 10.8, 11.5, 11.0, 12.0]
        config = IndicatorConfig(
            indicator_name="rsi", period=3, overbought_threshold=95, oversold_threshold=5
        )
        result = IndicatorFactory.create("rsi", config).calculate(bars_from_closes(closes))
        rsi = result.primary().to_numpy()
        signals = result.signals().tolist()
        for position in range(1, len(closes)):
            crossed = rsi[position - 1] <= 95 < rsi[position]
            assert (signals[position] is SignalType.STRONG_SELL) == crossed
