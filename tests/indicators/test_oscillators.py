"""Tests for the CCI and OBV indicators."""

import numpy as np
import pandas as pd

from ta_engine.data.bars import BarSeries, InputName, ingest
from ta_engine.indicators import IndicatorConfig, IndicatorFactory
from ta_engine.signal.signal_types import SignalType


class TestCCI:
    """Test suite for CCIIndicator."""

    def test_reads_typical_price(self) -> None:
        config = IndicatorFactory.default_config("cci")
        assert config.input_name is InputName.TYPICAL_PRICE

    def test_hand_computed(self, bars_from_closes) -> None:
        config = IndicatorFactory.default_config("cci").with_overrides(period=2)
        result = IndicatorFactory.create("cci", config).calculate(
            bars_from_closes([1.0, 2.0, 3.0])
        )

        # distance [0, 0.5, 0.5], mean deviation [0, 0.25, 0.5]
        np.testing.assert_allclose(
            result.primary().to_numpy(), [0.0, 0.5 / 0.00375, 0.5 / 0.0075]
        )
        assert result.signals().tolist() == [
            SignalType.HOLD,
            SignalType.STRONG_SELL,
            SignalType.SELL,
        ]

    def test_constant_prices(self, constant_bars: BarSeries) -> None:
        result = IndicatorFactory.create("cci").calculate(constant_bars)
        np.testing.assert_allclose(result.primary().to_numpy(), 0.0)
        assert set(result.signals()) == {SignalType.HOLD}

    def test_constant_scales_output(self, bars: BarSeries) -> None:
        base = IndicatorFactory.create("cci").calculate(bars).primary()
        config = IndicatorFactory.default_config("cci").with_overrides(cci_constant=0.03)
        halved = IndicatorFactory.create("cci", config).calculate(bars).primary()
        np.testing.assert_allclose(halved.to_numpy(), base.to_numpy() / 2)


class TestOBV:
    """Test suite for OBVIndicator."""

    def test_running_total(self, bars_from_closes) -> None:
        result = IndicatorFactory.create("obv").calculate(
            bars_from_closes([10.0, 11.0, 11.0, 10.0, 12.0], volume=100.0)
        )
        np.testing.assert_allclose(result.primary().to_numpy(), [0.0, 100.0, 100.0, 0.0, 100.0])

    def test_uses_bar_volume(self) -> None:
        bars = ingest(
            pd.DataFrame(
                {
                    "open": [1.0, 2.0, 1.5],
                    "high": [1.0, 2.0, 1.5],
                    "low": [1.0, 2.0, 1.5],
                    "close": [1.0, 2.0, 1.5],
                    "volume": [500.0, 300.0, 200.0],
                }
            )
        )
        result = IndicatorFactory.create("obv").calculate(bars)
        np.testing.assert_allclose(result.primary().to_numpy(), [0.0, 300.0, 100.0])

    def test_signal_line_is_ema(self, bars: BarSeries) -> None:
        result = IndicatorFactory.create("obv").calculate(bars)
        obv = result.channel("Obv")
        expected = obv.ewm(span=20, adjust=False).mean()
        np.testing.assert_allclose(result.channel("ObvSignal").to_numpy(), expected.to_numpy())

    def test_constant_prices(self, constant_bars: BarSeries) -> None:
        result = IndicatorFactory.create("obv").calculate(constant_bars)
        np.testing.assert_allclose(result.primary().to_numpy(), 0.0)
        assert set(result.signals()) == {SignalType.HOLD}

    def test_config_override(self, bars: BarSeries) -> None:
        config = IndicatorConfig(indicator_name="obv", period=5, ma_type="simple")
        result = IndicatorFactory.create("obv", config).calculate(bars)
        expected = result.channel("Obv").rolling(5, min_periods=1).mean()
        np.testing.assert_allclose(result.channel("ObvSignal").to_numpy(), expected.to_numpy())
