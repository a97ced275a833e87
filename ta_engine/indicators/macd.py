"""Moving Average Convergence Divergence (MACD) indicator implementation."""

from collections.abc import Mapping

import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries
from ta_engine.signal.classifiers import run_trend_compare

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


@IndicatorFactory.register("macd")
class MACDIndicator(BaseIndicator):
    """Moving Average Convergence Divergence momentum indicator.

    MACD is the difference between a fast and a slow moving average of price.
    Its own moving average forms the signal line, and the histogram is the gap
    between the two. A positive histogram is bullish, a negative one bearish.
    """

    channel_names = ("Macd", "Signal", "Histogram")

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the canonical MACD configuration."""
        return IndicatorConfig(
            indicator_name="macd",
            factory_name="macd",
            indicator_type="momentum",
            period=26,
            ma_type=MovingAverageType.EXPONENTIAL,
            fast_period=12,
            slow_period=26,
            signal_period=9,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        fast = self.moving_average(values, length=self.config.fast_period)
        slow = self.moving_average(values, length=self.config.slow_period)
        macd = fast - slow
        signal_line = self.moving_average(macd, length=self.config.signal_period)
        return {
            "Macd": macd,
            "Signal": signal_line,
            "Histogram": macd - signal_line,
        }

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        return run_trend_compare(channels["Histogram"])
