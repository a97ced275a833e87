"""Bollinger Bands indicator implementation."""

from collections.abc import Mapping

import numpy as np
import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries
from ta_engine.rolling.window import rolling_std
from ta_engine.signal.classifiers import run_dual_band

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


@IndicatorFactory.register("bollinger_bands")
class BollingerBandsIndicator(BaseIndicator):
    """Bollinger Bands volatility indicator.

    The middle band is a moving average of price. The upper and lower bands sit
    ``standard_deviations`` standard deviations away from it, where the deviation
    is measured from the middle band itself. Bandwidth is the band spread relative
    to the middle band, 0 when the middle band is 0.

    Closing beyond a band is read as a breakout in that direction; a close that
    keeps stretching further past the band is a strong signal.
    """

    channel_names = ("MiddleBand", "UpperBand", "LowerBand", "Bandwidth")

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the canonical Bollinger Bands configuration."""
        return IndicatorConfig(
            indicator_name="bollinger_bands",
            factory_name="bollinger_bands",
            indicator_type="volatility",
            period=20,
            ma_type=MovingAverageType.SIMPLE,
            standard_deviations=2.0,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        middle = self.moving_average(values)
        deviation = rolling_std(values, self.config.period, mean=middle)
        offset = deviation * self.config.standard_deviations
        upper = middle + offset
        lower = middle - offset

        middle_values = middle.to_numpy()
        spread = (upper - lower).to_numpy()
        bandwidth = np.zeros(len(middle_values), dtype=np.float64)
        nonzero = middle_values != 0
        bandwidth[nonzero] = spread[nonzero] / middle_values[nonzero]

        return {
            "MiddleBand": middle,
            "UpperBand": upper,
            "LowerBand": lower,
            "Bandwidth": pd.Series(bandwidth, index=values.index),
        }

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        return run_dual_band(values, channels["UpperBand"], channels["LowerBand"])
