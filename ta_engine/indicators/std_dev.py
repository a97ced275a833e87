"""Standard deviation volatility indicator implementation."""

from collections.abc import Mapping

import numpy as np
import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries
from ta_engine.rolling.window import rolling_variance
from ta_engine.signal.classifiers import run_volatility_breakout

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


@IndicatorFactory.register("std_dev")
class StandardDeviationVolatility(BaseIndicator):
    """Standard deviation volatility indicator.

    Variance is the trailing average of squared deviations from the moving
    average of price. The signal line is the moving average of the resulting
    standard deviation; while volatility is at or above it, the side of price
    relative to its average sets the direction.
    """

    channel_names = ("StdDev", "Variance", "Signal")

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        return IndicatorConfig(
            indicator_name="std_dev",
            factory_name="std_dev",
            indicator_type="volatility",
            period=20,
            ma_type=MovingAverageType.SIMPLE,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        average = self.moving_average(values)
        variance = rolling_variance(values, self.config.period, mean=average)
        std_dev = pd.Series(np.sqrt(variance.to_numpy()), index=values.index)
        return {
            "StdDev": std_dev,
            "Variance": variance,
            "Signal": self.moving_average(std_dev),
        }

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        average = self.moving_average(values)
        return run_volatility_breakout(values - average, channels["StdDev"], channels["Signal"])
