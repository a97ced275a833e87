"""Average True Range (ATR) indicator implementation."""

from collections.abc import Mapping

import numpy as np
import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries, InputName
from ta_engine.signal.classifiers import run_volatility_breakout
from ta_engine.utils.math_utils import MathUtils

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


def true_range(high: np.ndarray, low: np.ndarray, close: np.ndarray) -> np.ndarray:
    """True range per bar; the first bar, with no previous close, uses high - low."""
    output = np.empty(len(close), dtype=np.float64)
    if len(close) == 0:
        return output
    output[0] = high[0] - low[0]
    for position in range(1, len(close)):
        output[position] = MathUtils.true_range(
            high[position], low[position], close[position - 1]
        )
    return output


@IndicatorFactory.register("atr")
class ATRIndicator(BaseIndicator):
    """Average True Range volatility indicator.

    ATR smooths the true range (the largest of the bar's range and its gaps from
    the previous close) with Wilder's method. While ATR is at or above its own
    moving average, the side of price relative to its average sets the signal.
    """

    channel_names = ("Atr",)

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the canonical ATR configuration."""
        return IndicatorConfig(
            indicator_name="atr",
            factory_name="atr",
            indicator_type="volatility",
            period=14,
            ma_type=MovingAverageType.WILDERS,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        ranges = true_range(
            bars.values(InputName.HIGH),
            bars.values(InputName.LOW),
            bars.values(InputName.CLOSE),
        )
        atr = self.moving_average(pd.Series(ranges, index=values.index))
        return {"Atr": atr}

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        atr = channels["Atr"]
        return run_volatility_breakout(
            values - self.moving_average(values),
            atr,
            self.moving_average(atr),
        )
