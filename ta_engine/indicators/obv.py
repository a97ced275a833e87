"""On-Balance Volume (OBV) indicator implementation."""

from collections.abc import Mapping

import numpy as np
import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries, InputName
from ta_engine.signal.classifiers import run_trend_compare

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


@IndicatorFactory.register("obv")
class OBVIndicator(BaseIndicator):
    """On-Balance Volume indicator.

    OBV is a running total of volume: added on up bars, subtracted on down bars,
    unchanged otherwise. The first bar has no previous close and starts the total
    at 0. OBV above its moving average (the ObvSignal channel) is bullish.
    """

    channel_names = ("Obv", "ObvSignal")

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the canonical OBV configuration."""
        return IndicatorConfig(
            indicator_name="obv",
            factory_name="obv",
            indicator_type="volume",
            period=20,
            ma_type=MovingAverageType.EXPONENTIAL,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        direction = np.sign(values.diff().fillna(0.0).to_numpy())
        obv = np.cumsum(direction * bars.values(InputName.VOLUME))
        obv_series = pd.Series(obv, index=values.index)
        return {"Obv": obv_series, "ObvSignal": self.moving_average(obv_series)}

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        return run_trend_compare(channels["Obv"] - channels["ObvSignal"])
