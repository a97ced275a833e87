"""Commodity Channel Index (CCI) indicator implementation."""

from collections.abc import Mapping

import numpy as np
import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries, InputName
from ta_engine.signal.classifiers import run_band_threshold

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


@IndicatorFactory.register("cci")
class CCIIndicator(BaseIndicator):
    """Commodity Channel Index oscillator.

    CCI = (typical price - its average) / (constant * mean deviation), where the
    mean deviation is the moving average of the absolute distance from that
    average. A zero mean deviation reads 0. Readings beyond +100 and -100 mark
    overbought and oversold conditions.
    """

    channel_names = ("Cci",)

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the canonical CCI configuration."""
        return IndicatorConfig(
            indicator_name="cci",
            factory_name="cci",
            indicator_type="oscillator",
            period=20,
            ma_type=MovingAverageType.SIMPLE,
            input_name=InputName.TYPICAL_PRICE,
            cci_constant=0.015,
            overbought_threshold=100.0,
            oversold_threshold=-100.0,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        average = self.moving_average(values)
        distance = values - average
        mean_deviation = self.moving_average(distance.abs()).to_numpy()

        cci = np.zeros(len(values), dtype=np.float64)
        nonzero = mean_deviation != 0
        cci[nonzero] = distance.to_numpy()[nonzero] / (
            self.config.cci_constant * mean_deviation[nonzero]
        )
        return {"Cci": pd.Series(cci, index=values.index)}

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        cci = channels["Cci"]
        return run_band_threshold(
            cci.diff().fillna(0.0),
            cci,
            upper=self.config.overbought_threshold,
            lower=self.config.oversold_threshold,
        )
