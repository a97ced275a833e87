"""Williams %R oscillator implementation."""

from collections.abc import Mapping

import pandas as pd

from ta_engine.data.bars import BarSeries, InputName
from ta_engine.rolling.window import highest_lowest
from ta_engine.signal.classifiers import run_band_threshold

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig
from .stochastic import stochastic_position


@IndicatorFactory.register("williams_r")
class WilliamsROscillator(BaseIndicator):
    """Williams %R momentum oscillator.

    Williams %R measures where the close sits below the highest high of the
    lookback window, on a scale from -100 (at the lowest low) to 0 (at the
    highest high). A flat window reads -50. Readings above -20 are considered
    overbought and below -80 oversold.
    """

    channel_names = ("WilliamsR",)

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the canonical Williams %R configuration."""
        return IndicatorConfig(
            indicator_name="williams_r",
            factory_name="williams_r",
            indicator_type="oscillator",
            period=14,
            overbought_threshold=-20.0,
            oversold_threshold=-80.0,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        highest, lowest = highest_lowest(
            bars.values(InputName.HIGH), bars.values(InputName.LOW), self.config.period
        )
        position = stochastic_position(
            values.to_numpy(), highest.to_numpy(), lowest.to_numpy(), flat_default=50.0
        )
        return {"WilliamsR": pd.Series(position - 100.0, index=values.index)}

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        williams_r = channels["WilliamsR"]
        return run_band_threshold(
            williams_r.diff().fillna(0.0),
            williams_r,
            upper=self.config.overbought_threshold,
            lower=self.config.oversold_threshold,
        )
