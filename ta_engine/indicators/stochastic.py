"""Stochastic Oscillator implementation."""

from collections.abc import Mapping

import numpy as np
import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries, InputName
from ta_engine.rolling.window import highest_lowest
from ta_engine.signal.classifiers import run_band_threshold

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


def stochastic_position(
    values: np.ndarray,
    highest: np.ndarray,
    lowest: np.ndarray,
    *,
    flat_default: float,
) -> np.ndarray:
    """Position of ``values`` within the trailing range, as a percentage in ``[0, 100]``.

    Bars whose range is zero read ``flat_default``.
    """
    span = highest - lowest
    position = np.full(len(values), flat_default, dtype=np.float64)
    ranged = span != 0
    position[ranged] = (values[ranged] - lowest[ranged]) / span[ranged] * 100.0
    return np.clip(position, 0.0, 100.0)


@IndicatorFactory.register("stochastic")
class StochasticOscillator(BaseIndicator):
    """Stochastic Oscillator momentum indicator.

    %K locates the close within the highest-high/lowest-low range of the lookback
    window. FastD smooths %K and SlowD smooths FastD; their gap drives the signal,
    with band crossings of FastD raising overbought/oversold warnings.
    """

    channel_names = ("FastK", "FastD", "SlowD")

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the canonical stochastic configuration."""
        return IndicatorConfig(
            indicator_name="stochastic",
            factory_name="stochastic",
            indicator_type="oscillator",
            period=14,
            ma_type=MovingAverageType.SIMPLE,
            smooth_period=3,
            signal_period=3,
            overbought_threshold=80.0,
            oversold_threshold=20.0,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        highest, lowest = highest_lowest(
            bars.values(InputName.HIGH), bars.values(InputName.LOW), self.config.period
        )
        fast_k = pd.Series(
            stochastic_position(
                values.to_numpy(), highest.to_numpy(), lowest.to_numpy(), flat_default=50.0
            ),
            index=values.index,
        )
        fast_d = self.moving_average(fast_k, length=self.config.smooth_period)
        slow_d = self.moving_average(fast_d, length=self.config.signal_period)
        return {"FastK": fast_k, "FastD": fast_d, "SlowD": slow_d}

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        return run_band_threshold(
            channels["FastD"] - channels["SlowD"],
            channels["FastD"],
            upper=self.config.overbought_threshold,
            lower=self.config.oversold_threshold,
        )
