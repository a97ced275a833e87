"""Relative Strength Index (RSI) indicator implementation."""

import math
from collections.abc import Mapping

import numpy as np
import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries
from ta_engine.signal.classifiers import run_band_threshold
from ta_engine.utils.math_utils import clamp, safe_divide

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


def relative_strength(avg_gain: float, avg_loss: float) -> float:
    """Map average gain/loss to an RSI reading in ``[0, 100]``.

    No losses reads 100, no gains reads 0, and a window with neither reads 50.
    A ratio too large to represent also reads 100.
    """
    if avg_loss == 0:
        return 100.0 if avg_gain > 0 else 50.0
    if avg_gain == 0:
        return 0.0
    rs = safe_divide(avg_gain, avg_loss, default=math.inf)
    if math.isinf(rs):
        return 100.0
    return clamp(100.0 - 100.0 / (1.0 + rs), 0.0, 100.0)


@IndicatorFactory.register("rsi")
class RSIIndicator(BaseIndicator):
    """Relative Strength Index momentum indicator.

    The RSI is a momentum oscillator that measures the speed and change of price movements,
    typically used to identify overbought or oversold conditions in a market. It oscillates
    between 0 and 100, with readings above 70 generally considered overbought and
    readings below 30 considered oversold.

    A short signal line smooths the RSI; the histogram (RSI minus signal line) drives
    the directional signal, while fresh crossings of the bands raise extreme warnings.
    """

    channel_names = ("Rsi", "Signal", "Histogram")

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the canonical RSI configuration."""
        return IndicatorConfig(
            indicator_name="rsi",
            factory_name="rsi",
            indicator_type="momentum",
            period=14,
            ma_type=MovingAverageType.WILDERS,
            signal_period=3,
            overbought_threshold=70.0,
            oversold_threshold=30.0,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        """Calculate RSI, its signal line and histogram.

        The RSI is calculated using the following steps:
        1. Split bar-to-bar price changes into gains and losses
        2. Smooth both with the configured moving average
        3. Map the ratio of average gain to average loss onto 0-100
        """
        change = values.diff().fillna(0.0)
        gains = change.clip(lower=0.0)
        losses = (-change).clip(lower=0.0)

        avg_gains = self.moving_average(gains)
        avg_losses = self.moving_average(losses)

        rsi = pd.Series(
            np.fromiter(
                (relative_strength(g, l) for g, l in zip(avg_gains, avg_losses)),
                dtype=np.float64,
                count=len(values),
            ),
            index=values.index,
        )
        signal_line = self.moving_average(rsi, length=self.config.signal_period)
        return {
            "Rsi": rsi,
            "Signal": signal_line,
            "Histogram": rsi - signal_line,
        }

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        return run_band_threshold(
            channels["Histogram"],
            channels["Rsi"],
            upper=self.config.overbought_threshold,
            lower=self.config.oversold_threshold,
        )
