"""Moving average trend indicators.

Each indicator smooths the configured price input with one moving average
variant and classifies the distance between price and the average: price
above the average is bullish, below is bearish, and a tie keeps the previous
signal.
"""

from collections.abc import Mapping
from typing import ClassVar

import pandas as pd

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.data.bars import BarSeries
from ta_engine.signal.classifiers import run_trend_compare

from .base_indicator import BaseIndicator, IndicatorFactory
from .indicator_configs import IndicatorConfig


class MovingAverageIndicator(BaseIndicator):
    """Price versus moving average trend indicator.

    Subclasses pin ``ma_kind`` and the reference period; the configured
    ``ma_type`` is ignored in favour of the variant the indicator is named after.
    """

    ma_kind: ClassVar[MovingAverageType] = MovingAverageType.SIMPLE
    default_period: ClassVar[int] = 14

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        name = cls.channel_names[0].lower()
        return IndicatorConfig(
            indicator_name=name,
            factory_name=name,
            indicator_type="trend",
            period=cls.default_period,
            ma_type=cls.ma_kind,
        )

    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        average = self.moving_average(values, ma_type=self.ma_kind)
        return {self.primary_channel: average}

    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        return run_trend_compare(values - channels[self.primary_channel])


@IndicatorFactory.register("sma")
class SMAIndicator(MovingAverageIndicator):
    """Simple Moving Average: the unweighted mean of the trailing window."""

    channel_names = ("Sma",)
    ma_kind = MovingAverageType.SIMPLE


@IndicatorFactory.register("ema")
class EMAIndicator(MovingAverageIndicator):
    """Exponential Moving Average with smoothing factor ``2 / (period + 1)``."""

    channel_names = ("Ema",)
    ma_kind = MovingAverageType.EXPONENTIAL


@IndicatorFactory.register("wma")
class WMAIndicator(MovingAverageIndicator):
    """Linearly Weighted Moving Average, newest bar weighted most."""

    channel_names = ("Wma",)
    ma_kind = MovingAverageType.WEIGHTED


@IndicatorFactory.register("wwma")
class WellesWilderMAIndicator(MovingAverageIndicator):
    """Welles Wilder's smoothing, an EMA with smoothing factor ``1 / period``."""

    channel_names = ("Wwma",)
    ma_kind = MovingAverageType.WILDERS


@IndicatorFactory.register("kama")
class KAMAIndicator(MovingAverageIndicator):
    """Kaufman Adaptive Moving Average.

    The smoothing constant follows the efficiency ratio: trending stretches
    track price with the fast constant, choppy stretches flatten toward the
    slow constant.
    """

    channel_names = ("Kama",)
    ma_kind = MovingAverageType.KAUFMAN_ADAPTIVE
    default_period = 10

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        return super().default_config().model_copy(update={'fast_period': 2, 'slow_period': 30})


@IndicatorFactory.register("dema")
class DEMAIndicator(MovingAverageIndicator):
    """Double Exponential Moving Average, ``2*EMA - EMA(EMA)``."""

    channel_names = ("Dema",)
    ma_kind = MovingAverageType.DOUBLE_EXPONENTIAL


@IndicatorFactory.register("tema")
class TEMAIndicator(MovingAverageIndicator):
    """Triple Exponential Moving Average."""

    channel_names = ("Tema",)
    ma_kind = MovingAverageType.TRIPLE_EXPONENTIAL


@IndicatorFactory.register("tma")
class TMAIndicator(MovingAverageIndicator):
    """Triangular Moving Average, an SMA of the SMA."""

    channel_names = ("Tma",)
    ma_kind = MovingAverageType.TRIANGULAR
    default_period = 20


@IndicatorFactory.register("hma")
class HullMAIndicator(MovingAverageIndicator):
    """Hull Moving Average, a lag-reduced weighted average."""

    channel_names = ("Hma",)
    ma_kind = MovingAverageType.HULL
    default_period = 20


@IndicatorFactory.register("t3")
class T3Indicator(MovingAverageIndicator):
    """Tillson T3: six chained EMAs blended by the volume factor."""

    channel_names = ("T3",)
    ma_kind = MovingAverageType.T3
    default_period = 5
