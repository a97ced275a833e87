"""Indicator system for the technical-analysis engine.

Importing this package registers every built-in indicator with
``IndicatorFactory``.
"""

from ta_engine.signal.signal_types import SignalType

from .atr import ATRIndicator
from .base_indicator import BaseIndicator, IndicatorFactory
from .bollinger_bands import BollingerBandsIndicator
from .cci import CCIIndicator
from .config_loader import IndicatorConfigResolver
from .indicator_configs import IndicatorConfig
from .macd import MACDIndicator
from .moving_averages import (
    DEMAIndicator,
    EMAIndicator,
    HullMAIndicator,
    KAMAIndicator,
    MovingAverageIndicator,
    SMAIndicator,
    T3Indicator,
    TEMAIndicator,
    TMAIndicator,
    WellesWilderMAIndicator,
    WMAIndicator,
)
from .obv import OBVIndicator
from .pipeline import BatchOutcome, IndicatorRequest, resolve_config, run_batch, run_indicator
from .result import IndicatorResult
from .rsi import RSIIndicator
from .std_dev import StandardDeviationVolatility
from .stochastic import StochasticOscillator
from .williams_r import WilliamsROscillator

__all__ = [
    "BaseIndicator",
    "BatchOutcome",
    "IndicatorConfig",
    "IndicatorConfigResolver",
    "IndicatorFactory",
    "IndicatorRequest",
    "IndicatorResult",
    "SignalType",
    "resolve_config",
    "run_batch",
    "run_indicator",
    # Indicator classes
    "MovingAverageIndicator",
    "SMAIndicator",
    "EMAIndicator",
    "WMAIndicator",
    "WellesWilderMAIndicator",
    "KAMAIndicator",
    "DEMAIndicator",
    "TEMAIndicator",
    "TMAIndicator",
    "HullMAIndicator",
    "T3Indicator",
    "RSIIndicator",
    "MACDIndicator",
    "StochasticOscillator",
    "WilliamsROscillator",
    "BollingerBandsIndicator",
    "StandardDeviationVolatility",
    "ATRIndicator",
    "CCIIndicator",
    "OBVIndicator",
]
