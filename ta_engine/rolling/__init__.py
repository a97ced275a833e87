"""Causal rolling-window statistics."""

from ta_engine.rolling.window import (
    RollingWindow,
    WindowMode,
    highest_lowest,
    rolling_max,
    rolling_mean,
    rolling_min,
    rolling_std,
    rolling_sum,
    rolling_variance,
)

__all__ = [
    'RollingWindow',
    'WindowMode',
    'highest_lowest',
    'rolling_max',
    'rolling_mean',
    'rolling_min',
    'rolling_std',
    'rolling_sum',
    'rolling_variance',
]
