"""Signal types and per-bar classification rules."""

from ta_engine.signal.classifiers import (
    ClassifierState,
    advance,
    band_threshold,
    condition,
    dual_band,
    reduce_signals,
    run_band_threshold,
    run_condition,
    run_dual_band,
    run_trend_compare,
    run_volatility_breakout,
    trend_compare,
    volatility_breakout,
)
from ta_engine.signal.signal_types import SignalList, SignalType

__all__ = [
    'ClassifierState',
    'SignalList',
    'SignalType',
    'advance',
    'band_threshold',
    'condition',
    'dual_band',
    'reduce_signals',
    'run_band_threshold',
    'run_condition',
    'run_dual_band',
    'run_trend_compare',
    'run_volatility_breakout',
    'trend_compare',
    'volatility_breakout',
]
