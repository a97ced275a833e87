"""Utility helpers for the indicator engine."""

from ta_engine.utils.math_utils import MathUtils, clamp, safe_divide
from ta_engine.utils.series_utils import as_array, ensure_same_length, to_series

__all__ = [
    'MathUtils',
    'as_array',
    'clamp',
    'ensure_same_length',
    'safe_divide',
    'to_series',
]
