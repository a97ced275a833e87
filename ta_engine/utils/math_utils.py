"""Guarded scalar arithmetic shared by indicator formulas.

Division by zero and non-finite intermediates resolve to an explicit default
instead of propagating inf or NaN into a series.
"""

import math

import numpy as np


class MathUtils:
    """Utility class for guarded numeric operations."""

    @staticmethod
    def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
        """Safe division that handles zero and non-finite operands.

        Args:
            numerator: Numerator
            denominator: Denominator
            default: Value returned when the division is not defined

        Returns:
            Division result or default value
        """
        if denominator == 0 or not math.isfinite(denominator) or not math.isfinite(numerator):
            return default
        result = numerator / denominator
        return result if math.isfinite(result) else default

    @staticmethod
    def clamp(value: float, lower: float, upper: float) -> float:
        """Clamp ``value`` into ``[lower, upper]``."""
        return min(max(value, lower), upper)

    @staticmethod
    def true_range(high: float, low: float, prev_close: float) -> float:
        """Greatest of high-low, |high-prev_close| and |low-prev_close|."""
        return max(high - low, abs(high - prev_close), abs(low - prev_close))

    @staticmethod
    def all_finite(values: np.ndarray) -> bool:
        """Return True when every element is a finite number."""
        return bool(np.isfinite(values).all())


# Standalone functions for convenience
def safe_divide(numerator: float, denominator: float, default: float = 0.0) -> float:
    """Safe division function."""
    return MathUtils.safe_divide(numerator, denominator, default)


def clamp(value: float, lower: float, upper: float) -> float:
    """Clamp a value into a closed interval."""
    return MathUtils.clamp(value, lower, upper)
