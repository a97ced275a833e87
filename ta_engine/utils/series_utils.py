"""Conversions between pandas Series and the float64 arrays the kernels run on."""

from typing import Any

import numpy as np
import pandas as pd

from ta_engine.core.errors import ConfigurationError


def as_array(series: Any) -> tuple[np.ndarray, pd.Index]:
    """Return ``series`` as a float64 array together with the index to restore.

    Args:
        series: pandas Series, numpy array or any 1-D sequence of numbers

    Returns:
        Tuple of (float64 values, index)
    """
    if isinstance(series, pd.Series):
        return series.to_numpy(dtype=np.float64, copy=True), series.index
    values = np.asarray(series, dtype=np.float64)
    if values.ndim != 1:
        raise ConfigurationError("Series input must be one-dimensional", component="series")
    return values.copy(), pd.RangeIndex(len(values))


def to_series(values: np.ndarray, index: pd.Index, name: str | None = None) -> pd.Series:
    """Wrap kernel output back into a float64 Series."""
    return pd.Series(values, index=index, name=name, dtype=np.float64)


def ensure_same_length(component: str, **series: Any) -> int:
    """Check that every named input has the same length and return it.

    Raises:
        ConfigurationError: If the lengths differ
    """
    lengths = {name: len(values) for name, values in series.items()}
    if len(set(lengths.values())) > 1:
        raise ConfigurationError(f"Series lengths differ: {lengths}", component=component)
    return next(iter(lengths.values()), 0)
