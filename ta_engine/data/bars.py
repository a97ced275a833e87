"""Bar series: the immutable OHLCV input shared by every indicator.

``ingest`` turns raw bars (``Bar`` objects, mappings, or a DataFrame) into a
``BarSeries`` whose columns are read-only float64 arrays. Indicators never
mutate it, so one instance can be shared by any number of indicator runs.
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping
from dataclasses import dataclass
from enum import StrEnum
from typing import Any

import numpy as np
import pandas as pd

from ta_engine.core.errors import ConfigurationError
from ta_engine.utils.math_utils import MathUtils

OHLCV_COLUMNS: tuple[str, ...] = ('open', 'high', 'low', 'close', 'volume')


class InputName(StrEnum):
    """Price input an indicator reads from a bar series."""

    CLOSE = "close"
    OPEN = "open"
    HIGH = "high"
    LOW = "low"
    VOLUME = "volume"
    TYPICAL_PRICE = "typical_price"
    FULL_TYPICAL_PRICE = "full_typical_price"
    MEDIAN_PRICE = "median_price"
    WEIGHTED_CLOSE = "weighted_close"
    AVERAGE_PRICE = "average_price"


@dataclass(frozen=True, slots=True)
class Bar:
    """One OHLCV observation."""

    open: float
    high: float
    low: float
    close: float
    volume: float = 0.0
    timestamp: Any = None


def _readonly(values: Any) -> np.ndarray:
    array = np.array(values, dtype=np.float64, copy=True)
    array.setflags(write=False)
    return array


class BarSeries:
    """Ordered, immutable OHLCV columns aligned on a common index."""

    def __init__(self, columns: Mapping[str, Any], index: pd.Index | None = None) -> None:
        """Build a bar series from column arrays.

        Args:
            columns: Mapping with open/high/low/close/volume sequences
            index: Optional index (timestamps); a RangeIndex is used otherwise

        Raises:
            ConfigurationError: If a column is missing, lengths differ, or values
                are not finite
        """
        missing = [name for name in OHLCV_COLUMNS if name not in columns]
        if missing:
            raise ConfigurationError(f"Missing required columns: {missing}", component="bars")

        arrays = {name: _readonly(columns[name]) for name in OHLCV_COLUMNS}
        lengths = {name: len(array) for name, array in arrays.items()}
        if len(set(lengths.values())) > 1:
            raise ConfigurationError(f"Column lengths differ: {lengths}", component="bars")

        for name, array in arrays.items():
            if array.ndim != 1:
                raise ConfigurationError(f"Column {name} must be one-dimensional", component="bars")
            if not MathUtils.all_finite(array):
                raise ConfigurationError(
                    f"Column {name} contains NaN or infinite values", component="bars"
                )

        count = lengths['close']
        if index is None:
            index = pd.RangeIndex(count)
        elif len(index) != count:
            raise ConfigurationError(
                f"Index length {len(index)} does not match bar count {count}", component="bars"
            )

        self._columns = arrays
        self._index = index
        self._derived: dict[InputName, np.ndarray] = {}

    # ------------------------------------------------------------------#
    # Construction helpers
    # ------------------------------------------------------------------#
    @classmethod
    def from_frame(cls, data: pd.DataFrame) -> BarSeries:
        """Create a bar series from a DataFrame with OHLCV columns."""
        renamed = data.rename(columns={col: str(col).lower() for col in data.columns})
        missing = [name for name in OHLCV_COLUMNS if name not in renamed.columns]
        if missing:
            raise ConfigurationError(f"Missing required columns: {missing}", component="bars")
        columns = {name: renamed[name].to_numpy(dtype=np.float64) for name in OHLCV_COLUMNS}
        return cls(columns, index=data.index)

    @classmethod
    def from_bars(cls, bars: Iterable[Bar | Mapping[str, Any]]) -> BarSeries:
        """Create a bar series from ``Bar`` objects or mappings with OHLCV keys."""
        rows = [cls._coerce_bar(bar) for bar in bars]
        columns = {name: [getattr(bar, name) for bar in rows] for name in OHLCV_COLUMNS}
        timestamps = [bar.timestamp for bar in rows]
        index = None
        if rows and all(timestamp is not None for timestamp in timestamps):
            index = pd.Index(timestamps)
        return cls(columns, index=index)

    @staticmethod
    def _coerce_bar(bar: Bar | Mapping[str, Any]) -> Bar:
        if isinstance(bar, Bar):
            return bar
        if isinstance(bar, Mapping):
            try:
                return Bar(
                    open=float(bar['open']),
                    high=float(bar['high']),
                    low=float(bar['low']),
                    close=float(bar['close']),
                    volume=float(bar.get('volume', 0.0)),
                    timestamp=bar.get('timestamp'),
                )
            except KeyError as exc:
                raise ConfigurationError(f"Bar is missing field {exc}", component="bars") from exc
        raise ConfigurationError(
            f"Unsupported bar type: {type(bar).__name__}", component="bars"
        )

    # ------------------------------------------------------------------#
    # Accessors
    # ------------------------------------------------------------------#
    def __len__(self) -> int:
        return len(self._index)

    def __getitem__(self, position: int) -> Bar:
        timestamp = self._index[position]
        return Bar(
            open=float(self._columns['open'][position]),
            high=float(self._columns['high'][position]),
            low=float(self._columns['low'][position]),
            close=float(self._columns['close'][position]),
            volume=float(self._columns['volume'][position]),
            timestamp=timestamp,
        )

    @property
    def index(self) -> pd.Index:
        """Index shared by every series derived from these bars."""
        return self._index

    def values(self, input_name: InputName | str = InputName.CLOSE) -> np.ndarray:
        """Return the read-only array for a raw column or derived price input."""
        name = InputName(input_name)
        if name.value in self._columns:
            return self._columns[name.value]
        if name not in self._derived:
            self._derived[name] = _readonly(self._derive(name))
        return self._derived[name]

    def series(self, input_name: InputName | str = InputName.CLOSE) -> pd.Series:
        """Return a price input as a float64 Series aligned with the bars."""
        name = InputName(input_name)
        return pd.Series(self.values(name), index=self._index, name=name.value, copy=True)

    @property
    def open(self) -> pd.Series:
        return self.series(InputName.OPEN)

    @property
    def high(self) -> pd.Series:
        return self.series(InputName.HIGH)

    @property
    def low(self) -> pd.Series:
        return self.series(InputName.LOW)

    @property
    def close(self) -> pd.Series:
        return self.series(InputName.CLOSE)

    @property
    def volume(self) -> pd.Series:
        return self.series(InputName.VOLUME)

    def to_frame(self) -> pd.DataFrame:
        """Return a copy of the bars as an OHLCV DataFrame."""
        return pd.DataFrame(
            {name: self._columns[name] for name in OHLCV_COLUMNS}, index=self._index, copy=True
        )

    def validate_ohlc(self) -> None:
        """Check OHLC price relationships.

        Raises:
            ConfigurationError: If any bar has high < low, or open/close outside the range
        """
        high = self._columns['high']
        low = self._columns['low']
        if (high < low).any():
            raise ConfigurationError("High prices must be >= low prices", component="bars")
        for name in ('open', 'close'):
            column = self._columns[name]
            if (column > high).any() or (column < low).any():
                raise ConfigurationError(
                    f"{name.capitalize()} prices must lie within the high/low range",
                    component="bars",
                )

    def _derive(self, name: InputName) -> np.ndarray:
        high = self._columns['high']
        low = self._columns['low']
        close = self._columns['close']
        open_ = self._columns['open']
        if name is InputName.TYPICAL_PRICE:
            return (high + low + close) / 3
        if name is InputName.FULL_TYPICAL_PRICE:
            return (open_ + high + low + close) / 4
        if name is InputName.MEDIAN_PRICE:
            return (high + low) / 2
        if name is InputName.WEIGHTED_CLOSE:
            return (high + low + 2 * close) / 4
        if name is InputName.AVERAGE_PRICE:
            return (open_ + close) / 2
        raise ConfigurationError(f"Unsupported input: {name}", component="bars")


def ingest(
    bars: BarSeries | pd.DataFrame | Iterable[Bar | Mapping[str, Any]],
    *,
    strict: bool = False,
) -> BarSeries:
    """Wrap raw bars into the canonical ``BarSeries`` accessor form.

    Args:
        bars: An existing BarSeries, an OHLCV DataFrame, or an iterable of bars
        strict: Also validate OHLC price relationships

    Returns:
        BarSeries sharing nothing mutable with the caller's input
    """
    if isinstance(bars, BarSeries):
        series = bars
    elif isinstance(bars, pd.DataFrame):
        series = BarSeries.from_frame(bars)
    else:
        series = BarSeries.from_bars(bars)

    if strict:
        series.validate_ohlc()
    return series
