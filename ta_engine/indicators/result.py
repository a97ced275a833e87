"""Bar-aligned output container returned by every indicator run."""

from __future__ import annotations

from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

import pandas as pd

from ta_engine.core.errors import ConfigurationError
from ta_engine.signal.signal_types import SignalType


class IndicatorResult:
    """Named output channels, a primary channel and the signal series.

    Every stored series has the bar count as its length. Accessors hand out
    copies so a caller may chain or mutate them without touching the result.
    """

    __slots__ = ('_name', '_channels', '_primary', '_signals', '_config')

    def __init__(
        self,
        name: str,
        channels: Mapping[str, pd.Series],
        primary: str,
        signals: pd.Series,
        config: Mapping[str, Any] | None = None,
    ) -> None:
        """Store the outputs of one indicator invocation.

        Args:
            name: Indicator identifier
            channels: Channel name to series, in display order
            primary: Name of the channel used for chaining
            signals: One ``SignalType`` per bar
            config: Configuration snapshot the result was produced with

        Raises:
            ConfigurationError: If the primary channel is missing or lengths differ
        """
        if primary not in channels:
            raise ConfigurationError(
                f"Primary channel {primary!r} not among {list(channels)}", component=name
            )
        lengths = {channel: len(series) for channel, series in channels.items()}
        lengths['signals'] = len(signals)
        if len(set(lengths.values())) > 1:
            raise ConfigurationError(f"Output lengths differ: {lengths}", component=name)

        self._name = name
        self._channels = MappingProxyType(
            {channel: series.astype('float64').rename(channel) for channel, series in channels.items()}
        )
        self._primary = primary
        self._signals = signals.rename('signal')
        self._config = MappingProxyType(dict(config or {}))

    @property
    def name(self) -> str:
        return self._name

    @property
    def primary_name(self) -> str:
        return self._primary

    @property
    def channel_names(self) -> list[str]:
        return list(self._channels)

    @property
    def config(self) -> Mapping[str, Any]:
        """Read-only snapshot of the configuration used for this run."""
        return self._config

    def __len__(self) -> int:
        return len(self._signals)

    def __repr__(self) -> str:
        return (
            f"IndicatorResult(name={self._name!r}, primary={self._primary!r}, "
            f"channels={self.channel_names}, bars={len(self)})"
        )

    def primary(self) -> pd.Series:
        """Return a copy of the primary series for chaining."""
        return self._channels[self._primary].copy()

    def channel(self, name: str) -> pd.Series:
        """Return a copy of one named channel.

        Raises:
            ConfigurationError: If the channel does not exist
        """
        try:
            return self._channels[name].copy()
        except KeyError as exc:
            raise ConfigurationError(
                f"Unknown channel {name!r}; available channels: {self.channel_names}",
                component=self._name,
            ) from exc

    def channels(self) -> dict[str, pd.Series]:
        """Return copies of every channel keyed by name."""
        return {name: series.copy() for name, series in self._channels.items()}

    def signals(self) -> pd.Series:
        """Return a copy of the per-bar ``SignalType`` series."""
        return self._signals.copy()

    def latest_signal(self) -> SignalType:
        """Return the signal of the last bar, HOLD when there are no bars."""
        if len(self._signals) == 0:
            return SignalType.HOLD
        return self._signals.iloc[-1]

    def to_frame(self) -> pd.DataFrame:
        """Return every channel plus a ``signal`` column of signal names."""
        frame = pd.DataFrame(self.channels())
        frame['signal'] = [signal.value for signal in self._signals]
        return frame
