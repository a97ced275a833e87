"""Base indicator class and factory pattern for the indicator system.

Every indicator follows the same pipeline: read the configured price input (or
an explicit ``source`` series when chaining), run moving-average and rolling
stages over it, combine the stage outputs bar by bar into named channels, and
classify the primary channel into one signal per bar.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from collections.abc import Callable, Mapping
from typing import Any, ClassVar

import numpy as np
import pandas as pd
from pydantic import ValidationError

from ta_engine.averages.moving_average import MovingAverageType, apply_moving_average
from ta_engine.core.errors import CalculationError, ConfigurationError
from ta_engine.core.logger import get_engine_logger
from ta_engine.data.bars import Bar, BarSeries, ingest
from ta_engine.utils.math_utils import MathUtils

from .indicator_configs import IndicatorConfig
from .result import IndicatorResult

BarsInput = BarSeries | pd.DataFrame | list[Bar] | list[Mapping[str, Any]]


class BaseIndicator(ABC):
    """Abstract base class for all technical indicators.

    Subclasses declare their channel names (primary first), implement
    ``compute_channels`` to produce them, and ``classify`` to turn them into a
    signal series.
    """

    channel_names: ClassVar[tuple[str, ...]] = ()

    def __init__(self, config: IndicatorConfig, logger: logging.Logger | None = None) -> None:
        """Initialize the indicator with configuration.

        Args:
            config: Indicator configuration parameters
            logger: Optional logger instance

        Raises:
            ConfigurationError: If the configuration is invalid for this indicator
        """
        self.config = config
        self.logger = logger or get_engine_logger(__name__)
        self.name = config.indicator_name
        self.type = config.indicator_type

        self._validate_configuration()

        self.logger.debug(
            f"Initialized indicator: {self.name} (type: {self.type}, period: {config.period})",
            extra={'indicator': self.name},
        )

    @classmethod
    def default_config(cls) -> IndicatorConfig:
        """Return the default configuration for the indicator implementation."""
        raise NotImplementedError(f"{cls.__name__} must define default_config()")

    @property
    def primary_channel(self) -> str:
        return self.channel_names[0]

    @abstractmethod
    def compute_channels(self, bars: BarSeries, values: pd.Series) -> dict[str, pd.Series]:
        """Calculate indicator channels.

        Args:
            bars: Bar series the run is aligned with
            values: Price input (or chained source) the indicator reads

        Returns:
            Mapping of channel name to series, one entry per ``channel_names``
        """

    @abstractmethod
    def classify(self, channels: Mapping[str, pd.Series], values: pd.Series) -> pd.Series:
        """Turn computed channels into one signal per bar."""

    def calculate(
        self,
        bars: BarsInput,
        source: pd.Series | IndicatorResult | None = None,
    ) -> IndicatorResult:
        """Run the full pipeline over ``bars``.

        Args:
            bars: Raw bars or an already ingested ``BarSeries``
            source: Optional series (or another indicator's result, whose primary
                channel is used) replacing the configured price input

        Returns:
            IndicatorResult aligned bar-for-bar with ``bars``

        Raises:
            ConfigurationError: If ``source`` does not match the bar count
            CalculationError: If ``source`` has no usable values
        """
        bar_series = ingest(bars)
        values = self._resolve_input(bar_series, source)
        channels = self.compute_channels(bar_series, values)
        signals = self.classify(channels, values)

        ordered = {name: channels[name] for name in self.channel_names}
        result = IndicatorResult(
            name=self.name,
            channels=ordered,
            primary=self.primary_channel,
            signals=signals,
            config=self.config.model_dump(mode='json'),
        )
        self.logger.debug(
            f"Calculated {self.name.upper()} with period {self.config.period} "
            f"over {len(bar_series)} bars",
            extra={'indicator': self.name},
        )
        return result

    def input_series(self, bars: BarSeries) -> pd.Series:
        """Return the configured price input for ``bars``."""
        return bars.series(self.config.input_name)

    def moving_average(
        self,
        series: pd.Series,
        length: int | None = None,
        ma_type: MovingAverageType | str | None = None,
    ) -> pd.Series:
        """Apply the configured (or given) moving average variant to ``series``."""
        resolved_type = MovingAverageType(ma_type or self.config.ma_type)
        params: dict[str, Any] = {}
        if resolved_type is MovingAverageType.KAUFMAN_ADAPTIVE:
            params = {
                'fast_length': self.config.fast_period,
                'slow_length': self.config.slow_period,
            }
        elif resolved_type is MovingAverageType.T3:
            params = {'v_factor': self.config.v_factor}
        return apply_moving_average(
            resolved_type, length or self.config.period, series, **params
        )

    def get_indicator_info(self) -> dict[str, Any]:
        """Get indicator information and current configuration.

        Returns:
            Dictionary with indicator information
        """
        return {
            "name": self.name,
            "type": self.type,
            "period": self.config.period,
            "channels": list(self.channel_names),
            "config": self.config.model_dump(),
        }

    def _resolve_input(
        self, bars: BarSeries, source: pd.Series | IndicatorResult | None
    ) -> pd.Series:
        if source is None:
            return self.input_series(bars)

        if isinstance(source, IndicatorResult):
            series = source.primary()
        elif isinstance(source, pd.Series):
            series = source.copy()
        else:
            raise CalculationError(
                f"Unsupported source type for {self.name}: {type(source).__name__}"
            )

        if len(series) != len(bars):
            raise ConfigurationError(
                f"Source length {len(series)} does not match bar count {len(bars)}",
                component=self.name,
            )
        values = series.to_numpy(dtype=np.float64)
        if not MathUtils.all_finite(values):
            raise CalculationError(f"Source series for {self.name} contains non-finite values")
        return pd.Series(values, index=bars.index, name=series.name)

    def _validate_configuration(self) -> None:
        """Validate indicator-specific configuration parameters."""
        try:
            if not self.config.indicator_name:
                raise ValueError("indicator_name is required")
            if self.config.period <= 0:
                raise ValueError("period must be positive")

            self.config.validate_for_indicator()

        except (ValidationError, ValueError) as e:
            raise ConfigurationError(
                f"Configuration validation failed: {e}", component=self.name
            ) from e


class IndicatorFactory:
    """Factory for creating indicator instances.

    Indicators register themselves by name with the ``register`` decorator and
    are created from a name plus an optional configuration.
    """

    _indicators: dict[str, type[BaseIndicator]] = {}

    @classmethod
    def register(cls, name: str) -> Callable[[type[BaseIndicator]], type[BaseIndicator]]:
        """Register an indicator class with the factory.

        Args:
            name: Name to register the indicator under

        Returns:
            Decorator function for registering the indicator class
        """

        def decorator(indicator_class: type[BaseIndicator]) -> type[BaseIndicator]:
            cls._indicators[name.lower()] = indicator_class
            return indicator_class

        return decorator

    @classmethod
    def _get_indicator_class(cls, name: str) -> type[BaseIndicator]:
        slug = name.lower()
        indicator_class = cls._indicators.get(slug)
        if indicator_class is None:
            available = sorted(cls._indicators.keys())
            raise ConfigurationError(
                f"Unknown indicator: {slug}. Available indicators: {available}",
                component="indicator_factory",
            )
        return indicator_class

    @classmethod
    def default_config(cls, name: str) -> IndicatorConfig:
        """Return the registered indicator's default configuration."""
        indicator_class = cls._get_indicator_class(name)
        return indicator_class.default_config()

    @classmethod
    def create(
        cls,
        name: str,
        config: IndicatorConfig | None = None,
        logger: logging.Logger | None = None,
    ) -> BaseIndicator:
        """Create an indicator instance by name.

        Args:
            name: Name of the indicator to create
            config: Configuration for the indicator. When omitted the registered
                indicator default will be used.
            logger: Optional logger passed to the indicator

        Returns:
            Indicator instance

        Raises:
            ConfigurationError: If the indicator name is not registered
        """
        indicator_class = cls._get_indicator_class(name)
        resolved_config = config or indicator_class.default_config()
        if resolved_config.factory_name != name.lower():
            resolved_config = resolved_config.model_copy(update={'factory_name': name.lower()})
        return indicator_class(resolved_config, logger=logger)

    @classmethod
    def get_available_indicators(cls) -> list[str]:
        """Get list of available indicator names.

        Returns:
            List of available indicator names
        """
        return list(cls._indicators.keys())

    @classmethod
    def is_registered(cls, name: str) -> bool:
        """Check if an indicator is registered.

        Args:
            name: Name of the indicator to check

        Returns:
            True if the indicator is registered
        """
        return name.lower() in cls._indicators
