"""Indicator configuration model.

``IndicatorConfig`` carries every parameter an indicator reads. Unused fields are
ignored by indicators that do not need them, so one model serves the whole
registry and one YAML layout serves every preset.
"""

from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    ValidationError,
    field_validator,
    model_validator,
)

from ta_engine.averages.moving_average import MovingAverageType
from ta_engine.core.errors import ConfigurationError
from ta_engine.data.bars import InputName

_INDICATOR_TYPES = ('trend', 'momentum', 'volatility', 'volume', 'oscillator')

_INDICATOR_TYPE_HINTS: dict[str, str] = {
    'sma': 'trend',
    'ema': 'trend',
    'wma': 'trend',
    'wwma': 'trend',
    'kama': 'trend',
    'dema': 'trend',
    'tema': 'trend',
    'tma': 'trend',
    'hma': 'trend',
    't3': 'trend',
    'rsi': 'momentum',
    'macd': 'momentum',
    'stochastic': 'oscillator',
    'williams_r': 'oscillator',
    'cci': 'oscillator',
    'obv': 'volume',
    'bollinger_bands': 'volatility',
    'std_dev': 'volatility',
    'atr': 'volatility',
}


class IndicatorConfig(BaseModel):
    """Configuration for indicator parameters.

    Field validators reject non-positive periods; ``validate_for_indicator``
    applies the cross-field rules of the indicator named by ``factory_name``.
    """

    model_config = ConfigDict(
        json_schema_extra={
            'component': 'indicator',
            'yaml_example': {
                '__config_class__': 'IndicatorConfig',
                'indicator_name': 'rsi',
                'factory_name': 'rsi',
                'indicator_type': 'momentum',
                'period': 14,
                'ma_type': 'wilders',
                'signal_period': 3,
                'overbought_threshold': 70,
                'oversold_threshold': 30,
            },
        },
    )

    # Core indicator settings
    indicator_name: str = Field(description="Name of the indicator")
    indicator_type: str = Field(default="trend", description="Type/category of indicator")
    factory_name: str | None = Field(
        default=None,
        description="Optional IndicatorFactory registration name",
    )
    period: int = Field(default=14, description="Lookback period for calculations")
    ma_type: MovingAverageType = Field(
        default=MovingAverageType.SIMPLE, description="Moving average variant"
    )
    input_name: InputName = Field(default=InputName.CLOSE, description="Price input to read")
    parameters: dict[str, Any] = Field(default_factory=dict, description="Additional parameters")

    # Signal lines and multi-period indicators
    signal_period: int = Field(default=9, description="Signal line period")
    fast_period: int = Field(default=12, description="Fast period (MACD, KAMA)")
    slow_period: int = Field(default=26, description="Slow period (MACD, KAMA)")
    smooth_period: int = Field(default=3, description="Smoothing period (stochastic %D)")

    # Oscillator bands
    overbought_threshold: float = Field(default=70.0, description="Overbought level")
    oversold_threshold: float = Field(default=30.0, description="Oversold level")

    # Volatility and formula constants
    standard_deviations: float = Field(default=2.0, description="Band width in standard deviations")
    cci_constant: float = Field(default=0.015, description="Constant divisor for CCI")
    v_factor: float = Field(default=0.7, description="T3 volume factor")

    @field_validator('indicator_name')
    @classmethod
    def validate_indicator_name(cls, v: str) -> str:
        """Ensure indicator name is a non-empty string."""
        if not isinstance(v, str) or not v.strip():
            raise ValueError("indicator_name must be a non-empty string")
        return v.strip()

    @field_validator('indicator_type', mode='before')
    @classmethod
    def validate_indicator_type(cls, v: str) -> str:
        """Validate indicator type is one of the allowed values."""
        value = str(v).lower().strip()
        if value not in _INDICATOR_TYPES:
            raise ValueError(f"indicator_type must be one of {list(_INDICATOR_TYPES)}")
        return value

    @field_validator('period', 'signal_period', 'fast_period', 'slow_period', 'smooth_period')
    @classmethod
    def validate_positive_periods(cls, v: int) -> int:
        """Validate that all period parameters are positive."""
        if v <= 0:
            raise ValueError("Period must be positive")
        return v

    @field_validator('standard_deviations', 'cci_constant')
    @classmethod
    def validate_positive_constants(cls, v: float) -> float:
        if v <= 0:
            raise ValueError("Value must be positive")
        return v

    @field_validator('v_factor')
    @classmethod
    def validate_v_factor(cls, v: float) -> float:
        if not 0.0 <= v <= 1.0:
            raise ValueError(f"v_factor {v} must be between 0.0 and 1.0")
        return v

    @model_validator(mode='after')
    def _normalise_indicator(self) -> 'IndicatorConfig':
        """Normalise indicator metadata for downstream loaders."""
        normalized_lower = self.indicator_name.lower()
        if self.factory_name is None:
            self.factory_name = normalized_lower
        else:
            self.factory_name = self.factory_name.strip().lower()

        hint = _INDICATOR_TYPE_HINTS.get(self.factory_name)
        if hint is not None and 'indicator_type' not in self.model_fields_set:
            self.indicator_type = hint
        return self

    @classmethod
    def build(cls, **values: Any) -> 'IndicatorConfig':
        """Construct a config, reporting validation failures as ``ConfigurationError``."""
        try:
            return cls(**values)
        except ValidationError as exc:
            raise ConfigurationError(
                "Indicator configuration is invalid",
                component=str(values.get('indicator_name', 'indicator')),
                errors=[error['msg'] for error in exc.errors()],
            ) from exc

    def with_overrides(self, **overrides: Any) -> 'IndicatorConfig':
        """Return a validated copy with ``overrides`` applied."""
        payload = self.model_dump()
        payload.update(overrides)
        return type(self).build(**payload)

    def validate_for_indicator(self) -> None:
        """Validate configuration is appropriate for the configured indicator.

        Raises:
            ValueError: If configuration is invalid for the indicator
        """
        name = self.factory_name or self.indicator_name.lower()
        if name == 'macd' and self.fast_period >= self.slow_period:
            raise ValueError("Fast period must be less than slow period for MACD")
        if name == 'kama' and self.fast_period >= self.slow_period:
            raise ValueError("Fast period must be less than slow period for KAMA")
        if self.overbought_threshold <= self.oversold_threshold:
            raise ValueError("Overbought threshold must be greater than oversold threshold")
