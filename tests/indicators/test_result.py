"""Tests for the IndicatorResult container."""

import pandas as pd
import pytest

from ta_engine.core.errors import ConfigurationError
from ta_engine.indicators.result import IndicatorResult
from ta_engine.signal.signal_types import SignalType


@pytest.fixture
def result() -> IndicatorResult:
    index = pd.RangeIndex(3)
    return IndicatorResult(
        name="macd",
        channels={
            "Macd": pd.Series([1, 2, 3], index=index),
            "Signal": pd.Series([0.5, 1.5, 2.5], index=index),
        },
        primary="Macd",
        signals=pd.Series([SignalType.HOLD, SignalType.BUY, SignalType.SELL], index=index),
        config={"period": 26},
    )


class TestIndicatorResult:
    """Test suite for IndicatorResult."""

    def test_metadata(self, result: IndicatorResult) -> None:
        assert result.name == "macd"
        assert result.primary_name == "Macd"
        assert result.channel_names == ["Macd", "Signal"]
        assert len(result) == 3
        assert result.config["period"] == 26
        assert "primary='Macd'" in repr(result)

    def test_channels_are_named_float_series(self, result: IndicatorResult) -> None:
        primary = result.primary()
        assert primary.name == "Macd"
        assert primary.dtype == "float64"
        assert result.channel("Signal").name == "Signal"

    def test_accessors_return_copies(self, result: IndicatorResult) -> None:
        primary = result.primary()
        primary.iloc[0] = 100.0
        result.channels()["Signal"].iloc[0] = 100.0
        result.signals().iloc[0] = SignalType.STRONG_BUY

        assert result.primary().iloc[0] == 1.0
        assert result.channel("Signal").iloc[0] == 0.5
        assert result.signals().iloc[0] is SignalType.HOLD

    def test_config_is_read_only(self, result: IndicatorResult) -> None:
        with pytest.raises(TypeError):
            result.config["period"] = 5  # type: ignore[index]

    def test_unknown_channel(self, result: IndicatorResult) -> None:
        with pytest.raises(ConfigurationError, match="Unknown channel"):
            result.channel("Histogram")

    def test_latest_signal(self, result: IndicatorResult) -> None:
        assert result.latest_signal() is SignalType.SELL

    def test_to_frame(self, result: IndicatorResult) -> None:
        frame = result.to_frame()
        assert list(frame.columns) == ["Macd", "Signal", "signal"]
        assert list(frame["signal"]) == ["HOLD", "BUY", "SELL"]


class TestValidation:
    """Construction-time checks."""

    def test_missing_primary(self) -> None:
        with pytest.raises(ConfigurationError, match="Primary channel"):
            IndicatorResult(
                name="x",
                channels={"A": pd.Series([1.0])},
                primary="B",
                signals=pd.Series([SignalType.HOLD]),
            )

    def test_length_mismatch(self) -> None:
        with pytest.raises(ConfigurationError, match="Output lengths differ"):
            IndicatorResult(
                name="x",
                channels={"A": pd.Series([1.0, 2.0])},
                primary="A",
                signals=pd.Series([SignalType.HOLD]),
            )

    def test_empty_result(self) -> None:
        result = IndicatorResult(
            name="x",
            channels={"A": pd.Series([], dtype="float64")},
            primary="A",
            signals=pd.Series([], dtype=object),
        )
        assert len(result) == 0
        assert result.latest_signal() is SignalType.HOLD
        assert result.to_frame().empty
