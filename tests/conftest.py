"""Pytest configuration and shared fixtures for the ta_engine test suite."""

from collections.abc import Iterator
from typing import Any

import numpy as np
import pandas as pd
import pytest

from ta_engine.core.logger import EngineLogger
from ta_engine.data.bars import BarSeries, ingest


def pytest_configure(config: Any) -> None:
    """Configure pytest with custom markers and settings."""
    config.addinivalue_line(
        "markers", "slow: marks tests as slow (deselect with '-m \"not slow\"')"
    )
    config.addinivalue_line("markers", "unit: marks tests as unit tests")


def make_bars(closes: list[float], volume: float = 1000.0) -> BarSeries:
    """Build bars whose open/high/low all equal the close."""
    frame = pd.DataFrame(
        {
            'open': closes,
            'high': closes,
            'low': closes,
            'close': closes,
            'volume': [volume] * len(closes),
        }
    )
    return ingest(frame)


@pytest.fixture(scope="session")
def ohlcv_frame() -> pd.DataFrame:
    """Generate reproducible OHLCV data with a datetime index."""
    dates = pd.date_range(start="2023-01-01", periods=120, freq="D")
    rng = np.random.default_rng(42)

    returns = rng.normal(0.0005, 0.015, len(dates))
    close = 100.0 * np.cumprod(1 + returns)
    open_ = close * (1 + rng.normal(0, 0.004, len(dates)))
    high = np.maximum(open_, close) * (1 + np.abs(rng.normal(0, 0.006, len(dates))))
    low = np.minimum(open_, close) * (1 - np.abs(rng.normal(0, 0.006, len(dates))))
    volume = rng.integers(100_000, 1_000_000, len(dates)).astype(float)

    return pd.DataFrame(
        {'open': open_, 'high': high, 'low': low, 'close': close, 'volume': volume},
        index=dates,
    )


@pytest.fixture
def bars(ohlcv_frame: pd.DataFrame) -> BarSeries:
    """Ingested version of ``ohlcv_frame``."""
    return ingest(ohlcv_frame)


@pytest.fixture
def scenario_bars() -> BarSeries:
    """Closes [10, 11, 12, 11, 10]."""
    return make_bars([10.0, 11.0, 12.0, 11.0, 10.0])


@pytest.fixture
def constant_bars() -> BarSeries:
    """Ten bars closing at 5."""
    return make_bars([5.0] * 10)


@pytest.fixture(autouse=True)
def reset_loggers() -> Iterator[None]:
    """Reset cached engine loggers between tests."""
    yield
    EngineLogger.reset()


@pytest.fixture
def bars_from_closes() -> Any:
    """Factory fixture building flat bars from a list of closes."""
    return make_bars
