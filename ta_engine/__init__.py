"""Technical-analysis indicator engine.

This package computes technical indicators over ordered OHLCV bar series and
classifies them into per-bar trading signals, built from shared rolling-window
statistics and a recursive moving-average engine.
"""

from __future__ import annotations

from importlib import import_module
from typing import Any

__version__ = "0.1.0"
__all__ = [
    "BarSeries",
    "IndicatorConfig",
    "IndicatorFactory",
    "IndicatorResult",
    "SignalType",
    "ingest",
    "run_batch",
    "run_indicator",
]

_EXPORTS: dict[str, tuple[str, str]] = {
    "BarSeries": ("ta_engine.data.bars", "BarSeries"),
    "IndicatorConfig": ("ta_engine.indicators.indicator_configs", "IndicatorConfig"),
    "IndicatorFactory": ("ta_engine.indicators", "IndicatorFactory"),
    "IndicatorResult": ("ta_engine.indicators.result", "IndicatorResult"),
    "SignalType": ("ta_engine.signal.signal_types", "SignalType"),
    "ingest": ("ta_engine.data.bars", "ingest"),
    "run_batch": ("ta_engine.indicators", "run_batch"),
    "run_indicator": ("ta_engine.indicators", "run_indicator"),
}


def __getattr__(name: str) -> Any:
    """Lazily resolve exports so importing the package stays cheap."""
    try:
        module_path, attr_name = _EXPORTS[name]
    except KeyError as exc:
        raise AttributeError(f"module {__name__!r} has no attribute {name!r}") from exc
    module = import_module(module_path)
    value = getattr(module, attr_name)
    globals()[name] = value
    return value


def __dir__() -> list[str]:
    """Expose dynamically-resolved attributes via dir()."""
    return sorted(list(globals().keys()) + __all__)
