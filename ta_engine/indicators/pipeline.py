"""Entry points for running indicators over a bar series.

``run_indicator`` executes one indicator; ``run_batch`` executes many independent
requests over the same bars, isolating configuration failures per request and
checking for cancellation between (never during) invocations.
"""

from __future__ import annotations

import logging
import uuid
from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import pandas as pd

from ta_engine.core.config_processor import ConfigProcessor
from ta_engine.core.errors import EngineError
from ta_engine.core.logger import get_engine_logger, logger_context
from ta_engine.data.bars import ingest

from .base_indicator import BarsInput, IndicatorFactory
from .config_loader import IndicatorConfigResolver
from .indicator_configs import IndicatorConfig
from .result import IndicatorResult

ConfigInput = IndicatorConfig | Mapping[str, Any] | str | Path | None
SourceInput = pd.Series | IndicatorResult | None


def resolve_config(
    name: str,
    config: ConfigInput = None,
    resolver: IndicatorConfigResolver | None = None,
) -> IndicatorConfig:
    """Turn any supported config definition into an ``IndicatorConfig`` for ``name``.

    Plain mappings are layered over the indicator's default configuration; mappings
    naming a ``preset`` or ``config_path`` and bare preset names are loaded through
    the resolver.
    """
    if config is None:
        return IndicatorFactory.default_config(name)
    if isinstance(config, IndicatorConfig):
        return config

    resolver = resolver or IndicatorConfigResolver()
    if isinstance(config, Mapping) and not {'preset', 'preset_name', 'config_path'} & set(config):
        defaults = IndicatorFactory.default_config(name).model_dump(mode='json')
        return resolver.resolve(ConfigProcessor.deep_merge(defaults, config))
    return resolver.resolve(config)


def run_indicator(
    name: str,
    bars: BarsInput,
    config: ConfigInput = None,
    source: SourceInput = None,
    *,
    logger: logging.Logger | None = None,
) -> IndicatorResult:
    """Run one registered indicator.

    Args:
        name: Registered indicator name (see ``IndicatorFactory``)
        bars: Raw bars or an ingested ``BarSeries``
        config: IndicatorConfig, overrides mapping, or preset name; defaults to the
            indicator's default configuration
        source: Optional series or result whose primary channel replaces the price input

    Returns:
        IndicatorResult aligned with ``bars``

    Raises:
        ConfigurationError: For unknown indicators, invalid configs or length mismatches
    """
    resolved = resolve_config(name, config)
    indicator = IndicatorFactory.create(name, resolved, logger=logger)
    return indicator.calculate(bars, source)


@dataclass(frozen=True)
class IndicatorRequest:
    """One indicator invocation inside a batch."""

    name: str
    config: ConfigInput = None
    source: SourceInput = None
    key: str | None = None

    @property
    def label(self) -> str:
        return self.key or self.name


@dataclass(frozen=True)
class BatchOutcome:
    """Result or failure of one batch request."""

    key: str
    result: IndicatorResult | None = None
    error: EngineError | None = None
    cancelled: bool = False

    @property
    def ok(self) -> bool:
        return self.result is not None


def _as_request(request: IndicatorRequest | str | Mapping[str, Any]) -> IndicatorRequest:
    if isinstance(request, IndicatorRequest):
        return request
    if isinstance(request, str):
        return IndicatorRequest(name=request)
    return IndicatorRequest(**dict(request))


def run_batch(
    requests: Iterable[IndicatorRequest | str | Mapping[str, Any]],
    bars: BarsInput,
    *,
    cancel: Callable[[], bool] | None = None,
    logger: logging.Logger | None = None,
    run_id: str | None = None,
) -> list[BatchOutcome]:
    """Run independent indicator requests over one bar series.

    Every record logged while the batch runs carries ``run_id``, and records for a
    request also carry its label as the indicator context.

    Args:
        requests: Requests, indicator names, or mappings of ``IndicatorRequest`` fields
        bars: Bars shared read-only by every request
        cancel: Polled before each request; once it returns True the remaining
            requests are reported as cancelled
        logger: Optional logger
        run_id: Identifier bound to the batch's log records; generated when omitted

    Returns:
        One outcome per request, in request order
    """
    log = logger or get_engine_logger(__name__)
    run_id = run_id or uuid.uuid4().hex[:12]
    bar_series = ingest(bars)
    pending = [_as_request(request) for request in requests]
    outcomes: list[BatchOutcome] = []

    with logger_context(log, run_id=run_id):
        for position, request in enumerate(pending):
            if cancel is not None and cancel():
                log.info(f"Batch cancelled with {len(pending) - position} requests pending")
                outcomes.extend(
                    BatchOutcome(key=remaining.label, cancelled=True)
                    for remaining in pending[position:]
                )
                break
            with logger_context(log, indicator=request.label):
                try:
                    result = run_indicator(
                        request.name, bar_series, request.config, request.source, logger=log
                    )
                except EngineError as exc:
                    log.warning(f"Indicator {request.label} failed: {exc}")
                    outcomes.append(BatchOutcome(key=request.label, error=exc))
                else:
                    outcomes.append(BatchOutcome(key=request.label, result=result))

    return outcomes
