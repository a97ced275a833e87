"""Logging configuration for the indicator engine.

This module wires standard-library logging for every engine component with a
shared pipe-delimited format, optional JSON output, optional rotating log
files, and per-run context (run id and indicator) injected through a filter.
"""

import json
import logging
import logging.handlers
import os
import sys
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from enum import StrEnum
from typing import Any


class LogLevel(StrEnum):
    """Log level enumeration."""

    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


_RESERVED_RECORD_KEYS = frozenset(
    {
        'name',
        'msg',
        'args',
        'levelname',
        'levelno',
        'pathname',
        'filename',
        'module',
        'lineno',
        'funcName',
        'created',
        'msecs',
        'relativeCreated',
        'thread',
        'threadName',
        'processName',
        'process',
        'taskName',
        'getMessage',
        'exc_info',
        'exc_text',
        'stack_info',
    }
)


class StructuredFormatter(logging.Formatter):
    """Formatter emitting one JSON object per record."""

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'module': record.module,
            'function': record.funcName,
            'line': record.lineno,
        }

        if record.exc_info:
            log_entry['exception'] = self.formatException(record.exc_info)

        for key, value in record.__dict__.items():
            if key not in _RESERVED_RECORD_KEYS:
                log_entry[key] = value

        return json.dumps(log_entry, default=str)


class LoggerContextFilter(logging.Filter):
    """Ensure every record carries run_id and indicator attributes."""

    def __init__(
        self,
        run_id: str | None = None,
        indicator: str | None = None,
        *,
        is_default: bool = False,
    ) -> None:
        """Initialize the filter with optional context overrides."""
        super().__init__()
        self.run_id = run_id
        self.indicator = indicator
        self.is_default = is_default

    def filter(self, record: logging.LogRecord) -> bool:
        """Inject contextual attributes if they are missing."""
        if self.run_id is not None:
            record.run_id = self.run_id
        elif getattr(record, 'run_id', None) is None:
            record.run_id = '-'

        if self.indicator is not None:
            record.indicator = self.indicator
        elif getattr(record, 'indicator', None) is None:
            record.indicator = '-'
        return True


ROOT_LOGGER_NAME = "ta_engine"


def _normalized_logger_name(name: str) -> str:
    if not name or name == ROOT_LOGGER_NAME:
        return ROOT_LOGGER_NAME
    if name.startswith(f"{ROOT_LOGGER_NAME}."):
        return name
    return f"{ROOT_LOGGER_NAME}.{name}"


def _ensure_default_context(filterable: logging.Filterer) -> None:
    """Attach a default context filter so the format can reference run_id/indicator."""
    for existing in filterable.filters:
        if isinstance(existing, LoggerContextFilter) and existing.is_default:
            return
    filterable.addFilter(LoggerContextFilter(is_default=True))


def bind_logger_context(
    logger: logging.Logger,
    *,
    run_id: str | None = None,
    indicator: str | None = None,
) -> logging.Logger:
    """Bind contextual metadata to an existing logger instance."""
    current_run_id: str | None = None
    current_indicator: str | None = None
    for existing in list(logger.filters):
        if isinstance(existing, LoggerContextFilter) and not existing.is_default:
            current_run_id = existing.run_id
            current_indicator = existing.indicator
            logger.removeFilter(existing)

    new_run_id = run_id if run_id is not None else current_run_id
    new_indicator = indicator if indicator is not None else current_indicator

    if new_run_id is not None or new_indicator is not None:
        logger.addFilter(LoggerContextFilter(run_id=new_run_id, indicator=new_indicator))
    return logger


@contextmanager
def logger_context(
    logger: logging.Logger,
    *,
    run_id: str | None = None,
    indicator: str | None = None,
) -> Iterator[logging.Logger]:
    """Bind context for the duration of a block, then restore the previous binding."""
    previous = [
        existing
        for existing in logger.filters
        if isinstance(existing, LoggerContextFilter) and not existing.is_default
    ]
    bind_logger_context(logger, run_id=run_id, indicator=indicator)
    try:
        yield logger
    finally:
        for existing in list(logger.filters):
            if isinstance(existing, LoggerContextFilter) and not existing.is_default:
                logger.removeFilter(existing)
        for existing in previous:
            logger.addFilter(existing)


def get_engine_logger(
    name: str = ROOT_LOGGER_NAME,
    *,
    run_id: str | None = None,
    indicator: str | None = None,
    **kwargs: Any,
) -> logging.Logger:
    """Return a child of the engine root logger with contextual metadata bound."""
    root_logger = EngineLogger.get_logger(ROOT_LOGGER_NAME, **kwargs)
    normalized_name = _normalized_logger_name(name)
    if normalized_name == root_logger.name:
        target_logger = root_logger
    else:
        relative_name = normalized_name.split(f"{ROOT_LOGGER_NAME}.", 1)[1]
        target_logger = root_logger.getChild(relative_name)
        _ensure_default_context(target_logger)
    if run_id is not None or indicator is not None:
        return bind_logger_context(target_logger, run_id=run_id, indicator=indicator)
    return target_logger


class EngineLogger:
    """Cache of configured engine loggers."""

    _loggers: dict[str, logging.Logger] = {}

    @classmethod
    def get_logger(
        cls,
        name: str,
        level: str = "INFO",
        file_path: str | None = None,
        max_file_size: int = 10485760,  # 10MB
        backup_count: int = 5,
        console: bool = True,
        structured: bool = False,
    ) -> logging.Logger:
        """Get or create a logger with the specified configuration."""
        if name in cls._loggers:
            return cls._loggers[name]

        logger = logging.getLogger(name)
        logger.setLevel(getattr(logging, LogLevel(level.upper()).value))
        logger.handlers.clear()

        if structured:
            formatter: logging.Formatter = StructuredFormatter()
        else:
            formatter = logging.Formatter(
                '%(asctime)s | %(levelname)s | %(name)s | '
                'run=%(run_id)s indicator=%(indicator)s | '
                '%(module)s:%(funcName)s:%(lineno)d | %(message)s'
            )

        if console:
            console_handler = logging.StreamHandler(sys.stdout)
            console_handler.setFormatter(formatter)
            logger.addHandler(console_handler)
            _ensure_default_context(console_handler)

        if file_path:
            directory = os.path.dirname(file_path)
            if directory:
                os.makedirs(directory, exist_ok=True)

            file_handler = logging.handlers.RotatingFileHandler(
                file_path, maxBytes=max_file_size, backupCount=backup_count
            )
            file_handler.setFormatter(formatter)
            logger.addHandler(file_handler)
            _ensure_default_context(file_handler)

        _ensure_default_context(logger)

        cls._loggers[name] = logger
        return logger

    @classmethod
    def reset(cls) -> None:
        """Forget cached loggers so the next lookup reconfigures them."""
        for logger in cls._loggers.values():
            logger.handlers.clear()
        cls._loggers.clear()
