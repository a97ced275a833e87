"""Exception hierarchy shared by every layer of the indicator engine.

Configuration problems are raised eagerly while a pipeline is being built.
Degenerate arithmetic and cold-start conditions are resolved locally by the
formulas themselves and never surface as exceptions.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import Any


class EngineError(Exception):
    """Base exception for indicator engine failures."""


class ConfigurationError(EngineError, ValueError):
    """Raised when an indicator, window, or input is configured incorrectly."""

    def __init__(
        self,
        message: str,
        *,
        component: str | None = None,
        errors: Sequence[Any] | None = None,
    ) -> None:
        """Capture the failing component and any validation details."""
        context = []
        if component:
            context.append(f"component={component}")
        if errors:
            context.append(f"errors={list(errors)}")
        suffix = f" ({', '.join(context)})" if context else ""
        super().__init__(f"{message}{suffix}")
        self.component = component
        self.errors = errors


class CalculationError(EngineError):
    """Raised when a computed result cannot be consumed the way it was requested."""
