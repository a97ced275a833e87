"""YAML loading and payload merging for engine configuration files."""

from __future__ import annotations

import os
from collections.abc import Mapping, MutableMapping
from pathlib import Path
from typing import Any, cast

import yaml

from ta_engine.core.errors import ConfigurationError


class ConfigSourceError(ConfigurationError):
    """Raised when a config source cannot be resolved or parsed."""


class ConfigProcessor:
    """Read YAML configuration payloads and merge override layers."""

    def load_yaml(self, path: str | Path) -> Mapping[str, Any]:
        """Read a YAML file and return its mapping payload."""
        resolved_path = Path(path).expanduser()
        if not resolved_path.is_file():
            raise ConfigSourceError(f"Config file not found: {resolved_path}")

        with resolved_path.open("r", encoding="utf-8") as handle:
            try:
                data = yaml.safe_load(handle) or {}
            except yaml.YAMLError as exc:
                raise ConfigSourceError(f"Invalid YAML in {resolved_path}: {exc}") from exc

        if not isinstance(data, MutableMapping):
            raise ConfigSourceError(f"YAML root must be a mapping: {resolved_path}")

        return dict(data)

    @staticmethod
    def deep_merge(
        base: Mapping[str, Any],
        update: Mapping[str, Any],
    ) -> dict[str, Any]:
        """Return ``base`` with ``update`` merged in, recursing into nested mappings."""
        merged: dict[str, Any] = dict(base)
        for key, value in update.items():
            if isinstance(value, Mapping) and isinstance(merged.get(key), Mapping):
                nested_base = cast(Mapping[str, Any], merged[key])
                merged[key] = ConfigProcessor.deep_merge(
                    nested_base,
                    cast(Mapping[str, Any], value),
                )
            else:
                merged[key] = value
        return merged

    @staticmethod
    def path_from_source(source: Any) -> Path | None:
        """Interpret ``source`` as a YAML path when it looks like one."""
        if isinstance(source, (str, bytes)):
            candidate = Path(os.fsdecode(source)).expanduser()
        elif isinstance(source, Path):
            candidate = source.expanduser()
        else:
            return None

        if candidate.is_file():
            return candidate
        if candidate.suffix.lower() in {".yml", ".yaml"}:
            return candidate
        return None
