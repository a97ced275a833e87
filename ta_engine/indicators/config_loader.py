"""Indicator configuration loading helpers.

This module centralises loading IndicatorConfig instances from dictionaries,
YAML preset files shipped under ``ta_engine/indicators/presets``, or shorthand
preset names.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from pathlib import Path
from typing import Any

from ta_engine.core.config_processor import ConfigProcessor, ConfigSourceError
from ta_engine.indicators.indicator_configs import IndicatorConfig

PRESET_ROOT = Path(__file__).resolve().parent / "presets"

_RESERVED_KEYS = frozenset({'config_path', 'preset', 'preset_name', 'overrides'})


class IndicatorConfigResolver:
    """Resolve indicator configuration definitions into IndicatorConfig instances."""

    def __init__(
        self,
        *,
        processor: ConfigProcessor | None = None,
        search_paths: Sequence[Path] | None = None,
    ) -> None:
        """Initialise the resolver with optional custom processor and search paths."""
        self._processor = processor or ConfigProcessor()
        self._search_paths = list(search_paths or ()) + [PRESET_ROOT]

    def resolve(self, definition: Any) -> IndicatorConfig:
        """Resolve any supported definition into an IndicatorConfig.

        Args:
            definition: An IndicatorConfig, a mapping (optionally naming a
                ``preset``/``config_path`` plus ``overrides``), or a preset name/path

        Raises:
            ConfigurationError: If the source cannot be found or the payload is invalid
        """
        if isinstance(definition, IndicatorConfig):
            return definition.model_copy(deep=True)

        payload: Mapping[str, Any]
        if isinstance(definition, Mapping):
            payload = self._resolve_mapping(definition)
        elif isinstance(definition, (str, Path)):
            payload = self._load_from_identifier(definition)
        else:
            raise ConfigSourceError(
                "Indicator definitions must be IndicatorConfig, mapping, or preset string",
                component="indicator_config",
            )

        return IndicatorConfig.build(**dict(payload))

    def available_presets(self) -> list[str]:
        """Return the preset names found on the search paths."""
        names: set[str] = set()
        for root in self._search_paths:
            if root.is_dir():
                names.update(path.stem for path in root.glob('*.y*ml'))
        return sorted(names)

    # ------------------------------------------------------------------#
    # Internal helpers
    # ------------------------------------------------------------------#
    def _resolve_mapping(self, definition: Mapping[str, Any]) -> Mapping[str, Any]:
        config_path = definition.get('config_path')
        preset = definition.get('preset') or definition.get('preset_name')
        overrides_section = definition.get('overrides') or {}

        inline_overrides = {
            key: value for key, value in definition.items() if key not in _RESERVED_KEYS
        }

        identifier = config_path or preset
        payload: dict[str, Any] = dict(self._load_from_identifier(identifier)) if identifier else {}

        if inline_overrides:
            payload = ConfigProcessor.deep_merge(payload, inline_overrides)
        if isinstance(overrides_section, Mapping) and overrides_section:
            payload = ConfigProcessor.deep_merge(payload, dict(overrides_section))

        return payload

    def _load_from_identifier(self, identifier: str | Path) -> Mapping[str, Any]:
        path = self._resolve_path(identifier)
        data = dict(self._processor.load_yaml(path))
        meta = data.pop('__config_class__', None)
        if meta is not None and meta != 'IndicatorConfig':
            raise ConfigSourceError(
                f"Expected IndicatorConfig payload, received {meta} (file={path})",
            )
        return data

    def _resolve_path(self, identifier: str | Path) -> Path:
        direct = ConfigProcessor.path_from_source(identifier)
        if direct is not None and direct.is_file():
            return direct

        raw = Path(identifier)
        candidates: list[Path] = []

        def _append(path: Path) -> None:
            if path not in candidates:
                candidates.append(path)

        if raw.suffix.lower() in {'.yml', '.yaml'}:
            _append(raw)
        else:
            _append(raw.with_name(f"{raw.name}.yaml"))
            _append(raw.with_name(f"{raw.name}.yml"))

        for candidate in list(candidates):
            if candidate.is_absolute():
                continue
            _append(Path.cwd() / candidate)
            for root in self._search_paths:
                _append(root / candidate)

        for candidate in candidates:
            if candidate.is_file():
                return candidate

        raise ConfigSourceError(f"Indicator config file not found: {identifier}")
