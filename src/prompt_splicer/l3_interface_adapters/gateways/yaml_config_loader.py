"""Gateway: YAML configuration loader."""

from __future__ import annotations

import os
from collections.abc import Sequence
from pathlib import Path

import yaml

from prompt_splicer.l3_interface_adapters.gateways.paths import DEFAULT_CONFIG_PATHS

CONFIG_ENV_VAR = 'PROMPT_SPLICER_CONFIG'


class YamlConfigLoader:
    """Reads one YAML mapping and deep-merges CLI overrides on top.

    Resolution order for the file: explicit path, then ``$PROMPT_SPLICER_CONFIG``,
    then the first existing file in *search_paths*. No file at all is not an error.
    """

    def __init__(self, search_paths: Sequence[Path] = DEFAULT_CONFIG_PATHS) -> None:
        self._search_paths = list(search_paths)

    def resolve_path(self, config_path: str | None = None) -> Path | None:
        explicit = config_path or os.environ.get(CONFIG_ENV_VAR)
        if explicit:
            path = Path(explicit).expanduser()
            if not path.exists():
                raise FileNotFoundError(f'Config file not found: {path}')
            return path
        return next((p for p in self._search_paths if p.exists()), None)

    def load_raw(
        self,
        config_path: str | None = None,
        overrides: dict | None = None,
    ) -> dict:
        """Merged data as a plain dict, before validation."""
        data: dict = {}
        path = self.resolve_path(config_path)
        if path is not None:
            deep_merge(data, _read_mapping(path))
        if overrides:
            deep_merge(data, overrides)
        return data


def _read_mapping(path: Path) -> dict:
    data = yaml.safe_load(path.read_text(encoding='utf-8'))
    if data is None:
        return {}
    if not isinstance(data, dict):
        raise ValueError(f'Config root must be a mapping: {path}')
    return data


def deep_merge(base: dict, override: dict) -> dict:
    """Recursively merge *override* into *base* (mutates base)."""
    for key, value in override.items():
        if isinstance(base.get(key), dict) and isinstance(value, dict):
            deep_merge(base[key], value)
        else:
            base[key] = value
    return base
