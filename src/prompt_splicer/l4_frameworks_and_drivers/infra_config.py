"""Infrastructure provider configs — lives in L4, not domain."""

from __future__ import annotations

import copy

from pydantic import BaseModel, Field

from prompt_splicer.l1_entities.config import AppConfig
from prompt_splicer.l3_interface_adapters.gateways.yaml_config_loader import deep_merge

APP_CONFIG_DEFAULTS: dict = {
    'cache': {
        'ttl_seconds': 24 * 60 * 60,
        'max_entries': 256,
    },
    'autosave': {
        'interval_seconds': 30.0,
        'debounce_seconds': 2.0,
    },
    'provider': {
        'model': 'gpt-5-mini',
        'timeout_seconds': 120.0,
    },
    'output': {
        'directory': '.',
        'export_filename': 'prompt-output.txt',
    },
}


def build_app_config(raw: dict) -> AppConfig:
    """Merge *raw* user overrides on top of defaults, then validate."""
    merged = copy.deepcopy(APP_CONFIG_DEFAULTS)
    deep_merge(merged, raw)
    return AppConfig.model_validate(merged)


class OpenAIProviderConfig(BaseModel):
    api_key: str | None = None  # None → stored credentials, then OPENAI_API_KEY env
    base_url: str = 'https://api.openai.com/v1'


class StorageConfig(BaseModel):
    directory: str | None = None  # None → platformdirs user data dir


class InfraConfig(BaseModel):
    """Groups all provider-specific settings outside the domain layer."""

    openai: OpenAIProviderConfig = Field(default_factory=OpenAIProviderConfig)
    storage: StorageConfig = Field(default_factory=StorageConfig)
