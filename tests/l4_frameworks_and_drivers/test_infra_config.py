"""Tests for infra config and app config defaults."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from prompt_splicer.l4_frameworks_and_drivers.infra_config import APP_CONFIG_DEFAULTS, InfraConfig, build_app_config


class TestBuildAppConfig:
    def test_defaults(self):
        config = build_app_config({})
        assert config.cache.ttl_seconds == 86400
        assert config.cache.max_entries == 256
        assert config.autosave.interval_seconds == 30.0
        assert config.autosave.debounce_seconds == 2.0
        assert config.provider.model == 'gpt-5-mini'
        assert config.output.export_filename == 'prompt-output.txt'

    def test_partial_override_keeps_siblings(self):
        config = build_app_config({'cache': {'max_entries': 10}})
        assert config.cache.max_entries == 10
        assert config.cache.ttl_seconds == 86400

    def test_defaults_not_mutated(self):
        build_app_config({'provider': {'model': 'gpt-4o-mini'}})
        assert APP_CONFIG_DEFAULTS['provider']['model'] == 'gpt-5-mini'

    def test_infra_sections_ignored(self):
        config = build_app_config({'openai': {'api_key': 'sk-x'}, 'storage': {'directory': '/tmp/x'}})
        assert config.provider.model == 'gpt-5-mini'

    def test_invalid_value_rejected(self):
        with pytest.raises(ValidationError):
            build_app_config({'cache': {'ttl_seconds': 0}})

    def test_unknown_model_rejected(self):
        with pytest.raises(ValidationError, match='Unknown model: gpt-4'):
            build_app_config({'provider': {'model': 'gpt-4'}})


class TestInfraConfig:
    def test_defaults(self):
        infra = InfraConfig()
        assert infra.openai.api_key is None
        assert infra.openai.base_url == 'https://api.openai.com/v1'
        assert infra.storage.directory is None

    def test_from_raw(self):
        infra = InfraConfig.model_validate(
            {'openai': {'api_key': 'sk-x', 'base_url': 'http://localhost:8080/v1'}, 'cache': {'ttl_seconds': 5}}
        )
        assert infra.openai.api_key == 'sk-x'
        assert infra.openai.base_url == 'http://localhost:8080/v1'
