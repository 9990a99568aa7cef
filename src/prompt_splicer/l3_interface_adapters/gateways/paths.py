"""Shared path constants for configuration and stored data."""

from __future__ import annotations

from platformdirs import user_config_path, user_data_path

CONFIG_DIR = user_config_path('prompt-splicer')
DATA_DIR = user_data_path('prompt-splicer')
STORE_DIR = DATA_DIR / 'store'

DEFAULT_CONFIG_PATHS = [
    CONFIG_DIR / 'config.yaml',
    CONFIG_DIR / 'config.yml',
]
