"""Gateway: stored user preferences — provider credentials and the theme flag."""

from __future__ import annotations

import json
import logging
from typing import Literal

from pydantic import ValidationError

from prompt_splicer.l1_entities.credentials import ProviderCredentials
from prompt_splicer.l2_use_cases.ports.key_value_store import KeyValueStore

log = logging.getLogger('psp.kv')

CREDENTIALS_KEY = 'openai-credentials'
THEME_KEY = 'prompt-editor-theme'

Theme = Literal['dark', 'light']


class PreferencesRepository:
    def __init__(self, store: KeyValueStore) -> None:
        self._store = store

    def load_credentials(self) -> ProviderCredentials | None:
        try:
            raw = self._store.get(CREDENTIALS_KEY)
            if raw is None:
                return None
            return ProviderCredentials.model_validate(json.loads(raw))
        except (OSError, ValueError, ValidationError) as e:
            log.warning('Stored credentials unreadable, ignoring: %s', e)
            return None

    def save_credentials(self, credentials: ProviderCredentials) -> None:
        self._store.set(CREDENTIALS_KEY, credentials.model_dump_json())

    def clear_credentials(self) -> None:
        self._store.remove(CREDENTIALS_KEY)

    def theme(self) -> Theme:
        """Stored theme; dark unless light was chosen."""
        try:
            stored = self._store.get(THEME_KEY)
        except OSError as e:
            log.warning('Stored theme unreadable, using dark: %s', e)
            return 'dark'
        return 'light' if stored == 'light' else 'dark'

    def set_theme(self, theme: Theme) -> None:
        if theme not in ('dark', 'light'):
            raise ValueError(f'Unknown theme: {theme}')
        self._store.set(THEME_KEY, theme)
