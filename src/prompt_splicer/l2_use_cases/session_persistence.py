"""Use case: save and restore the durable part of a session."""

from __future__ import annotations

import json
import logging

from pydantic import ValidationError

from prompt_splicer.l1_entities.errors import PersistenceError
from prompt_splicer.l1_entities.session_snapshot import SessionSnapshot
from prompt_splicer.l2_use_cases.ports.key_value_store import KeyValueStore

log = logging.getLogger('psp.persist')

SESSION_KEY = 'prompt-editor-session'


class SessionPersistence:
    """Last-write-wins snapshot under one fixed key. Failures are logged, never raised."""

    def __init__(self, store: KeyValueStore, key: str = SESSION_KEY) -> None:
        self._store = store
        self._key = key
        self.save_count = 0

    def save(self, snapshot: SessionSnapshot) -> bool:
        """Write *snapshot*. Returns False if storage rejected it."""
        try:
            self._write(snapshot)
        except PersistenceError as e:
            log.warning('Session save failed: %s', e)
            return False
        self.save_count += 1
        log.debug(
            'Session saved (%d segments, %d prompt chars)',
            len(snapshot.segments),
            len(snapshot.original_prompt),
        )
        return True

    def load(self) -> SessionSnapshot | None:
        """Read the stored snapshot; None if absent or unreadable."""
        try:
            return self._read()
        except PersistenceError as e:
            log.warning('Session load failed, starting fresh: %s', e)
            return None

    def clear(self) -> None:
        try:
            self._store.remove(self._key)
        except OSError as e:
            log.warning('Session clear failed: %s', e)

    def _write(self, snapshot: SessionSnapshot) -> None:
        try:
            payload = snapshot.to_json()
        except ValueError as e:
            # PydanticSerializationError, e.g. a lone surrogate in the prompt
            raise PersistenceError(f'session not serializable: {e}') from e
        try:
            self._store.set(self._key, payload)
        except OSError as e:
            raise PersistenceError(str(e)) from e

    def _read(self) -> SessionSnapshot | None:
        try:
            raw = self._store.get(self._key)
        except OSError as e:
            raise PersistenceError(str(e)) from e
        if raw is None:
            return None
        try:
            data = json.loads(raw)
            if not isinstance(data, dict):
                raise PersistenceError('session record is not an object')
            data = {
                'originalPrompt': data.get('originalPrompt') or '',
                'segments': data.get('segments') or [],
                'savedAt': data.get('savedAt') or data.get('timestamp') or 0.0,
            }
            return SessionSnapshot.model_validate(data)
        except (ValueError, ValidationError) as e:
            raise PersistenceError(f'corrupt session record: {e}') from e
