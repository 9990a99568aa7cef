"""Gateway: file-backed key-value store — implements KeyValueStore port.

One file per key; values are written to a temp file and renamed into place so
each key is replaced atomically.
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from urllib.parse import quote, unquote

log = logging.getLogger('psp.kv')

_SUFFIX = '.json'


class FileKeyValueStore:
    """Stores each key as ``<dir>/<percent-encoded key>.json``."""

    def __init__(self, directory: Path) -> None:
        self._dir = directory
        self._dir.mkdir(parents=True, exist_ok=True)

    @property
    def directory(self) -> Path:
        return self._dir

    def _path(self, key: str) -> Path:
        return self._dir / (quote(key, safe='-_.') + _SUFFIX)

    def get(self, key: str) -> str | None:
        path = self._path(key)
        try:
            return path.read_text(encoding='utf-8')
        except FileNotFoundError:
            return None
        except UnicodeDecodeError as e:
            raise OSError(f'{path.name} is not valid UTF-8: {e.reason}') from e

    def set(self, key: str, value: str) -> None:
        path = self._path(key)
        tmp = path.with_name(path.name + '.tmp')
        try:
            data = value.encode('utf-8')
        except UnicodeEncodeError as e:
            raise OSError(f'{key} value is not encodable as UTF-8: {e.reason}') from e
        tmp.write_bytes(data)
        os.replace(tmp, path)
        log.debug('Wrote %s (%d chars)', key, len(value))

    def remove(self, key: str) -> None:
        self._path(key).unlink(missing_ok=True)

    def keys(self, prefix: str = '') -> list[str]:
        found = []
        for path in self._dir.glob(f'*{_SUFFIX}'):
            key = unquote(path.name[: -len(_SUFFIX)])
            if key.startswith(prefix):
                found.append(key)
        return sorted(found)
