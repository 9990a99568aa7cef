"""Content-addressed, time-expiring cache of AI-operation results.

Entries live in the key-value store (one JSON record per key) so they survive
restarts. An in-process LRU index bounds how many records are kept; storage
failures are logged and reported as misses.
"""

from __future__ import annotations

import hashlib
import json
import logging
import time
from collections import OrderedDict
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any

from pydantic import ValidationError

from prompt_splicer.l1_entities.cache_entry import CacheEntry
from prompt_splicer.l1_entities.errors import CacheIOError
from prompt_splicer.l2_use_cases.ports.key_value_store import KeyValueStore

log = logging.getLogger('psp.cache')

CACHE_PREFIX = 'prompt-splicer-cache-'
DEFAULT_TTL_SECONDS = 24 * 60 * 60
DEFAULT_MAX_ENTRIES = 256


def content_hash(text: str) -> str:
    """64-bit fingerprint of *text* as 16 hex digits. Collisions only serve a stale result."""
    return hashlib.blake2b(text.encode('utf-8'), digest_size=8).hexdigest()


def make_cache_key(operation: str, text: str) -> str:
    return f'{CACHE_PREFIX}{operation}-{content_hash(text)}'


@dataclass
class CacheStats:
    hits: int = 0
    misses: int = 0
    expirations: int = 0
    evictions: int = 0
    errors: int = 0


class ResultCache:
    """TTL-expiring, LRU-bounded cache. Never raises storage errors to callers."""

    def __init__(
        self,
        store: KeyValueStore,
        *,
        ttl_seconds: float = DEFAULT_TTL_SECONDS,
        max_entries: int = DEFAULT_MAX_ENTRIES,
        clock: Callable[[], float] = time.time,
    ) -> None:
        self._store = store
        self._ttl = ttl_seconds
        self._max_entries = max_entries
        self._clock = clock
        self._lru: OrderedDict[str, None] = OrderedDict()
        self.stats = CacheStats()
        self._index_existing()

    def __len__(self) -> int:
        return len(self._lru)

    def __contains__(self, key: str) -> bool:
        return key in self._lru

    def get(self, key: str) -> Any | None:
        """Return the cached payload, or None on miss. Expired entries are evicted."""
        try:
            entry = self._read(key)
        except CacheIOError as e:
            self.stats.errors += 1
            self.stats.misses += 1
            log.warning('Cache read error for %s: %s', key, e)
            self._discard(key)
            return None

        if entry is None:
            self.stats.misses += 1
            self._lru.pop(key, None)
            return None

        if not entry.is_valid(self._clock(), self._ttl):
            self.stats.expirations += 1
            self.stats.misses += 1
            log.debug('Cache entry expired: %s', key)
            self._discard(key)
            return None

        self.stats.hits += 1
        self._touch(key)
        return entry.data

    def set(self, key: str, payload: Any) -> None:
        """Store *payload* stamped with the current time, overwriting any prior entry."""
        entry = CacheEntry(key=key, data=payload, timestamp=self._clock())
        try:
            self._store.set(key, json.dumps({'data': entry.data, 'timestamp': entry.timestamp}))
        except (OSError, TypeError, ValueError) as e:
            self.stats.errors += 1
            log.warning('Cache write error for %s: %s', key, e)
            return

        self._touch(key)

    def clear(self) -> int:
        """Remove every cache record. Returns how many were removed."""
        keys = set(self._lru)
        try:
            keys.update(self._store.keys(CACHE_PREFIX))
        except OSError as e:
            log.warning('Cache listing failed during clear: %s', e)
        for key in keys:
            self._remove_quietly(key)
        self._lru.clear()
        log.info('Cache cleared (%d entries)', len(keys))
        return len(keys)

    # --- internals ---

    def _read(self, key: str) -> CacheEntry | None:
        try:
            raw = self._store.get(key)
        except OSError as e:
            raise CacheIOError(str(e)) from e
        if raw is None:
            return None
        try:
            record = json.loads(raw)
            return CacheEntry(key=key, data=record['data'], timestamp=record['timestamp'])
        except (ValueError, KeyError, TypeError, ValidationError) as e:
            raise CacheIOError(f'corrupt record: {e}') from e

    def _touch(self, key: str) -> None:
        """Mark *key* most recently used and evict beyond capacity."""
        self._lru[key] = None
        self._lru.move_to_end(key)
        while len(self._lru) > self._max_entries:
            oldest, _ = self._lru.popitem(last=False)
            self.stats.evictions += 1
            log.debug('Cache evicted LRU entry %s', oldest)
            self._remove_quietly(oldest)

    def _discard(self, key: str) -> None:
        self._lru.pop(key, None)
        self._remove_quietly(key)

    def _remove_quietly(self, key: str) -> None:
        try:
            self._store.remove(key)
        except OSError as e:
            self.stats.errors += 1
            log.warning('Cache remove error for %s: %s', key, e)

    def _index_existing(self) -> None:
        """Seed the LRU index from stored records, oldest first; drop expired or corrupt ones."""
        try:
            keys = self._store.keys(CACHE_PREFIX)
        except OSError as e:
            log.warning('Cache index unavailable: %s', e)
            return

        now = self._clock()
        live: list[tuple[float, str]] = []
        for key in keys:
            try:
                entry = self._read(key)
            except CacheIOError:
                self._remove_quietly(key)
                continue
            if entry is None:
                continue
            if entry.is_valid(now, self._ttl):
                live.append((entry.timestamp, key))
            else:
                self._remove_quietly(key)

        for _, key in sorted(live):
            self._lru[key] = None
        while len(self._lru) > self._max_entries:
            oldest, _ = self._lru.popitem(last=False)
            self._remove_quietly(oldest)
        log.debug('Cache index seeded with %d entries', len(self._lru))
