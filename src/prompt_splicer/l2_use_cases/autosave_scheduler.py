"""Autosave: periodic and debounced session saves on the running event loop."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Callable

from prompt_splicer.l1_entities.session_snapshot import SessionSnapshot
from prompt_splicer.l2_use_cases.segment_store import SegmentStore
from prompt_splicer.l2_use_cases.session_persistence import SessionPersistence

log = logging.getLogger('psp.autosave')


class AutosaveScheduler:
    """Saves the session every *interval* while segments exist, and *debounce*
    after the last prompt/segment change.

    Both triggers go through the same save path; the later one wins.
    """

    def __init__(
        self,
        store: SegmentStore,
        persistence: SessionPersistence,
        *,
        interval: float = 30.0,
        debounce: float = 2.0,
    ) -> None:
        self._store = store
        self._persistence = persistence
        self._interval = interval
        self._debounce = debounce
        self._periodic: asyncio.Task | None = None
        self._pending: asyncio.TimerHandle | None = None
        self._loop: asyncio.AbstractEventLoop | None = None
        self._running = False
        store.subscribe(self.notify_change)

    @property
    def running(self) -> bool:
        return self._running

    @property
    def has_pending_save(self) -> bool:
        return self._pending is not None

    def start(self) -> None:
        """Begin the periodic timer. Must be called from inside the event loop."""
        if self._running:
            return
        self._loop = asyncio.get_running_loop()
        self._running = True
        self._periodic = self._loop.create_task(self._periodic_loop())
        log.debug('Autosave started (interval=%ss, debounce=%ss)', self._interval, self._debounce)

    async def stop(self, *, flush: bool = True) -> None:
        """Cancel both timers; with *flush*, save once more if a debounced save was pending."""
        had_pending = self._pending is not None
        self._cancel_pending()
        self._running = False
        if self._periodic is not None:
            self._periodic.cancel()
            try:
                await self._periodic
            except asyncio.CancelledError:
                pass
            self._periodic = None
        if flush and had_pending:
            self.save_now()
        log.debug('Autosave stopped')

    def notify_change(self) -> None:
        """Restart the debounce window. Ignored while the scheduler is not running."""
        if not self._running or self._loop is None:
            return
        self._cancel_pending()
        self._pending = self._loop.call_later(self._debounce, self._on_debounce)

    def save_now(self) -> bool:
        state = self._store.state
        return self._persistence.save(SessionSnapshot.from_state(state))

    def _on_debounce(self) -> None:
        self._pending = None
        log.debug('Debounced save')
        self.save_now()

    async def _periodic_loop(self) -> None:
        while True:
            await asyncio.sleep(self._interval)
            if self._store.state.segments:
                log.debug('Periodic save')
                self.save_now()

    def _cancel_pending(self) -> None:
        if self._pending is not None:
            self._pending.cancel()
            self._pending = None
