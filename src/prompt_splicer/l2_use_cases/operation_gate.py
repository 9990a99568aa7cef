"""Single-slot gate admitting one outstanding AI operation at a time."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import contextmanager

from prompt_splicer.l1_entities.errors import OperationBusyError

log = logging.getLogger('psp.controller')


class OperationGate:
    """Rejects a second operation while one is in flight (reject, not queue)."""

    def __init__(self) -> None:
        self._active: str | None = None

    @property
    def busy(self) -> bool:
        return self._active is not None

    @property
    def active(self) -> str | None:
        return self._active

    @contextmanager
    def hold(self, name: str) -> Iterator[None]:
        if self._active is not None:
            log.info('Rejected %s: %s still running', name, self._active)
            raise OperationBusyError(f'Cannot start {name}: {self._active} is still running')
        self._active = name
        try:
            yield
        finally:
            self._active = None
