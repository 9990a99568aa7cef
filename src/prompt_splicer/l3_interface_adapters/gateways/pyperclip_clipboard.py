"""Gateway: system clipboard via pyperclip, with a manual-copy file fallback."""

from __future__ import annotations

import logging
from pathlib import Path

import pyperclip

log = logging.getLogger('psp.controller')

FALLBACK_FILENAME = 'clipboard-fallback.txt'


class PyperclipClipboard:
    """Copies text to the system clipboard.

    When no clipboard mechanism is available the text is written to
    *fallback_dir* for the user to copy by hand and that path is returned.
    """

    def __init__(self, fallback_dir: Path) -> None:
        self._fallback_dir = fallback_dir

    def copy(self, text: str) -> str | None:
        try:
            pyperclip.copy(text)
            return None
        except pyperclip.PyperclipException as e:
            log.info('Clipboard unavailable (%s), writing fallback file', e)

        try:
            self._fallback_dir.mkdir(parents=True, exist_ok=True)
            path = self._fallback_dir / FALLBACK_FILENAME
            path.write_text(text, encoding='utf-8')
        except OSError as e:
            log.warning('Clipboard fallback failed: %s', e)
            return None
        return str(path)
