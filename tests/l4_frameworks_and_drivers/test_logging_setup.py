"""Tests for file logging setup."""

from __future__ import annotations

import logging
from pathlib import Path

from prompt_splicer.l4_frameworks_and_drivers.logging_setup import setup_file_logging


def test_writes_log_file(tmp_path: Path):
    root = logging.getLogger('psp')
    before = list(root.handlers)
    try:
        path = setup_file_logging(tmp_path / 'logs')
        logging.getLogger('psp.cache').warning('cache write error')
        for handler in root.handlers:
            handler.flush()
        text = path.read_text(encoding='utf-8')
        assert 'cache write error' in text
        assert 'psp.cache' in text
    finally:
        for handler in root.handlers[len(before) :]:
            handler.close()
            root.removeHandler(handler)
