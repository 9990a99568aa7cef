"""Port: system clipboard."""

from __future__ import annotations

from typing import Protocol


class Clipboard(Protocol):
    def copy(self, text: str) -> str | None:
        """Copy *text*. Returns None on success or a fallback location for manual copy."""
        ...
