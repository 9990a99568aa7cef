"""Port: string-keyed persistent store."""

from __future__ import annotations

from typing import Protocol


class KeyValueStore(Protocol):
    """Single-key atomic get/set/remove. Implementations may raise OSError."""

    def get(self, key: str) -> str | None:
        """Return the stored value, or None if absent."""
        ...

    def set(self, key: str, value: str) -> None:
        """Store *value* under *key*, overwriting any prior value."""
        ...

    def remove(self, key: str) -> None:
        """Delete *key*; absent keys are ignored."""
        ...

    def keys(self, prefix: str = '') -> list[str]:
        """List stored keys starting with *prefix*."""
        ...
