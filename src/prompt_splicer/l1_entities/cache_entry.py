"""Cached AI-operation result."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel


class CacheEntry(BaseModel):
    """Stored payload plus its creation instant (epoch seconds)."""

    key: str
    data: Any
    timestamp: float

    def is_valid(self, now: float, ttl_seconds: float) -> bool:
        return now - self.timestamp < ttl_seconds
