"""In-memory TTL cache for upstream lookups."""

from __future__ import annotations

import time
from collections.abc import Callable
from typing import Generic, TypeVar

T = TypeVar("T")


class TTLCache(Generic[T]):
    """Key/value store whose entries expire ``ttl_seconds`` after being set."""

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic) -> None:
        self._ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[float, T]] = {}

    def get(self, key: str) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        stored_at, value = entry
        if self._clock() - stored_at > self._ttl_seconds:
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: T) -> None:
        now = self._clock()
        expired = [name for name, (stored_at, _) in self._entries.items() if now - stored_at > self._ttl_seconds]
        for name in expired:
            del self._entries[name]
        self._entries[key] = (now, value)

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
