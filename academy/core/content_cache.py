"""In-memory TTL cache for resolved day content."""

import time
from collections.abc import Callable
from typing import Generic, TypeVar

from academy.core.logging import get_logger

logger = get_logger(__name__)

T = TypeVar("T")


class TTLCache(Generic[T]):
    """
    Expiring key/value map owned by a single process.

    Entries older than ``ttl_seconds`` are treated as misses and dropped on
    read. There is no size bound; invalidation is explicit.
    """

    def __init__(self, ttl_seconds: float, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._entries: dict[str, tuple[T, float]] = {}

    def get(self, key: str) -> T | None:
        entry = self._entries.get(key)
        if entry is None:
            return None
        value, stored_at = entry
        if self._clock() - stored_at >= self.ttl_seconds:
            logger.debug(f"Cache entry expired: {key}")
            del self._entries[key]
            return None
        return value

    def set(self, key: str, value: T) -> None:
        self._entries[key] = (value, self._clock())

    def invalidate(self, key: str) -> bool:
        """Drop one entry. Returns True if it was present."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> int:
        """Drop every entry. Returns the number removed."""
        count = len(self._entries)
        self._entries.clear()
        return count

    def __len__(self) -> int:
        return len(self._entries)
