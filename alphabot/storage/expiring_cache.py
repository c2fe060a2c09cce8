"""In-memory key/value cache with per-entry expiry.

Entries expire lazily: an expired entry is dropped when it is read.
There is no background sweep and no size-based eviction. Each fetcher owns
its own cache and chooses the TTL per call type.
"""

from __future__ import annotations

import logging
import time
from dataclasses import dataclass
from typing import Callable, Generic, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


def monotonic_ms() -> int:
    """Monotonic clock in milliseconds."""
    return int(time.monotonic() * 1000)


@dataclass(frozen=True)
class CacheEntry(Generic[T]):
    """Cached value and its absolute expiry time (ms)."""

    value: T
    expiry: int


class ExpiringCache(Generic[T]):
    """Key/value store with lazy expiry-on-read.

    All operations are synchronous dict operations, so they are atomic with
    respect to other coroutines on the same event loop.
    """

    def __init__(self, clock: Callable[[], int] = monotonic_ms):
        self._clock = clock
        self._entries: dict[str, CacheEntry[T]] = {}

    def get(self, key: str) -> T | None:
        """Return the cached value, or None if absent or expired."""
        entry = self._entries.get(key)
        if entry is None:
            return None
        if self._clock() > entry.expiry:
            # Only drop the entry we inspected; a concurrent set may have replaced it
            if self._entries.get(key) is entry:
                del self._entries[key]
            logger.debug("Cache entry expired: %s", key)
            return None
        return entry.value

    def set(self, key: str, value: T, ttl_ms: int) -> None:
        """Store a value that expires ``ttl_ms`` milliseconds from now."""
        self._entries[key] = CacheEntry(value=value, expiry=self._clock() + ttl_ms)

    def delete(self, key: str) -> bool:
        """Remove an entry; returns True if it existed."""
        return self._entries.pop(key, None) is not None

    def clear(self) -> None:
        self._entries.clear()

    def __len__(self) -> int:
        return len(self._entries)
