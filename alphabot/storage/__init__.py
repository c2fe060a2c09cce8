"""Storage layer."""

from alphabot.storage.expiring_cache import CacheEntry, ExpiringCache, monotonic_ms

__all__ = [
    "CacheEntry",
    "ExpiringCache",
    "monotonic_ms",
]
