"""In-process cache with per-entry absolute expiration."""

from src.cache.timed_cache import CacheEntry, TimedCache


__all__ = [
    "CacheEntry",
    "TimedCache",
]
