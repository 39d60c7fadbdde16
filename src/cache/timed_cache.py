"""Thread-safe key/value cache with per-entry absolute expiration."""

import threading
import time
from collections.abc import Callable
from dataclasses import dataclass
from typing import Any


@dataclass(frozen=True)
class CacheEntry:
    """A cached value and the clock instant at which it stops being served."""

    value: Any
    expires_at: float

    def is_expired(self, now: float) -> bool:
        """Check whether the entry is expired at ``now``.

        Args:
            now: Current clock reading.

        Returns:
            True once ``now`` has reached the expiration instant.
        """
        return now >= self.expires_at


class TimedCache:
    """Key/value store where each entry expires a fixed time after it was set.

    Expiry is checked on read: an expired entry is dropped and reported as a
    miss. There is no capacity bound and no background sweep.

    Safe for concurrent ``get``/``set`` from worker threads.
    """

    def __init__(self, clock: Callable[[], float] = time.monotonic) -> None:
        """Initialize an empty cache.

        Args:
            clock: Monotonic clock returning seconds (injectable for tests).
        """
        self._clock = clock
        self._entries: dict[str, CacheEntry] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        """Return the live value for ``key``, or ``default`` on a miss.

        Args:
            key: Cache key.
            default: Value returned when the key is absent or expired.

        Returns:
            The cached value, or ``default``.
        """
        with self._lock:
            entry = self._entries.get(key)
            if entry is None:
                return default
            if entry.is_expired(self._clock()):
                del self._entries[key]
                return default
            return entry.value

    def set(self, key: str, value: Any, ttl_seconds: float) -> None:
        """Store ``value`` under ``key``, replacing any previous entry.

        Args:
            key: Cache key.
            value: Value to store.
            ttl_seconds: Lifetime of the entry in seconds.

        Raises:
            ValueError: If ``ttl_seconds`` is not positive.
        """
        if ttl_seconds <= 0:
            msg = f"ttl_seconds must be positive, got {ttl_seconds}"
            raise ValueError(msg)

        with self._lock:
            self._entries[key] = CacheEntry(
                value=value,
                expires_at=self._clock() + ttl_seconds,
            )

    def invalidate(self, key: str) -> None:
        """Remove ``key`` if present."""
        with self._lock:
            self._entries.pop(key, None)

    def clear(self) -> None:
        """Remove every entry."""
        with self._lock:
            self._entries.clear()

    def __len__(self) -> int:
        # Counts stored entries, expired ones not yet read included.
        with self._lock:
            return len(self._entries)
