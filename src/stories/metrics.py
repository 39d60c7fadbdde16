"""Metrics collection for best-story aggregation."""

from collections import Counter
from dataclasses import dataclass, field
from threading import Lock

from src.stories.errors import ItemFailureReason


# Module-level singleton state
_metrics_instance: "StoriesMetrics | None" = None
_metrics_lock: Lock = Lock()


@dataclass
class StoriesMetrics:
    """Thread-safe counters for cache and upstream activity.

    Use get_instance() for singleton access.
    """

    _lock: Lock = field(default_factory=Lock, repr=False, compare=False)

    cache_hits_by_tier: Counter[str] = field(default_factory=Counter)
    cache_misses_by_tier: Counter[str] = field(default_factory=Counter)
    item_failures_by_reason: Counter[str] = field(default_factory=Counter)
    list_failures_total: int = 0
    requests_total: int = 0
    stories_returned_total: int = 0

    @classmethod
    def get_instance(cls) -> "StoriesMetrics":
        """Get the singleton instance (thread-safe).

        Returns:
            The shared StoriesMetrics instance.
        """
        global _metrics_instance  # noqa: PLW0603
        if _metrics_instance is None:
            with _metrics_lock:
                if _metrics_instance is None:
                    _metrics_instance = cls()
        return _metrics_instance

    @classmethod
    def reset(cls) -> None:
        """Reset the singleton instance (for testing)."""
        global _metrics_instance  # noqa: PLW0603
        with _metrics_lock:
            _metrics_instance = None

    def record_cache_hit(self, tier: str) -> None:
        """Record a cache hit for a tier (``ids`` or ``item``)."""
        with self._lock:
            self.cache_hits_by_tier[tier] += 1

    def record_cache_miss(self, tier: str) -> None:
        """Record a cache miss for a tier. Each miss is one upstream call."""
        with self._lock:
            self.cache_misses_by_tier[tier] += 1

    def record_item_failure(self, reason: ItemFailureReason) -> None:
        """Record a dropped item.

        Args:
            reason: Why the item was dropped.
        """
        with self._lock:
            self.item_failures_by_reason[reason.value] += 1

    def record_list_failure(self) -> None:
        """Record a failed ID list fetch."""
        with self._lock:
            self.list_failures_total += 1

    def record_request(self, stories_returned: int) -> None:
        """Record a completed aggregation.

        Args:
            stories_returned: Number of stories in the result.
        """
        with self._lock:
            self.requests_total += 1
            self.stories_returned_total += stories_returned

    def to_dict(self) -> dict[str, int | dict[str, int]]:
        """Convert metrics to dictionary.

        Returns:
            Dictionary of metric name to value.
        """
        with self._lock:
            return {
                "cache_hits_by_tier": dict(self.cache_hits_by_tier),
                "cache_misses_by_tier": dict(self.cache_misses_by_tier),
                "item_failures_by_reason": dict(self.item_failures_by_reason),
                "list_failures_total": self.list_failures_total,
                "requests_total": self.requests_total,
                "stories_returned_total": self.stories_returned_total,
            }
