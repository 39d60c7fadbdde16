"""Resolve one item ID to a normalized story through the item cache."""

import structlog
from pydantic import ValidationError

from src.cache.timed_cache import TimedCache
from src.stories.constants import DEFAULT_ITEM_TTL_SECONDS, TIER_ITEM, item_cache_key
from src.stories.errors import ItemFailureReason
from src.stories.metrics import StoriesMetrics
from src.stories.models import NormalizedStory
from src.upstream.gateway import UpstreamGateway
from src.upstream.models import HackerNewsItem, UpstreamError


logger = structlog.get_logger()


class ItemFetcher:
    """Resolves item IDs to stories, consulting and populating the cache.

    Individual failures are degraded: ``resolve`` returns None instead of
    raising, so one bad item never fails a batch.
    """

    def __init__(
        self,
        gateway: UpstreamGateway,
        cache: TimedCache,
        ttl_seconds: float = DEFAULT_ITEM_TTL_SECONDS,
    ) -> None:
        """Initialize the item fetcher.

        Args:
            gateway: Source of raw item payloads.
            cache: Cache shared with the aggregator.
            ttl_seconds: Lifetime of cached stories.
        """
        self._gateway = gateway
        self._cache = cache
        self._ttl_seconds = ttl_seconds
        self._metrics = StoriesMetrics.get_instance()
        self._log = logger.bind(component="stories", subcomponent="item_fetcher")

    def resolve(self, item_id: int) -> NormalizedStory | None:
        """Resolve one item ID.

        Args:
            item_id: Item identifier.

        Returns:
            The normalized story, or None if the item could not be fetched,
            does not exist, or has an unusable payload.
        """
        key = item_cache_key(item_id)
        cached = self._cache.get(key)
        if cached is not None:
            self._metrics.record_cache_hit(TIER_ITEM)
            self._log.debug("item_cache_hit", item_id=item_id)
            return cached

        self._metrics.record_cache_miss(TIER_ITEM)

        try:
            payload = self._gateway.fetch_item(item_id)
        except UpstreamError as e:
            return self._fail(item_id, ItemFailureReason.FETCH, **e.to_dict())

        if not payload:
            return self._fail(item_id, ItemFailureReason.ABSENT)

        try:
            story = NormalizedStory.from_item(HackerNewsItem.model_validate(payload))
        except (ValidationError, OverflowError, OSError, ValueError) as e:
            return self._fail(item_id, ItemFailureReason.INVALID, error=str(e))

        self._cache.set(key, story, self._ttl_seconds)
        self._log.debug("item_fetched", item_id=item_id, score=story.score)
        return story

    def _fail(
        self,
        item_id: int,
        reason: ItemFailureReason,
        **details: object,
    ) -> None:
        """Log and count a dropped item.

        Args:
            item_id: Item identifier.
            reason: Failure classification.
            **details: Extra structured fields for the log event.
        """
        self._metrics.record_item_failure(reason)
        self._log.warning(
            "item_fetch_failed",
            item_id=item_id,
            reason=reason.value,
            **details,
        )
