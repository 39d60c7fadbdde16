"""Factory wiring the cache, item fetcher, and aggregator together."""

import structlog

from src.cache.timed_cache import TimedCache
from src.settings.app import AppSettings
from src.stories.aggregator import BestStoriesAggregator
from src.stories.item_fetcher import ItemFetcher
from src.upstream.gateway import HackerNewsGateway, UpstreamGateway


logger = structlog.get_logger()


def create_gateway(settings: AppSettings) -> HackerNewsGateway:
    """Create the httpx gateway described by ``settings``."""
    return HackerNewsGateway(
        base_url=settings.upstream_base_url,
        timeout_seconds=settings.upstream_timeout_seconds,
        user_agent=settings.user_agent,
        max_connections=settings.max_stories,
    )


def create_aggregator(
    settings: AppSettings,
    gateway: UpstreamGateway,
    cache: TimedCache | None = None,
) -> BestStoriesAggregator:
    """Create an aggregator sharing one cache with its item fetcher.

    Args:
        settings: Application settings (cache TTLs).
        gateway: Upstream gateway.
        cache: Cache to use; a new one is created when omitted.

    Returns:
        A ready-to-use BestStoriesAggregator.
    """
    cache = cache if cache is not None else TimedCache()
    item_fetcher = ItemFetcher(
        gateway=gateway,
        cache=cache,
        ttl_seconds=settings.item_ttl_seconds,
    )
    logger.info(
        "aggregator_created",
        component="stories",
        ids_ttl_seconds=settings.ids_ttl_seconds,
        item_ttl_seconds=settings.item_ttl_seconds,
    )
    return BestStoriesAggregator(
        gateway=gateway,
        cache=cache,
        item_fetcher=item_fetcher,
        ids_ttl_seconds=settings.ids_ttl_seconds,
    )
