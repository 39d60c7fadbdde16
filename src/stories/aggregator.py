"""Best-story aggregation: ranked IDs, concurrent item fan-out, score sort."""

import contextvars
import time
from concurrent.futures import Future, ThreadPoolExecutor

import structlog

from src.cache.timed_cache import TimedCache
from src.stories.constants import (
    BEST_IDS_CACHE_KEY,
    DEFAULT_IDS_TTL_SECONDS,
    TIER_IDS,
)
from src.stories.errors import UpstreamListError
from src.stories.item_fetcher import ItemFetcher
from src.stories.metrics import StoriesMetrics
from src.stories.models import NormalizedStory
from src.upstream.gateway import UpstreamGateway
from src.upstream.models import UpstreamError


logger = structlog.get_logger()


class BestStoriesAggregator:
    """Builds the top-N best stories sorted by score.

    Provides:
    - Cached ranked ID list (fatal if it cannot be fetched)
    - Concurrent resolution of every dispatched item with failure isolation
    - Final ordering by descending score

    The caller is trusted to pass an already validated ``n``.
    """

    def __init__(
        self,
        gateway: UpstreamGateway,
        cache: TimedCache,
        item_fetcher: ItemFetcher,
        ids_ttl_seconds: float = DEFAULT_IDS_TTL_SECONDS,
    ) -> None:
        """Initialize the aggregator.

        Args:
            gateway: Source of the ranked ID list.
            cache: Cache shared with the item fetcher.
            item_fetcher: Resolver for individual items.
            ids_ttl_seconds: Lifetime of the cached ID list.
        """
        self._gateway = gateway
        self._cache = cache
        self._item_fetcher = item_fetcher
        self._ids_ttl_seconds = ids_ttl_seconds
        self._metrics = StoriesMetrics.get_instance()
        self._log = logger.bind(component="stories", subcomponent="aggregator")

    def get_best(self, n: int) -> list[NormalizedStory]:
        """Return up to ``n`` of the best stories, highest score first.

        Args:
            n: Number of top-ranked IDs to resolve.

        Returns:
            Resolved stories sorted by descending score. May be shorter than
            ``n`` when items fail or upstream has fewer IDs.

        Raises:
            UpstreamListError: If the ranked ID list cannot be obtained.
        """
        start_ns = time.perf_counter_ns()

        ranked_ids = self._get_ranked_ids()
        top_ids = ranked_ids[: max(n, 0)]

        stories = self._resolve_all(top_ids)
        stories.sort(key=lambda story: story.score, reverse=True)

        self._metrics.record_request(len(stories))
        self._log.info(
            "best_stories_complete",
            requested=n,
            available_ids=len(ranked_ids),
            dispatched=len(top_ids),
            returned=len(stories),
            duration_ms=round((time.perf_counter_ns() - start_ns) / 1_000_000, 2),
        )
        return stories

    def _get_ranked_ids(self) -> tuple[int, ...]:
        """Get the ranked ID list from cache or upstream.

        Returns:
            Ranked IDs, best first.

        Raises:
            UpstreamListError: If the upstream call fails.
        """
        cached = self._cache.get(BEST_IDS_CACHE_KEY)
        if cached is not None:
            self._metrics.record_cache_hit(TIER_IDS)
            self._log.debug("ids_cache_hit", count=len(cached))
            return cached

        self._metrics.record_cache_miss(TIER_IDS)

        try:
            ids = tuple(self._gateway.fetch_best_ids())
        except UpstreamError as e:
            self._metrics.record_list_failure()
            self._log.error("best_ids_fetch_failed", **e.to_dict())
            raise UpstreamListError(e) from e

        self._cache.set(BEST_IDS_CACHE_KEY, ids, self._ids_ttl_seconds)
        self._log.info("best_ids_fetched", count=len(ids))
        return ids

    def _resolve_all(self, item_ids: tuple[int, ...]) -> list[NormalizedStory]:
        """Resolve every item concurrently and wait for all of them.

        Each item gets its own worker. Workers run in a copy of the caller's
        context, so bound log fields such as the request ID carry over.

        Args:
            item_ids: IDs in ranked order.

        Returns:
            Successfully resolved stories, in ranked order.
        """
        if not item_ids:
            return []

        with ThreadPoolExecutor(max_workers=len(item_ids)) as executor:
            futures: list[tuple[int, Future[NormalizedStory | None]]] = [
                (
                    item_id,
                    executor.submit(
                        contextvars.copy_context().run,
                        self._item_fetcher.resolve,
                        item_id,
                    ),
                )
                for item_id in item_ids
            ]

            stories: list[NormalizedStory] = []
            for item_id, future in futures:
                try:
                    story = future.result()
                except Exception as e:  # noqa: BLE001
                    self._log.error(
                        "item_execution_error",
                        item_id=item_id,
                        error=str(e),
                    )
                    continue
                if story is not None:
                    stories.append(story)

        return stories
