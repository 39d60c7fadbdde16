"""Best-story aggregation over the cached upstream API.

This module provides:
- NormalizedStory model
- ItemFetcher for cached, failure-tolerant item resolution
- BestStoriesAggregator for the concurrent top-N pipeline
- Metrics and error types
"""

from src.stories.aggregator import BestStoriesAggregator
from src.stories.errors import BestStoriesError, ItemFailureReason, UpstreamListError
from src.stories.item_fetcher import ItemFetcher
from src.stories.metrics import StoriesMetrics
from src.stories.models import NormalizedStory


__all__ = [
    "BestStoriesAggregator",
    "ItemFetcher",
    "NormalizedStory",
    "StoriesMetrics",
    # Errors
    "BestStoriesError",
    "ItemFailureReason",
    "UpstreamListError",
]
