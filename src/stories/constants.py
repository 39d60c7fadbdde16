"""Constants for best-story aggregation."""

# Cache keys
BEST_IDS_CACHE_KEY = "ids:best"
ITEM_CACHE_KEY_TEMPLATE = "item:{item_id}"

# Default time-to-live for both cache tiers (5 minutes)
DEFAULT_IDS_TTL_SECONDS = 300
DEFAULT_ITEM_TTL_SECONDS = 300

# Bounds enforced by the inbound layers (HTTP API and CLI)
DEFAULT_STORY_COUNT = 10
MAX_STORY_COUNT = 500

# Cache tiers, used as metric labels
TIER_IDS = "ids"
TIER_ITEM = "item"


def item_cache_key(item_id: int) -> str:
    """Build the cache key for one item's normalized story."""
    return ITEM_CACHE_KEY_TEMPLATE.format(item_id=item_id)
