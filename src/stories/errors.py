"""Error types for best-story aggregation."""

from enum import Enum

from src.upstream.models import UpstreamError


class ItemFailureReason(str, Enum):
    """Why a single item was dropped from a result.

    Recorded in logs and metrics only; item failures never propagate.

    - FETCH: Transport or HTTP failure fetching the item
    - ABSENT: Upstream reported no such item
    - INVALID: Payload could not be normalized
    """

    FETCH = "FETCH"
    ABSENT = "ABSENT"
    INVALID = "INVALID"


class BestStoriesError(Exception):
    """Base exception for best-story aggregation."""


class UpstreamListError(BestStoriesError):
    """The ranked ID list could not be obtained; the request cannot be served.

    The originating UpstreamError is available as ``__cause__`` and ``cause``.
    """

    def __init__(self, cause: UpstreamError) -> None:
        """Initialize the error.

        Args:
            cause: The upstream failure that prevented fetching the list.
        """
        super().__init__(f"Best story ID list unavailable: {cause.message}")
        self.cause = cause
