"""Upstream API access: gateway protocol, httpx implementation, and payload models."""

from src.upstream.constants import DEFAULT_TIMEOUT_SECONDS, HACKER_NEWS_BASE_URL
from src.upstream.gateway import HackerNewsGateway, UpstreamGateway
from src.upstream.models import HackerNewsItem, UpstreamError, UpstreamErrorClass


__all__ = [
    # Gateway
    "UpstreamGateway",
    "HackerNewsGateway",
    # Models
    "HackerNewsItem",
    "UpstreamError",
    "UpstreamErrorClass",
    # Constants
    "HACKER_NEWS_BASE_URL",
    "DEFAULT_TIMEOUT_SECONDS",
]
