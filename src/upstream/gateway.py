"""Gateway to the Hacker News API: ranked best-story IDs and item details."""

import json
from types import TracebackType
from typing import Any, Protocol, runtime_checkable

import httpx
import structlog
from pydantic import TypeAdapter, ValidationError

from src.upstream.constants import (
    BEST_STORIES_PATH,
    DEFAULT_MAX_CONNECTIONS,
    DEFAULT_TIMEOUT_SECONDS,
    DEFAULT_USER_AGENT,
    HACKER_NEWS_BASE_URL,
    HTTP_STATUS_BAD_REQUEST,
    HTTP_STATUS_OK_MAX,
    HTTP_STATUS_OK_MIN,
    HTTP_STATUS_SERVER_ERROR_MAX,
    HTTP_STATUS_SERVER_ERROR_MIN,
    ITEM_PATH_TEMPLATE,
)
from src.upstream.models import UpstreamError, UpstreamErrorClass


logger = structlog.get_logger()

_ID_LIST_ADAPTER = TypeAdapter(list[int])


@runtime_checkable
class UpstreamGateway(Protocol):
    """Protocol for the remote source of ranked IDs and item details.

    Allows injecting fakes in tests and alternative transports.
    """

    def fetch_best_ids(self) -> list[int]:
        """Fetch the full ranked list of best-story IDs, best first.

        Returns:
            Ranked item IDs (may be empty).

        Raises:
            UpstreamError: On transport failure or a malformed payload.
        """
        ...

    def fetch_item(self, item_id: int) -> dict[str, Any] | None:
        """Fetch the raw detail payload of one item.

        Args:
            item_id: Item identifier.

        Returns:
            Decoded JSON object, or None when upstream reports no such item.

        Raises:
            UpstreamError: On transport failure or an undecodable body.
        """
        ...


class HackerNewsGateway:
    """httpx-backed UpstreamGateway for the Hacker News Firebase API.

    One pooled ``httpx.Client`` is shared by all callers; httpx clients are
    safe to use from multiple threads.
    """

    def __init__(
        self,
        base_url: str = HACKER_NEWS_BASE_URL,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        user_agent: str = DEFAULT_USER_AGENT,
        max_connections: int = DEFAULT_MAX_CONNECTIONS,
        client: httpx.Client | None = None,
    ) -> None:
        """Initialize the gateway.

        Args:
            base_url: API root, without trailing slash.
            timeout_seconds: Per-request timeout.
            user_agent: User-Agent header sent with every request.
            max_connections: Connection pool size.
            client: Preconfigured client (tests inject one with a mock
                transport). The gateway does not close an injected client.
        """
        self._base_url = base_url.rstrip("/")
        self._owns_client = client is None
        self._client = client or httpx.Client(
            timeout=timeout_seconds,
            follow_redirects=True,
            headers={"User-Agent": user_agent, "Accept": "application/json"},
            limits=httpx.Limits(
                max_connections=max_connections,
                max_keepalive_connections=max_connections,
            ),
        )
        self._log = logger.bind(component="upstream", base_url=self._base_url)

    def fetch_best_ids(self) -> list[int]:
        """Fetch the ranked best-story ID list.

        Returns:
            Ranked item IDs, best first.

        Raises:
            UpstreamError: On transport failure, non-2xx status, or a body
                that is not a JSON array of integers.
        """
        url = f"{self._base_url}{BEST_STORIES_PATH}"
        payload = self._get_json(url)

        try:
            ids = _ID_LIST_ADAPTER.validate_python(payload, strict=True)
        except ValidationError as e:
            raise UpstreamError(
                error_class=UpstreamErrorClass.PARSE,
                message=f"Expected a JSON array of integers: {e.error_count()} errors",
                url=url,
            ) from e

        self._log.debug("best_ids_fetched", count=len(ids))
        return ids

    def fetch_item(self, item_id: int) -> dict[str, Any] | None:
        """Fetch the raw payload for one item.

        Args:
            item_id: Item identifier.

        Returns:
            The decoded JSON object, or None for a JSON ``null`` body.

        Raises:
            UpstreamError: On transport failure, non-2xx status, or a body
                that is neither an object nor ``null``.
        """
        url = f"{self._base_url}{ITEM_PATH_TEMPLATE.format(item_id=item_id)}"
        payload = self._get_json(url)

        if payload is None:
            return None
        if not isinstance(payload, dict):
            raise UpstreamError(
                error_class=UpstreamErrorClass.PARSE,
                message=f"Expected a JSON object, got {type(payload).__name__}",
                url=url,
            )
        return payload

    def close(self) -> None:
        """Close the underlying client if the gateway created it."""
        if self._owns_client:
            self._client.close()

    def __enter__(self) -> "HackerNewsGateway":
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.close()

    def _get_json(self, url: str) -> Any:
        """GET ``url`` and decode the JSON body.

        Args:
            url: Absolute URL.

        Returns:
            Decoded JSON value.

        Raises:
            UpstreamError: On any transport, status, or decoding failure.
        """
        try:
            response = self._client.get(url)
        except httpx.TimeoutException as e:
            raise UpstreamError(
                error_class=UpstreamErrorClass.NETWORK_TIMEOUT,
                message=f"Request timed out: {e}",
                url=url,
            ) from e
        except httpx.ConnectError as e:
            raise UpstreamError(
                error_class=UpstreamErrorClass.CONNECTION_ERROR,
                message=f"Connection failed: {e}",
                url=url,
            ) from e
        except httpx.HTTPError as e:
            raise UpstreamError(
                error_class=UpstreamErrorClass.UNKNOWN,
                message=f"Request failed: {e}",
                url=url,
            ) from e

        http_error = self._classify_http_error(response.status_code, url)
        if http_error is not None:
            raise http_error

        try:
            return json.loads(response.content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise UpstreamError(
                error_class=UpstreamErrorClass.PARSE,
                message=f"Invalid JSON body: {e}",
                url=url,
                status_code=response.status_code,
            ) from e

    def _classify_http_error(self, status_code: int, url: str) -> UpstreamError | None:
        """Classify an HTTP status code as an error.

        Args:
            status_code: HTTP status code.
            url: Requested URL.

        Returns:
            UpstreamError if the status indicates failure, None otherwise.
        """
        if HTTP_STATUS_OK_MIN <= status_code < HTTP_STATUS_OK_MAX:
            return None

        if HTTP_STATUS_BAD_REQUEST <= status_code < HTTP_STATUS_SERVER_ERROR_MIN:
            error_class = UpstreamErrorClass.HTTP_4XX
            message = f"Client error ({status_code})"
        elif HTTP_STATUS_SERVER_ERROR_MIN <= status_code < HTTP_STATUS_SERVER_ERROR_MAX:
            error_class = UpstreamErrorClass.HTTP_5XX
            message = f"Server error ({status_code})"
        else:
            error_class = UpstreamErrorClass.UNKNOWN
            message = f"Unexpected status ({status_code})"

        return UpstreamError(
            error_class=error_class,
            message=message,
            url=url,
            status_code=status_code,
        )
