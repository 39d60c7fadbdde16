"""Data models and error types for the upstream API."""

from enum import Enum

from pydantic import BaseModel, ConfigDict, Field


class UpstreamErrorClass(str, Enum):
    """Classification of upstream failures for logs and metrics.

    - NETWORK_TIMEOUT: Request timed out
    - CONNECTION_ERROR: Could not establish connection
    - HTTP_4XX: Upstream answered with a 4xx status
    - HTTP_5XX: Upstream answered with a 5xx status
    - PARSE: Response body is not the expected JSON shape
    - UNKNOWN: Unclassified transport error
    """

    NETWORK_TIMEOUT = "NETWORK_TIMEOUT"
    CONNECTION_ERROR = "CONNECTION_ERROR"
    HTTP_4XX = "HTTP_4XX"
    HTTP_5XX = "HTTP_5XX"
    PARSE = "PARSE"
    UNKNOWN = "UNKNOWN"


class UpstreamError(Exception):
    """Raised when an upstream call fails at the transport or payload level."""

    def __init__(
        self,
        error_class: UpstreamErrorClass,
        message: str,
        url: str | None = None,
        status_code: int | None = None,
    ) -> None:
        """Initialize the upstream error.

        Args:
            error_class: Classification of the error.
            message: Human-readable error message.
            url: URL that was requested.
            status_code: HTTP status code if a response was received.
        """
        super().__init__(message)
        self.error_class = error_class
        self.message = message
        self.url = url
        self.status_code = status_code

    def to_dict(self) -> dict[str, str | int | None]:
        """Convert error to dictionary for logging.

        Returns:
            Dictionary representation of the error.
        """
        return {
            "error_class": self.error_class.value,
            "message": self.message,
            "url": self.url,
            "status_code": self.status_code,
        }


class HackerNewsItem(BaseModel):
    """Raw item payload as served by ``/item/{id}.json``.

    Only the fields the service consumes are declared; everything else in the
    payload is ignored.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    id: int | None = None
    title: str | None = None
    url: str | None = None
    by: str | None = None
    time: int = Field(default=0, description="Unix epoch seconds")
    score: int = 0
    descendants: int = Field(default=0, description="Total comment count")
