"""Unit tests for the stories API routes."""

from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
import structlog
from fastapi.testclient import TestClient

from src.api.app import REQUEST_ID_HEADER, create_app
from src.settings.app import AppSettings
from src.stories.aggregator import BestStoriesAggregator
from src.stories.errors import UpstreamListError
from src.stories.metrics import StoriesMetrics
from src.stories.models import NormalizedStory
from tests.helpers.gateway import transport_error
from tests.helpers.time import FIXED_NOW


def _story(title: str, score: int) -> NormalizedStory:
    """Build a story for canned aggregator responses."""
    return NormalizedStory(
        title=title,
        uri=f"https://example.com/{title}",
        posted_by="alice",
        time=FIXED_NOW,
        score=score,
        comment_count=2,
    )


@pytest.fixture
def aggregator() -> MagicMock:
    """Create a mocked aggregator."""
    return MagicMock(spec=BestStoriesAggregator)


@pytest.fixture
def settings() -> AppSettings:
    """Create settings with console logs and a small maximum."""
    return AppSettings(max_stories=100, default_stories=10, json_logs=False)


@pytest.fixture
def client(settings: AppSettings, aggregator: MagicMock) -> Iterator[TestClient]:
    """Create a test client around the app with an injected aggregator."""
    with TestClient(create_app(settings=settings, aggregator=aggregator)) as test_client:
        yield test_client


class TestGetBestStories:
    """Tests for GET /api/stories/best."""

    def test_returns_camel_case_stories(
        self, client: TestClient, aggregator: MagicMock
    ) -> None:
        """Stories are serialized with camelCase keys in aggregator order."""
        aggregator.get_best.return_value = [_story("b", 30), _story("a", 10)]

        response = client.get("/api/stories/best", params={"n": 2})

        assert response.status_code == 200
        body = response.json()
        assert [s["title"] for s in body] == ["b", "a"]
        assert body[0] == {
            "title": "b",
            "uri": "https://example.com/b",
            "postedBy": "alice",
            "time": "2017-06-13T00:00:00Z",
            "score": 30,
            "commentCount": 2,
        }
        aggregator.get_best.assert_called_once_with(2)

    def test_default_count(self, client: TestClient, aggregator: MagicMock) -> None:
        """Omitting n uses the configured default."""
        aggregator.get_best.return_value = []

        response = client.get("/api/stories/best")

        assert response.status_code == 200
        assert response.json() == []
        aggregator.get_best.assert_called_once_with(10)

    @pytest.mark.parametrize("n", [0, -3])
    def test_non_positive_n_rejected(
        self, client: TestClient, aggregator: MagicMock, n: int
    ) -> None:
        """n must be positive."""
        response = client.get("/api/stories/best", params={"n": n})

        assert response.status_code == 400
        assert response.json() == {"error": "Parameter 'n' must be greater than zero"}
        aggregator.get_best.assert_not_called()

    def test_n_above_max_rejected(
        self, client: TestClient, aggregator: MagicMock
    ) -> None:
        """n must not exceed the configured maximum."""
        response = client.get("/api/stories/best", params={"n": 101})

        assert response.status_code == 400
        assert response.json() == {"error": "Parameter 'n' cannot be greater than 100"}
        aggregator.get_best.assert_not_called()

    def test_non_integer_n_rejected(
        self, client: TestClient, aggregator: MagicMock
    ) -> None:
        """A non-integer n is a 400 validation error."""
        response = client.get("/api/stories/best", params={"n": "ten"})

        assert response.status_code == 400
        body = response.json()
        assert body["error"] == "Invalid request parameters"
        assert body["details"][0]["field"] == "query.n"
        aggregator.get_best.assert_not_called()

    def test_upstream_list_failure_is_500(
        self, client: TestClient, aggregator: MagicMock
    ) -> None:
        """An unavailable ID list maps to a generic 500."""
        aggregator.get_best.side_effect = UpstreamListError(transport_error())

        response = client.get("/api/stories/best", params={"n": 5})

        assert response.status_code == 500
        assert response.json() == {"error": "Error processing request"}

    def test_unexpected_error_is_500_without_details(
        self, settings: AppSettings, aggregator: MagicMock
    ) -> None:
        """Unhandled exceptions do not leak internals."""
        aggregator.get_best.side_effect = RuntimeError("secret internals")
        app = create_app(settings=settings, aggregator=aggregator)

        with TestClient(app, raise_server_exceptions=False) as test_client:
            response = test_client.get("/api/stories/best", params={"n": 5})

        assert response.status_code == 500
        assert "secret" not in response.text

    def test_unexpected_error_keeps_request_id(
        self, client: TestClient, aggregator: MagicMock
    ) -> None:
        """The 500 for an unhandled exception is logged and answered with the request ID."""
        aggregator.get_best.side_effect = RuntimeError("boom")
        logged_contexts: list[dict[str, object]] = []

        with patch("src.api.error_handlers.logger") as mock_logger:
            mock_logger.error.side_effect = lambda *args, **kwargs: logged_contexts.append(
                structlog.contextvars.get_contextvars()
            )
            response = client.get(
                "/api/stories/best", headers={REQUEST_ID_HEADER: "req-500"}
            )

        assert response.status_code == 500
        assert response.json() == {"error": "Error processing request"}
        assert response.headers[REQUEST_ID_HEADER] == "req-500"
        assert [ctx.get("request_id") for ctx in logged_contexts] == ["req-500"]

    def test_request_id_echoed(self, client: TestClient, aggregator: MagicMock) -> None:
        """A supplied request ID is returned; otherwise one is generated."""
        aggregator.get_best.return_value = []

        supplied = client.get(
            "/api/stories/best", headers={REQUEST_ID_HEADER: "abc123"}
        )
        generated = client.get("/api/stories/best")

        assert supplied.headers[REQUEST_ID_HEADER] == "abc123"
        assert len(generated.headers[REQUEST_ID_HEADER]) == 32


class TestHealth:
    """Tests for GET /health."""

    def setup_method(self) -> None:
        """Reset metrics before each test."""
        StoriesMetrics.reset()

    def test_health_reports_metrics(self, client: TestClient) -> None:
        """Health returns status and a metrics snapshot."""
        StoriesMetrics.get_instance().record_request(stories_returned=3)

        response = client.get("/health")

        assert response.status_code == 200
        body = response.json()
        assert body["status"] == "healthy"
        assert body["metrics"]["requests_total"] == 1
        assert body["metrics"]["stories_returned_total"] == 3


class TestLifespan:
    """Tests for application startup wiring."""

    def test_builds_aggregator_when_not_injected(self, settings: AppSettings) -> None:
        """Without an injected aggregator, startup builds a real one."""
        app = create_app(settings=settings)

        with TestClient(app):
            assert isinstance(app.state.aggregator, BestStoriesAggregator)
