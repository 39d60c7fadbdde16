"""Unit tests for the best-stories CLI."""

import json
from collections.abc import Iterator
from unittest.mock import MagicMock, patch

import pytest
from click.testing import CliRunner

from src.cli.best_stories import cli, format_table
from src.settings.app import AppSettings
from src.stories.errors import UpstreamListError
from src.stories.models import NormalizedStory
from tests.helpers.gateway import transport_error
from tests.helpers.time import FIXED_NOW


def _story(title: str, score: int, posted_by: str = "alice") -> NormalizedStory:
    """Build a story for canned aggregator responses."""
    return NormalizedStory(
        title=title,
        uri="",
        posted_by=posted_by,
        time=FIXED_NOW,
        score=score,
        comment_count=1,
    )


@pytest.fixture
def settings() -> AppSettings:
    """Create settings with console logs."""
    return AppSettings(max_stories=50, default_stories=5, json_logs=False)


@pytest.fixture
def aggregator() -> Iterator[MagicMock]:
    """Patch the aggregator factory and return the mocked aggregator."""
    mock_aggregator = MagicMock()
    with (
        patch("src.cli.best_stories.create_gateway") as mock_gateway,
        patch(
            "src.cli.best_stories.create_aggregator",
            return_value=mock_aggregator,
        ),
    ):
        mock_gateway.return_value.__enter__.return_value = MagicMock()
        yield mock_aggregator


class TestFetchCommand:
    """Tests for the fetch command."""

    def test_prints_json(self, settings: AppSettings, aggregator: MagicMock) -> None:
        """Stories are printed as camelCase JSON."""
        aggregator.get_best.return_value = [_story("Top", 50), _story("Next", 20)]

        result = CliRunner().invoke(
            cli, ["fetch", "-n", "2"], obj={"settings": settings}
        )

        assert result.exit_code == 0, result.output
        payload = json.loads(result.output)
        assert [s["title"] for s in payload] == ["Top", "Next"]
        assert payload[0]["postedBy"] == "alice"
        aggregator.get_best.assert_called_once_with(2)

    def test_default_count(self, settings: AppSettings, aggregator: MagicMock) -> None:
        """Omitting -n uses the configured default."""
        aggregator.get_best.return_value = []

        result = CliRunner().invoke(cli, ["fetch"], obj={"settings": settings})

        assert result.exit_code == 0
        aggregator.get_best.assert_called_once_with(5)

    def test_prints_table(self, settings: AppSettings, aggregator: MagicMock) -> None:
        """--table prints one line per story."""
        aggregator.get_best.return_value = [_story("Top", 50)]

        result = CliRunner().invoke(
            cli, ["fetch", "-n", "1", "--table"], obj={"settings": settings}
        )

        assert result.exit_code == 0
        lines = result.output.strip().splitlines()
        assert len(lines) == 2
        assert "Top" in lines[1]

    @pytest.mark.parametrize("n", ["0", "51"])
    def test_invalid_count(
        self, settings: AppSettings, aggregator: MagicMock, n: str
    ) -> None:
        """Out-of-range counts exit with a usage error."""
        result = CliRunner().invoke(
            cli, ["fetch", "-n", n], obj={"settings": settings}
        )

        assert result.exit_code == 2
        assert "Parameter 'n'" in result.output
        aggregator.get_best.assert_not_called()

    def test_upstream_list_failure(
        self, settings: AppSettings, aggregator: MagicMock
    ) -> None:
        """An unavailable ID list exits with status 1."""
        aggregator.get_best.side_effect = UpstreamListError(transport_error())

        result = CliRunner().invoke(
            cli, ["fetch", "-n", "3"], obj={"settings": settings}
        )

        assert result.exit_code == 1
        assert "Best story ID list unavailable" in result.output


class TestServeCommand:
    """Tests for the serve command."""

    def test_runs_uvicorn(self, settings: AppSettings) -> None:
        """The API app is served on the requested host and port."""
        with patch("uvicorn.run") as mock_run:
            result = CliRunner().invoke(
                cli,
                ["serve", "--host", "0.0.0.0", "--port", "9000"],
                obj={"settings": settings},
            )

        assert result.exit_code == 0
        mock_run.assert_called_once()
        app = mock_run.call_args.args[0]
        assert app.state.settings is settings
        assert mock_run.call_args.kwargs["host"] == "0.0.0.0"
        assert mock_run.call_args.kwargs["port"] == 9000


class TestFormatTable:
    """Tests for format_table."""

    def test_header_only_when_empty(self) -> None:
        """An empty list renders just the header."""
        assert format_table([]).splitlines() == [
            "  #   SCORE  COMMENTS  BY                TITLE"
        ]

    def test_rows_ranked(self) -> None:
        """Rows are numbered from 1 and truncate long usernames."""
        table = format_table([_story("A", 9, posted_by="x" * 30), _story("B", 1)])
        rows = table.splitlines()[1:]

        assert rows[0].startswith("  1       9")
        assert "x" * 16 + "  A" in rows[0]
        assert rows[1].startswith("  2       1")
