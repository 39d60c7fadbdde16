"""CLI commands for the best stories service."""

import json
import logging
import sys

import click
import structlog

from src.observability.logging import configure_logging
from src.settings.app import AppSettings, get_settings
from src.stories.errors import UpstreamListError
from src.stories.factory import create_aggregator, create_gateway
from src.stories.models import NormalizedStory


logger = structlog.get_logger()


def format_table(stories: list[NormalizedStory]) -> str:
    """Render stories as a fixed-width text table.

    Args:
        stories: Stories in display order.

    Returns:
        Table text, one story per line after a header.
    """
    lines = [f"{'#':>3}  {'SCORE':>6}  {'COMMENTS':>8}  {'BY':<16}  TITLE"]
    for rank, story in enumerate(stories, start=1):
        lines.append(
            f"{rank:>3}  {story.score:>6}  {story.comment_count:>8}  "
            f"{story.posted_by[:16]:<16}  {story.title}"
        )
    return "\n".join(lines)


@click.group()
@click.version_option(version="1.0.0")
@click.pass_context
def cli(ctx: click.Context) -> None:
    """Best stories from Hacker News, sorted by score."""
    ctx.ensure_object(dict)
    if "settings" not in ctx.obj:
        ctx.obj["settings"] = get_settings()


@cli.command()
@click.option(
    "-n",
    "count",
    type=int,
    default=None,
    help="Number of stories to return (default from settings).",
)
@click.option(
    "--json/--table",
    "as_json",
    default=True,
    help="Print stories as JSON (default) or as a text table.",
)
@click.option(
    "--verbose",
    "-v",
    is_flag=True,
    help="Enable verbose logging.",
)
@click.pass_context
def fetch(ctx: click.Context, count: int | None, as_json: bool, verbose: bool) -> None:
    """Fetch the best stories once and print them."""
    settings: AppSettings = ctx.obj["settings"]
    configure_logging(
        level=logging.DEBUG if verbose else logging.WARNING,
        json_format=settings.json_logs,
    )

    n = settings.default_stories if count is None else count
    error = settings.validate_story_count(n)
    if error is not None:
        click.echo(f"Error: {error}", err=True)
        sys.exit(2)

    with create_gateway(settings) as gateway:
        aggregator = create_aggregator(settings, gateway)
        try:
            stories = aggregator.get_best(n)
        except UpstreamListError as e:
            logger.error("fetch_failed", component="cli", error=str(e))
            click.echo(f"Error: {e}", err=True)
            sys.exit(1)

    if as_json:
        payload = [story.model_dump(mode="json", by_alias=True) for story in stories]
        click.echo(json.dumps(payload, indent=2, ensure_ascii=False))
    else:
        click.echo(format_table(stories))


@cli.command()
@click.option("--host", default="127.0.0.1", show_default=True, help="Bind address.")
@click.option("--port", default=8000, type=int, show_default=True, help="Bind port.")
@click.pass_context
def serve(ctx: click.Context, host: str, port: int) -> None:
    """Run the HTTP API."""
    import uvicorn

    from src.api.app import create_app

    settings: AppSettings = ctx.obj["settings"]
    uvicorn.run(create_app(settings), host=host, port=port, log_config=None)
