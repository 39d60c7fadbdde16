"""HTTP routes: best stories and health."""

from fastapi import APIRouter, Query, Request, status
from fastapi.responses import JSONResponse

from src.settings.app import AppSettings
from src.stories.aggregator import BestStoriesAggregator
from src.stories.metrics import StoriesMetrics
from src.stories.models import NormalizedStory


stories_router = APIRouter(prefix="/api/stories", tags=["stories"])
health_router = APIRouter(tags=["health"])


@stories_router.get(
    "/best",
    response_model=list[NormalizedStory],
    responses={
        status.HTTP_400_BAD_REQUEST: {"description": "Invalid 'n'"},
        status.HTTP_500_INTERNAL_SERVER_ERROR: {"description": "Upstream unavailable"},
    },
)
def get_best_stories(
    request: Request,
    n: int | None = Query(default=None, description="Number of stories to return"),
) -> list[NormalizedStory] | JSONResponse:
    """Return the best ``n`` stories from Hacker News, sorted by score descending."""
    settings: AppSettings = request.app.state.settings
    aggregator: BestStoriesAggregator = request.app.state.aggregator

    count = settings.default_stories if n is None else n
    error = settings.validate_story_count(count)
    if error is not None:
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content={"error": error},
        )

    return aggregator.get_best(count)


@health_router.get("/health")
def health_check() -> dict[str, object]:
    """Health check with a snapshot of cache and upstream counters."""
    return {
        "status": "healthy",
        "metrics": StoriesMetrics.get_instance().to_dict(),
    }
