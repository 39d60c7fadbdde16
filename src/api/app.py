"""FastAPI application factory for the best stories service."""

import uuid
from collections.abc import AsyncIterator, Awaitable, Callable
from contextlib import asynccontextmanager

import structlog
from fastapi import FastAPI, Request, Response
from fastapi.middleware.cors import CORSMiddleware

from src.api.error_handlers import register_error_handlers, unhandled_error_response
from src.api.routes import health_router, stories_router
from src.observability.logging import (
    bind_request_context,
    clear_request_context,
    configure_logging,
    parse_log_level,
)
from src.settings.app import AppSettings, get_settings
from src.stories.aggregator import BestStoriesAggregator
from src.stories.factory import create_aggregator, create_gateway


logger = structlog.get_logger()

REQUEST_ID_HEADER = "X-Request-ID"


def create_app(
    settings: AppSettings | None = None,
    aggregator: BestStoriesAggregator | None = None,
) -> FastAPI:
    """Create the API application.

    Args:
        settings: Application settings (loaded from the environment if omitted).
        aggregator: Preconfigured aggregator. When omitted, the lifespan
            builds one backed by the Hacker News gateway and closes the
            gateway on shutdown.

    Returns:
        Configured FastAPI application.
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncIterator[None]:
        configure_logging(
            level=parse_log_level(settings.log_level),
            json_format=settings.json_logs,
        )
        gateway = None
        if app.state.aggregator is None:
            gateway = create_gateway(settings)
            app.state.aggregator = create_aggregator(settings, gateway)
        logger.info("api_started", component="api")
        try:
            yield
        finally:
            if gateway is not None:
                gateway.close()
            logger.info("api_stopped", component="api")

    app = FastAPI(
        title="Best Stories API",
        version="1.0.0",
        description="Retrieve the best stories from Hacker News sorted by score",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.aggregator = aggregator

    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_methods=["*"],
        allow_headers=["*"],
    )
    app.middleware("http")(_request_context_middleware)

    register_error_handlers(app)
    app.include_router(stories_router)
    app.include_router(health_router)
    return app


async def _request_context_middleware(
    request: Request,
    call_next: Callable[[Request], Awaitable[Response]],
) -> Response:
    """Bind a request ID to log context and echo it in the response.

    Unhandled exceptions are turned into the generic 500 here, while the
    request ID is still bound, so the error log and the response carry it.
    """
    request_id = request.headers.get(REQUEST_ID_HEADER) or uuid.uuid4().hex
    bind_request_context(request_id)
    try:
        response = await call_next(request)
    except Exception as e:  # noqa: BLE001
        response = unhandled_error_response(request, e)
    finally:
        clear_request_context()
    response.headers[REQUEST_ID_HEADER] = request_id
    return response
