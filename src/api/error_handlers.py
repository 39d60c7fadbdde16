"""Global exception handlers for the stories API.

UpstreamListError and unexpected exceptions become 500 responses without
internal details; request validation errors become 400 responses.
"""

import structlog
from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from src.stories.errors import UpstreamListError


logger = structlog.get_logger()

PROCESSING_ERROR_MESSAGE = "Error processing request"


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_upstream_list_error_handler(app)
    _register_validation_error_handler(app)
    _register_generic_error_handler(app)


def _register_upstream_list_error_handler(app: FastAPI) -> None:
    @app.exception_handler(UpstreamListError)
    async def upstream_list_error_handler(
        request: Request, exc: UpstreamListError
    ) -> JSONResponse:
        logger.error(
            "upstream_list_unavailable",
            component="api",
            path=request.url.path,
            **exc.cause.to_dict(),
        )
        return JSONResponse(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            content={"error": PROCESSING_ERROR_MESSAGE},
        )


def _register_validation_error_handler(app: FastAPI) -> None:
    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError
    ) -> JSONResponse:
        logger.warning(
            "request_validation_failed",
            component="api",
            path=request.url.path,
            errors=len(exc.errors()),
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_generic_error_handler(app: FastAPI) -> None:
    @app.exception_handler(Exception)
    async def generic_error_handler(request: Request, exc: Exception) -> JSONResponse:
        return unhandled_error_response(request, exc)


def unhandled_error_response(request: Request, exc: Exception) -> JSONResponse:
    """Log an unexpected exception and build a 500 without internal details.

    Args:
        request: Request being served.
        exc: The unhandled exception.

    Returns:
        Generic 500 response.
    """
    logger.error(
        "unhandled_exception",
        component="api",
        path=request.url.path,
        error=str(exc),
        exc_info=exc,
    )
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": PROCESSING_ERROR_MESSAGE},
    )


def _build_validation_error_response(exc: RequestValidationError) -> dict[str, object]:
    """Build a validation error body naming each offending parameter."""
    return {
        "error": "Invalid request parameters",
        "details": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
            }
            for e in exc.errors()
        ],
    }
