"""Error Handlers — global exception handlers for the Board API.

Invariants:
    - RequestValidationError → 400 {error, message, details}, not reported
    - Exception (catch-all) → FailureInterceptor: {error, message} with the
      declared status or 500, plus a background report to the collector
    - Raw stack traces never reach the client
    - Catch-all responses carry the CORS headers CORSMiddleware would add

Design Decisions:
    - Catch-all registered on Exception so sync (threadpool) and async route
      failures share one path
    - Interceptor read from app.state; built from settings on first use when
      the lifespan has not installed one
    - Starlette runs the Exception handler in ServerErrorMiddleware, outside
      CORSMiddleware, so the catch-all sets Access-Control-Allow-Origin itself
"""

import logging

from fastapi import FastAPI, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse

from board_api.config import get_settings
from board_api.core.errors import GENERIC_ERROR_MESSAGE
from board_api.infrastructure.report_dispatcher import ReportDispatcher
from board_api.services.failure_reporting import FailureInterceptor, RequestContext

logger = logging.getLogger(__name__)


def register_error_handlers(app: FastAPI) -> None:
    """Register all global error handlers on the FastAPI app."""
    _register_validation_error_handler(app)
    _register_failure_interceptor(app)


def get_failure_interceptor(app: FastAPI) -> FailureInterceptor:
    interceptor = getattr(app.state, "failure_interceptor", None)
    if interceptor is None:
        settings = get_settings()
        interceptor = FailureInterceptor.from_settings(
            settings,
            ReportDispatcher(
                settings.collector_url, settings.report_timeout_seconds,
            ),
        )
        app.state.failure_interceptor = interceptor
    return interceptor


def request_context(request: Request) -> RequestContext:
    """Snapshot the request fields the interceptor consumes."""
    return RequestContext(
        path=request.url.path,
        method=request.method,
        user_agent=request.headers.get("user-agent"),
        route_params={k: str(v) for k, v in request.path_params.items()},
        query_params=dict(request.query_params),
        headers=dict(request.headers),
    )


def cors_headers(request: Request, allowed_origins: list[str]) -> dict[str, str]:
    """Simple-response CORS headers for a request's Origin, if it is allowed."""
    origin = request.headers.get("origin")
    if not origin:
        return {}
    if "*" in allowed_origins:
        return {"Access-Control-Allow-Origin": "*"}
    if origin in allowed_origins:
        return {"Access-Control-Allow-Origin": origin, "Vary": "Origin"}
    return {}


def _register_validation_error_handler(app: FastAPI) -> None:
    """Register Pydantic validation error handler."""

    @app.exception_handler(RequestValidationError)
    async def validation_error_handler(
        request: Request, exc: RequestValidationError,
    ):
        """Handle Pydantic validation errors."""
        logger.warning(
            f"Validation error on {request.url.path}: {exc.errors()}",
        )
        return JSONResponse(
            status_code=status.HTTP_400_BAD_REQUEST,
            content=_build_validation_error_response(exc),
        )


def _register_failure_interceptor(app: FastAPI) -> None:
    """Register catch-all error handler."""

    @app.exception_handler(Exception)
    async def unhandled_error_handler(request: Request, exc: Exception):
        """Catch-all: reports in the background, never leaks internals."""
        interceptor = get_failure_interceptor(request.app)
        status_code, body = interceptor.on_request_failure(
            exc, request_context(request),
        )
        return JSONResponse(
            status_code=status_code,
            content=body,
            headers=cors_headers(request, get_settings().cors_origins),
        )


def _build_validation_error_response(exc: RequestValidationError) -> dict:
    """Build structured validation error response."""
    return {
        "error": GENERIC_ERROR_MESSAGE,
        "message": "Invalid request data",
        "details": [
            {
                "field": ".".join(str(loc) for loc in e["loc"]),
                "message": e["msg"],
                "type": e["type"],
            }
            for e in exc.errors()
        ],
    }
