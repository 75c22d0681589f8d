"""Board API — FastAPI application entry point.

Invariants:
    - Routes registered explicitly (no auto-discovery)
    - Global error handlers registered via register_error_handlers()
    - CORS configured from settings (not hardcoded)
    - Logging, database and the failure reporting pipeline are process-wide
      services created in the lifespan and torn down on shutdown
    - A lifespan initialization failure is reported as a startup failure and
      re-raised so the server exits non-zero

Design Decisions:
    - Lifespan over @app.on_event: FastAPI recommended pattern, cleaner cleanup
    - /swagger served as an alias of /docs
"""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.openapi.docs import get_swagger_ui_html

from board_api.api.error_handlers import register_error_handlers
from board_api.api.routes import health, test_projects
from board_api.config import get_settings
from board_api.infrastructure.database import close_db, init_db
from board_api.infrastructure.observability import setup_logging
from board_api.infrastructure.report_dispatcher import ReportDispatcher
from board_api.services.failure_reporting import (
    FailureInterceptor, report_startup_failure,
)

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup/shutdown lifecycle."""
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    dispatcher = ReportDispatcher(
        settings.collector_url, settings.report_timeout_seconds,
    )
    try:
        init_db(
            settings.database_url,
            pool_size=settings.database_pool_size,
            max_overflow=settings.database_max_overflow,
        )
    except Exception as e:
        await report_startup_failure(e, settings, dispatcher)
        await dispatcher.aclose()
        raise
    app.state.failure_interceptor = FailureInterceptor.from_settings(
        settings, dispatcher,
    )
    logger.info("Board API started")
    yield
    logger.info("Board API shutting down")
    await dispatcher.aclose()
    await close_db()


app = FastAPI(
    title="Backend API",
    description="Backend API documentation",
    version="1.0.0",
    lifespan=lifespan,
)

settings = get_settings()
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(health.router)
app.include_router(test_projects.router)

register_error_handlers(app)


@app.get("/swagger", include_in_schema=False)
async def swagger_ui():
    return get_swagger_ui_html(
        openapi_url=app.openapi_url, title=f"{app.title} - Swagger UI",
    )
