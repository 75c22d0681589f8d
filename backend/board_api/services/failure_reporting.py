"""Failure Reporting — turns unhandled errors into client responses and collector reports.

Invariants:
    - on_request_failure() always returns (status, {error, message}); it never
      raises and never waits on the collector
    - A report is built and dispatched only when a collector URL is configured
    - Each failure builds its own FailureReport; nothing is shared between calls
    - Startup reports: path/method STARTUP, user agent STARTUP_ERROR, line None,
      file = first line of the rendered trace

Design Decisions:
    - Tracebacks rendered most-recent-call-first so the first frame after the
      message line is the raising frame (locate_frame takes the first match)
    - Library frames (site-packages, stdlib) are skipped when locating the
      source, so driver errors point at the route that issued the call
    - RequestContext is built by the API layer; this module never touches
      Starlette objects
"""

import logging
import os
import re
import sysconfig
import traceback
from dataclasses import dataclass, field

from board_api.config import Settings
from board_api.core.errors import (
    BoardApiError, UNKNOWN_ERROR_MESSAGE, build_error_body, resolve_status_code,
)
from board_api.core.locate_frame import FrameLocation, locate_frame
from board_api.core.resolve_tenant import (
    TenantResolution, TenantSignals, compile_tenant_pattern, resolve_tenant,
)
from board_api.infrastructure.report_dispatcher import ReportDispatcher
from board_api.schemas.failure_report import (
    DEFAULT_ERROR_KIND, STACK_UNAVAILABLE, STARTUP_MARKER, STARTUP_USER_AGENT,
    FailureReport,
)

logger = logging.getLogger(__name__)

_PACKAGE_ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
_LIBRARY_ROOTS = tuple(
    os.path.abspath(sysconfig.get_paths()[key]) for key in ("stdlib", "platstdlib")
)
_LIBRARY_MARKERS = ("site-packages", "dist-packages")


@dataclass(frozen=True)
class RequestContext:
    """What the interceptor needs to know about the failing request."""
    path: str
    method: str
    user_agent: str | None = None
    route_params: dict[str, str] = field(default_factory=dict)
    query_params: dict[str, str] = field(default_factory=dict)
    headers: dict[str, str] = field(default_factory=dict)


def render_stack_trace(exc: BaseException) -> str:
    """'<Kind>: <message>' line followed by frames, innermost first.

    The header is collapsed to one line so message text is never read as a frame.
    """
    if exc.__traceback__ is None:
        return STACK_UNAVAILABLE
    header = " ".join(
        "".join(traceback.format_exception_only(type(exc), exc)).split(),
    )
    frames = list(reversed(traceback.extract_tb(exc.__traceback__)))
    body = "".join(traceback.StackSummary.from_list(frames).format())
    return f"{header}\n{body}".rstrip()


def is_application_path(path: str) -> bool:
    """False for installed libraries, the standard library and frozen modules."""
    if path.startswith("<"):
        return False
    full = os.path.abspath(path)
    if full.startswith(_PACKAGE_ROOT + os.sep):
        return True
    if any(marker in full.split(os.sep) for marker in _LIBRARY_MARKERS):
        return False
    return not any(full.startswith(root + os.sep) for root in _LIBRARY_ROOTS)


def locate_source(stack_trace: str) -> FrameLocation:
    """First application frame; falls back to the first frame of any kind."""
    location = locate_frame(stack_trace, accept_path=is_application_path)
    return location if location.found else locate_frame(stack_trace)


def error_message(exc: BaseException) -> str:
    if isinstance(exc, BoardApiError):
        return exc.message or UNKNOWN_ERROR_MESSAGE
    return str(exc) or UNKNOWN_ERROR_MESSAGE


def error_kind(exc: BaseException) -> str:
    return type(exc).__name__ or DEFAULT_ERROR_KIND


def declared_status(exc: BaseException) -> int:
    if isinstance(exc, BoardApiError):
        return exc.declared_status()
    return resolve_status_code(None)


def build_request_report(
    exc: BaseException, context: RequestContext, tenant_id: str | None,
) -> FailureReport:
    stack_trace = render_stack_trace(exc)
    location = locate_source(stack_trace)
    if not location.found:
        first_lines = " | ".join(stack_trace.splitlines()[:3])
        logger.warning(
            f"Failed to extract file/line from stack. First few lines: {first_lines}",
        )
    return FailureReport(
        tenant_id=tenant_id,
        source_file=location.file_name,
        source_line=location.line_number,
        stack_trace=stack_trace,
        message=error_message(exc),
        error_kind=error_kind(exc),
        request_path=context.path,
        request_method=context.method,
        user_agent=context.user_agent,
    )


def build_startup_report(
    exc: BaseException, board_id: str | None,
) -> FailureReport:
    stack_trace = render_stack_trace(exc)
    first_line = stack_trace.splitlines()[0] if stack_trace else None
    return FailureReport(
        tenant_id=board_id,
        source_file=first_line,
        source_line=None,
        stack_trace=stack_trace,
        message=error_message(exc),
        error_kind=error_kind(exc),
        request_path=STARTUP_MARKER,
        request_method=STARTUP_MARKER,
        user_agent=STARTUP_USER_AGENT,
    )


class FailureInterceptor:
    """Terminal handler for request-time failures."""

    def __init__(
        self,
        dispatcher: ReportDispatcher,
        board_id: str | None = None,
        tenant_pattern: re.Pattern | None = None,
    ):
        self.dispatcher = dispatcher
        self.board_id = board_id
        self.tenant_pattern = tenant_pattern or compile_tenant_pattern()

    @classmethod
    def from_settings(
        cls, settings: Settings, dispatcher: ReportDispatcher,
    ) -> "FailureInterceptor":
        return cls(
            dispatcher,
            board_id=settings.board_id,
            tenant_pattern=compile_tenant_pattern(settings.tenant_id_pattern),
        )

    def resolve_tenant(self, context: RequestContext) -> TenantResolution:
        return resolve_tenant(
            TenantSignals(
                route_params=context.route_params,
                query_params=context.query_params,
                headers=context.headers,
                configured_board_id=self.board_id,
                collector_url=self.dispatcher.collector_url,
            ),
            self.tenant_pattern,
        )

    def on_request_failure(
        self, exc: BaseException, context: RequestContext,
    ) -> tuple[int, dict]:
        """Log, report in the background, and build the client response."""
        logger.error(
            f"Unhandled error occurred on {context.method} {context.path}: {exc}",
            exc_info=exc,
            extra={
                "path": context.path,
                "method": context.method,
                "error_code": exc.code if isinstance(exc, BoardApiError) else None,
            },
        )
        tenant = self.resolve_tenant(context)
        logger.warning(
            f"Extracted boardId: {tenant.tenant_id or 'NULL'}",
            extra={
                "board_id": tenant.tenant_id,
                "tenant_source": tenant.source.value,
            },
        )
        if self.dispatcher.enabled:
            report = build_request_report(exc, context, tenant.tenant_id)
            self.dispatcher.dispatch_detached(report)
        else:
            logger.warning(
                "RUNTIME_ERROR_ENDPOINT_URL is not set - skipping error reporting",
            )
        return declared_status(exc), build_error_body(error_message(exc))


async def report_startup_failure(
    exc: BaseException,
    settings: Settings,
    dispatcher: ReportDispatcher | None = None,
) -> None:
    """Log a startup failure and make one bounded report attempt.

    The attempt's outcome is ignored; callers terminate the process afterwards.
    """
    logger.error(
        f"[STARTUP ERROR] Failed to start server: {error_message(exc)}",
        exc_info=exc,
    )
    owns_dispatcher = dispatcher is None
    if dispatcher is None:
        dispatcher = ReportDispatcher(
            settings.collector_url, settings.report_timeout_seconds,
        )
    try:
        if dispatcher.enabled:
            await dispatcher.dispatch(build_startup_report(exc, settings.board_id))
    finally:
        if owns_dispatcher:
            await dispatcher.aclose()
