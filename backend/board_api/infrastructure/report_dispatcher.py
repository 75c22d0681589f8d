"""Report Dispatcher — POSTs failure reports to the collector endpoint.

Invariants:
    - One POST per report: JSON body, Content-Type: application/json, no auth
    - Whole attempt bounded by timeout_seconds (default 5.0); on expiry the
      in-flight request is cancelled and the attempt counts as failed
    - Collector response (status + body) logged at WARNING, never interpreted
    - Failures logged at ERROR and swallowed; dispatch() never raises
    - No collector URL → no-op, logged at WARNING, no network call
    - No retry, no queue: at most one attempt per report

Design Decisions:
    - httpx.AsyncClient picks http/https from the URL scheme
    - dispatch_detached() is the only entry point used on the request path;
      it spawns a DetachedTasks task and returns without awaiting it
    - Created once per process (lifespan) and closed by aclose()
"""

import asyncio
import logging

import httpx

from board_api.infrastructure.detached import DetachedTasks
from board_api.schemas.failure_report import FailureReport

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_SECONDS = 5.0


class ReportDispatcher:
    """Delivers FailureReports to a collector URL, best-effort."""

    def __init__(
        self,
        collector_url: str | None,
        timeout_seconds: float = DEFAULT_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ):
        self.collector_url = collector_url or None
        self.timeout_seconds = timeout_seconds
        self._client: httpx.AsyncClient | None = None
        if self.collector_url:
            self._client = httpx.AsyncClient(
                timeout=httpx.Timeout(timeout_seconds),
                transport=transport,
            )
        self._tasks = DetachedTasks("failure-report")

    @property
    def enabled(self) -> bool:
        return self._client is not None

    @property
    def in_flight(self) -> int:
        return len(self._tasks)

    async def dispatch(self, report: FailureReport) -> bool:
        """Send one report. Returns True on a 2xx response, never raises."""
        if not self.enabled:
            _log_disabled()
            return False
        try:
            response = await asyncio.wait_for(
                self._post(report), timeout=self.timeout_seconds,
            )
        except asyncio.TimeoutError:
            logger.error(
                f"Failure report timed out after {self.timeout_seconds}s",
                extra={"collector_url": self.collector_url},
            )
            return False
        except httpx.HTTPError as e:
            logger.error(
                f"Failure report request error: {e!r}",
                extra={"collector_url": self.collector_url},
            )
            return False
        except Exception as e:
            logger.error(
                f"Failure report could not be sent: {e}",
                extra={"collector_url": self.collector_url},
                exc_info=True,
            )
            return False

        logger.warning(
            f"Error endpoint response: {response.status_code} - {response.text}",
            extra={"status_code": response.status_code},
        )
        return response.is_success

    def dispatch_detached(self, report: FailureReport) -> asyncio.Task | None:
        """Launch dispatch() without waiting for it. Requires a running loop."""
        if not self.enabled:
            _log_disabled()
            return None
        return self._tasks.spawn(self.dispatch(report), report.error_kind)

    async def aclose(self) -> None:
        """Let in-flight dispatches finish (bounded), then close the client."""
        await self._tasks.drain(self.timeout_seconds)
        if self._client is not None:
            await self._client.aclose()
            self._client = None

    async def _post(self, report: FailureReport) -> httpx.Response:
        logger.warning(
            f"Sending error to endpoint: {self.collector_url}",
            extra={"collector_url": self.collector_url},
        )
        return await self._client.post(
            self.collector_url,
            json=report.to_payload(),
            headers={"Content-Type": "application/json"},
        )


def _log_disabled() -> None:
    logger.warning(
        "RUNTIME_ERROR_ENDPOINT_URL is not set - skipping error reporting",
    )
