"""Failure Report Schema — the JSON document sent to the collector endpoint.

Invariants:
    - Every field has a fallback, so a report is always constructible
    - Serialized with collector wire names (boardId, file, line, stackTrace,
      exceptionType, requestPath, requestMethod, userAgent)
    - Startup reports use STARTUP for path/method and STARTUP_ERROR for user agent

Design Decisions:
    - Python field names + aliases: code stays snake_case, wire stays camelCase
"""

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field

from board_api.core.errors import UNKNOWN_ERROR_MESSAGE

STACK_UNAVAILABLE = "N/A"
DEFAULT_ERROR_KIND = "Error"
STARTUP_MARKER = "STARTUP"
STARTUP_USER_AGENT = "STARTUP_ERROR"


def _now() -> datetime:
    return datetime.now(timezone.utc)


class FailureReport(BaseModel):
    """Structured description of one unhandled failure."""

    model_config = ConfigDict(populate_by_name=True, frozen=True)

    tenant_id: str | None = Field(None, alias="boardId")
    timestamp: datetime = Field(default_factory=_now)
    source_file: str | None = Field(None, alias="file")
    source_line: int | None = Field(None, alias="line", gt=0)
    stack_trace: str = Field(STACK_UNAVAILABLE, alias="stackTrace")
    message: str = UNKNOWN_ERROR_MESSAGE
    error_kind: str = Field(DEFAULT_ERROR_KIND, alias="exceptionType")
    request_path: str = Field(STARTUP_MARKER, alias="requestPath")
    request_method: str = Field(STARTUP_MARKER, alias="requestMethod")
    user_agent: str | None = Field(None, alias="userAgent")

    def to_payload(self) -> dict:
        """JSON-ready dict keyed by wire names (None kept as null)."""
        return self.model_dump(mode="json", by_alias=True)
