"""Error Hierarchy — typed exceptions with an optional declared HTTP status.

Invariants:
    - Every error has a code (str) and a category (ErrorCategory)
    - http_status is optional; None means "no declared status" and maps to 500
    - declared_status() only returns statuses in the 400-599 range
    - to_response() produces the client-facing {error, message} envelope

Design Decisions:
    - Status is a structured attribute, never read via getattr on arbitrary
      exceptions (ADR: no duck-typed status lookup in the interceptor)
"""

from enum import Enum

GENERIC_ERROR_MESSAGE = "An error occurred while processing your request"
UNKNOWN_ERROR_MESSAGE = "Unknown error"

_MIN_ERROR_STATUS = 400
_MAX_ERROR_STATUS = 599
_DEFAULT_STATUS = 500


class ErrorCategory(str, Enum):
    """High-level error categories for routing and handling."""
    INTERNAL = "internal"


class BoardApiError(Exception):
    """Base exception for all Board API errors."""

    def __init__(
        self,
        message: str,
        code: str = "INTERNAL_ERROR",
        category: ErrorCategory = ErrorCategory.INTERNAL,
        http_status: int | None = None,
    ):
        super().__init__(message)
        self.message = message
        self.code = code
        self.category = category
        self.http_status = http_status

    def declared_status(self) -> int:
        """Declared status when it is a valid error status, else 500."""
        return resolve_status_code(self.http_status)

    def to_response(self) -> dict:
        """Convert to the client-facing error envelope."""
        return build_error_body(self.message)


def resolve_status_code(declared: int | None) -> int:
    """Map an optional declared status to the status actually sent.

    Only 4xx/5xx are honored: the response always carries the {error, message}
    envelope, so a 1xx-3xx status would present a failure as a success.
    """
    if isinstance(declared, bool) or not isinstance(declared, int):
        return _DEFAULT_STATUS
    if _MIN_ERROR_STATUS <= declared <= _MAX_ERROR_STATUS:
        return declared
    return _DEFAULT_STATUS


def build_error_body(message: str | None) -> dict:
    """{error, message} body; message falls back to 'Unknown error'."""
    return {
        "error": GENERIC_ERROR_MESSAGE,
        "message": message or UNKNOWN_ERROR_MESSAGE,
    }

