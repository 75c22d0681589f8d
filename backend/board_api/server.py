"""Server Entrypoint — binds the listening socket and runs uvicorn on it.

Invariants:
    - The socket is bound here, before uvicorn starts, so a bind failure is an
      exception this module sees
    - Bind failure → report_startup_failure() → exit status 1
"""

import asyncio
import logging
import socket
import sys

import uvicorn

from board_api.config import Settings, get_settings
from board_api.infrastructure.observability import setup_logging
from board_api.services.failure_reporting import report_startup_failure

logger = logging.getLogger(__name__)

STARTUP_FAILURE_EXIT_CODE = 1


def bind_socket(host: str, port: int) -> socket.socket:
    sock = socket.socket(socket.AF_INET, socket.SOCK_STREAM)
    try:
        sock.setsockopt(socket.SOL_SOCKET, socket.SO_REUSEADDR, 1)
        sock.bind((host, port))
    except OSError:
        sock.close()
        raise
    sock.set_inheritable(True)
    return sock


def fail_startup(exc: BaseException, settings: Settings) -> None:
    """Report a startup failure (bounded, outcome ignored) and exit non-zero."""
    asyncio.run(report_startup_failure(exc, settings))
    sys.exit(STARTUP_FAILURE_EXIT_CODE)


def main() -> None:
    settings = get_settings()
    setup_logging(settings.log_level, settings.log_format)
    try:
        sock = bind_socket(settings.host, settings.port)
    except OSError as e:
        fail_startup(e, settings)
        return
    logger.warning(f"Server is running on {settings.host}:{settings.port}")
    server = uvicorn.Server(
        uvicorn.Config(
            "board_api.main:app",
            log_level=settings.log_level.lower(),
        ),
    )
    server.run(sockets=[sock])


if __name__ == "__main__":
    main()
