"""Root conftest — shared test configuration."""

import os

# Tests never report to a real collector or pick up a real board id
os.environ.pop("RUNTIME_ERROR_ENDPOINT_URL", None)
os.environ.pop("BOARD_ID", None)
os.environ.setdefault(
    "DATABASE_URL",
    "sqlite+aiosqlite:///:memory:",
)
