"""API test fixtures — async DB, collector stub and FastAPI test clients.

Invariants:
    - Every test gets a fresh in-memory SQLite database
    - get_db dependency overridden to use the test DB session
    - app.state.failure_interceptor replaced by one posting to a CollectorStub
    - ASGITransport(raise_app_exceptions=False): Starlette re-raises handled
      exceptions after the catch-all response is sent
"""

import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import (
    AsyncSession, async_sessionmaker, create_async_engine,
)

from board_api.db.base import Base
from board_api.infrastructure.database import get_db
from board_api.main import app
from board_api.services.failure_reporting import FailureInterceptor
import board_api.models  # noqa: F401
from collector_stub import CollectorStub
from failing_app import build_failing_app


@pytest.fixture
async def test_engine():
    engine = create_async_engine(
        "sqlite+aiosqlite:///:memory:", echo=False,
    )
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield engine
    async with engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)
    await engine.dispose()


@pytest.fixture
async def test_session_factory(test_engine):
    return async_sessionmaker(
        test_engine, class_=AsyncSession, expire_on_commit=False,
    )


@pytest.fixture
async def test_db(test_session_factory):
    async with test_session_factory() as session:
        yield session


@pytest.fixture
def collector():
    return CollectorStub()


@pytest.fixture
async def interceptor(collector):
    interceptor = FailureInterceptor(collector.dispatcher())
    yield interceptor
    await interceptor.dispatcher.aclose()


@pytest.fixture
async def client(test_session_factory, interceptor):
    """FastAPI test client with DB and failure interceptor overridden."""
    async def override_get_db():
        async with test_session_factory() as session:
            yield session

    app.dependency_overrides[get_db] = override_get_db
    original = getattr(app.state, "failure_interceptor", None)
    app.state.failure_interceptor = interceptor

    async with AsyncClient(
        transport=ASGITransport(app=app, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c

    app.dependency_overrides.clear()
    app.state.failure_interceptor = original


@pytest.fixture
async def failing_client(interceptor):
    failing = build_failing_app(interceptor)
    async with AsyncClient(
        transport=ASGITransport(app=failing, raise_app_exceptions=False),
        base_url="http://test",
    ) as c:
        yield c
