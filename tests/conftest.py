"""Pytest configuration and fixtures."""

from collections.abc import AsyncGenerator

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Base, Database
from app.core.rate_limit import limiter
from app.core.settings import DatabaseConfig, LLMConfig, MCPConfig
from app.models.chat import Chat  # noqa: F401
from app.models.message import Message  # noqa: F401
from app.models.user_settings import UserSettings  # noqa: F401
from app.schemas.settings_schema import SettingsDocument, default_settings_document
from tests.fakes import FakeRemote

# --- Test DB (SQLite in-memory) ---

test_database = Database(DatabaseConfig(url="sqlite+aiosqlite:///:memory:"))
test_session_factory = test_database.session_factory


@pytest.fixture(autouse=True)
async def setup_db() -> AsyncGenerator[None, None]:
    """Create all tables before each test, drop after."""
    async with test_database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)
    yield
    async with test_database.engine.begin() as conn:
        await conn.run_sync(Base.metadata.drop_all)


async def override_get_async_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a test database session."""
    async with test_session_factory() as session:
        try:
            yield session
            await session.commit()
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()


@pytest.fixture
async def db_session() -> AsyncGenerator[AsyncSession, None]:
    """Provide a raw async session for repository tests."""
    async with test_session_factory() as session:
        yield session


@pytest.fixture(autouse=True)
def reset_rate_limits() -> None:
    """Start each test with empty rate-limit counters."""
    limiter.reset()


# --- Settings defaults ---


@pytest.fixture
def default_settings() -> SettingsDocument:
    """Defaults as built from an empty environment."""
    return default_settings_document(
        LLMConfig(
            openai_api_key="",
            openai_base_url="https://api.openai.com/v1",
            anthropic_api_key="",
            anthropic_base_url="https://api.anthropic.com",
            test_timeout_seconds=5.0,
        ),
        MCPConfig(server_url="http://mcp.test:8083", enabled=False, timeout_ms=30000),
    )


# --- Remote servers (httpx.MockTransport) ---


@pytest.fixture
def fake_remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
async def http_client(fake_remote: FakeRemote) -> AsyncGenerator[httpx.AsyncClient, None]:
    """Outbound client whose requests never leave the process."""
    async with httpx.AsyncClient(
        transport=httpx.MockTransport(fake_remote.handler)
    ) as client:
        yield client


# --- App override & client fixtures ---


def _get_app(http_client: httpx.AsyncClient):  # type: ignore[no-untyped-def]
    """Import app lazily and apply overrides."""
    from app.core.database import get_async_session as original_dep
    from app.dependencies import get_http_client
    from app.main import app

    app.dependency_overrides[original_dep] = override_get_async_session
    app.dependency_overrides[get_http_client] = lambda: http_client
    return app


@pytest.fixture
async def async_client(
    http_client: httpx.AsyncClient,
) -> AsyncGenerator[AsyncClient, None]:
    """Create an async test client for the API."""
    application = _get_app(http_client)
    transport = ASGITransport(app=application)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    application.dependency_overrides.clear()
