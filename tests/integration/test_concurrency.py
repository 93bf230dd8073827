"""Concurrent writes against a file-backed database."""

import asyncio
from collections.abc import AsyncGenerator
from pathlib import Path

import httpx
import pytest
from httpx import ASGITransport, AsyncClient
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.database import Database, get_async_session
from app.core.settings import DatabaseConfig
from app.dependencies import get_http_client
from app.main import app

CONCURRENT_APPENDS = 30


@pytest.fixture
async def file_database(tmp_path: Path) -> AsyncGenerator[Database, None]:
    """A real SQLite file, so every request gets its own connection."""
    database = Database(DatabaseConfig(url=f"sqlite+aiosqlite:///{tmp_path / 'chat.db'}"))
    await database.create_all()
    yield database
    await database.dispose()


@pytest.fixture
async def file_client(
    file_database: Database, http_client: httpx.AsyncClient
) -> AsyncGenerator[AsyncClient, None]:
    async def session_override() -> AsyncGenerator[AsyncSession, None]:
        async with file_database.session_factory() as session:
            try:
                yield session
                await session.commit()
            except Exception:
                await session.rollback()
                raise

    app.dependency_overrides[get_async_session] = session_override
    app.dependency_overrides[get_http_client] = lambda: http_client
    async with AsyncClient(transport=ASGITransport(app=app), base_url="http://test") as ac:
        yield ac
    app.dependency_overrides.clear()


class TestConcurrentAppends:
    """Parallel POST /api/chats/{id}/messages to one chat."""

    @pytest.mark.asyncio
    async def test_counters_match_messages(self, file_client: AsyncClient) -> None:
        chat = (await file_client.post("/api/chats", json={"title": "Burst"})).json()
        chat_id = chat["data"]["chat"]["id"]

        responses = await asyncio.gather(
            *(
                file_client.post(
                    f"/api/chats/{chat_id}/messages",
                    json={"role": "user", "content": "x"},
                )
                for _ in range(CONCURRENT_APPENDS)
            )
        )

        assert all(r.json()["status"] == 200 for r in responses)
        fetched = (await file_client.get(f"/api/chats/{chat_id}")).json()["data"]["chat"]
        assert fetched["message_count"] == CONCURRENT_APPENDS
        assert fetched["total_tokens"] == CONCURRENT_APPENDS
        messages = (await file_client.get(f"/api/chats/{chat_id}/messages")).json()
        assert len(messages["data"]["messages"]) == CONCURRENT_APPENDS


class TestConcurrentSettingsWrites:
    """Parallel POST /api/settings touching different sections."""

    @pytest.mark.asyncio
    async def test_no_section_is_lost(self, file_client: AsyncClient) -> None:
        await file_client.get("/api/settings")

        responses = await asyncio.gather(
            file_client.post("/api/settings", json={"mcp": {"timeout": 5000}}),
            file_client.post(
                "/api/settings", json={"personalization": {"username": "Bob"}}
            ),
            file_client.post("/api/settings", json={"openai": {"apiKey": "k"}}),
        )

        assert all(r.json()["status"] == 200 for r in responses)
        data = (await file_client.get("/api/settings")).json()["data"]
        assert data["mcp"]["timeout"] == 5000
        assert data["personalization"]["username"] == "Bob"
        assert data["openai"]["apiKey"] == "k"
