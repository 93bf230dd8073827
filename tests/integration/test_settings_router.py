"""Integration tests for /api/settings."""

from unittest.mock import AsyncMock

import pytest
from httpx import AsyncClient
from sqlalchemy.exc import OperationalError

from app.dependencies import get_settings_repository
from app.main import app
from app.repositories.settings_repo import SettingsRepository


class TestGetSettings:
    """GET /api/settings"""

    @pytest.mark.asyncio
    async def test_defaults_with_camel_case_keys(
        self, async_client: AsyncClient
    ) -> None:
        resp = await async_client.get("/api/settings")

        assert resp.status_code == 200
        data = resp.json()["data"]
        assert set(data) == {"openai", "claude", "mcp", "personalization"}
        assert data["openai"]["apiKey"] == ""
        assert data["claude"]["baseUrl"]
        assert data["mcp"]["serverUrl"] == ""
        assert data["personalization"]["emojiStyle"] == "native"

    @pytest.mark.asyncio
    async def test_storage_failure_returns_defaults(
        self, async_client: AsyncClient
    ) -> None:
        failing = AsyncMock(spec=SettingsRepository)
        failing.find_settings_data.side_effect = OperationalError(
            "SELECT", {}, Exception("unable to open database file")
        )
        app.dependency_overrides[get_settings_repository] = lambda: failing

        resp = await async_client.get("/api/settings")

        assert resp.status_code == 200
        assert resp.json()["data"]["personalization"]["username"] == "User"


class TestUpdateSettings:
    """POST/PUT /api/settings"""

    @pytest.mark.asyncio
    async def test_partial_updates_merge(self, async_client: AsyncClient) -> None:
        await async_client.post(
            "/api/settings",
            json={"mcp": {"enabled": True, "serverUrl": "http://tools:9000"}},
        )
        resp = await async_client.put("/api/settings", json={"mcp": {"timeout": 5000}})

        assert resp.json()["message"] == "Settings updated"
        mcp = (await async_client.get("/api/settings")).json()["data"]["mcp"]
        assert mcp == {"enabled": True, "serverUrl": "http://tools:9000", "timeout": 5000}

    @pytest.mark.asyncio
    async def test_other_sections_preserved(self, async_client: AsyncClient) -> None:
        await async_client.post("/api/settings", json={"openai": {"apiKey": "sk-1"}})
        await async_client.post(
            "/api/settings", json={"personalization": {"username": "Ada"}}
        )

        data = (await async_client.get("/api/settings")).json()["data"]

        assert data["openai"]["apiKey"] == "sk-1"
        assert data["personalization"]["username"] == "Ada"

    @pytest.mark.asyncio
    async def test_unknown_section_rejected(self, async_client: AsyncClient) -> None:
        resp = await async_client.post("/api/settings", json={"theme": {"dark": True}})

        assert resp.status_code == 200
        assert resp.json()["code"] == "VALIDATION_ERROR"

    @pytest.mark.asyncio
    async def test_invalid_timeout_rejected(self, async_client: AsyncClient) -> None:
        resp = await async_client.post("/api/settings", json={"mcp": {"timeout": 0}})

        assert resp.json()["status"] == 400
        mcp = (await async_client.get("/api/settings")).json()["data"]["mcp"]
        assert mcp["timeout"] == 30000

    @pytest.mark.asyncio
    async def test_storage_failure_surfaces(self, async_client: AsyncClient) -> None:
        failing = AsyncMock(spec=SettingsRepository)
        failing.lock_for_update.side_effect = OperationalError(
            "UPDATE", {}, Exception("database is locked")
        )
        app.dependency_overrides[get_settings_repository] = lambda: failing

        resp = await async_client.post("/api/settings", json={"mcp": {"enabled": True}})

        assert resp.status_code == 200
        assert resp.json() == {
            "status": 503,
            "message": "Failed to update settings",
            "code": "STORAGE_ERROR",
        }
