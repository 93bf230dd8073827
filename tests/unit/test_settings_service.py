"""Unit tests for SettingsService."""

from unittest.mock import AsyncMock

import pytest
from sqlalchemy.exc import OperationalError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError
from app.models.user_settings import UserSettings
from app.repositories.settings_repo import SettingsRepository
from app.schemas.settings_schema import SettingsDocument, SettingsUpdate
from app.services.settings_service import SettingsService


@pytest.fixture
def settings_repo(db_session: AsyncSession) -> SettingsRepository:
    return SettingsRepository(db_session)


@pytest.fixture
def service(
    settings_repo: SettingsRepository,
    db_session: AsyncSession,
    default_settings: SettingsDocument,
) -> SettingsService:
    return SettingsService(
        settings_repo=settings_repo, session=db_session, defaults=default_settings
    )


def _failing_repo() -> AsyncMock:
    repo = AsyncMock(spec=SettingsRepository)
    failure = OperationalError("UPDATE user_settings", {}, Exception("disk I/O error"))
    repo.lock_for_update.side_effect = failure
    repo.find_settings_data.side_effect = failure
    return repo


class TestGetSettings:
    """Tests for SettingsService.get_settings."""

    @pytest.mark.asyncio
    async def test_first_read_stores_defaults(
        self,
        service: SettingsService,
        settings_repo: SettingsRepository,
        default_settings: SettingsDocument,
    ) -> None:
        assert await settings_repo.find_settings_data() is None

        document = await service.get_settings()

        assert document == default_settings
        assert await settings_repo.find_settings_data() == default_settings.to_json()

    @pytest.mark.asyncio
    async def test_corrupt_row_yields_defaults(
        self,
        service: SettingsService,
        db_session: AsyncSession,
        default_settings: SettingsDocument,
    ) -> None:
        db_session.add(UserSettings(user_id="default", settings_data="{broken"))
        await db_session.flush()

        assert await service.get_settings() == default_settings

    @pytest.mark.asyncio
    async def test_storage_failure_yields_defaults(
        self, default_settings: SettingsDocument
    ) -> None:
        service = SettingsService(
            settings_repo=_failing_repo(),
            session=AsyncMock(),
            defaults=default_settings,
        )
        assert await service.get_settings() == default_settings


class TestUpdateSettings:
    """Tests for SettingsService.update_settings."""

    @pytest.mark.asyncio
    async def test_partial_update_preserves_other_fields(
        self, service: SettingsService
    ) -> None:
        await service.update_settings(
            SettingsUpdate.model_validate(
                {
                    "openai": {"apiKey": "sk-one"},
                    "mcp": {"enabled": True, "serverUrl": "http://tools:9000"},
                }
            )
        )

        updated = await service.update_settings(
            SettingsUpdate.model_validate({"mcp": {"timeout": 5000}})
        )

        assert updated.mcp.timeout == 5000
        assert updated.mcp.enabled is True
        assert updated.mcp.server_url == "http://tools:9000"
        assert updated.openai.api_key == "sk-one"
        assert await service.get_settings() == updated

    @pytest.mark.asyncio
    async def test_update_without_existing_row(
        self, service: SettingsService, settings_repo: SettingsRepository
    ) -> None:
        updated = await service.update_settings(
            SettingsUpdate.model_validate({"personalization": {"username": "Ada"}})
        )

        assert updated.personalization.username == "Ada"
        assert await settings_repo.find_settings_data() == updated.to_json()

    @pytest.mark.asyncio
    async def test_update_replaces_corrupt_row(
        self,
        service: SettingsService,
        db_session: AsyncSession,
        default_settings: SettingsDocument,
    ) -> None:
        db_session.add(UserSettings(user_id="default", settings_data="[]"))
        await db_session.flush()

        updated = await service.update_settings(
            SettingsUpdate.model_validate({"claude": {"apiKey": "sk-ant"}})
        )

        assert updated.claude.api_key == "sk-ant"
        assert updated.openai == default_settings.openai

    @pytest.mark.asyncio
    async def test_storage_failure_surfaces(
        self, default_settings: SettingsDocument
    ) -> None:
        service = SettingsService(
            settings_repo=_failing_repo(),
            session=AsyncMock(),
            defaults=default_settings,
        )
        with pytest.raises(StorageError):
            await service.update_settings(
                SettingsUpdate.model_validate({"mcp": {"enabled": True}})
            )
