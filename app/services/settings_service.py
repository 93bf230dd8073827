"""Service layer for the settings document."""

import structlog
from pydantic import ValidationError
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.exceptions import StorageError
from app.repositories.settings_repo import SettingsRepository
from app.schemas.settings_schema import (
    SettingsDocument,
    SettingsUpdate,
    parse_settings_document,
)

logger = structlog.get_logger()


class SettingsService:
    """Read-never-fails, write-must-surface access to the settings document."""

    def __init__(
        self,
        settings_repo: SettingsRepository,
        session: AsyncSession,
        defaults: SettingsDocument,
    ) -> None:
        self._settings_repo = settings_repo
        self._session = session
        self._defaults = defaults

    async def _load(self) -> SettingsDocument:
        """Stored document over defaults; the row is created on first access."""
        raw = await self._settings_repo.find_settings_data()
        if raw is None:
            await self._settings_repo.insert_if_missing(self._defaults.to_json())
            return self._defaults
        return parse_settings_document(raw, self._defaults)

    async def get_settings(self) -> SettingsDocument:
        """Current settings; falls back to defaults on any storage or parse error."""
        try:
            return await self._load()
        except ValidationError as exc:
            logger.warning(
                "Stored settings are corrupt, using defaults",
                errors=exc.error_count(),
            )
            return self._defaults
        except SQLAlchemyError as exc:
            logger.warning("Settings unavailable, using defaults", error=str(exc))
            try:
                await self._session.rollback()
            except SQLAlchemyError:
                logger.warning("Rollback after settings read failure also failed")
            return self._defaults

    async def update_settings(self, update: SettingsUpdate) -> SettingsDocument:
        """Merge ``update`` into the stored document section by section.

        Fields the update does not mention keep their stored values. Raises
        ``StorageError`` if the write cannot be completed.
        """
        try:
            await self._settings_repo.lock_for_update()
            raw = await self._settings_repo.find_settings_data()
            current = self._defaults
            if raw is not None:
                try:
                    current = parse_settings_document(raw, self._defaults)
                except ValidationError:
                    logger.warning("Overwriting corrupt stored settings")
            merged = current.merged(update)
            await self._settings_repo.upsert_settings_data(merged.to_json())
        except SQLAlchemyError as exc:
            logger.error("Failed to update settings", error=str(exc))
            raise StorageError("Failed to update settings") from exc

        logger.info(
            "Settings updated",
            sections=sorted(update.model_dump(exclude_none=True).keys()),
        )
        return merged
