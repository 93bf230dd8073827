"""Composite liveness check."""

from datetime import UTC, datetime

import structlog
from sqlalchemy.exc import SQLAlchemyError

from app.core.config import Settings
from app.repositories.chat_repo import ChatRepository
from app.schemas.health_schema import ApiAvailability, HealthResponse
from app.services.settings_service import SettingsService

logger = structlog.get_logger()


class HealthService:
    """Reports database reachability and which integrations are configured."""

    def __init__(
        self,
        chat_repo: ChatRepository,
        settings_service: SettingsService,
        app_settings: Settings,
    ) -> None:
        self._chat_repo = chat_repo
        self._settings_service = settings_service
        self._app_settings = app_settings

    async def check(self) -> HealthResponse:
        environment = self._app_settings.app.env
        try:
            await self._chat_repo.ping()
        except SQLAlchemyError as exc:
            logger.error("Health check: database unreachable", error=str(exc))
            return HealthResponse(
                status="unhealthy",
                timestamp=datetime.now(UTC),
                database="unavailable",
                environment=environment,
                error=str(exc),
            )

        stored = await self._settings_service.get_settings()
        llm = self._app_settings.llm
        apis = ApiAvailability(
            openai=llm.has_openai_key or bool(stored.openai.api_key),
            anthropic=llm.has_anthropic_key or bool(stored.claude.api_key),
            mcp=stored.mcp.enabled,
        )
        return HealthResponse(
            status="healthy",
            timestamp=datetime.now(UTC),
            database="connected",
            apis=apis,
            environment=environment,
        )
