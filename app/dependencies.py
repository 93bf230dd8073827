"""Global dependencies for the application."""

import httpx
from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.config import settings
from app.core.database import get_async_session
from app.repositories.chat_repo import ChatRepository
from app.repositories.settings_repo import SettingsRepository
from app.schemas.settings_schema import SettingsDocument, default_settings_document
from app.services.chat_service import ChatService
from app.services.health_service import HealthService
from app.services.mcp_bridge import MCPBridge
from app.services.provider_check import ProviderCheckService
from app.services.settings_service import SettingsService


def get_http_client(request: Request) -> httpx.AsyncClient:
    """Shared outbound HTTP client owned by the application lifespan."""
    return request.app.state.http_client


def get_default_settings() -> SettingsDocument:
    """Settings document used when nothing (valid) is stored."""
    return default_settings_document(settings.llm, settings.mcp)


# --- Repositories ---


def get_chat_repository(
    session: AsyncSession = Depends(get_async_session),
) -> ChatRepository:
    """Get ChatRepository bound to the current session."""
    return ChatRepository(session)


def get_settings_repository(
    session: AsyncSession = Depends(get_async_session),
) -> SettingsRepository:
    """Get SettingsRepository bound to the current session."""
    return SettingsRepository(session)


# --- Services ---


def get_chat_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
    session: AsyncSession = Depends(get_async_session),
) -> ChatService:
    """Get ChatService for the current request."""
    return ChatService(chat_repo=chat_repo, session=session)


def get_settings_service(
    settings_repo: SettingsRepository = Depends(get_settings_repository),
    session: AsyncSession = Depends(get_async_session),
    defaults: SettingsDocument = Depends(get_default_settings),
) -> SettingsService:
    """Get SettingsService for the default user."""
    return SettingsService(
        settings_repo=settings_repo, session=session, defaults=defaults
    )


def get_mcp_bridge(
    http_client: httpx.AsyncClient = Depends(get_http_client),
    settings_service: SettingsService = Depends(get_settings_service),
) -> MCPBridge:
    """Get MCPBridge reading its server address from stored settings."""
    return MCPBridge(
        http_client=http_client,
        settings_service=settings_service,
        fallback_server_url=settings.mcp.server_url,
    )


def get_provider_check_service(
    http_client: httpx.AsyncClient = Depends(get_http_client),
) -> ProviderCheckService:
    """Get ProviderCheckService using the shared HTTP client."""
    return ProviderCheckService(http_client=http_client, llm_config=settings.llm)


def get_health_service(
    chat_repo: ChatRepository = Depends(get_chat_repository),
    settings_service: SettingsService = Depends(get_settings_service),
) -> HealthService:
    """Get HealthService."""
    return HealthService(
        chat_repo=chat_repo,
        settings_service=settings_service,
        app_settings=settings,
    )
