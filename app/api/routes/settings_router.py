"""Settings API router."""

from typing import Annotated

from fastapi import APIRouter, Depends

from app.dependencies import get_settings_service
from app.schemas.response_schema import ApiResponse, success_response
from app.schemas.settings_schema import SettingsDocument, SettingsUpdate
from app.services.settings_service import SettingsService

router = APIRouter(prefix="/api/settings", tags=["settings"])

SettingsServiceDep = Annotated[SettingsService, Depends(get_settings_service)]


@router.get("", response_model=ApiResponse[SettingsDocument])
async def get_settings(service: SettingsServiceDep) -> dict:
    """Fetch the settings document merged over defaults."""
    return success_response(await service.get_settings())


@router.api_route(
    "",
    methods=["POST", "PUT"],
    response_model=ApiResponse[SettingsDocument],
)
async def update_settings(
    request: SettingsUpdate,
    service: SettingsServiceDep,
) -> dict:
    """Merge a partial document into the stored settings."""
    updated = await service.update_settings(request)
    return success_response(updated, message="Settings updated")
