"""Health check schemas."""

from datetime import datetime
from typing import Literal

from pydantic import BaseModel, ConfigDict


class ApiAvailability(BaseModel):
    """Which upstream integrations are configured."""

    model_config = ConfigDict(frozen=True)

    openai: bool
    anthropic: bool
    mcp: bool


class HealthResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["healthy", "unhealthy"]
    timestamp: datetime
    database: Literal["connected", "unavailable"]
    apis: ApiAvailability | None = None
    environment: str
    error: str | None = None
