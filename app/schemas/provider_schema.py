"""LLM provider credential test schemas."""

from pydantic import BaseModel, ConfigDict, Field


class CredentialTestRequest(BaseModel):
    """Credentials to validate against a provider."""

    model_config = ConfigDict(populate_by_name=True)

    api_key: str = Field(default="", alias="apiKey")
    base_url: str | None = Field(default=None, alias="baseUrl")


class CredentialTestResponse(BaseModel):
    model_config = ConfigDict(frozen=True)

    success: bool
    message: str
