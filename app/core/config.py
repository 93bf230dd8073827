"""Application configuration using Pydantic Settings V2."""

from functools import cached_property
from typing import Literal

from pydantic import Field, SecretStr
from pydantic_settings import BaseSettings, SettingsConfigDict

from app.core.settings import (
    AppConfig,
    DatabaseConfig,
    LLMConfig,
    MCPConfig,
    RateLimitConfig,
    ServerConfig,
)

APP_VERSION = "1.0.0"


class Settings(BaseSettings):
    """Application settings loaded from environment variables.

    Flat fields are loaded directly from environment variables.
    Domain properties provide grouped access (e.g. settings.mcp.server_url).
    These are process-level defaults; the per-user settings document stored
    in the database is layered on top of them at request time.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore",
    )

    # App
    app_name: str = Field(
        default="austentel-chat",
        description="Application name",
    )
    app_env: Literal["development", "staging", "production"] = Field(
        default="development",
        description="Application environment",
    )
    debug: bool = Field(
        default=False,
        description="Debug mode (SQL echo; tracebacks replace the 500 error body)",
    )

    # Database
    database_url: str = Field(
        default="sqlite+aiosqlite:///./data/chat.db",
        description="Async SQLite database URL",
    )

    # OpenAI
    openai_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Default OpenAI API key",
    )
    openai_base_url: str = Field(
        default="https://api.openai.com/v1",
        description="OpenAI API base URL",
    )

    # Anthropic
    anthropic_api_key: SecretStr = Field(
        default=SecretStr(""),
        description="Default Anthropic API key",
    )
    anthropic_base_url: str = Field(
        default="https://api.anthropic.com",
        description="Anthropic API base URL",
    )
    provider_test_timeout_seconds: float = Field(
        default=30.0,
        gt=0,
        le=300,
        description="Timeout for provider credential checks",
    )

    # MCP
    mcp_server_url: str = Field(
        default="http://localhost:8083",
        description="Fallback MCP tool server URL",
    )
    mcp_enabled: bool = Field(
        default=False,
        description="Default value of the MCP enabled flag",
    )
    mcp_timeout_ms: int = Field(
        default=30000,
        ge=1000,
        le=600000,
        description="Default MCP request timeout in milliseconds",
    )

    # Rate limits
    credential_test_rate_limit: str = Field(
        default="10/minute",
        description="Rate limit for provider credential test endpoints",
    )

    # Server
    host: str = Field(
        default="0.0.0.0",
        description="Server host",
    )
    port: int = Field(
        default=8000,
        ge=1,
        le=65535,
        description="Server port",
    )

    # --- Domain properties ---

    @cached_property
    def app(self) -> AppConfig:
        """Application environment configuration."""
        return AppConfig(
            name=self.app_name,
            version=APP_VERSION,
            env=self.app_env,
            debug=self.debug,
        )

    @cached_property
    def database(self) -> DatabaseConfig:
        """Database connection configuration."""
        return DatabaseConfig(url=self.database_url)

    @cached_property
    def llm(self) -> LLMConfig:
        """LLM provider configuration."""
        return LLMConfig(
            openai_api_key=self.openai_api_key,
            openai_base_url=self.openai_base_url,
            anthropic_api_key=self.anthropic_api_key,
            anthropic_base_url=self.anthropic_base_url,
            test_timeout_seconds=self.provider_test_timeout_seconds,
        )

    @cached_property
    def mcp(self) -> MCPConfig:
        """MCP bridge configuration."""
        return MCPConfig(
            server_url=self.mcp_server_url,
            enabled=self.mcp_enabled,
            timeout_ms=self.mcp_timeout_ms,
        )

    @cached_property
    def rate_limit(self) -> RateLimitConfig:
        """Rate limit configuration."""
        return RateLimitConfig(credential_test=self.credential_test_rate_limit)

    @cached_property
    def server(self) -> ServerConfig:
        """Server configuration."""
        return ServerConfig(
            host=self.host,
            port=self.port,
        )

    # --- Convenience properties (delegate to domain configs) ---

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.app.is_development


# Global settings instance
settings = Settings()
