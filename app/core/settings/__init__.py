"""Domain-specific configuration models."""

from app.core.settings.app_config import AppConfig
from app.core.settings.database_config import DatabaseConfig
from app.core.settings.llm_config import LLMConfig
from app.core.settings.mcp_config import MCPConfig
from app.core.settings.rate_limit_config import RateLimitConfig
from app.core.settings.server_config import ServerConfig

__all__ = [
    "AppConfig",
    "DatabaseConfig",
    "LLMConfig",
    "MCPConfig",
    "RateLimitConfig",
    "ServerConfig",
]
