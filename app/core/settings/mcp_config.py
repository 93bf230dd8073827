"""MCP bridge configuration."""

from pydantic import BaseModel


class MCPConfig(BaseModel, frozen=True):
    """Defaults for the MCP tool-server bridge."""

    server_url: str
    enabled: bool
    timeout_ms: int
