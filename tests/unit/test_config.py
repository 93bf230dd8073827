"""Tests for domain-specific configuration."""

from pathlib import Path

import pytest
from pydantic import SecretStr, ValidationError

from app.core.config import APP_VERSION, Settings
from app.core.settings import (
    AppConfig,
    DatabaseConfig,
    LLMConfig,
    MCPConfig,
    ServerConfig,
)


class TestLLMConfig:
    """LLMConfig frozen immutability and property tests."""

    def _config(self, openai_key: str = "", anthropic_key: str = "") -> LLMConfig:
        return LLMConfig(
            openai_api_key=SecretStr(openai_key),
            openai_base_url="https://api.openai.com/v1",
            anthropic_api_key=SecretStr(anthropic_key),
            anthropic_base_url="https://api.anthropic.com",
            test_timeout_seconds=30.0,
        )

    def test_frozen_immutability(self) -> None:
        config = self._config()
        with pytest.raises(ValidationError):
            config.openai_base_url = "http://other"  # type: ignore[misc]

    def test_has_keys(self) -> None:
        config = self._config(openai_key="sk-1")
        assert config.has_openai_key is True
        assert config.has_anthropic_key is False


class TestAppConfig:
    """AppConfig frozen immutability and property tests."""

    def test_frozen_immutability(self) -> None:
        config = AppConfig(name="test", version="1.0.0", env="development", debug=True)
        with pytest.raises(ValidationError):
            config.name = "changed"  # type: ignore[misc]

    def test_is_development(self) -> None:
        config = AppConfig(name="app", version="1.0.0", env="development", debug=True)
        assert config.is_development is True
        assert config.is_production is False

    def test_is_production(self) -> None:
        config = AppConfig(name="app", version="1.0.0", env="production", debug=False)
        assert config.is_production is True
        assert config.is_development is False


class TestDatabaseConfig:
    """DatabaseConfig path resolution tests."""

    def test_file_path(self) -> None:
        config = DatabaseConfig(url="sqlite+aiosqlite:///./data/chat.db")
        assert config.is_memory is False
        assert config.file_path == Path("./data/chat.db")

    def test_memory(self) -> None:
        config = DatabaseConfig(url="sqlite+aiosqlite:///:memory:")
        assert config.is_memory is True
        assert config.file_path is None


class TestServerConfig:
    """ServerConfig frozen immutability tests."""

    def test_frozen_immutability(self) -> None:
        config = ServerConfig(host="0.0.0.0", port=8000)
        with pytest.raises(ValidationError):
            config.port = 9000  # type: ignore[misc]


class TestMCPConfig:
    """MCPConfig field access tests."""

    def test_field_access(self) -> None:
        config = MCPConfig(server_url="http://tools:8083", enabled=True, timeout_ms=500)
        assert config.server_url == "http://tools:8083"
        assert config.enabled is True
        assert config.timeout_ms == 500


class TestSettingsDomainProperties:
    """Settings domain property access tests."""

    def test_defaults(self, monkeypatch: pytest.MonkeyPatch) -> None:
        for name in ("APP_NAME", "DEBUG", "DATABASE_URL", "MCP_SERVER_URL", "MCP_ENABLED"):
            monkeypatch.delenv(name, raising=False)
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.app.name == "austentel-chat"
        assert s.app.version == APP_VERSION
        assert s.app.debug is False
        assert s.database.url == "sqlite+aiosqlite:///./data/chat.db"
        assert s.mcp.server_url == "http://localhost:8083"
        assert s.mcp.enabled is False
        assert s.mcp.timeout_ms == 30000
        assert s.rate_limit.credential_test == "10/minute"

    def test_llm_property(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("OPENAI_API_KEY", "test-openai-key")
        monkeypatch.setenv("ANTHROPIC_API_KEY", "test-anthropic-key")
        monkeypatch.setenv("PROVIDER_TEST_TIMEOUT_SECONDS", "12")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.llm.openai_api_key.get_secret_value() == "test-openai-key"
        assert s.llm.anthropic_api_key.get_secret_value() == "test-anthropic-key"
        assert s.llm.test_timeout_seconds == 12.0

    def test_app_property(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("APP_NAME", "my-app")
        monkeypatch.setenv("APP_ENV", "production")
        monkeypatch.setenv("DEBUG", "false")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.app.name == "my-app"
        assert s.app.env == "production"
        assert s.app.debug is False
        assert s.is_development is False

    def test_mcp_property(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MCP_SERVER_URL", "http://tools:9000")
        monkeypatch.setenv("MCP_ENABLED", "true")
        monkeypatch.setenv("MCP_TIMEOUT_MS", "5000")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.mcp.server_url == "http://tools:9000"
        assert s.mcp.enabled is True
        assert s.mcp.timeout_ms == 5000

    def test_mcp_timeout_bounds(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("MCP_TIMEOUT_MS", "600001")
        with pytest.raises(ValidationError):
            Settings(_env_file=None)  # type: ignore[call-arg]

    def test_server_property(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("HOST", "127.0.0.1")
        monkeypatch.setenv("PORT", "9000")
        s = Settings(_env_file=None)  # type: ignore[call-arg]
        assert s.server.host == "127.0.0.1"
        assert s.server.port == 9000
