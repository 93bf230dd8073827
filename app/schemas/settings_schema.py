"""Settings document schemas.

The document has exactly four sections. On the wire every field is camelCase
(``apiKey``, ``serverUrl``), matching what the web client stores. Each section
has a full model (every field present, defaults filled in) and a patch model
(every field optional) used for merge-on-write.
"""

from typing import Literal, TypeVar

from pydantic import BaseModel, ConfigDict, Field, field_validator
from pydantic.alias_generators import to_camel

from app.core.settings import LLMConfig, MCPConfig

DEFAULT_OPENAI_BASE_URL = "https://api.openai.com/v1"
DEFAULT_CLAUDE_BASE_URL = "https://api.anthropic.com"
DEFAULT_MCP_TIMEOUT_MS = 30000

EmojiStyle = Literal["native", "twitter", "apple", "google"]


class _Section(BaseModel):
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )


class OpenAISettings(_Section):
    """OpenAI provider credentials."""

    api_key: str = ""
    enabled: bool = True
    base_url: str = DEFAULT_OPENAI_BASE_URL

    @field_validator("base_url")
    @classmethod
    def blank_base_url_means_default(cls, v: str) -> str:
        return v.strip() or DEFAULT_OPENAI_BASE_URL


class ClaudeSettings(_Section):
    """Anthropic provider credentials."""

    api_key: str = ""
    enabled: bool = True
    base_url: str = DEFAULT_CLAUDE_BASE_URL

    @field_validator("base_url")
    @classmethod
    def blank_base_url_means_default(cls, v: str) -> str:
        return v.strip() or DEFAULT_CLAUDE_BASE_URL


class MCPSettings(_Section):
    """Remote tool server connection."""

    enabled: bool = False
    server_url: str = ""
    timeout: int = Field(default=DEFAULT_MCP_TIMEOUT_MS, gt=0, le=600000)


class PersonalizationSettings(_Section):
    """Display preferences."""

    avatar: str = "default"
    username: str = "User"
    enable_emojis: bool = True
    emoji_style: EmojiStyle = "native"
    custom_avatar_url: str = ""


class OpenAISettingsPatch(_Section):
    api_key: str | None = None
    enabled: bool | None = None
    base_url: str | None = None


class ClaudeSettingsPatch(_Section):
    api_key: str | None = None
    enabled: bool | None = None
    base_url: str | None = None


class MCPSettingsPatch(_Section):
    enabled: bool | None = None
    server_url: str | None = None
    timeout: int | None = Field(default=None, gt=0, le=600000)


class PersonalizationSettingsPatch(_Section):
    avatar: str | None = None
    username: str | None = None
    enable_emojis: bool | None = None
    emoji_style: EmojiStyle | None = None
    custom_avatar_url: str | None = None


S = TypeVar("S", bound=_Section)


def _merge_section(current: S, patch: _Section | None) -> S:
    """Overlay the fields explicitly set in ``patch`` onto ``current``."""
    if patch is None:
        return current
    changes = {
        name: value
        for name, value in patch.model_dump(exclude_unset=True).items()
        if value is not None
    }
    # Re-validate so section-level normalisation (blank base URLs) still applies.
    return type(current).model_validate({**current.model_dump(), **changes})


class SettingsUpdate(BaseModel):
    """Partial settings document; unknown top-level keys are rejected."""

    model_config = ConfigDict(extra="forbid")

    openai: OpenAISettingsPatch | None = None
    claude: ClaudeSettingsPatch | None = None
    mcp: MCPSettingsPatch | None = None
    personalization: PersonalizationSettingsPatch | None = None


class SettingsDocument(BaseModel):
    """Complete settings document; all four sections are always present."""

    model_config = ConfigDict(extra="ignore")

    openai: OpenAISettings = Field(default_factory=OpenAISettings)
    claude: ClaudeSettings = Field(default_factory=ClaudeSettings)
    mcp: MCPSettings = Field(default_factory=MCPSettings)
    personalization: PersonalizationSettings = Field(
        default_factory=PersonalizationSettings
    )

    def merged(self, update: SettingsUpdate) -> "SettingsDocument":
        """Return a new document with ``update`` applied field by field."""
        return SettingsDocument(
            openai=_merge_section(self.openai, update.openai),
            claude=_merge_section(self.claude, update.claude),
            mcp=_merge_section(self.mcp, update.mcp),
            personalization=_merge_section(
                self.personalization, update.personalization
            ),
        )

    def to_json(self) -> str:
        """Serialize with camelCase keys for storage."""
        return self.model_dump_json(by_alias=True)


def default_settings_document(llm: LLMConfig, mcp: MCPConfig) -> SettingsDocument:
    """Compiled-in defaults, seeded from the environment configuration."""
    return SettingsDocument(
        openai=OpenAISettings(base_url=llm.openai_base_url),
        claude=ClaudeSettings(base_url=llm.anthropic_base_url),
        mcp=MCPSettings(enabled=mcp.enabled, timeout=mcp.timeout_ms),
    )


class _StoredSettings(SettingsUpdate):
    # Rows written by older clients may carry extra keys; ignore them on read.
    model_config = ConfigDict(extra="ignore")


def parse_settings_document(raw: str, defaults: SettingsDocument) -> SettingsDocument:
    """Parse a stored blob, filling any missing section or field from ``defaults``.

    Raises ``pydantic.ValidationError`` for corrupt JSON.
    """
    stored = _StoredSettings.model_validate_json(raw)
    return defaults.merged(stored)
