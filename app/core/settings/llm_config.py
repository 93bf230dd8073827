"""LLM provider configuration."""

from pydantic import BaseModel, SecretStr


class LLMConfig(BaseModel, frozen=True):
    """LLM provider settings."""

    openai_api_key: SecretStr
    openai_base_url: str
    anthropic_api_key: SecretStr
    anthropic_base_url: str
    test_timeout_seconds: float

    @property
    def has_openai_key(self) -> bool:
        """Check if an OpenAI key is configured in the environment."""
        return bool(self.openai_api_key.get_secret_value())

    @property
    def has_anthropic_key(self) -> bool:
        """Check if an Anthropic key is configured in the environment."""
        return bool(self.anthropic_api_key.get_secret_value())
