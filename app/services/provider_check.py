"""One-shot credential checks against the OpenAI and Anthropic APIs."""

import httpx
import structlog

from app.core.settings import LLMConfig
from app.schemas.provider_schema import CredentialTestResponse

logger = structlog.get_logger()

ANTHROPIC_VERSION = "2023-06-01"
ANTHROPIC_PROBE_MODEL = "claude-3-haiku-20240307"

INVALID_CREDENTIALS_MESSAGE = "Invalid API key or connection failed"
CONNECTION_FAILED_MESSAGE = "Connection failed"


class ProviderCheckService:
    """Validates provider credentials with the cheapest request each API allows."""

    def __init__(self, http_client: httpx.AsyncClient, llm_config: LLMConfig) -> None:
        self._http = http_client
        self._llm = llm_config

    async def test_openai(
        self, api_key: str, base_url: str | None = None
    ) -> CredentialTestResponse:
        """List models with the key; any 2xx means the key works."""
        url = f"{(base_url or self._llm.openai_base_url).rstrip('/')}/models"
        try:
            response = await self._http.get(
                url,
                headers={
                    "Authorization": f"Bearer {api_key}",
                    "Content-Type": "application/json",
                },
                timeout=self._llm.test_timeout_seconds,
            )
        except httpx.HTTPError as exc:
            logger.info("OpenAI credential test failed to connect", error=str(exc))
            return CredentialTestResponse(
                success=False, message=CONNECTION_FAILED_MESSAGE
            )

        logger.info("OpenAI credential test", status=response.status_code)
        if response.is_success:
            return CredentialTestResponse(
                success=True, message="OpenAI API connection successful"
            )
        return CredentialTestResponse(success=False, message=INVALID_CREDENTIALS_MESSAGE)

    async def test_claude(
        self, api_key: str, base_url: str | None = None
    ) -> CredentialTestResponse:
        """Send a 1-token message; 2xx or 400 means the key was accepted."""
        url = f"{(base_url or self._llm.anthropic_base_url).rstrip('/')}/v1/messages"
        try:
            response = await self._http.post(
                url,
                headers={
                    "x-api-key": api_key,
                    "Content-Type": "application/json",
                    "anthropic-version": ANTHROPIC_VERSION,
                },
                json={
                    "model": ANTHROPIC_PROBE_MODEL,
                    "max_tokens": 1,
                    "messages": [{"role": "user", "content": "test"}],
                },
                timeout=self._llm.test_timeout_seconds,
            )
        except httpx.HTTPError as exc:
            logger.info("Claude credential test failed to connect", error=str(exc))
            return CredentialTestResponse(
                success=False, message=CONNECTION_FAILED_MESSAGE
            )

        logger.info("Claude credential test", status=response.status_code)
        # A 400 means authentication passed but the minimal request was rejected.
        if response.is_success or response.status_code == httpx.codes.BAD_REQUEST:
            return CredentialTestResponse(
                success=True, message="Claude API connection successful"
            )
        return CredentialTestResponse(success=False, message=INVALID_CREDENTIALS_MESSAGE)
