"""Rate limit configuration."""

from pydantic import BaseModel


class RateLimitConfig(BaseModel, frozen=True):
    """Rate limit strings in slowapi notation."""

    credential_test: str
