"""Token estimation request/response schemas."""

from pydantic import BaseModel, ConfigDict, Field


class TokenEstimateRequest(BaseModel):
    """Text to price for a given model."""

    prompt: str = ""
    completion: str = ""
    model: str = Field(default="gpt-4", min_length=1, max_length=100)


class TokenEstimateResponse(BaseModel):
    """Estimated token counts and dollar cost."""

    model_config = ConfigDict(frozen=True)

    model: str
    prompt_tokens: int
    completion_tokens: int
    total_tokens: int
    formatted_total: str
    cost: float
