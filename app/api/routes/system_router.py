"""Health, credential test and token estimate endpoints."""

from typing import Annotated

from fastapi import APIRouter, Depends, Request
from fastapi.responses import JSONResponse

from app.core.config import settings
from app.core.rate_limit import limiter
from app.dependencies import get_health_service, get_provider_check_service
from app.schemas.health_schema import HealthResponse
from app.schemas.provider_schema import CredentialTestRequest, CredentialTestResponse
from app.schemas.response_schema import ApiResponse, success_response
from app.schemas.token_schema import TokenEstimateRequest, TokenEstimateResponse
from app.services.health_service import HealthService
from app.services.provider_check import ProviderCheckService
from app.services.token_counter import (
    TokenCount,
    calculate_cost,
    estimate_tokens,
    format_token_count,
)

router = APIRouter(prefix="/api", tags=["system"])

HealthServiceDep = Annotated[HealthService, Depends(get_health_service)]
ProviderCheckDep = Annotated[ProviderCheckService, Depends(get_provider_check_service)]


@router.get("/health", response_model=ApiResponse[HealthResponse])
async def health_check(service: HealthServiceDep) -> dict | JSONResponse:
    """Database reachability plus configured-integration summary."""
    result = await service.check()
    if result.status == "unhealthy":
        return JSONResponse(
            status_code=500,
            content=success_response(
                result.model_dump(mode="json"), status=500, message="Unhealthy"
            ),
        )
    return success_response(result)


@router.post("/test-openai", response_model=CredentialTestResponse)
@limiter.limit(settings.rate_limit.credential_test)
async def test_openai(
    request: Request,
    body: CredentialTestRequest,
    service: ProviderCheckDep,
) -> CredentialTestResponse:
    """Validate an OpenAI API key."""
    return await service.test_openai(body.api_key, body.base_url)


@router.post("/test-claude", response_model=CredentialTestResponse)
@limiter.limit(settings.rate_limit.credential_test)
async def test_claude(
    request: Request,
    body: CredentialTestRequest,
    service: ProviderCheckDep,
) -> CredentialTestResponse:
    """Validate an Anthropic API key."""
    return await service.test_claude(body.api_key, body.base_url)


@router.post("/tokens/estimate", response_model=ApiResponse[TokenEstimateResponse])
async def estimate(request: TokenEstimateRequest) -> dict:
    """Estimate tokens and cost for a prompt/completion pair."""
    counts = TokenCount.of(
        prompt_tokens=estimate_tokens(request.prompt, request.model),
        completion_tokens=estimate_tokens(request.completion, request.model),
    )
    return success_response(
        TokenEstimateResponse(
            model=request.model,
            prompt_tokens=counts.prompt_tokens,
            completion_tokens=counts.completion_tokens,
            total_tokens=counts.total_tokens,
            formatted_total=format_token_count(counts.total_tokens),
            cost=calculate_cost(counts, request.model),
        )
    )
