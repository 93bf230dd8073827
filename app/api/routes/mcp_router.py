"""MCP bridge API router."""

import json
from typing import Annotated

import structlog
from fastapi import APIRouter, Depends, Request

from app.dependencies import get_mcp_bridge
from app.schemas.mcp_schema import (
    INTERNAL_ERROR,
    PARSE_ERROR,
    JsonRpcResponse,
    MCPStatusResponse,
)
from app.schemas.response_schema import ApiResponse, success_response
from app.services.mcp_bridge import MCPBridge

logger = structlog.get_logger()

router = APIRouter(prefix="/api/mcp", tags=["mcp"])

MCPBridgeDep = Annotated[MCPBridge, Depends(get_mcp_bridge)]


@router.get("", response_model=ApiResponse[MCPStatusResponse])
async def mcp_status(bridge: MCPBridgeDep) -> dict:
    """Probe the configured tool server."""
    return success_response(await bridge.status())


@router.post("")
async def mcp_rpc(request: Request, bridge: MCPBridgeDep) -> dict:
    """JSON-RPC 2.0 endpoint; always answers with a JSON-RPC envelope."""
    try:
        payload = json.loads(await request.body())
    except ValueError:
        return JsonRpcResponse.failure(None, PARSE_ERROR, "Parse error").to_wire()

    try:
        response = await bridge.handle(payload)
    except Exception as exc:
        logger.exception("MCP dispatch failed")
        request_id = payload.get("id") if isinstance(payload, dict) else None
        response = JsonRpcResponse.failure(
            request_id, INTERNAL_ERROR, str(exc) or "Internal error"
        )
    return response.to_wire()
