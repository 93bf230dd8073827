"""JSON-RPC bridge between MCP clients and the remote tool server.

Protocol negotiation (``initialize``, ``tools/list``, ``resources/list``) is
answered locally. ``tools/call`` is forwarded to the tool server's RPC
endpoint; if that fails, the tool is tried once more as a plain HTTP POST to
``{serverUrl}/{toolName}``. There is no further retry.
"""

import uuid
from typing import Any
from urllib.parse import quote

import httpx
import structlog
from pydantic import ValidationError

from app.core.config import APP_VERSION
from app.core.exceptions import UpstreamServiceError
from app.schemas.mcp_schema import (
    INTERNAL_ERROR,
    INVALID_PARAMS,
    INVALID_REQUEST,
    METHOD_NOT_FOUND,
    JsonRpcRequest,
    JsonRpcResponse,
    MCPStatusResponse,
    ToolCallParams,
    ToolDescriptor,
)
from app.schemas.settings_schema import MCPSettings
from app.services.settings_service import SettingsService

logger = structlog.get_logger()

PROTOCOL_VERSION = "2024-11-05"
SERVER_INFO = {"name": "AUSTENTEL MCP Bridge", "version": APP_VERSION}


def _object_schema(
    properties: dict[str, Any] | None = None, required: list[str] | None = None
) -> dict[str, Any]:
    return {
        "type": "object",
        "properties": properties or {},
        "required": required or [],
    }


TOOL_CATALOG: tuple[ToolDescriptor, ...] = (
    ToolDescriptor(
        name="test",
        description="Test MCP connectivity",
        input_schema=_object_schema(),
    ),
    ToolDescriptor(
        name="ssh_command",
        description="Execute command on remote server",
        input_schema=_object_schema(
            {
                "host": {"type": "string", "description": "Target host IP address"},
                "command": {"type": "string", "description": "Command to execute"},
            },
            ["host", "command"],
        ),
    ),
    ToolDescriptor(
        name="check_port",
        description="Check if a network port is open",
        input_schema=_object_schema(
            {
                "host": {"type": "string", "description": "Target host"},
                "port": {
                    "type": "integer",
                    "description": "Port number",
                    "default": 80,
                },
            },
            ["host"],
        ),
    ),
    ToolDescriptor(
        name="freeswitch_status",
        description="Check FreeSWITCH service status",
        input_schema=_object_schema(),
    ),
    ToolDescriptor(
        name="valkey_status",
        description="Check Valkey cache status",
        input_schema=_object_schema(),
    ),
    ToolDescriptor(
        name="calculate",
        description="Add two numbers",
        input_schema=_object_schema(
            {
                "a": {"type": "number", "description": "First number"},
                "b": {"type": "number", "description": "Second number"},
            },
            ["a", "b"],
        ),
    ),
)


class MCPBridge:
    """Dispatches JSON-RPC calls; the tool server address is re-read per call."""

    def __init__(
        self,
        http_client: httpx.AsyncClient,
        settings_service: SettingsService,
        fallback_server_url: str,
    ) -> None:
        self._http = http_client
        self._settings_service = settings_service
        self._fallback_server_url = fallback_server_url

    async def _mcp_settings(self) -> tuple[MCPSettings, str, float]:
        settings = await self._settings_service.get_settings()
        mcp = settings.mcp
        server_url = (mcp.server_url or self._fallback_server_url).rstrip("/")
        return mcp, server_url, mcp.timeout / 1000

    # --- JSON-RPC entry points ---

    async def handle(self, payload: Any) -> JsonRpcResponse:
        """Validate a decoded request body and dispatch it."""
        request_id = payload.get("id") if isinstance(payload, dict) else None
        if not isinstance(request_id, (str, int)):
            request_id = None
        try:
            request = JsonRpcRequest.model_validate(payload)
        except ValidationError:
            return JsonRpcResponse.failure(
                request_id, INVALID_REQUEST, "Invalid Request"
            )
        return await self.dispatch(request)

    async def dispatch(self, request: JsonRpcRequest) -> JsonRpcResponse:
        """Route one call by method name."""
        logger.info("MCP request", method=request.method, request_id=request.id)
        match request.method:
            case "initialize":
                return JsonRpcResponse.success(request.id, self.initialize_result())
            case "tools/list":
                return JsonRpcResponse.success(request.id, self.tools_list_result())
            case "resources/list":
                return JsonRpcResponse.success(request.id, {"resources": []})
            case "tools/call":
                return await self._dispatch_tool_call(request)
            case _:
                return JsonRpcResponse.failure(
                    request.id, METHOD_NOT_FOUND, "Method not found"
                )

    async def _dispatch_tool_call(self, request: JsonRpcRequest) -> JsonRpcResponse:
        try:
            params = ToolCallParams.model_validate(request.params)
        except ValidationError:
            return JsonRpcResponse.failure(
                request.id, INVALID_PARAMS, "tools/call requires a tool name"
            )
        try:
            result = await self.call_tool(params.name, params.arguments)
        except UpstreamServiceError as exc:
            return JsonRpcResponse.failure(request.id, INTERNAL_ERROR, exc.message)
        return JsonRpcResponse.success(request.id, result)

    @staticmethod
    def initialize_result() -> dict[str, Any]:
        return {
            "protocolVersion": PROTOCOL_VERSION,
            "serverInfo": SERVER_INFO,
            "capabilities": {"tools": {}, "resources": {}},
        }

    @staticmethod
    def tools_list_result() -> dict[str, Any]:
        return {"tools": [tool.model_dump(by_alias=True) for tool in TOOL_CATALOG]}

    # --- Remote calls ---

    async def call_tool(self, name: str, arguments: dict[str, Any]) -> Any:
        """Run a tool on the remote server, falling back to direct HTTP once.

        Raises ``UpstreamServiceError`` when both attempts fail.
        """
        _, server_url, timeout = await self._mcp_settings()
        try:
            return await self._post_rpc(
                server_url,
                timeout,
                "tools/call",
                {"name": name, "arguments": arguments},
            )
        except UpstreamServiceError as exc:
            logger.warning(
                "MCP RPC call failed, trying direct HTTP",
                tool=name,
                error=exc.message,
            )
        return await self._post_direct(server_url, timeout, name, arguments)

    async def _post_rpc(
        self, server_url: str, timeout: float, method: str, params: dict[str, Any]
    ) -> Any:
        envelope = {
            "jsonrpc": "2.0",
            "method": method,
            "params": params,
            "id": uuid.uuid4().hex,
        }
        try:
            response = await self._http.post(server_url, json=envelope, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise UpstreamServiceError("MCP server timed out") from exc
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(f"MCP server unreachable: {exc}") from exc

        if response.is_error:
            raise UpstreamServiceError(f"MCP server error: {response.status_code}")
        try:
            data = response.json()
        except ValueError as exc:
            raise UpstreamServiceError("MCP server returned invalid JSON") from exc
        if not isinstance(data, dict):
            raise UpstreamServiceError("MCP server returned an invalid response")
        if data.get("error"):
            error = data["error"]
            message = error.get("message") if isinstance(error, dict) else None
            raise UpstreamServiceError(message or "MCP request failed")
        return data.get("result")

    async def _post_direct(
        self, server_url: str, timeout: float, name: str, arguments: dict[str, Any]
    ) -> Any:
        url = f"{server_url}/{quote(name, safe='')}"
        try:
            response = await self._http.post(url, json=arguments, timeout=timeout)
        except httpx.TimeoutException as exc:
            raise UpstreamServiceError("Tool execution timed out") from exc
        except httpx.HTTPError as exc:
            raise UpstreamServiceError(f"Tool execution failed: {exc}") from exc

        if response.is_error:
            raise UpstreamServiceError(
                f"Tool execution failed: {response.status_code}"
            )
        try:
            return response.json()
        except ValueError as exc:
            raise UpstreamServiceError("Tool returned invalid JSON") from exc

    async def status(self) -> MCPStatusResponse:
        """Probe the tool server unless MCP is disabled in settings."""
        mcp, server_url, timeout = await self._mcp_settings()
        if not mcp.enabled:
            return MCPStatusResponse(
                status="disabled",
                message="MCP is disabled in settings",
                url=server_url,
            )
        try:
            response = await self._http.get(server_url, timeout=timeout)
            response.raise_for_status()
            server = response.json()
        except httpx.TimeoutException:
            return MCPStatusResponse(
                status="disconnected", error="Connection timed out", url=server_url
            )
        except (httpx.HTTPError, ValueError) as exc:
            logger.info("MCP server unreachable", url=server_url, error=str(exc))
            return MCPStatusResponse(
                status="disconnected",
                error=str(exc) or "Cannot reach MCP server",
                url=server_url,
            )
        return MCPStatusResponse(status="connected", server=server, url=server_url)

    # --- Typed helpers for the catalog tools ---

    async def test_connection(self) -> Any:
        return await self.call_tool("test", {})

    async def ssh_command(self, host: str, command: str) -> Any:
        return await self.call_tool("ssh_command", {"host": host, "command": command})

    async def check_port(self, host: str, port: int = 80) -> Any:
        return await self.call_tool("check_port", {"host": host, "port": port})

    async def freeswitch_status(self) -> Any:
        return await self.call_tool("freeswitch_status", {})

    async def valkey_status(self) -> Any:
        return await self.call_tool("valkey_status", {})

    async def calculate(self, a: float, b: float) -> Any:
        return await self.call_tool("calculate", {"a": a, "b": b})
