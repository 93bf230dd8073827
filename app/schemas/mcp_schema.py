"""JSON-RPC 2.0 envelopes and MCP tool descriptors."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

# JSON-RPC 2.0 error codes
PARSE_ERROR = -32700
INVALID_REQUEST = -32600
METHOD_NOT_FOUND = -32601
INVALID_PARAMS = -32602
INTERNAL_ERROR = -32603

RequestId = str | int | None


class JsonRpcRequest(BaseModel):
    """Inbound JSON-RPC call."""

    jsonrpc: Literal["2.0"] = "2.0"
    method: str = Field(..., min_length=1)
    params: dict[str, Any] = Field(default_factory=dict)
    id: RequestId = None


class JsonRpcError(BaseModel):
    code: int
    message: str
    data: Any | None = None


class JsonRpcResponse(BaseModel):
    """Outbound JSON-RPC reply; exactly one of ``result``/``error`` is set."""

    jsonrpc: Literal["2.0"] = "2.0"
    id: RequestId = None
    result: Any | None = None
    error: JsonRpcError | None = None

    @classmethod
    def success(cls, request_id: RequestId, result: Any) -> "JsonRpcResponse":
        return cls(id=request_id, result=result)

    @classmethod
    def failure(
        cls, request_id: RequestId, code: int, message: str
    ) -> "JsonRpcResponse":
        return cls(id=request_id, error=JsonRpcError(code=code, message=message))

    def to_wire(self) -> dict[str, Any]:
        """Dump without the member that does not apply."""
        body: dict[str, Any] = {"jsonrpc": self.jsonrpc, "id": self.id}
        if self.error is not None:
            body["error"] = self.error.model_dump(exclude_none=True)
        else:
            body["result"] = self.result
        return body


class ToolDescriptor(BaseModel):
    """Tool advertised to MCP clients via ``tools/list``."""

    model_config = ConfigDict(frozen=True, populate_by_name=True)

    name: str
    description: str
    input_schema: dict[str, Any] = Field(alias="inputSchema")


class ToolCallParams(BaseModel):
    """``params`` of a ``tools/call`` request."""

    name: str = Field(..., min_length=1)
    arguments: dict[str, Any] = Field(default_factory=dict)


class MCPStatusResponse(BaseModel):
    """Result of probing the configured tool server."""

    model_config = ConfigDict(frozen=True)

    status: Literal["connected", "disconnected", "disabled"]
    url: str
    server: Any | None = None
    message: str | None = None
    error: str | None = None
