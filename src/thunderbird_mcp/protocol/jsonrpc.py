from typing import Any, Self

from pydantic import Field, model_validator

from thunderbird_mcp.protocol.base import (
    Error,
    ProtocolModel,
    Request,
    RequestId,
)

JSONRPC_VERSION = "2.0"


class JSONRPCRequest(ProtocolModel):
    """
    JSON-RPC 2.0 request wrapper for MCP requests.

    Wire format for requests that expect responses.
    """

    jsonrpc: str = Field(default=JSONRPC_VERSION, frozen=True)
    id: RequestId
    """
    Unique identifier for matching requests to responses.
    """

    request: Request
    """
    The MCP request payload.
    """

    @classmethod
    def from_request(cls, request: Request, id: RequestId) -> "JSONRPCRequest":
        return cls(id=id, request=request)

    def to_wire(self) -> dict[str, Any]:
        """Convert to wire format (spec-compliant JSON-RPC 2.0)"""
        protocol_data = self.request.to_protocol()
        protocol_data["jsonrpc"] = self.jsonrpc
        protocol_data["id"] = self.id
        return protocol_data


class JSONRPCResponse(ProtocolModel):
    """
    JSON-RPC 2.0 response as received from the peer.

    Holds either a result or an error, never both. A response holding neither
    is valid to decode; callers report it as "no result in response".
    """

    jsonrpc: str = JSONRPC_VERSION
    id: RequestId | None = None
    """
    Identifier mirrored from the request. Peers may send null when they could
    not read the request id.
    """

    result: Any = None
    """
    Result payload, any JSON value. A JSON null counts as no result.
    """

    error: Error | None = None
    """
    Error payload.
    """

    @model_validator(mode="after")
    def check_result_or_error(self) -> Self:
        if self.result is not None and self.error is not None:
            raise ValueError("Response must not carry both 'result' and 'error'")
        return self

    @classmethod
    def from_wire(cls, data: Any) -> "JSONRPCResponse":
        """Validate a decoded JSON body. Raises ValidationError on bad shapes."""
        return cls.model_validate(data)

    @classmethod
    def from_error(cls, error: Error, id: RequestId | None) -> "JSONRPCResponse":
        return cls(id=id, error=error)

    @classmethod
    def failure(
        cls,
        id: RequestId | None,
        code: int,
        message: str,
        data: Any = None,
    ) -> "JSONRPCResponse":
        """Build a synthetic error response for a failure on our side."""
        return cls.from_error(Error(code=code, message=message, data=data), id)

    @property
    def has_result(self) -> bool:
        return self.result is not None
