from thunderbird_mcp.protocol.base import (
    INTERNAL_ERROR,
    PARSE_ERROR,
    Error,
    PaginatedRequest,
    PaginatedResult,
    ProtocolModel,
    Request,
    RequestId,
    Result,
)
from thunderbird_mcp.protocol.content import (
    AnyContent,
    AudioContent,
    ContentList,
    EmbeddedResource,
    ImageContent,
    TextContent,
    UnknownContent,
)
from thunderbird_mcp.protocol.jsonrpc import (
    JSONRPC_VERSION,
    JSONRPCRequest,
    JSONRPCResponse,
)
from thunderbird_mcp.protocol.tools import (
    CallToolRequest,
    CallToolResult,
    InputSchema,
    ListToolsRequest,
    ListToolsResult,
    Tool,
)

__all__ = [
    # Error codes
    "PARSE_ERROR",
    "INTERNAL_ERROR",
    # Base types
    "ProtocolModel",
    "Request",
    "PaginatedRequest",
    "Result",
    "PaginatedResult",
    "Error",
    "RequestId",
    # Content
    "AnyContent",
    "ContentList",
    "TextContent",
    "ImageContent",
    "AudioContent",
    "EmbeddedResource",
    "UnknownContent",
    # JSON-RPC
    "JSONRPC_VERSION",
    "JSONRPCRequest",
    "JSONRPCResponse",
    # Tools
    "InputSchema",
    "Tool",
    "ListToolsRequest",
    "ListToolsResult",
    "CallToolRequest",
    "CallToolResult",
]
