"""Tolerant MCP tool client for the Thunderbird MCP extension."""

from thunderbird_mcp.client.session import (
    ClientSession,
    check_tool_error,
    unwrap_tool_result,
)
from thunderbird_mcp.config import ClientConfig, load_config_from_env
from thunderbird_mcp.format import format_date, format_rows, truncate
from thunderbird_mcp.shared.exceptions import (
    EmptyResultError,
    MCPError,
    RequestSerializationError,
    ResponseIdMismatchError,
    ToolError,
    TransportError,
)
from thunderbird_mcp.shared.sanitize import sanitize_json

__all__ = [
    "ClientSession",
    "ClientConfig",
    "load_config_from_env",
    "check_tool_error",
    "unwrap_tool_result",
    "sanitize_json",
    "format_rows",
    "format_date",
    "truncate",
    "MCPError",
    "TransportError",
    "RequestSerializationError",
    "EmptyResultError",
    "ResponseIdMismatchError",
    "ToolError",
]
