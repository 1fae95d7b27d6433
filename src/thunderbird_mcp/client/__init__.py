from thunderbird_mcp.client.session import (
    ClientSession,
    check_tool_error,
    unwrap_tool_result,
)

__all__ = ["ClientSession", "check_tool_error", "unwrap_tool_result"]
