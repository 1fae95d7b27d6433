"""
Tool messages: the only MCP surface the Thunderbird extension needs.

1. **Discovery**: `ListToolsRequest` asks the extension what it can do
   (`searchMessages`, `getMessage`, `listFolders`, ...).
2. **Execution**: `CallToolRequest` runs one tool with a JSON argument object.
3. **Answer**: `CallToolResult` wraps the tool's answer in content blocks. The
   first text block usually holds JSON text, sometimes plain prose.
"""

from typing import Any, Literal

from pydantic import Field

from thunderbird_mcp.protocol.base import (
    PaginatedRequest,
    PaginatedResult,
    ProtocolModel,
    Request,
    Result,
)
from thunderbird_mcp.protocol.content import ContentList


class InputSchema(ProtocolModel):
    """
    JSON schema describing the arguments a tool accepts.

    Always of type "object": tools take named parameters.
    """

    type: Literal["object"] = Field(default="object", frozen=True)
    properties: dict[str, Any] | None = None
    required: list[str] | None = None


class Tool(ProtocolModel):
    """A tool advertised by the peer."""

    name: str
    description: str | None = None
    input_schema: InputSchema = Field(alias="inputSchema")


class ListToolsRequest(PaginatedRequest):
    """Ask the server what tools are available."""

    method: Literal["tools/list"] = "tools/list"


class ListToolsResult(PaginatedResult):
    """Server's response listing available tools."""

    tools: list[Tool]


class CallToolRequest(Request):
    """
    Execute a specific tool with given arguments.
    """

    method: Literal["tools/call"] = "tools/call"
    name: str
    """
    Name of the tool to call.
    """

    arguments: dict[str, Any] = Field(default_factory=dict)
    """
    Arguments to pass to the tool. Always sent, empty when there are none.
    """


class CallToolResult(Result):
    """Result from executing a tool."""

    content: ContentList = Field(default_factory=list)
    """
    The tool's output blocks, in the order the peer sent them.
    """

    is_error: bool = Field(default=False, alias="isError")
    """
    True if the tool itself failed. This is a tool-level flag, not a
    protocol-level error.
    """
