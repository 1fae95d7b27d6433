import logging
import threading
from types import TracebackType
from typing import Any, Self

from thunderbird_mcp.config import ClientConfig
from thunderbird_mcp.protocol.base import INTERNAL_ERROR, PARSE_ERROR, Request
from thunderbird_mcp.protocol.jsonrpc import JSONRPCRequest, JSONRPCResponse
from thunderbird_mcp.protocol.tools import (
    CallToolRequest,
    CallToolResult,
    ListToolsRequest,
    ListToolsResult,
)
from thunderbird_mcp.shared.decoding import decode_payload, decode_response
from thunderbird_mcp.shared.exceptions import (
    EmptyResultError,
    MCPError,
    RequestSerializationError,
    ResponseIdMismatchError,
    ToolError,
    TransportError,
)
from thunderbird_mcp.transport.base import Transport
from thunderbird_mcp.transport.http import HttpTransport

log = logging.getLogger(__name__)


class ClientSession:
    """
    Synchronous MCP client for the Thunderbird extension.

    One request in flight per call; each call blocks until the peer answers or
    the transport gives up. Sessions share nothing but their read-only config,
    so use one per thread if in doubt.
    """

    def __init__(
        self,
        transport: Transport | None = None,
        config: ClientConfig | None = None,
    ):
        self.config = config or ClientConfig()
        self.transport = transport or HttpTransport(
            url=self.config.url, timeout=self.config.timeout
        )
        self._request_id = 0
        self._id_lock = threading.Lock()

    def _next_request_id(self) -> int:
        with self._id_lock:
            self._request_id += 1
            return self._request_id

    def send_request(
        self,
        request: Request,
        transport_metadata: dict[str, Any] | None = None,
    ) -> tuple[JSONRPCResponse, dict[str, Any] | None]:
        """Send a request and decode the peer's response.

        Transport failures and undecodable bodies do not raise: they come back
        as error responses with INTERNAL_ERROR and PARSE_ERROR codes, so
        callers handle a single error shape.

        Args:
            request: The request to send.
            transport_metadata: Transport specific metadata to send with the
                request (extra HTTP headers, etc.)

        Returns:
            tuple[JSONRPCResponse, dict[str, Any] | None]: The response and the
                transport metadata of the reply, if one was received.

        Raises:
            ResponseIdMismatchError: If the peer answered another request id.
        """
        request_id = self._next_request_id()
        method = request.method  # type: ignore[attr-defined]
        log.debug("Sending %s (id=%s)", method, request_id)

        try:
            # pydantic's PydanticSerializationError is a ValueError.
            wire = JSONRPCRequest.from_request(request, request_id).to_wire()
        except ValueError as exc:
            return JSONRPCResponse.failure(
                request_id, PARSE_ERROR, f"Failed to serialize request: {exc}"
            ), None

        try:
            message = self.transport.send(wire, transport_metadata)
        except RequestSerializationError as exc:
            return JSONRPCResponse.failure(request_id, PARSE_ERROR, str(exc)), None
        except TransportError as exc:
            log.warning("Request %s failed: %s", request_id, exc)
            url = getattr(self.transport, "url", self.config.url)
            return JSONRPCResponse.failure(
                request_id,
                INTERNAL_ERROR,
                f"Connection failed: {exc}. Is Thunderbird running with the MCP"
                f" extension and reachable at {url}?",
                data=exc,
            ), None

        response = decode_response(message.body, request_id)
        if response.id is not None and response.id != request_id:
            raise ResponseIdMismatchError(request_id, response.id)
        return response, message.metadata

    def _request_result(
        self,
        request: Request,
        transport_metadata: dict[str, Any] | None = None,
    ) -> Any:
        response, metadata = self.send_request(request, transport_metadata)
        if response.error is not None:
            raise MCPError(response.error, transport_metadata=metadata)
        if not response.has_result:
            raise EmptyResultError()
        return response.result

    def call_tool(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        transport_metadata: dict[str, Any] | None = None,
    ) -> Any:
        """Call a tool and return its answer as a plain JSON value.

        The answer is taken from the first text content block and decoded as
        JSON, repairing raw control characters if needed. Text that still is
        not JSON is returned as a string. Results without content blocks are
        returned unchanged.

        Raises:
            MCPError: If the response carries an error. Transport failures use
                INTERNAL_ERROR, unreadable bodies PARSE_ERROR; peer codes are
                passed through.
            EmptyResultError: If the response has neither result nor error.
            ResponseIdMismatchError: If the peer answered another request id.
        """
        request = CallToolRequest(name=name, arguments=arguments or {})
        result = self._request_result(request, transport_metadata)
        return unwrap_tool_result(result)

    def call_tool_result(
        self,
        name: str,
        arguments: dict[str, Any] | None = None,
        transport_metadata: dict[str, Any] | None = None,
    ) -> CallToolResult:
        """Call a tool and return the typed content envelope, undecoded.

        Raises the same errors as `call_tool`, plus ValueError if the result
        is not an object.
        """
        request = CallToolRequest(name=name, arguments=arguments or {})
        result = self._request_result(request, transport_metadata)
        if not isinstance(result, dict):
            raise ValueError(
                f"Expected an object result from {name!r}, got {type(result).__name__}"
            )
        return CallToolResult.from_protocol(result)

    def list_tools(self, cursor: str | None = None) -> ListToolsResult:
        """List the tools the extension offers."""
        result = self._request_result(ListToolsRequest(cursor=cursor))
        if not isinstance(result, dict):
            raise ValueError(
                "Expected an object result from tools/list, got"
                f" {type(result).__name__}"
            )
        return ListToolsResult.from_protocol(result)

    def close(self) -> None:
        self.transport.close()

    def __enter__(self) -> Self:
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc_val: BaseException | None,
        exc_tb: TracebackType | None,
    ) -> None:
        self.close()
        return None


def unwrap_tool_result(result: Any) -> Any:
    """
    Extract a tool's answer from an MCP content envelope.

    Only the first block with type "text" is consulted. If its `text` is a
    string it is decoded; otherwise, or when there is no envelope at all, the
    result is returned unchanged.
    """
    if not isinstance(result, dict):
        return result
    content = result.get("content")
    if not isinstance(content, list):
        return result

    if result.get("isError") is True:
        log.warning("Tool reported isError; unwrapping its content anyway")

    block = next(
        (b for b in content if isinstance(b, dict) and b.get("type") == "text"),
        None,
    )
    if block is None or not isinstance(block.get("text"), str):
        return result
    return decode_payload(block["text"])


def check_tool_error(value: Any) -> Any:
    """Raise ToolError if a tool answered `{"error": "<message>"}`."""
    if isinstance(value, dict) and isinstance(value.get("error"), str):
        raise ToolError(value["error"])
    return value
