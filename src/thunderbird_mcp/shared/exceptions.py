from typing import Any

from thunderbird_mcp.protocol.base import Error, RequestId


class MCPError(Exception):
    """
    Exception type raised when a response carries an error object.

    Covers errors reported by the peer as well as the synthetic errors the
    session builds for transport failures and unparseable bodies. Inspect
    `error.code` to tell them apart.
    """

    def __init__(self, error: Error, transport_metadata: dict[str, Any] | None = None):
        """Initialize MCPError."""
        super().__init__(error.message)
        self.error = error
        self.transport_metadata = transport_metadata

    @property
    def code(self) -> int:
        return self.error.code


class TransportError(ConnectionError):
    """The peer could not be reached or the response body could not be read."""


class RequestSerializationError(ValueError):
    """The outgoing payload could not be encoded as JSON."""


class EmptyResultError(Exception):
    """A response carried neither a result nor an error."""

    def __init__(self, message: str = "No result in response"):
        super().__init__(message)


class ResponseIdMismatchError(ValueError):
    """A response answered a different request than the one that was sent."""

    def __init__(self, expected: RequestId, received: RequestId):
        super().__init__(
            f"Response id mismatch: expected {expected!r}, received {received!r}"
        )
        self.expected = expected
        self.received = received


class ToolError(Exception):
    """
    A tool ran but reported a failure in its own payload.

    Some tools answer with `{"error": "..."}` instead of a protocol-level error.
    """
