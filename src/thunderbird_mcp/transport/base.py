"""Transport layer abstraction for the JSON-RPC client."""

from abc import ABC, abstractmethod
from dataclasses import dataclass
from types import TracebackType
from typing import Any, Self


@dataclass
class TransportMessage:
    """A raw response body with transport-specific metadata."""

    body: str
    metadata: dict[str, Any] | None = None


class Transport(ABC):
    """Abstract transport for request/response delivery.

    Moves one serialized request to the peer and hands back the raw body of
    its answer. Knows nothing about JSON-RPC semantics or decoding.
    """

    @abstractmethod
    def send(
        self, payload: dict[str, Any], metadata: dict[str, Any] | None = None
    ) -> TransportMessage:
        """Send a request and return the raw response.

        Raises:
            TransportError: If the peer cannot be reached or the body cannot
                be read.
            RequestSerializationError: If the payload is not JSON serializable.
        """

    @abstractmethod
    def close(self) -> None:
        """Close the transport."""

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
