"""HTTP transport: one JSON POST per request, body returned as text."""

import json
import logging
import time
from typing import Any

import httpx

from thunderbird_mcp.config import DEFAULT_TIMEOUT, DEFAULT_URL
from thunderbird_mcp.shared.exceptions import RequestSerializationError, TransportError
from thunderbird_mcp.transport.base import Transport, TransportMessage

log = logging.getLogger(__name__)


class HttpTransport(Transport):
    """
    POSTs JSON-RPC requests to the extension's local HTTP server.

    Any HTTP status is a valid answer: the body of a 4xx/5xx reply is returned
    like any other, since the peer may put a JSON-RPC error envelope in it.
    Only connection-level problems raise.

    `timeout` is a deadline for the whole exchange. httpx bounds each phase
    (connect, write, each read) by it. The deadline is checked again once the
    headers are in and after every body chunk.
    """

    def __init__(
        self,
        url: str = DEFAULT_URL,
        timeout: float = DEFAULT_TIMEOUT,
        http_client: httpx.Client | None = None,
    ):
        self.url = url
        self.timeout = timeout
        # An injected client belongs to the caller; we never close it.
        self._owns_client = http_client is None
        self._client = http_client or httpx.Client(timeout=timeout)

    def send(
        self, payload: dict[str, Any], metadata: dict[str, Any] | None = None
    ) -> TransportMessage:
        try:
            body = json.dumps(payload)
        except (TypeError, ValueError) as exc:
            raise RequestSerializationError(
                f"Failed to serialize request: {exc}"
            ) from exc

        headers = {"Content-Type": "application/json"}
        if metadata and metadata.get("headers"):
            headers.update(metadata["headers"])

        deadline = time.monotonic() + self.timeout
        try:
            with self._client.stream(
                "POST", self.url, content=body, headers=headers, timeout=self.timeout
            ) as response:
                if time.monotonic() > deadline:
                    raise TransportError(
                        f"timed out after {self.timeout}s waiting for response"
                    )
                chunks: list[bytes] = []
                for chunk in response.iter_bytes():
                    chunks.append(chunk)
                    if time.monotonic() > deadline:
                        raise TransportError(
                            f"timed out after {self.timeout}s reading response body"
                        )
                status_code = response.status_code
        except httpx.TimeoutException as exc:
            raise TransportError(f"timed out after {self.timeout}s: {exc}") from exc
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or type(exc).__name__) from exc

        try:
            text = b"".join(chunks).decode("utf-8")
        except UnicodeDecodeError as exc:
            raise TransportError(f"Failed to read response body: {exc}") from exc

        log.debug("HTTP %s from %s (%d bytes)", status_code, self.url, len(text))
        return TransportMessage(
            body=text, metadata={"status_code": status_code, "url": self.url}
        )

    def close(self) -> None:
        if self._owns_client:
            self._client.close()
