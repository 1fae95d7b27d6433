"""
Decode with repair: strict parse, then sanitize and retry, then fall back.
"""

import json
import logging
from collections.abc import Callable
from typing import Any, TypeVar

from thunderbird_mcp.protocol.base import PARSE_ERROR, RequestId
from thunderbird_mcp.protocol.jsonrpc import JSONRPCResponse
from thunderbird_mcp.shared.sanitize import sanitize_json

log = logging.getLogger(__name__)

T = TypeVar("T")

DECODE_ERRORS = (ValueError, RecursionError)


def tolerant_decode(
    raw: str,
    strict_decode: Callable[[str], T],
    fallback: Callable[[str, Exception], T],
) -> T:
    """
    Decode `raw`, repairing it once if needed.

    Args:
        raw: Text to decode.
        strict_decode: Parser that raises ValueError (JSONDecodeError,
            pydantic ValidationError) on bad input, or RecursionError on input
            nested too deeply. Other exceptions propagate.
        fallback: Called with the original text and the last decode error when
            the sanitized text does not decode either. Must not raise.

    Returns:
        The decoded value, or whatever `fallback` returns.
    """
    try:
        return strict_decode(raw)
    except DECODE_ERRORS as exc:
        log.debug("Strict decode failed (%s), retrying with sanitized text", exc)

    try:
        return strict_decode(sanitize_json(raw))
    except DECODE_ERRORS as exc:
        return fallback(raw, exc)


def _strict_response(text: str) -> JSONRPCResponse:
    return JSONRPCResponse.from_wire(json.loads(text))


def decode_response(raw: str, request_id: RequestId) -> JSONRPCResponse:
    """
    Turn an HTTP body into a response.

    A body that cannot be decoded even after sanitizing becomes a synthetic
    PARSE_ERROR response for `request_id`.
    """

    def fallback(text: str, exc: Exception) -> JSONRPCResponse:
        log.warning("Unparseable response body for request %r: %s", request_id, exc)
        return JSONRPCResponse.failure(
            request_id,
            PARSE_ERROR,
            f"Invalid JSON from Thunderbird (request id {request_id!r}): {exc}",
        )

    return tolerant_decode(raw, _strict_response, fallback)


def decode_payload(text: str) -> Any:
    """
    Decode the JSON text carried by a content block.

    Text that is not JSON even after sanitizing is returned as-is: tools may
    answer with a plain status message.
    """

    def fallback(raw: str, exc: Exception) -> Any:
        log.debug("Tool payload is not JSON, returning it as text: %s", exc)
        return raw

    return tolerant_decode(text, json.loads, fallback)
