"""Client configuration. Read once when a session is built, never mutated."""

import os

from pydantic import BaseModel, ConfigDict, Field

DEFAULT_URL = "http://localhost:8765/"
DEFAULT_TIMEOUT = 30.0


class ClientConfig(BaseModel):
    model_config = ConfigDict(frozen=True)

    url: str = DEFAULT_URL
    """
    Endpoint of the MCP extension's HTTP server.
    """

    timeout: float = Field(default=DEFAULT_TIMEOUT, gt=0)
    """
    Deadline in seconds for one whole request, body read included.
    """


def load_config_from_env() -> ClientConfig:
    url = os.environ.get("THUNDERBIRD_MCP_URL") or DEFAULT_URL
    timeout = os.environ.get("THUNDERBIRD_MCP_TIMEOUT") or DEFAULT_TIMEOUT
    return ClientConfig(url=url, timeout=timeout)
