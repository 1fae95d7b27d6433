import traceback
from typing import Annotated, Any, TypeVar

from pydantic import BaseModel, ConfigDict, Field, StrictInt, field_validator

RequestId = Annotated[
    int | str, "Unique identifier for a request. Can be a string or integer."
]
Cursor = Annotated[str, "Opaque string used for pagination in list operations."]


ResultT = TypeVar("ResultT", bound="Result")


class ProtocolModel(BaseModel):
    model_config = ConfigDict(extra="allow", populate_by_name=True)


class Request(ProtocolModel):
    """
    Base class for MCP requests.

    Subclasses pin `method` and declare their params as fields. Field aliases
    give the camelCase names used on the wire.
    """

    metadata: dict[str, Any] | None = Field(default=None)
    """
    Additional request metadata, sent as `params._meta`.
    """

    def to_protocol(self) -> dict[str, Any]:
        """Convert to protocol-level representation"""
        params = self.model_dump(
            exclude={"method", "metadata"},
            by_alias=True,
            exclude_none=True,
            mode="json",
        )
        if self.metadata:
            params["_meta"] = self.metadata

        # `method` is declared on every subclass, not on the base class.
        result: dict[str, Any] = {"method": self.method}  # type: ignore[attr-defined]
        if params:
            result["params"] = params
        return result


class PaginatedRequest(Request):
    """
    Base class for requests that support pagination.

    If `cursor` is set, the server returns results starting after it.
    """

    cursor: Cursor | None = None


class Result(ProtocolModel):
    """
    Base class for MCP results.

    Results are the `result` member of a successful response.
    """

    metadata: dict[str, Any] | None = Field(default=None)
    """
    Additional result metadata, carried as `_meta`.
    """

    @classmethod
    def from_protocol(cls: type[ResultT], data: dict[str, Any]) -> ResultT:
        """Convert from protocol-level representation."""
        kwargs: dict[str, Any] = {}
        if data.get("_meta"):
            kwargs["metadata"] = data["_meta"]

        for field_name, field_info in cls.model_fields.items():
            if field_name == "metadata":
                continue
            param_key = field_info.alias if field_info.alias else field_name
            if param_key in data:
                kwargs[field_name] = data[param_key]

        return cls(**kwargs)


class PaginatedResult(Result):
    """
    Base class for results that support pagination.

    A present `next_cursor` means more results may be available.
    """

    next_cursor: Cursor | None = Field(default=None, alias="nextCursor")


PARSE_ERROR = -32700
INTERNAL_ERROR = -32603


class Error(ProtocolModel):
    """
    JSON-RPC error object. Immutable once built.

    Example:
        Error(code=INTERNAL_ERROR, message="Connection failed", data=exc)
    """

    model_config = ConfigDict(frozen=True)

    code: StrictInt
    """
    Error type code. Peer-defined codes are kept as received; a code sent as
    a JSON string is rejected.
    """

    message: str
    """
    Human readable error message.
    """

    data: Any = None
    """
    Additional error details, any JSON value. Exceptions passed here are
    converted to formatted tracebacks.
    """

    @field_validator("data", mode="before")
    @classmethod
    def transform_data(cls, value: Any) -> Any:
        if isinstance(value, BaseException):
            return cls._format_exception(value)
        return value

    @staticmethod
    def _format_exception(exc: BaseException) -> str:
        return "".join(traceback.format_exception(type(exc), exc, exc.__traceback__))
