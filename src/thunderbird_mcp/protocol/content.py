from typing import Annotated, Any, Literal

from pydantic import Field

from .base import ProtocolModel


class TextContent(ProtocolModel):
    """
    Text returned by a tool.

    The Thunderbird extension serializes its real answer (messages, folders,
    accounts...) as JSON into `text`.
    """

    type: Literal["text"] = "text"
    text: str
    """
    The text content of the block.
    """


class ImageContent(ProtocolModel):
    """
    An image returned by a tool, as base64-encoded data.
    """

    type: Literal["image"] = "image"
    mime_type: str = Field(alias="mimeType")
    data: str
    """
    The base64-encoded image data.
    """


class AudioContent(ProtocolModel):
    """
    Audio returned by a tool, as base64-encoded data.
    """

    type: Literal["audio"] = "audio"
    mime_type: str = Field(alias="mimeType")
    data: str
    """
    The base64-encoded audio data
    """


class EmbeddedResource(ProtocolModel):
    """
    The contents of a resource embedded in a tool result.
    """

    type: Literal["resource"] = "resource"
    resource: dict[str, Any]


class UnknownContent(ProtocolModel):
    """
    Any block we have no model for. All fields are kept as extras.
    """

    type: str


AnyContent = Annotated[
    TextContent | ImageContent | AudioContent | EmbeddedResource | UnknownContent,
    Field(union_mode="left_to_right"),
]

ContentList = list[AnyContent]
