"""Round-trip helpers between notification models and their wire forms."""

from collections.abc import Callable
from typing import Any, TypeVar

from notifications.exceptions import MalformedStreamError
from notifications.model.base import NotificationModel
from notifications.transport.stream import BytesStreamOutput, StreamInput
from notifications.transport.xcontent import ContentBuilder, ContentParser, JsonContentParser

T = TypeVar("T")


def to_bytes(model: NotificationModel) -> bytes:
    """Encode ``model`` in its binary stream form."""
    output = BytesStreamOutput()
    model.write_to(output)
    return output.getvalue()


def from_bytes(data: bytes, reader: Callable[[StreamInput], T]) -> T:
    """Decode ``data`` with ``reader``, e.g. ``DeliveryStatus.read_from``.

    Every byte must be consumed; leftovers mean the data was not written by
    the matching ``write_to``.
    """
    stream = StreamInput(data)
    model = reader(stream)
    if not stream.at_end():
        raise MalformedStreamError("Unread bytes remain after decoding")
    return model


def to_json_string(model: NotificationModel, params: dict[str, Any] | None = None) -> str:
    """Encode ``model`` as compact JSON text."""
    return model.to_xcontent(ContentBuilder(), params).to_json()


def from_json_string(text: str | bytes, parse: Callable[[ContentParser], T]) -> T:
    """Decode JSON ``text`` with ``parse``, e.g. ``DeliveryStatus.parse``."""
    parser = JsonContentParser(text)
    parser.next_token()
    return parse(parser)
