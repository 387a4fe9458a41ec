"""Wire collaborators for notification models: binary streams and JSON content."""

from notifications.transport.stream import BytesStreamOutput, StreamInput, StreamOutput
from notifications.transport.xcontent import (
    ContentBuilder,
    ContentParser,
    JsonContentParser,
    Token,
    ensure_expected_token,
)

__all__ = [
    "BytesStreamOutput",
    "ContentBuilder",
    "ContentParser",
    "JsonContentParser",
    "StreamInput",
    "StreamOutput",
    "Token",
    "ensure_expected_token",
]
