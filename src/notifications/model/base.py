"""Serialization contract shared by notification models."""

from abc import ABC, abstractmethod
from typing import Any, Protocol

from notifications.transport.stream import StreamInput, StreamOutput
from notifications.transport.xcontent import ContentBuilder, ContentParser


class DiagnosticLog(Protocol):
    """Anything with a structlog-style ``info(event, **context)`` method."""

    def info(self, event: str, **kwargs: Any) -> Any: ...


class NotificationModel(ABC):
    """A model that travels as a binary stream and as a JSON document.

    ``read_from`` and ``parse`` reconstruct an instance; ``write_to`` and
    ``to_xcontent`` are their exact inverses.
    """

    @classmethod
    @abstractmethod
    def read_from(cls, stream: StreamInput) -> "NotificationModel": ...

    @classmethod
    @abstractmethod
    def parse(cls, parser: ContentParser) -> "NotificationModel": ...

    @abstractmethod
    def write_to(self, output: StreamOutput) -> None: ...

    @abstractmethod
    def to_xcontent(self, builder: ContentBuilder, params: dict[str, Any] | None = None) -> ContentBuilder: ...
