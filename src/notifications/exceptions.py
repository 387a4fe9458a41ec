"""Exceptions raised while building or (de)serializing notification models."""


class NotificationsError(Exception):
    """Base class for all notification model errors."""


class InvalidArgumentError(NotificationsError, ValueError):
    """A model was constructed with a null or empty required value.

    ``messages`` maps each offending field to its error messages.
    """

    def __init__(self, messages: dict[str, list[str]]):
        self.messages = messages
        super().__init__(messages)


class MalformedStreamError(NotificationsError, OSError):
    """Binary input was truncated, corrupt, or the underlying stream failed."""


class MalformedDocumentError(NotificationsError, ValueError):
    """Text input does not follow the expected object token shape."""


class MissingFieldError(NotificationsError, ValueError):
    """A required field was absent from a fully parsed document."""

    def __init__(self, field: str):
        self.field = field
        super().__init__(f"{field} field absent")
