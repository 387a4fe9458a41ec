"""DeliveryStatus value object — outcome of delivering a notification event.

Travels in two forms:

    Binary (between processes):  status_code, status_text as framed strings
    JSON (REST):                 {"status_code": "200", "status_text": "Success"}

Both readers construct through the validating constructor, so a decoded
instance always satisfies the same invariants as one built directly.
"""

from collections.abc import Mapping
from typing import Any

import structlog
from pydantic import BaseModel, ConfigDict, ValidationError, ValidationInfo, field_validator

from notifications.constants import STATUS_CODE_TAG, STATUS_TEXT_TAG
from notifications.exceptions import InvalidArgumentError, MalformedDocumentError, MissingFieldError
from notifications.model.base import DiagnosticLog, NotificationModel
from notifications.transport.stream import StreamInput, StreamOutput
from notifications.transport.xcontent import ContentBuilder, ContentParser, Token, ensure_expected_token

logger = structlog.get_logger(__name__)

_NON_VALUE_TOKENS = frozenset({Token.END_OBJECT, Token.END_ARRAY, Token.FIELD_NAME})


class DeliveryStatus(BaseModel, NotificationModel):
    """Immutable status code and status text for a delivered (or failed) event."""

    model_config = ConfigDict(frozen=True, strict=True, extra="forbid")

    status_code: str
    status_text: str

    def __init__(self, status_code: str | None = None, status_text: str | None = None, **data: Any):
        try:
            super().__init__(status_code=status_code, status_text=status_text, **data)
        except ValidationError as exc:
            messages: dict[str, list[str]] = {}
            for error in exc.errors():
                field = str(error["loc"][0]) if error["loc"] else "__root__"
                messages.setdefault(field, []).append(error["msg"])
            raise InvalidArgumentError(messages) from exc

    @field_validator("status_code", "status_text", mode="before")
    @classmethod
    def must_not_be_null_or_empty(cls, value: Any, info: ValidationInfo) -> Any:
        if value is None or value == "":
            raise ValueError(f"{info.field_name} is null or empty")
        return value

    @classmethod
    def model_construct(cls, _fields_set: set[str] | None = None, **values: Any) -> "DeliveryStatus":
        """Build through the validating constructor; no unvalidated instances."""
        return cls(**values)

    def model_copy(self, *, update: Mapping[str, Any] | None = None, deep: bool = False) -> "DeliveryStatus":
        """Copy with optional field updates, re-validated like any construction."""
        return type(self)(**{**self.model_dump(), **(update or {})})

    # -------------------------------------------------------------------
    # Binary stream
    # -------------------------------------------------------------------
    @classmethod
    def read_from(cls, stream: StreamInput) -> "DeliveryStatus":
        """Reconstruct an instance written by ``write_to``."""
        status_code = stream.read_string()
        status_text = stream.read_string()
        return cls(status_code=status_code, status_text=status_text)

    def write_to(self, output: StreamOutput) -> None:
        output.write_string(self.status_code)
        output.write_string(self.status_text)

    # -------------------------------------------------------------------
    # JSON content
    # -------------------------------------------------------------------
    @classmethod
    def parse(cls, parser: ContentParser, log: DiagnosticLog | None = None) -> "DeliveryStatus":
        """Create an instance from a parser positioned on START_OBJECT.

        Unknown fields are skipped (nested values included) and reported to
        ``log`` at info level; they never fail the parse.

        Raises:
            MalformedDocumentError: the tokens are not a flat object of fields.
            MissingFieldError: status_code or status_text is absent or null.
            InvalidArgumentError: a field is present but empty.
        """
        log = logger if log is None else log
        status_code = None
        status_text = None

        ensure_expected_token(Token.START_OBJECT, parser.current_token())
        while True:
            token = parser.next_token()
            if token is Token.END_OBJECT:
                break
            ensure_expected_token(Token.FIELD_NAME, token)
            field_name = parser.current_name()

            value_token = parser.next_token()
            if value_token is None or value_token in _NON_VALUE_TOKENS:
                found = value_token.value if value_token is not None else "end of input"
                raise MalformedDocumentError(f"Expected a value for field [{field_name}] but found [{found}]")

            if field_name == STATUS_CODE_TAG:
                status_code = parser.text()
            elif field_name == STATUS_TEXT_TAG:
                status_text = parser.text()
            else:
                parser.skip_children()
                log.info("Unexpected field while parsing DeliveryStatus", field=field_name)

        if status_code is None:
            raise MissingFieldError(STATUS_CODE_TAG)
        if status_text is None:
            raise MissingFieldError(STATUS_TEXT_TAG)
        return cls(status_code=status_code, status_text=status_text)

    def to_xcontent(self, builder: ContentBuilder, params: dict[str, Any] | None = None) -> ContentBuilder:
        return (
            builder.start_object()
            .field(STATUS_CODE_TAG, self.status_code)
            .field(STATUS_TEXT_TAG, self.status_text)
            .end_object()
        )
