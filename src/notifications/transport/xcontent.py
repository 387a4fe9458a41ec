"""Token-based JSON content parsing and building.

Models read themselves from a ``ContentParser`` one token at a time and write
themselves into a ``ContentBuilder``. ``JsonContentParser`` is positioned
before the first token on creation; callers advance it with ``next_token()``
before handing it to a model's ``parse``.
"""

import json
from abc import ABC, abstractmethod
from collections.abc import Iterator
from enum import Enum
from typing import Any

from notifications.exceptions import MalformedDocumentError


class Token(Enum):
    START_OBJECT = "START_OBJECT"
    END_OBJECT = "END_OBJECT"
    START_ARRAY = "START_ARRAY"
    END_ARRAY = "END_ARRAY"
    FIELD_NAME = "FIELD_NAME"
    VALUE_STRING = "VALUE_STRING"
    VALUE_NUMBER = "VALUE_NUMBER"
    VALUE_BOOLEAN = "VALUE_BOOLEAN"
    VALUE_NULL = "VALUE_NULL"


_VALUE_TOKENS = frozenset({Token.VALUE_STRING, Token.VALUE_NUMBER, Token.VALUE_BOOLEAN, Token.VALUE_NULL})


def ensure_expected_token(expected: Token, actual: Token | None) -> None:
    """Raise MalformedDocumentError unless ``actual`` is ``expected``."""
    if actual != expected:
        found = actual.value if actual is not None else "end of input"
        raise MalformedDocumentError(f"Failed to parse object: expecting token of type [{expected.value}] but found [{found}]")


class ContentParser(ABC):
    """Abstract cursor over the tokens of a structured document."""

    @abstractmethod
    def current_token(self) -> Token | None:
        """Token under the cursor, or None before the first/after the last."""
        ...

    @abstractmethod
    def next_token(self) -> Token | None:
        """Advance and return the new current token (None at end of input)."""
        ...

    @abstractmethod
    def current_name(self) -> str | None:
        """Field name for the current FIELD_NAME token or the value following it."""
        ...

    @abstractmethod
    def text(self) -> str | None:
        """Textual form of the current scalar value (None for null)."""
        ...

    @abstractmethod
    def skip_children(self) -> None:
        """If on START_OBJECT/START_ARRAY, advance to the matching end token."""
        ...


class _JsonNumber(str):
    """Number kept in its original JSON spelling."""


def _tokenize(value: Any, name: str | None = None) -> Iterator[tuple[Token, str | None, Any]]:
    if isinstance(value, dict):
        yield Token.START_OBJECT, name, None
        for key, item in value.items():
            yield Token.FIELD_NAME, key, None
            yield from _tokenize(item, key)
        yield Token.END_OBJECT, name, None
    elif isinstance(value, list):
        yield Token.START_ARRAY, name, None
        for item in value:
            yield from _tokenize(item, name)
        yield Token.END_ARRAY, name, None
    elif value is None:
        yield Token.VALUE_NULL, name, None
    elif isinstance(value, bool):
        yield Token.VALUE_BOOLEAN, name, value
    elif isinstance(value, (int, float, _JsonNumber)):
        yield Token.VALUE_NUMBER, name, value
    else:
        yield Token.VALUE_STRING, name, value


class JsonContentParser(ContentParser):
    """ContentParser over JSON text or an already decoded JSON value."""

    def __init__(self, content: str | bytes | dict | list):
        if isinstance(content, (str, bytes, bytearray)):
            try:
                content = json.loads(content, parse_int=_JsonNumber, parse_float=_JsonNumber)
            except json.JSONDecodeError as exc:
                raise MalformedDocumentError(f"Invalid JSON document: {exc}") from exc
        self._tokens = _tokenize(content)
        self._token: Token | None = None
        self._name: str | None = None
        self._value: Any = None

    def current_token(self) -> Token | None:
        return self._token

    def next_token(self) -> Token | None:
        self._token, self._name, self._value = next(self._tokens, (None, None, None))
        return self._token

    def current_name(self) -> str | None:
        return self._name

    def text(self) -> str | None:
        if self._token not in _VALUE_TOKENS:
            found = self._token.value if self._token is not None else "end of input"
            raise MalformedDocumentError(f"Can't get text on a [{found}]")
        if self._token is Token.VALUE_NULL:
            return None
        if self._token is Token.VALUE_BOOLEAN:
            return "true" if self._value else "false"
        if self._token is Token.VALUE_NUMBER and not isinstance(self._value, _JsonNumber):
            return json.dumps(self._value)
        return str(self._value)

    def skip_children(self) -> None:
        if self._token not in (Token.START_OBJECT, Token.START_ARRAY):
            return
        depth = 1
        while depth:
            token = self.next_token()
            if token is None:
                raise MalformedDocumentError("Unexpected end of input while skipping children")
            if token in (Token.START_OBJECT, Token.START_ARRAY):
                depth += 1
            elif token in (Token.END_OBJECT, Token.END_ARRAY):
                depth -= 1


class ContentBuilder:
    """Builds a JSON object through chained start/field/end calls.

        ContentBuilder().start_object().field("status_code", "200").end_object().to_json()
    """

    def __init__(self):
        self._root: dict | None = None
        self._stack: list[dict] = []

    def start_object(self, name: str | None = None) -> "ContentBuilder":
        obj: dict = {}
        if self._stack:
            if name is None:
                raise ValueError("Nested objects need a field name")
            self._stack[-1][name] = obj
        elif self._root is not None:
            raise ValueError("Document already has a root object")
        else:
            self._root = obj
        self._stack.append(obj)
        return self

    def field(self, name: str, value: Any) -> "ContentBuilder":
        if not self._stack:
            raise ValueError(f"Cannot write field [{name}] outside of an object")
        self._stack[-1][name] = self._render(value)
        return self

    def end_object(self) -> "ContentBuilder":
        if not self._stack:
            raise ValueError("end_object() without a matching start_object()")
        self._stack.pop()
        return self

    def to_dict(self) -> dict:
        if self._root is None or self._stack:
            raise ValueError("Document is incomplete")
        return self._root

    def to_json(self) -> str:
        return json.dumps(self.to_dict(), separators=(",", ":"), ensure_ascii=False)

    @classmethod
    def _render(cls, value: Any) -> Any:
        # Nested models render through their own to_xcontent
        if hasattr(value, "to_xcontent"):
            return value.to_xcontent(cls()).to_dict()
        if isinstance(value, dict):
            return {key: cls._render(item) for key, item in value.items()}
        if isinstance(value, (list, tuple)):
            return [cls._render(item) for item in value]
        return value
