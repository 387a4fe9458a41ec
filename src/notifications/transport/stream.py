"""Binary stream primitives for moving models between processes.

Strings are framed as a variable-length unsigned integer holding the UTF-8
byte length, followed by the UTF-8 bytes. The integer is written 7 bits per
byte, least significant group first, with the high bit set on every byte
except the last.

    out = BytesStreamOutput()
    out.write_string("200")
    StreamInput(out.getvalue()).read_string()  # "200"
"""

import io
from typing import BinaryIO

from notifications.exceptions import MalformedStreamError

# A 32-bit unsigned length never needs more than 5 groups of 7 bits.
_MAX_VINT_BYTES = 5
_MAX_VINT = 0xFFFFFFFF


class StreamInput:
    """Ordered reader over a readable binary file object."""

    def __init__(self, source: BinaryIO | bytes | bytearray):
        if isinstance(source, (bytes, bytearray)):
            source = io.BytesIO(bytes(source))
        self._source = source

    def read_bytes(self, length: int) -> bytes:
        """Read exactly ``length`` bytes or fail.

        Unbuffered sources may return fewer bytes than requested; reads
        repeat until ``length`` bytes arrive or the source reports end of stream.
        """
        if length < 0:
            raise MalformedStreamError(f"Negative read length: {length}")
        buffer = bytearray()
        while len(buffer) < length:
            try:
                chunk = self._source.read(length - len(buffer))
            except OSError as exc:
                raise MalformedStreamError(f"Failed to read from stream: {exc}") from exc
            if chunk is None:
                raise MalformedStreamError("Stream has no data available without blocking")
            if not chunk:
                raise MalformedStreamError(f"Unexpected end of stream: expected {length} bytes, got {len(buffer)}")
            buffer += chunk
        return bytes(buffer)

    def read_byte(self) -> int:
        return self.read_bytes(1)[0]

    def read_vint(self) -> int:
        value = 0
        for index in range(_MAX_VINT_BYTES):
            byte = self.read_byte()
            value |= (byte & 0x7F) << (7 * index)
            if not byte & 0x80:
                if value > _MAX_VINT:
                    raise MalformedStreamError(f"Variable-length integer out of range: {value}")
                return value
        raise MalformedStreamError("Variable-length integer is longer than 5 bytes")

    def read_string(self) -> str:
        raw = self.read_bytes(self.read_vint())
        try:
            return raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            raise MalformedStreamError(f"String is not valid UTF-8: {exc}") from exc

    def at_end(self) -> bool:
        """Return True when no unread bytes remain."""
        try:
            position = self._source.tell()
            end = self._source.seek(0, io.SEEK_END)
            self._source.seek(position)
        except (OSError, AttributeError) as exc:
            raise MalformedStreamError("Stream does not support end-of-input checks") from exc
        return position == end


class StreamOutput:
    """Ordered writer over a writable binary file object."""

    def __init__(self, sink: BinaryIO):
        self._sink = sink

    def write_bytes(self, data: bytes) -> None:
        """Write all of ``data``; raw sinks may accept it in several pieces."""
        view = memoryview(data)
        while view:
            written = self._sink.write(view)
            if not written:
                raise MalformedStreamError(f"Stream accepted no bytes with {len(view)} left to write")
            view = view[written:]

    def write_byte(self, value: int) -> None:
        self.write_bytes(bytes((value,)))

    def write_vint(self, value: int) -> None:
        if value < 0 or value > _MAX_VINT:
            raise ValueError(f"Variable-length integer out of range: {value}")
        buffer = bytearray()
        while value & ~0x7F:
            buffer.append((value & 0x7F) | 0x80)
            value >>= 7
        buffer.append(value)
        self.write_bytes(bytes(buffer))

    def write_string(self, value: str) -> None:
        encoded = value.encode("utf-8")
        self.write_vint(len(encoded))
        self.write_bytes(encoded)


class BytesStreamOutput(StreamOutput):
    """StreamOutput that collects everything written in memory."""

    def __init__(self):
        super().__init__(io.BytesIO())

    def getvalue(self) -> bytes:
        return self._sink.getvalue()

    def to_input(self) -> StreamInput:
        """Return a StreamInput positioned at the start of the written bytes."""
        return StreamInput(self.getvalue())
