import io

import pytest
import structlog
from notifications.model.delivery_status import DeliveryStatus


class TricklingReader(io.RawIOBase):
    """Raw source that hands out at most ``chunk`` bytes per read."""

    def __init__(self, data, chunk=2):
        self._data = data
        self._position = 0
        self._chunk = chunk

    def readable(self):
        return True

    def readinto(self, buffer):
        piece = self._data[self._position : self._position + min(self._chunk, len(buffer))]
        buffer[: len(piece)] = piece
        self._position += len(piece)
        return len(piece)


class TricklingWriter(io.RawIOBase):
    """Raw sink that accepts at most ``chunk`` bytes per write."""

    def __init__(self, chunk=2):
        self.data = bytearray()
        self._chunk = chunk

    def writable(self):
        return True

    def write(self, buffer):
        piece = bytes(buffer[: self._chunk])
        self.data += piece
        return len(piece)


@pytest.fixture()
def delivery_status():
    return DeliveryStatus(status_code="200", status_text="Success")


@pytest.fixture(autouse=True)
def _reset_structlog():
    """Undo any structlog configuration a test applied."""
    yield
    structlog.reset_defaults()


class RecordingLog:
    """Logger stand-in that records ``info`` calls."""

    def __init__(self):
        self.entries: list[dict] = []

    def info(self, event, **kwargs):
        self.entries.append({"event": event, **kwargs})


@pytest.fixture()
def recording_log():
    return RecordingLog()


@pytest.fixture()
def trickling_reader():
    """Factory for raw sources that return short reads."""
    return TricklingReader


@pytest.fixture()
def trickling_writer():
    """Factory for raw sinks that accept partial writes."""
    return TricklingWriter
