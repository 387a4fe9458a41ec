"""Tests for DeliveryStatus binary stream encoding and decoding."""

import io

import pytest
from notifications.exceptions import InvalidArgumentError, MalformedStreamError
from notifications.model.delivery_status import DeliveryStatus
from notifications.transport.stream import BytesStreamOutput, StreamInput, StreamOutput


class _FailingReader(io.RawIOBase):
    def readable(self):
        return True

    def read(self, size=-1):
        raise OSError("connection reset")


class TestWriteTo:
    def test_writes_code_then_text(self, delivery_status):
        output = BytesStreamOutput()
        delivery_status.write_to(output)
        assert output.getvalue() == b"\x03200\x07Success"

    def test_writes_utf8_byte_length(self):
        output = BytesStreamOutput()
        DeliveryStatus("200", "Zugestellt ✓").write_to(output)
        # "✓" is three bytes in UTF-8
        assert output.getvalue() == b"\x03200\x0eZugestellt \xe2\x9c\x93"

    def test_writes_to_any_binary_file(self, delivery_status):
        sink = io.BytesIO()
        delivery_status.write_to(StreamOutput(sink))
        assert sink.getvalue() == b"\x03200\x07Success"


class TestReadFrom:
    def test_reads_code_then_text(self):
        status = DeliveryStatus.read_from(StreamInput(b"\x03404\x09Not Found"))
        assert status == DeliveryStatus("404", "Not Found")

    def test_reads_from_binary_file(self):
        status = DeliveryStatus.read_from(StreamInput(io.BytesIO(b"\x03200\x07Success")))
        assert status == DeliveryStatus("200", "Success")

    def test_leaves_following_bytes_unread(self):
        stream = StreamInput(b"\x03200\x07Success\x03500\x05Error")
        first = DeliveryStatus.read_from(stream)
        second = DeliveryStatus.read_from(stream)
        assert first == DeliveryStatus("200", "Success")
        assert second == DeliveryStatus("500", "Error")
        assert stream.at_end()

    def test_empty_status_code_fails_validation(self):
        with pytest.raises(InvalidArgumentError) as exc:
            DeliveryStatus.read_from(StreamInput(b"\x00\x07Success"))
        assert "status_code" in exc.value.messages

    def test_empty_status_text_fails_validation(self):
        with pytest.raises(InvalidArgumentError):
            DeliveryStatus.read_from(StreamInput(b"\x03200\x00"))

    @pytest.mark.parametrize(
        "data",
        [b"", b"\x03", b"\x0320", b"\x03200", b"\x03200\x07Succ", b"\x03200\x87"],
        ids=["empty", "length-only", "short-code", "missing-text", "short-text", "cut-length-prefix"],
    )
    def test_truncated_input_rejected(self, data):
        with pytest.raises(MalformedStreamError):
            DeliveryStatus.read_from(StreamInput(data))

    def test_invalid_utf8_rejected(self):
        with pytest.raises(MalformedStreamError):
            DeliveryStatus.read_from(StreamInput(b"\x02\xc3\x28\x07Success"))

    def test_underlying_read_failure_rejected(self):
        with pytest.raises(MalformedStreamError) as exc:
            DeliveryStatus.read_from(StreamInput(_FailingReader()))
        assert isinstance(exc.value.__cause__, OSError)


class TestStreamRoundTrip:
    @pytest.mark.parametrize(
        "status_code, status_text",
        [
            ("200", "Success"),
            ("ERR_TIMEOUT", "Timed out waiting for the webhook endpoint"),
            ("✓", "配信済み"),
            ("503", "x" * 1000),
        ],
        ids=["http", "symbolic", "unicode", "long-text"],
    )
    def test_decode_reproduces_encoded_status(self, status_code, status_text):
        original = DeliveryStatus(status_code, status_text)
        output = BytesStreamOutput()
        original.write_to(output)

        recreated = DeliveryStatus.read_from(output.to_input())

        assert recreated == original
        assert recreated is not original


class TestUnbufferedStreams:
    def test_read_from_source_returning_short_reads(self, trickling_reader):
        status = DeliveryStatus.read_from(StreamInput(trickling_reader(b"\x03200\x07Success")))
        assert status == DeliveryStatus("200", "Success")

    def test_write_to_sink_accepting_partial_writes(self, trickling_writer, delivery_status):
        sink = trickling_writer()
        delivery_status.write_to(StreamOutput(sink))
        assert bytes(sink.data) == b"\x03200\x07Success"

    def test_unbuffered_round_trip(self, trickling_reader, trickling_writer):
        original = DeliveryStatus("✓", "配信済み")
        sink = trickling_writer(chunk=3)
        original.write_to(StreamOutput(sink))

        recreated = DeliveryStatus.read_from(StreamInput(trickling_reader(bytes(sink.data), chunk=1)))

        assert recreated == original
