"""Unit tests for NDJSON line framing."""

import io
import json

import pytest

from gamepack.core.exceptions import ProtocolError
from gamepack.protocol.commands import GetStatus, Init
from gamepack.protocol.framing import (
    decode_command,
    decode_response,
    encode_message,
    read_frames,
)
from gamepack.core.config import ProtocolConfig
from gamepack.protocol.responses import LiveData, ShutdownComplete
from gamepack.protocol.version import MAX_MESSAGE_SIZE


class TestReadFrames:
    def test_yields_non_blank_lines(self) -> None:
        stream = io.BytesIO(b'{"a":1}\n\n   \n{"b":2}\r\n')
        assert list(read_frames(stream)) == [b'{"a":1}', b'{"b":2}']

    def test_last_line_without_newline(self) -> None:
        assert list(read_frames(io.BytesIO(b"x\ny"))) == [b"x", b"y"]

    def test_empty_stream_ends_cleanly(self) -> None:
        assert list(read_frames(io.BytesIO(b""))) == []

    def test_is_lazy(self) -> None:
        frames = read_frames(io.BytesIO(b"one\ntwo\n"))
        assert next(frames) == b"one"
        assert next(frames) == b"two"
        with pytest.raises(StopIteration):
            next(frames)


class TestBoundedReads:
    class RecordingStream(io.BytesIO):
        def __init__(self, data: bytes) -> None:
            super().__init__(data)
            self.sizes = []

        def readline(self, size=-1):
            self.sizes.append(size)
            return super().readline(size)

    def test_oversized_line_is_truncated_and_skipped(self) -> None:
        stream = self.RecordingStream(b"a" * 50 + b"\nok\n")
        assert list(read_frames(stream, max_size=10)) == [b"a" * 11, b"ok"]
        assert all(0 < size <= 11 for size in stream.sizes)

    def test_oversized_last_line_without_newline(self) -> None:
        assert list(read_frames(io.BytesIO(b"ok\n" + b"b" * 40), max_size=10)) == [b"ok", b"b" * 11]

    def test_line_at_the_limit_is_whole(self) -> None:
        assert list(read_frames(io.BytesIO(b"x" * 10 + b"\ny\n"), max_size=10)) == [b"x" * 10, b"y"]

    def test_truncated_frame_fails_decoding(self) -> None:
        (frame,) = read_frames(io.BytesIO(b'{"type":"init","request_id":"' + b"z" * 100 + b'"}\n'), max_size=32)
        with pytest.raises(ProtocolError, match="exceeds limit of 32 bytes"):
            decode_command(frame, max_size=32)


class TestEncode:
    def test_single_line_with_trailing_newline(self) -> None:
        data = encode_message(ShutdownComplete(request_id="r1"))
        assert data.endswith(b"\n")
        assert data.count(b"\n") == 1
        assert json.loads(data) == {"type": "shutdown_complete", "request_id": "r1"}

    def test_newlines_inside_strings_are_escaped(self) -> None:
        data = encode_message(LiveData(request_id="r", data={"note": "line1\nline2"}))
        assert data.count(b"\n") == 1
        assert json.loads(data)["data"]["note"] == "line1\nline2"

    def test_non_ascii_is_utf8(self) -> None:
        data = encode_message(LiveData(request_id="r", data={"name": "Kai'Sa ☆"}))
        assert json.loads(data.decode("utf-8"))["data"]["name"] == "Kai'Sa ☆"


class TestDecode:
    def test_decode_command_bytes(self) -> None:
        assert decode_command(b'{"type":"get_status","request_id":"r1"}\n') == GetStatus(request_id="r1")

    def test_decode_command_str(self) -> None:
        assert decode_command('  {"type":"init","request_id":"a"}  ') == Init(request_id="a")

    def test_invalid_utf8(self) -> None:
        with pytest.raises(ProtocolError, match="UTF-8"):
            decode_command(b'{"type":"init","request_id":"\xff"}')

    def test_oversized_line(self) -> None:
        with pytest.raises(ProtocolError, match="exceeds limit"):
            decode_command(b'{"type":"init","request_id":"r"}', max_size=10)

    def test_str_size_is_measured_in_utf8_bytes(self) -> None:
        text = '{"type":"init","request_id":"' + "\u00e9" * 5 + '"}'
        with pytest.raises(ProtocolError, match="exceeds limit"):
            decode_command(text, max_size=len(text))
        assert decode_command(text, max_size=len(text.encode("utf-8"))).request_id == "\u00e9" * 5

    def test_default_limit_matches_configuration(self) -> None:
        assert ProtocolConfig().max_message_size == MAX_MESSAGE_SIZE == 10 * 1024 * 1024

    def test_decode_response(self) -> None:
        assert decode_response(b'{"type":"shutdown_complete","request_id":"r"}') == ShutdownComplete(
            request_id="r"
        )
