"""Line framing for the gamepack wire protocol.

Message Format:
- Serialization: JSON, one object per line
- Delimiter: Newline (\\n) for message framing
- Encoding: UTF-8
- Size: at most ``max_size`` UTF-8 bytes per line, newline excluded

Blank lines are skipped. End of stream ends the frame sequence cleanly.
JSON encoding escapes newlines inside strings, so an encoded message never
contains a raw newline.

Usage:
    from gamepack.protocol.framing import read_frames, decode_command

    for frame in read_frames(sys.stdin.buffer):
        command = decode_command(frame)
"""

from __future__ import annotations

from typing import BinaryIO, Iterator

from pydantic import BaseModel

from gamepack.core.exceptions import ProtocolError
from gamepack.protocol.commands import Command, parse_command
from gamepack.protocol.responses import Response, parse_response
from gamepack.protocol.version import MAX_MESSAGE_SIZE


def read_frames(stream: BinaryIO, max_size: int = MAX_MESSAGE_SIZE) -> Iterator[bytes]:
    """Yield each non-blank line of a binary stream, stripped.

    At most ``max_size + 1`` bytes of a line are held in memory. The rest
    of a longer line is read and discarded, and its first ``max_size + 1``
    bytes are yielded as is so that decoding rejects the frame as
    oversized.

    The iterator is lazy and not restartable. It ends at end of stream.
    """
    while True:
        raw = stream.readline(max_size + 1)
        if not raw:
            return
        if len(raw) > max_size and not raw.endswith(b"\n"):
            _skip_rest_of_line(stream, max_size)
            yield raw
            continue
        line = raw.strip()
        if not line:
            continue
        yield line


def _skip_rest_of_line(stream: BinaryIO, max_size: int) -> None:
    while True:
        chunk = stream.readline(max_size + 1)
        if not chunk or chunk.endswith(b"\n"):
            return


def encode_message(msg: BaseModel) -> bytes:
    """Encode a message to wire format (JSON + newline, UTF-8).

    Raises:
        pydantic_core.PydanticSerializationError: If the payload cannot be
            represented as JSON.
    """
    return msg.model_dump_json().encode("utf-8") + b"\n"


def _decode_text(data: bytes | str, max_size: int) -> str:
    if isinstance(data, str):
        data = data.encode("utf-8", errors="surrogatepass")
    if len(data) > max_size:
        raise ProtocolError(
            f"Message size {len(data)} exceeds limit of {max_size} bytes"
        )
    try:
        return data.decode("utf-8").strip()
    except UnicodeDecodeError as e:
        raise ProtocolError(f"Message is not valid UTF-8: {e}") from e


def decode_command(data: bytes | str, max_size: int = MAX_MESSAGE_SIZE) -> Command:
    """Decode one framed command.

    Raises:
        ProtocolError: If the line is oversized, not UTF-8 or not a command.
    """
    return parse_command(_decode_text(data, max_size))


def decode_response(data: bytes | str, max_size: int = MAX_MESSAGE_SIZE) -> Response:
    """Decode one framed response (solicited or unsolicited).

    Raises:
        ProtocolError: If the line is oversized, not UTF-8 or not a response.
    """
    return parse_response(_decode_text(data, max_size))
