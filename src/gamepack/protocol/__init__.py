"""Gamepack wire protocol.

This package contains the closed message taxonomy exchanged between the
daemon and a gamepack worker over newline-delimited JSON, and the framing
helpers that read and write it.

Components:
- types: shared value types (events, moments, timeline entries, status)
- match_data: unsolicited telemetry messages
- recovery: stale match recovery values
- commands: daemon -> pack commands
- responses: pack -> daemon responses
- framing: NDJSON line framing
"""

from gamepack.protocol.version import MAX_MESSAGE_SIZE, PROTOCOL_VERSION
from gamepack.protocol.types import (
    EntryType,
    GameEvent,
    GameStatus,
    InitResponse,
    MatchData,
    Moment,
    SummarySource,
    TimelineEntry,
)
from gamepack.protocol.match_data import (
    MatchDataMessage,
    SetComplete,
    WriteGameEvents,
    WriteMoments,
    WriteStatistics,
    parse_match_data_message,
)
from gamepack.protocol.recovery import IsMatchInProgressResponse
from gamepack.protocol.commands import Command, CommandType, parse_command
from gamepack.protocol.responses import (
    ErrorResponse,
    Response,
    ResponseType,
    WriteMatchData,
    parse_response,
)
from gamepack.protocol.framing import (
    decode_command,
    decode_response,
    encode_message,
    read_frames,
)

__all__ = [
    "PROTOCOL_VERSION",
    "MAX_MESSAGE_SIZE",
    "EntryType",
    "GameEvent",
    "GameStatus",
    "InitResponse",
    "MatchData",
    "Moment",
    "SummarySource",
    "TimelineEntry",
    "MatchDataMessage",
    "SetComplete",
    "WriteGameEvents",
    "WriteMoments",
    "WriteStatistics",
    "parse_match_data_message",
    "IsMatchInProgressResponse",
    "Command",
    "CommandType",
    "parse_command",
    "ErrorResponse",
    "Response",
    "ResponseType",
    "WriteMatchData",
    "parse_response",
    "decode_command",
    "decode_response",
    "encode_message",
    "read_frames",
]
