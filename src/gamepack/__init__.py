"""gamepack - control protocol between a daemon and per-game workers.

A gamepack worker reads newline-delimited JSON commands on stdin, answers
each on stdout, and interleaves unsolicited match telemetry on the same
stream.

Quick start:
    from gamepack import GamepackHandler, InitResponse, run_gamepack

    class MyGame(GamepackHandler):
        def init(self) -> InitResponse:
            return InitResponse(game_id=7, slug="my-game", protocol_version=1)

    run_gamepack(MyGame())
"""

from gamepack.core.exceptions import GamepackError, HandlerError, ProtocolError
from gamepack.protocol import (
    PROTOCOL_VERSION,
    EntryType,
    GameEvent,
    GameStatus,
    InitResponse,
    IsMatchInProgressResponse,
    MatchData,
    Moment,
    SetComplete,
    SummarySource,
    TimelineEntry,
    WriteGameEvents,
    WriteMoments,
    WriteStatistics,
    parse_command,
    parse_response,
)
from gamepack.worker import (
    GamepackHandler,
    GamepackRunner,
    MatchDataEmitter,
    dispatch_command,
    run_gamepack,
)

__version__ = "0.1.0"

__all__ = [
    "GamepackError",
    "HandlerError",
    "ProtocolError",
    "PROTOCOL_VERSION",
    "EntryType",
    "GameEvent",
    "GameStatus",
    "InitResponse",
    "IsMatchInProgressResponse",
    "MatchData",
    "Moment",
    "SetComplete",
    "SummarySource",
    "TimelineEntry",
    "WriteGameEvents",
    "WriteMoments",
    "WriteStatistics",
    "parse_command",
    "parse_response",
    "GamepackHandler",
    "GamepackRunner",
    "MatchDataEmitter",
    "dispatch_command",
    "run_gamepack",
]
