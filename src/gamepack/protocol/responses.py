"""Responses sent from a gamepack to the daemon.

Every response answers exactly one command and echoes its ``request_id``,
with two exceptions: an error answering an unparseable line carries an
empty request_id, and ``write_match_data`` is unsolicited telemetry that
always carries the empty request_id.
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, NonNegativeInt, TypeAdapter, ValidationError

from gamepack.core.exceptions import ProtocolError
from gamepack.protocol.match_data import MatchDataMessage, SetComplete
from gamepack.protocol.types import GameEvent, ProtocolModel, Subpack, TimelineEntry

# request_id of unsolicited messages and of errors for unparseable input
UNSOLICITED_REQUEST_ID = ""


class ResponseType(StrEnum):
    """Wire discriminants of every response."""

    INITIALIZED = "initialized"
    RUNNING_STATUS = "running_status"
    GAME_STATUS = "game_status"
    EVENTS = "events"
    LIVE_DATA = "live_data"
    SESSION_STARTED = "session_started"
    SESSION_ENDED = "session_ended"
    ERROR = "error"
    SHUTDOWN_COMPLETE = "shutdown_complete"
    EVENT_ICON_RESOLVED = "event_icon_resolved"
    MATCH_IN_PROGRESS_STATUS = "match_in_progress_status"
    MATCH_TIMELINE = "match_timeline"
    SAMPLE_MATCH_DATA = "sample_match_data"
    WRITE_MATCH_DATA = "write_match_data"


class _ResponseBase(ProtocolModel):
    request_id: str


class Initialized(_ResponseBase):
    type: Literal["initialized"] = "initialized"
    game_id: int
    slug: str
    protocol_version: NonNegativeInt


class RunningStatus(_ResponseBase):
    type: Literal["running_status"] = "running_status"
    running: bool


class GameStatusResponse(_ResponseBase):
    """Connection and game status, copied verbatim from the handler."""

    type: Literal["game_status"] = "game_status"
    connected: bool
    connection_status: str
    game_phase: Optional[str] = None
    is_in_game: bool


class Events(_ResponseBase):
    type: Literal["events"] = "events"
    events: list[GameEvent] = Field(default_factory=list)


class LiveData(_ResponseBase):
    """Live match data. Absent data is distinct from an empty object."""

    type: Literal["live_data"] = "live_data"
    data: Any = None


class SessionStarted(_ResponseBase):
    type: Literal["session_started"] = "session_started"
    context: Any = None


class SessionEnded(_ResponseBase):
    type: Literal["session_ended"] = "session_ended"
    match_data: Any = None


class ErrorResponse(_ResponseBase):
    """Error answer. ``code`` is an optional machine-readable error code."""

    type: Literal["error"] = "error"
    message: str
    code: Optional[str] = None

    @classmethod
    def create(
        cls, request_id: str, message: str, code: Optional[str] = None
    ) -> "ErrorResponse":
        return cls(request_id=request_id, message=message, code=code)


class ShutdownComplete(_ResponseBase):
    type: Literal["shutdown_complete"] = "shutdown_complete"


class EventIconResolved(_ResponseBase):
    type: Literal["event_icon_resolved"] = "event_icon_resolved"
    event_key: str
    icon_url: Optional[str] = None


class MatchInProgressStatus(_ResponseBase):
    """Stale match recovery answer, optionally embedding final stats."""

    type: Literal["match_in_progress_status"] = "match_in_progress_status"
    still_playing: bool
    set_complete: Optional[SetComplete] = None


class MatchTimeline(_ResponseBase):
    type: Literal["match_timeline"] = "match_timeline"
    found: bool
    entries: list[TimelineEntry] = Field(default_factory=list)


class SampleMatchData(_ResponseBase):
    type: Literal["sample_match_data"] = "sample_match_data"
    subpack: Subpack = 0
    data: Any


class WriteMatchData(_ResponseBase):
    """Unsolicited match telemetry. Never answers a command."""

    type: Literal["write_match_data"] = "write_match_data"
    request_id: str = UNSOLICITED_REQUEST_ID
    message: MatchDataMessage


Response = Annotated[
    Union[
        Initialized,
        RunningStatus,
        GameStatusResponse,
        Events,
        LiveData,
        SessionStarted,
        SessionEnded,
        ErrorResponse,
        ShutdownComplete,
        EventIconResolved,
        MatchInProgressStatus,
        MatchTimeline,
        SampleMatchData,
        WriteMatchData,
    ],
    Field(discriminator="type"),
]

_response_adapter: TypeAdapter[Response] = TypeAdapter(Response)


def parse_response(data: str | bytes | dict[str, Any]) -> Response:
    """Parse one response.

    Raises:
        ProtocolError: On malformed JSON, a non-object payload, an unknown
            ``type`` or invalid fields.
    """
    try:
        parsed = json.loads(data) if isinstance(data, (str, bytes)) else data
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProtocolError(f"Failed to decode response: {e}") from e
    if not isinstance(parsed, dict):
        raise ProtocolError("Response must be a JSON object")
    try:
        return _response_adapter.validate_python(parsed)
    except ValidationError as e:
        raise ProtocolError(f"Response validation failed: {e}") from e


def is_unsolicited(response: Response) -> bool:
    """True for telemetry that does not answer any command."""
    return isinstance(response, WriteMatchData)
