"""Commands sent from the daemon to a gamepack.

Each command carries a caller-assigned ``request_id`` that the pack echoes
back in exactly one response. The set of commands is closed; the ``type``
field is the discriminant on the wire.

Usage:
    from gamepack.protocol.commands import GetStatus, parse_command

    cmd = parse_command('{"type":"get_status","request_id":"r1"}')
    assert cmd == GetStatus(request_id="r1")
"""

from __future__ import annotations

import json
from enum import StrEnum
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, NonNegativeInt, TypeAdapter, ValidationError

from gamepack.core.exceptions import ProtocolError
from gamepack.protocol.types import EntryTypeField, ProtocolModel, Subpack


class CommandType(StrEnum):
    """Wire discriminants of every command."""

    INIT = "init"
    DETECT_RUNNING = "detect_running"
    GET_STATUS = "get_status"
    POLL_EVENTS = "poll_events"
    GET_LIVE_DATA = "get_live_data"
    SESSION_START = "session_start"
    SESSION_END = "session_end"
    SHUTDOWN = "shutdown"
    RESOLVE_EVENT_ICON = "resolve_event_icon"
    IS_MATCH_IN_PROGRESS = "is_match_in_progress"
    GET_MATCH_TIMELINE = "get_match_timeline"
    GET_SAMPLE_MATCH_DATA = "get_sample_match_data"


class _CommandBase(ProtocolModel):
    request_id: str


class Init(_CommandBase):
    """Initialize the integration. Answered by ``initialized``."""

    type: Literal["init"] = "init"


class DetectRunning(_CommandBase):
    """Check whether the game process is running."""

    type: Literal["detect_running"] = "detect_running"


class GetStatus(_CommandBase):
    """Get current connection and game status."""

    type: Literal["get_status"] = "get_status"


class PollEvents(_CommandBase):
    """Poll for new game events since the previous poll."""

    type: Literal["poll_events"] = "poll_events"


class GetLiveData(_CommandBase):
    """Get live match data for display."""

    type: Literal["get_live_data"] = "get_live_data"


class SessionStart(_CommandBase):
    type: Literal["session_start"] = "session_start"


class SessionEnd(_CommandBase):
    """Session ended. ``context`` is whatever ``session_started`` returned."""

    type: Literal["session_end"] = "session_end"
    context: Any = None


class Shutdown(_CommandBase):
    """Request graceful shutdown. Always the last command answered."""

    type: Literal["shutdown"] = "shutdown"


class ResolveEventIcon(_CommandBase):
    """Request an icon URL for a discovered event type."""

    type: Literal["resolve_event_icon"] = "resolve_event_icon"
    event_key: str


class IsMatchInProgress(_CommandBase):
    """Stale match recovery: is this match still being played?"""

    type: Literal["is_match_in_progress"] = "is_match_in_progress"
    subpack: Subpack = 0
    external_match_id: str


class GetMatchTimeline(_CommandBase):
    """Request the timeline of a match.

    ``entry_types`` filters by kind (None = all); ``limit`` keeps the
    latest N entries.
    """

    type: Literal["get_match_timeline"] = "get_match_timeline"
    subpack: Subpack = 0
    external_match_id: str
    entry_types: Optional[list[EntryTypeField]] = None
    limit: Optional[NonNegativeInt] = None


class GetSampleMatchData(_CommandBase):
    """Request randomized but valid match data for UI previews."""

    type: Literal["get_sample_match_data"] = "get_sample_match_data"
    subpack: Subpack = 0


Command = Annotated[
    Union[
        Init,
        DetectRunning,
        GetStatus,
        PollEvents,
        GetLiveData,
        SessionStart,
        SessionEnd,
        Shutdown,
        ResolveEventIcon,
        IsMatchInProgress,
        GetMatchTimeline,
        GetSampleMatchData,
    ],
    Field(discriminator="type"),
]

_command_adapter: TypeAdapter[Command] = TypeAdapter(Command)


def parse_command(data: str | bytes | dict[str, Any]) -> Command:
    """Parse one command.

    Args:
        data: JSON text/bytes or an already-decoded object.

    Returns:
        The command variant named by the ``type`` field.

    Raises:
        ProtocolError: On malformed JSON, a non-object payload, an unknown
            ``type`` or invalid fields.
    """
    try:
        parsed = json.loads(data) if isinstance(data, (str, bytes)) else data
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProtocolError(f"Failed to decode command: {e}") from e
    if not isinstance(parsed, dict):
        raise ProtocolError("Command must be a JSON object")
    try:
        return _command_adapter.validate_python(parsed)
    except ValidationError as e:
        raise ProtocolError(f"Command validation failed: {e}") from e
