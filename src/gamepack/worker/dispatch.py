"""Dispatch engine.

Maps each command to exactly one handler capability call and each result
to exactly one response, echoing the command's request_id.
"""

from __future__ import annotations

from typing import Any, assert_never

import structlog
from pydantic import BaseModel

from gamepack.core.exceptions import HandlerError
from gamepack.protocol.commands import (
    Command,
    DetectRunning,
    GetLiveData,
    GetMatchTimeline,
    GetSampleMatchData,
    GetStatus,
    Init,
    IsMatchInProgress,
    PollEvents,
    ResolveEventIcon,
    SessionEnd,
    SessionStart,
    Shutdown,
)
from gamepack.protocol.responses import (
    ErrorResponse,
    EventIconResolved,
    Events,
    GameStatusResponse,
    Initialized,
    LiveData,
    MatchInProgressStatus,
    MatchTimeline,
    Response,
    RunningStatus,
    SampleMatchData,
    SessionEnded,
    SessionStarted,
    ShutdownComplete,
)
from gamepack.protocol.version import PROTOCOL_VERSION
from gamepack.worker.handler import GamepackHandler


log = structlog.get_logger()

INTERNAL_ERROR_CODE = "internal_error"


def _to_payload(value: Any) -> Any:
    """Turn a handler result into an opaque JSON payload.

    Falls back to an empty object when the value cannot be represented.
    """
    if value is None:
        return {}
    if isinstance(value, BaseModel):
        try:
            return value.model_dump(mode="json")
        except (ValueError, TypeError) as e:
            log.warning(
                "payload_serialization_failed",
                payload_type=type(value).__name__,
                error=str(e),
            )
            return {}
    return value


def dispatch_command(
    handler: GamepackHandler,
    command: Command,
    default_protocol_version: int = PROTOCOL_VERSION,
) -> Response:
    """Run one command against the handler and build its response.

    Args:
        handler: Game-specific capability implementation.
        command: Parsed command.
        default_protocol_version: Version reported when the handler
            declares 0.

    Returns:
        The single response answering ``command``.
    """
    request_id = command.request_id
    log.debug("dispatching_command", command=command.type, request_id=request_id)

    try:
        return _dispatch(handler, command, default_protocol_version)
    except HandlerError as e:
        log.info(
            "handler_error",
            command=command.type,
            request_id=request_id,
            error=e.message,
            code=e.code,
        )
        return ErrorResponse.create(request_id, e.message, e.code)
    except Exception as e:
        log.exception(
            "handler_unexpected_error",
            command=command.type,
            request_id=request_id,
            error=str(e),
        )
        return ErrorResponse.create(
            request_id, f"Internal error: {e}", INTERNAL_ERROR_CODE
        )


def _dispatch(
    handler: GamepackHandler,
    command: Command,
    default_protocol_version: int,
) -> Response:
    request_id = command.request_id

    match command:
        case Init():
            info = handler.init()
            return Initialized(
                request_id=request_id,
                game_id=info.game_id,
                slug=info.slug,
                protocol_version=info.protocol_version or default_protocol_version,
            )

        case DetectRunning():
            return RunningStatus(request_id=request_id, running=handler.detect_running())

        case GetStatus():
            status = handler.get_status()
            return GameStatusResponse(
                request_id=request_id,
                connected=status.connected,
                connection_status=status.connection_status,
                game_phase=status.game_phase,
                is_in_game=status.is_in_game,
            )

        case PollEvents():
            return Events(request_id=request_id, events=handler.poll_events())

        case GetLiveData():
            return LiveData(request_id=request_id, data=handler.get_live_data())

        case SessionStart():
            return SessionStarted(request_id=request_id, context=handler.on_session_start())

        case SessionEnd(context=context):
            match_data = handler.on_session_end(context)
            return SessionEnded(
                request_id=request_id,
                match_data=None if match_data is None else _to_payload(match_data),
            )

        case Shutdown():
            # shutdown is always acknowledged, even when cleanup fails
            try:
                handler.shutdown()
            except Exception as e:
                log.exception("handler_shutdown_failed", request_id=request_id, error=str(e))
            return ShutdownComplete(request_id=request_id)

        case ResolveEventIcon(event_key=event_key):
            return EventIconResolved(
                request_id=request_id,
                event_key=event_key,
                icon_url=handler.resolve_event_icon(event_key),
            )

        case IsMatchInProgress(subpack=subpack, external_match_id=match_id):
            result = handler.is_match_in_progress(subpack, match_id)
            return MatchInProgressStatus(
                request_id=request_id,
                still_playing=result.still_playing,
                set_complete=result.set_complete,
            )

        case GetMatchTimeline():
            # Timeline lookups are answered by the daemon's storage, never
            # by the pack. See gamepack.daemon.router.answer_timeline_query.
            return MatchTimeline(request_id=request_id, found=False, entries=[])

        case GetSampleMatchData(subpack=subpack):
            return SampleMatchData(
                request_id=request_id,
                subpack=subpack,
                data=_to_payload(handler.get_sample_match_data(subpack)),
            )

        case _:
            assert_never(command)
