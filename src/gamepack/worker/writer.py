"""Serialized output channel shared by responses and telemetry.

The worker has exactly one outbound byte stream. Command responses come
from the dispatch loop while ``write_match_data`` telemetry can come from
any number of producer threads started by the handler. MessageWriter is
the only path to that stream: serialize, write and flush happen under one
lock, so every message lands as one whole line. Ordering between racing
writers is first come, first served.

A message that cannot be serialized is dropped rather than written half
way. Drops are reported as structured warnings on stderr and counted.
"""

from __future__ import annotations

import threading
from datetime import datetime
from typing import Any, BinaryIO, Mapping, Optional, Sequence

import structlog
from pydantic import BaseModel

from gamepack.protocol.framing import encode_message
from gamepack.protocol.match_data import (
    MatchDataMessage,
    SetComplete,
    WriteGameEvents,
    WriteMoments,
    WriteStatistics,
)
from gamepack.protocol.responses import WriteMatchData
from gamepack.protocol.types import GameEvent, Moment, SummarySource


log = structlog.get_logger()


class MessageWriter:
    """Thread-safe line writer over a binary stream.

    Attributes:
        dropped_count: Number of messages dropped since creation.
    """

    def __init__(self, stream: BinaryIO) -> None:
        self._stream = stream
        self._lock = threading.Lock()
        self._closed = False
        self.dropped_count = 0

    @property
    def closed(self) -> bool:
        return self._closed

    def write(self, message: BaseModel, close_after: bool = False) -> bool:
        """Write one message as one line and flush.

        With ``close_after``, a successful write also closes the writer
        before the lock is released, so no other message can follow it.

        Returns:
            True if the message was written, False if it was dropped.

        Raises:
            OSError: If the underlying stream fails (e.g. broken pipe).
        """
        with self._lock:
            if self._closed:
                self.dropped_count += 1
                log.warning(
                    "message_dropped_writer_closed",
                    message_type=getattr(message, "type", type(message).__name__),
                )
                return False
            try:
                line = encode_message(message)
            except (ValueError, TypeError) as e:
                # PydanticSerializationError is a ValueError
                self.dropped_count += 1
                log.warning(
                    "message_dropped_serialization_failed",
                    message_type=getattr(message, "type", type(message).__name__),
                    request_id=getattr(message, "request_id", None),
                    error=str(e),
                )
                return False
            self._stream.write(line)
            self._stream.flush()
            if close_after:
                self._closed = True
            return True

    def close(self) -> None:
        """Refuse every later write. Does not close the underlying stream."""
        with self._lock:
            self._closed = True


class MatchDataEmitter:
    """Unsolicited telemetry producer handed to handlers.

    Safe to call from any thread.

    Usage:
        emitter.write_statistics(0, "m1", game_time_secs=12.0, stats={"kills": 1})
        emitter.set_complete(0, "m1", SummarySource.API, final_stats={...})
    """

    def __init__(self, writer: MessageWriter) -> None:
        self._writer = writer

    def emit(self, message: MatchDataMessage) -> bool:
        """Send one match data message wrapped in ``write_match_data``."""
        return self._writer.write(WriteMatchData(message=message))

    def write_statistics(
        self,
        subpack: int,
        external_match_id: str,
        game_time_secs: float,
        stats: Mapping[str, Any],
        played_at: Optional[datetime] = None,
    ) -> bool:
        return self.emit(
            WriteStatistics(
                subpack=subpack,
                external_match_id=external_match_id,
                played_at=played_at,
                game_time_secs=game_time_secs,
                stats=dict(stats),
            )
        )

    def write_game_events(
        self,
        subpack: int,
        external_match_id: str,
        events: Sequence[GameEvent],
    ) -> bool:
        return self.emit(
            WriteGameEvents(
                subpack=subpack,
                external_match_id=external_match_id,
                events=list(events),
            )
        )

    def write_moments(
        self,
        subpack: int,
        external_match_id: str,
        moments: Sequence[Moment],
    ) -> bool:
        return self.emit(
            WriteMoments(
                subpack=subpack,
                external_match_id=external_match_id,
                moments=list(moments),
            )
        )

    def set_complete(
        self,
        subpack: int,
        external_match_id: str,
        summary_source: SummarySource,
        final_stats: Optional[Mapping[str, Any]] = None,
    ) -> bool:
        return self.emit(
            SetComplete(
                subpack=subpack,
                external_match_id=external_match_id,
                summary_source=summary_source,
                final_stats=dict(final_stats) if final_stats is not None else None,
            )
        )
