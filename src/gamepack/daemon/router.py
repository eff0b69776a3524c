"""Daemon-side handling of pack traffic.

The daemon reads a single stream from each pack in which solicited
responses and unsolicited ``write_match_data`` telemetry interleave.
PackOutputRouter splits that stream: telemetry goes straight to the match
store, responses go back to whoever is waiting on their request_id.

Timeline queries (``get_match_timeline``) are the daemon's to answer, from
its own storage; the pack side always answers "not found".

Usage:
    router = PackOutputRouter(store)
    process = await asyncio.create_subprocess_exec(
        *argv, stdin=PIPE, stdout=PIPE, limit=router.reader_limit
    )
    await router.pump(process.stdout, on_response=pending.resolve)
"""

from __future__ import annotations

import asyncio
import inspect
import uuid
from typing import Any, Awaitable, Callable, Optional, Union

import structlog

from gamepack.core.exceptions import ProtocolError
from gamepack.protocol.commands import Command, CommandType, GetMatchTimeline, parse_command
from gamepack.protocol.framing import decode_response
from gamepack.protocol.responses import MatchTimeline, Response, WriteMatchData
from gamepack.protocol.version import MAX_MESSAGE_SIZE
from gamepack.protocols.storage import MatchStoreProtocol


log = structlog.get_logger()

ResponseCallback = Callable[[Response], Union[None, Awaitable[None]]]


def build_command(command: CommandType | str, **fields: Any) -> Command:
    """Build a command with an auto-generated request_id.

    Args:
        command: Command discriminant (must be a CommandType value).
        **fields: Command fields as keyword arguments.

    Raises:
        ValueError: If command is not a valid CommandType value.
        ProtocolError: If the fields do not validate.
    """
    try:
        command_type = CommandType(command)
    except ValueError:
        valid_commands = [c.value for c in CommandType]
        raise ValueError(
            f"Invalid command: '{command}'. Valid commands: {valid_commands}"
        ) from None

    return parse_command(
        {"type": command_type.value, "request_id": str(uuid.uuid4()), **fields}
    )


def answer_timeline_query(
    command: GetMatchTimeline, store: MatchStoreProtocol
) -> MatchTimeline:
    """Answer a timeline query from the daemon's storage."""
    found, entries = store.lookup_timeline(
        command.subpack,
        command.external_match_id,
        entry_types=command.entry_types,
        limit=command.limit,
    )
    return MatchTimeline(request_id=command.request_id, found=found, entries=entries)


class PackOutputRouter:
    """Splits pack output into stored telemetry and solicited responses.

    Attributes:
        invalid_count: Lines from the pack that could not be decoded.
        persisted_count: Telemetry messages handed to the store.
    """

    def __init__(
        self,
        store: MatchStoreProtocol,
        max_message_size: int = MAX_MESSAGE_SIZE,
    ) -> None:
        self._store = store
        self._max_message_size = max_message_size
        self.invalid_count = 0
        self.persisted_count = 0

    def route(self, line: bytes | str) -> Optional[Response]:
        """Route one line of pack output.

        Returns:
            The response for a solicited message, None for telemetry and
            for lines that could not be decoded.
        """
        try:
            response = decode_response(line, max_size=self._max_message_size)
        except ProtocolError as e:
            self.invalid_count += 1
            log.warning("pack_output_invalid", error=e.reason)
            return None

        if not isinstance(response, WriteMatchData):
            return response

        message = response.message
        try:
            self._store.persist(message)
        except Exception as e:
            log.exception(
                "match_data_persist_failed",
                message_type=message.type,
                external_match_id=message.external_match_id,
                error=str(e),
            )
            return None
        self.persisted_count += 1
        return None

    @property
    def reader_limit(self) -> int:
        """Buffer limit to give the pack's StreamReader.

        Lines above the reader's limit are discarded as invalid by
        ``pump``, so the reader needs headroom above max_message_size.
        """
        return self._max_message_size * 2

    async def pump(
        self,
        reader: asyncio.StreamReader,
        on_response: ResponseCallback,
    ) -> int:
        """Route every line from ``reader`` until end of stream.

        The reader should be created with ``limit=self.reader_limit``
        (e.g. ``asyncio.create_subprocess_exec(..., limit=router.reader_limit)``).
        A line longer than the reader's limit is skipped and counted in
        ``invalid_count``; routing continues with the next line.

        Args:
            reader: Pack stdout.
            on_response: Called with each solicited response. May be sync
                or async.

        Returns:
            Number of solicited responses delivered.
        """
        delivered = 0
        while True:
            line = await self._read_line(reader)
            if line is None:
                continue
            if not line:
                break
            if not line.strip():
                continue
            response = self.route(line)
            if response is None:
                continue
            result = on_response(response)
            if inspect.isawaitable(result):
                await result
            delivered += 1
        log.info("pack_output_closed", delivered=delivered, persisted=self.persisted_count)
        return delivered

    async def _read_line(self, reader: asyncio.StreamReader) -> Optional[bytes]:
        """Next line, b"" at end of stream, None for a skipped oversized line."""
        try:
            return await reader.readuntil(b"\n")
        except asyncio.IncompleteReadError as e:
            # last line without a trailing newline
            return e.partial
        except asyncio.LimitOverrunError as e:
            self.invalid_count += 1
            log.warning("pack_output_hard_limit_exceeded", limit=self.reader_limit)
            await self._skip_line(reader, e.consumed)
            return None

    @staticmethod
    async def _skip_line(reader: asyncio.StreamReader, consumed: int) -> None:
        # LimitOverrunError leaves the scanned bytes buffered
        while True:
            await reader.readexactly(consumed)
            try:
                await reader.readuntil(b"\n")
                return
            except asyncio.IncompleteReadError:
                return
            except asyncio.LimitOverrunError as e:
                consumed = e.consumed
