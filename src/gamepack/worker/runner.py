"""Main loop for gamepack workers.

Reads NDJSON commands from the input stream, dispatches them to the
handler one at a time and writes each response through the shared
MessageWriter. The loop blocks on the next line and on each handler call;
there is no pipelining, timeout or cancellation.

The loop ends when:
- a shutdown command has been answered
- the input stream closes
- the output stream breaks

Usage:
    from gamepack.worker.runner import run_gamepack

    run_gamepack(MyGame())
"""

from __future__ import annotations

import sys
from typing import BinaryIO, Optional

import structlog

from gamepack.core.config import Settings, get_settings
from gamepack.core.exceptions import ProtocolError
from gamepack.core.logging import configure_logging
from gamepack.protocol.framing import decode_command, read_frames
from gamepack.protocol.responses import (
    UNSOLICITED_REQUEST_ID,
    ErrorResponse,
    Response,
    ShutdownComplete,
)
from gamepack.worker.dispatch import dispatch_command
from gamepack.worker.handler import GamepackHandler
from gamepack.worker.state_machine import RunnerState, RunnerStateMachine
from gamepack.worker.writer import MatchDataEmitter, MessageWriter


log = structlog.get_logger()

PARSE_ERROR_CODE = "parse_error"


class GamepackRunner:
    """Drives one daemon conversation over a pair of byte streams.

    Creating a runner configures structlog from the settings, writing to
    stderr, so log lines never land in the output stream.

    Attributes:
        writer: The serialized output channel.
        emitter: Telemetry channel bound to the handler.
    """

    def __init__(
        self,
        handler: GamepackHandler,
        input_stream: BinaryIO,
        output_stream: BinaryIO,
        settings: Optional[Settings] = None,
    ) -> None:
        self._handler = handler
        self._input = input_stream
        self._settings = settings or get_settings()
        # stdout may be the protocol stream; logs must go to stderr
        configure_logging(self._settings.logging)
        self._state = RunnerStateMachine()
        self.writer = MessageWriter(output_stream)
        self.emitter = MatchDataEmitter(self.writer)
        handler.bind_emitter(self.emitter)

    @property
    def state(self) -> RunnerState:
        return self._state.current_state

    def handle_line(self, line: bytes | str) -> Response:
        """Decode one line and produce its single response.

        Unparseable input is answered with an Error carrying an empty
        request_id.
        """
        try:
            command = decode_command(
                line, max_size=self._settings.protocol.max_message_size
            )
        except ProtocolError as e:
            log.warning("command_parse_failed", error=e.reason)
            return ErrorResponse.create(
                UNSOLICITED_REQUEST_ID, f"Parse error: {e.reason}", PARSE_ERROR_CODE
            )
        return dispatch_command(
            self._handler,
            command,
            default_protocol_version=self._settings.protocol.default_protocol_version,
        )

    def run(self) -> None:
        """Run until shutdown, end of input or a broken output stream."""
        log.info("gamepack_runner_started")
        try:
            frames = read_frames(
                self._input, max_size=self._settings.protocol.max_message_size
            )
            for frame in frames:
                response = self.handle_line(frame)
                final = isinstance(response, ShutdownComplete)
                sent = self.writer.write(response, close_after=final)
                if final and sent:
                    log.info("shutdown_complete", request_id=response.request_id)
                    break
                self._state.transition(RunnerState.RUNNING)
            else:
                log.info("input_closed")
        except BrokenPipeError:
            log.warning("output_closed")
        finally:
            self._stop()

    def _stop(self) -> None:
        if self._state.is_running:
            self._state.stop()
        # nothing may follow shutdown_complete, not even telemetry
        self.writer.close()
        if self.writer.dropped_count:
            log.warning("messages_dropped", count=self.writer.dropped_count)


def run_gamepack(
    handler: GamepackHandler,
    settings: Optional[Settings] = None,
) -> None:
    """Run a handler over this process's stdin/stdout.

    Logging is configured from the settings and goes to stderr.
    """
    settings = settings or get_settings()
    GamepackRunner(
        handler,
        input_stream=sys.stdin.buffer,
        output_stream=sys.stdout.buffer,
        settings=settings,
    ).run()
