"""Gamepack worker runtime.

Components:
- handler: capability interface implemented per game
- dispatch: command -> handler call -> response mapping
- writer: serialized output channel and telemetry emitter
- state_machine: main loop states
- runner: stdin/stdout main loop
"""

from gamepack.worker.handler import GamepackHandler
from gamepack.worker.dispatch import dispatch_command
from gamepack.worker.writer import MatchDataEmitter, MessageWriter
from gamepack.worker.state_machine import RunnerState, RunnerStateMachine
from gamepack.worker.runner import GamepackRunner, run_gamepack

__all__ = [
    "GamepackHandler",
    "dispatch_command",
    "MatchDataEmitter",
    "MessageWriter",
    "RunnerState",
    "RunnerStateMachine",
    "GamepackRunner",
    "run_gamepack",
]
