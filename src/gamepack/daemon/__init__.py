"""Daemon-side helpers for talking to gamepack workers.

Components:
- router: splits pack output into telemetry and responses, answers
  timeline queries from storage, builds commands
"""

from gamepack.daemon.router import (
    PackOutputRouter,
    answer_timeline_query,
    build_command,
)

__all__ = [
    "PackOutputRouter",
    "answer_timeline_query",
    "build_command",
]
