"""Storage package for gamepack telemetry.

Exports:
    InMemoryMatchStore: Reference MatchStoreProtocol implementation.
    MatchRecord: Stored match with its timeline.
    MatchSummary: Per-match stat projection.
"""

from gamepack.storage.memory import InMemoryMatchStore, MatchRecord, MatchSummary

__all__ = [
    "InMemoryMatchStore",
    "MatchRecord",
    "MatchSummary",
]
