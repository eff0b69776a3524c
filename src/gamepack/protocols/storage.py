"""Match storage protocol.

The daemon persists pack telemetry through an implementation of this
interface and answers timeline queries from it. Uses `typing.Protocol`
for structural subtyping.

Usage:
    from gamepack.protocols import MatchStoreProtocol
    from gamepack.storage import InMemoryMatchStore

    store = InMemoryMatchStore()
    assert isinstance(store, MatchStoreProtocol)
"""

from __future__ import annotations

from typing import Optional, Protocol, Sequence, runtime_checkable

from gamepack.protocol.match_data import MatchDataMessage
from gamepack.protocol.types import EntryType, TimelineEntry


@runtime_checkable
class MatchStoreProtocol(Protocol):
    """Protocol for match telemetry storage.

    Methods:
        persist: Apply one unsolicited match data message.
        lookup_timeline: Read back a match timeline.

    Note:
        Implementations do NOT need to inherit from this class.
    """

    def persist(self, message: MatchDataMessage) -> bool:
        """Apply one match data message.

        Args:
            message: WriteStatistics, WriteGameEvents, WriteMoments or
                SetComplete.

        Returns:
            True if the message was stored, False otherwise.
        """
        ...

    def lookup_timeline(
        self,
        subpack: int,
        external_match_id: str,
        entry_types: Optional[Sequence[EntryType]] = None,
        limit: Optional[int] = None,
    ) -> tuple[bool, list[TimelineEntry]]:
        """Read the timeline of one match.

        Args:
            subpack: Subpack index.
            external_match_id: The game's match identifier.
            entry_types: Kinds to keep (None = all).
            limit: Keep only the latest N entries (None = all).

        Returns:
            Tuple of (found, entries in timeline order).
        """
        ...
