"""Stale match recovery values.

When the daemon (or a reloaded pack) starts up, matches that were in
progress at the last stop are checked with ``is_match_in_progress``. A pack
that knows the match has ended may attach a SetComplete carrying the final
stats so the daemon can finalize it in the same round trip.
"""

from __future__ import annotations

from typing import Optional

from gamepack.protocol.match_data import SetComplete
from gamepack.protocol.types import ProtocolModel


class IsMatchInProgressResponse(ProtocolModel):
    """Answer of a handler's ``is_match_in_progress``."""

    still_playing: bool
    set_complete: Optional[SetComplete] = None

    @classmethod
    def ended(cls) -> "IsMatchInProgressResponse":
        """Match has ended and no final stats are available."""
        return cls(still_playing=False)

    @classmethod
    def ended_with(cls, set_complete: SetComplete) -> "IsMatchInProgressResponse":
        """Match has ended; finalize it with the attached stats."""
        return cls(still_playing=False, set_complete=set_complete)

    @classmethod
    def playing(cls) -> "IsMatchInProgressResponse":
        return cls(still_playing=True)
