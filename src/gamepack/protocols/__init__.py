"""Collaborator interfaces for gamepack.

All protocols use `typing.Protocol` for structural subtyping with
`@runtime_checkable` for isinstance() support.

Protocols:
    MatchStoreProtocol: Storage of pack telemetry and timeline lookups.
    IconSourceProtocol: Event icon lookups.
"""

from __future__ import annotations

from gamepack.protocols.icons import IconSourceProtocol
from gamepack.protocols.storage import MatchStoreProtocol

__all__ = [
    "IconSourceProtocol",
    "MatchStoreProtocol",
]
