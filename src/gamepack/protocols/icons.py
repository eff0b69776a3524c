"""Icon source protocol.

Handlers that resolve icons for discovered event types usually delegate to
a lookup source (static asset table, CDN index, game API).
"""

from __future__ import annotations

from typing import Optional, Protocol, runtime_checkable


@runtime_checkable
class IconSourceProtocol(Protocol):
    """Protocol for event icon lookups."""

    def resolve_icon(self, event_key: str) -> Optional[str]:
        """Return an icon URL for ``event_key``, or None if unknown."""
        ...
