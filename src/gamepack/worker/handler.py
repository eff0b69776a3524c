"""Handler capability interface.

A gamepack implements one GamepackHandler subclass. Only ``init`` must be
overridden; every other capability has a default, so an integration only
overrides what its game supports.

Usage:
    from gamepack.worker import GamepackHandler, run_gamepack
    from gamepack.protocol.types import GameStatus, InitResponse

    class MyGame(GamepackHandler):
        def init(self) -> InitResponse:
            return InitResponse(game_id=7, slug="my-game", protocol_version=1)

        def get_status(self) -> GameStatus:
            return GameStatus.connected_with("Connected").in_game(True)

    run_gamepack(MyGame())
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from typing import TYPE_CHECKING, Any, Optional

from gamepack.protocol.recovery import IsMatchInProgressResponse
from gamepack.protocol.types import GameEvent, GameStatus, InitResponse, MatchData

if TYPE_CHECKING:
    from gamepack.worker.writer import MatchDataEmitter


class GamepackHandler(ABC):
    """Game-specific capabilities called by the dispatch engine.

    Methods other than ``init`` must not fail; absence is expressed by
    returning None. Raising HandlerError from any method is still answered
    with an Error response carrying the request_id.
    """

    _emitter: Optional["MatchDataEmitter"] = None

    def bind_emitter(self, emitter: "MatchDataEmitter") -> None:
        """Attach the shared telemetry channel. Called by the runner."""
        self._emitter = emitter

    @property
    def emitter(self) -> Optional["MatchDataEmitter"]:
        """Telemetry channel, or None before the runner starts."""
        return self._emitter

    @abstractmethod
    def init(self) -> InitResponse:
        """Initialize the integration.

        Called once when the worker starts.

        Raises:
            HandlerError: If the integration cannot start.
        """

    def detect_running(self) -> bool:
        """Whether the game client/process is running."""
        return False

    def get_status(self) -> GameStatus:
        """Current connection and game status."""
        return GameStatus.disconnected()

    def poll_events(self) -> list[GameEvent]:
        """New events since the previous poll. Called every ~500ms in game."""
        return []

    def get_live_data(self) -> Optional[Any]:
        """Live stats for display, or None when not in a game."""
        return None

    def on_session_start(self) -> Optional[Any]:
        """Session started. The returned context comes back in session_end."""
        return None

    def on_session_end(self, context: Any) -> Optional[MatchData]:
        """Session ended. Return the complete match data, if any."""
        return None

    def shutdown(self) -> None:
        """Release resources before the worker exits."""

    def resolve_event_icon(self, event_key: str) -> Optional[str]:
        """Icon URL for a discovered event type, or None."""
        return None

    def is_match_in_progress(
        self, subpack: int, external_match_id: str
    ) -> IsMatchInProgressResponse:
        """Stale match recovery check.

        The default declares the match ended with no final stats, so open
        matches get finalized instead of lingering.
        """
        return IsMatchInProgressResponse.ended()

    def get_sample_match_data(self, subpack: int) -> Optional[Any]:
        """Randomized but valid match data for UI previews, or None."""
        return None
