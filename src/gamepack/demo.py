"""Demo gamepack.

A self-contained handler that fakes a game so the daemon side can be
exercised without a real game client. Used by ``gamepack demo``.
"""

from __future__ import annotations

import random
import uuid
from typing import Any, Mapping, Optional

from gamepack.protocol.types import (
    GameEvent,
    GameStatus,
    InitResponse,
    MatchData,
    SummarySource,
)
from gamepack.protocols.icons import IconSourceProtocol
from gamepack.worker.handler import GamepackHandler


DEMO_GAME_ID = 999
DEMO_SLUG = "demo"

DEMO_ICONS = {
    "Kill": "https://example.invalid/icons/kill.png",
    "Death": "https://example.invalid/icons/death.png",
}


class StaticIconSource:
    """Icon lookups from a fixed table."""

    def __init__(self, icons: Mapping[str, str]) -> None:
        self._icons = dict(icons)

    def resolve_icon(self, event_key: str) -> Optional[str]:
        return self._icons.get(event_key)


class DemoHandler(GamepackHandler):
    """Fake game: always connected, one match per session."""

    def __init__(
        self,
        icons: Optional[IconSourceProtocol] = None,
        seed: Optional[int] = None,
    ) -> None:
        self._icons = icons or StaticIconSource(DEMO_ICONS)
        self._rng = random.Random(seed)
        self._match_id: Optional[str] = None
        self._game_time = 0.0
        self._kills = 0

    def init(self) -> InitResponse:
        return InitResponse(game_id=DEMO_GAME_ID, slug=DEMO_SLUG, protocol_version=0)

    def detect_running(self) -> bool:
        return True

    def get_status(self) -> GameStatus:
        status = GameStatus.connected_with("Connected")
        if self._match_id is None:
            return status.with_phase("Lobby")
        return status.with_phase("InProgress").in_game(True)

    def poll_events(self) -> list[GameEvent]:
        if self._match_id is None:
            return []
        self._game_time += 30.0
        self._kills += 1
        event = GameEvent(
            event_type="Kill",
            timestamp_secs=self._game_time,
            data={"kills": self._kills},
        )
        if self.emitter is not None:
            self.emitter.write_game_events(0, self._match_id, [event])
            self.emitter.write_statistics(
                0, self._match_id, self._game_time, {"kills": self._kills}
            )
        return [event]

    def get_live_data(self) -> Optional[Any]:
        if self._match_id is None:
            return None
        return {"kills": self._kills, "game_time_secs": self._game_time}

    def on_session_start(self) -> Optional[Any]:
        self._match_id = uuid.uuid4().hex
        self._game_time = 0.0
        self._kills = 0
        return {"external_match_id": self._match_id}

    def on_session_end(self, context: Any) -> Optional[MatchData]:
        match_id = self._match_id
        if match_id is None:
            return None
        if self.emitter is not None:
            self.emitter.set_complete(
                0, match_id, SummarySource.LIVE_FALLBACK, final_stats={"kills": self._kills}
            )
        self._match_id = None
        return MatchData(
            game_slug=DEMO_SLUG,
            game_id=DEMO_GAME_ID,
            result="win" if self._kills else "loss",
            details={"kills": self._kills, "context": context},
            duration_secs=self._game_time,
        )

    def resolve_event_icon(self, event_key: str) -> Optional[str]:
        return self._icons.resolve_icon(event_key)

    def get_sample_match_data(self, subpack: int) -> Optional[Any]:
        return {
            "subpack": subpack,
            "result": self._rng.choice(["win", "loss"]),
            "kills": self._rng.randint(0, 20),
            "duration_secs": self._rng.randint(900, 2400),
        }
