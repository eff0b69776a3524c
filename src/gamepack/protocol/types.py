"""Shared value types for the gamepack protocol.

Every value here is a transient message payload: built right before it is
sent, consumed right after it is received. Models are frozen; builder
helpers return new instances.

Wire conventions (shared by every model through ProtocolModel):
- Optional fields that are absent (None) are omitted on write.
- Explicit ``null`` is accepted on read for optional fields.
- Opaque payloads (``Any``) pass through untouched.
- Unknown fields are ignored for forward compatibility.
"""

from __future__ import annotations

from datetime import datetime
from enum import StrEnum
from typing import Annotated, Any, Optional

from pydantic import (
    BaseModel,
    BeforeValidator,
    ConfigDict,
    Field,
    NonNegativeInt,
    SerializerFunctionWrapHandler,
    model_serializer,
)


class ProtocolModel(BaseModel):
    """Base for every message and value model on the wire."""

    model_config = ConfigDict(extra="ignore", frozen=True)

    @model_serializer(mode="wrap")
    def _omit_absent_fields(
        self, handler: SerializerFunctionWrapHandler
    ) -> dict[str, Any]:
        data = handler(self)
        fields = type(self).model_fields
        if "type" in data:
            # discriminant first, as it reads on the wire
            data = {"type": data.pop("type"), **data}
        return {
            key: value
            for key, value in data.items()
            if not (
                value is None
                and key in fields
                and not fields[key].is_required()
                and fields[key].default is None
            )
        }


class _FoldedStrEnum(StrEnum):
    """StrEnum parsed case-insensitively, with optional underscores.

    ``"LiveFallback"``, ``"LIVE_FALLBACK"`` and ``"live_fallback"`` all map
    to the same member. The canonical text is always the member value.
    """

    @classmethod
    def _missing_(cls, value: object) -> Optional["_FoldedStrEnum"]:
        if not isinstance(value, str):
            return None
        folded = value.strip().replace("_", "").replace("-", "").lower()
        for member in cls:
            if member.value.replace("_", "") == folded:
                return member
        return None

    @classmethod
    def parse(cls, value: Any) -> Any:
        """Coerce a string to a member, leaving other values for validation."""
        if isinstance(value, str) and not isinstance(value, cls):
            try:
                return cls(value)
            except ValueError:
                return value
        return value


class EntryType(_FoldedStrEnum):
    """Kind of a timeline entry."""

    EVENT = "event"
    STATISTIC = "statistic"
    MOMENT = "moment"


class SummarySource(_FoldedStrEnum):
    """Provenance of the final stats attached to a completed match."""

    API = "api"
    LIVE_FALLBACK = "live_fallback"


EntryTypeField = Annotated[EntryType, BeforeValidator(EntryType.parse)]
SummarySourceField = Annotated[SummarySource, BeforeValidator(SummarySource.parse)]

# Subpack index, 0 = default game mode. Fits in one byte.
Subpack = Annotated[int, Field(ge=0, le=255)]

# entry_key used for every statistics timeline entry
STATS_ENTRY_KEY = "stats"


class GameEvent(ProtocolModel):
    """A game event that can trigger clip capture.

    Attributes:
        event_type: Event type identifier (e.g. "ChampionKill").
        timestamp_secs: Seconds from game start.
        data: Game-specific event payload.
        pre_capture_secs: Seconds to capture before the event (override).
        post_capture_secs: Seconds to capture after the event (override).
    """

    event_type: str
    timestamp_secs: float
    data: Any = None
    pre_capture_secs: Optional[float] = None
    post_capture_secs: Optional[float] = None

    def with_pre_capture(self, secs: float) -> "GameEvent":
        return self.model_copy(update={"pre_capture_secs": secs})

    def with_post_capture(self, secs: float) -> "GameEvent":
        return self.model_copy(update={"post_capture_secs": secs})


class Moment(ProtocolModel):
    """A candidate for recording, evaluated against daemon-side triggers.

    ``moment_id`` may be provisional (not yet registered with the daemon).
    """

    moment_id: str
    game_time_secs: float
    data: Any = None


class TimelineEntry(ProtocolModel):
    """One entry of a match timeline.

    Attributes:
        entry_type: Event, Statistic or Moment.
        entry_key: Event type name, "stats", or moment_id.
        game_time_secs: Game clock at capture.
        captured_at: Wall-clock capture time.
        data: Entry payload (for statistics: only the changed fields).
        trigger_fired: Whether a recording fired (Moment entries only).
    """

    entry_type: EntryTypeField
    entry_key: str
    game_time_secs: float
    captured_at: datetime
    data: Any = None
    trigger_fired: Optional[bool] = None


class GameStatus(ProtocolModel):
    """Current connection and game status returned by ``get_status``."""

    connected: bool = False
    connection_status: str = "Not connected"
    game_phase: Optional[str] = None
    is_in_game: bool = False

    @classmethod
    def disconnected(cls) -> "GameStatus":
        return cls()

    @classmethod
    def connected_with(cls, status: str) -> "GameStatus":
        """Create a connected status with a human-readable description."""
        return cls(connected=True, connection_status=status)

    def with_phase(self, phase: str) -> "GameStatus":
        return self.model_copy(update={"game_phase": phase})

    def in_game(self, in_game: bool = True) -> "GameStatus":
        return self.model_copy(update={"is_in_game": in_game})


class InitResponse(ProtocolModel):
    """Metadata returned by a handler's ``init``.

    A ``protocol_version`` of 0 means "use the protocol baseline".
    """

    game_id: int
    slug: str
    protocol_version: NonNegativeInt = 0


class MatchData(ProtocolModel):
    """Complete match data returned when a game session ends.

    Attributes:
        game_slug: Game slug (e.g. "league").
        game_id: Game identifier.
        result: "win", "loss", "remake" or "unknown".
        details: Game-specific match details.
        duration_secs: Match duration, when known.
        pack_id: Stable pack identifier, when the pack has one.
    """

    game_slug: str
    game_id: int
    result: str
    details: Any = None
    duration_secs: Optional[float] = None
    pack_id: Optional[str] = None
