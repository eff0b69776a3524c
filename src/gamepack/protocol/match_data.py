"""Unsolicited match telemetry messages.

These flow pack -> daemon only, wrapped in a ``write_match_data`` response
with an empty request_id. ``external_match_id`` is the game's own match
identifier and, together with ``subpack``, the dedup key for every write
belonging to one match.

Usage:
    from gamepack.protocol.match_data import WriteStatistics

    msg = WriteStatistics(
        subpack=0,
        external_match_id="m1",
        game_time_secs=12.0,
        stats={"kills": 1},
    )
"""

from __future__ import annotations

import json
from datetime import datetime
from typing import Annotated, Any, Literal, Optional, Union

from pydantic import Field, TypeAdapter, ValidationError

from gamepack.core.exceptions import ProtocolError
from gamepack.protocol.types import (
    GameEvent,
    Moment,
    ProtocolModel,
    Subpack,
    SummarySourceField,
)


class WriteStatistics(ProtocolModel):
    """Current full stat set for a match at a point in game time.

    ``played_at`` is only meaningful on the first write for a match.
    """

    type: Literal["write_statistics"] = "write_statistics"
    subpack: Subpack = 0
    external_match_id: str
    played_at: Optional[datetime] = None
    game_time_secs: float
    stats: dict[str, Any] = Field(default_factory=dict)


class WriteGameEvents(ProtocolModel):
    """Events to append to a match timeline."""

    type: Literal["write_game_events"] = "write_game_events"
    subpack: Subpack = 0
    external_match_id: str
    events: list[GameEvent] = Field(default_factory=list)


class WriteMoments(ProtocolModel):
    """Moments to append to a match timeline and evaluate against triggers."""

    type: Literal["write_moments"] = "write_moments"
    subpack: Subpack = 0
    external_match_id: str
    moments: list[Moment] = Field(default_factory=list)


class SetComplete(ProtocolModel):
    """Marks a match as finished, optionally with authoritative final stats."""

    type: Literal["set_complete"] = "set_complete"
    subpack: Subpack = 0
    external_match_id: str
    summary_source: SummarySourceField
    final_stats: Optional[dict[str, Any]] = None


MatchDataMessage = Annotated[
    Union[WriteStatistics, WriteGameEvents, WriteMoments, SetComplete],
    Field(discriminator="type"),
]

_match_data_adapter: TypeAdapter[MatchDataMessage] = TypeAdapter(MatchDataMessage)


def parse_match_data_message(data: str | bytes | dict[str, Any]) -> MatchDataMessage:
    """Parse one match data message.

    Args:
        data: JSON text/bytes or an already-decoded object.

    Raises:
        ProtocolError: If the payload is not a valid match data message.
    """
    try:
        parsed = json.loads(data) if isinstance(data, (str, bytes)) else data
    except (json.JSONDecodeError, UnicodeDecodeError) as e:
        raise ProtocolError(f"Failed to decode match data: {e}") from e
    if not isinstance(parsed, dict):
        raise ProtocolError("Match data must be a JSON object")
    try:
        return _match_data_adapter.validate_python(parsed)
    except ValidationError as e:
        raise ProtocolError(f"Match data validation failed: {e}") from e
