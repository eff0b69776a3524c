"""In-memory match store.

Reference implementation of the daemon-side telemetry semantics:

- Match records are created lazily, keyed by (subpack, external_match_id).
- Statistics writes append a delta-compressed timeline entry holding only
  the fields that changed, and upsert the full stat set into a separate
  summary projection.
- Each game event and each moment becomes one timeline entry. Moments are
  checked against the trigger table and the outcome is stored in the
  entry's ``trigger_fired`` field.
- SetComplete marks the match finished (idempotent) and may overwrite the
  summary with authoritative final stats tagged by their source.

Usage:
    store = InMemoryMatchStore(triggers={"pentakill": True})
    store.persist(WriteStatistics(external_match_id="m1", game_time_secs=12.0,
                                  stats={"kills": 1}))
    found, entries = store.lookup_timeline(0, "m1")
"""

from __future__ import annotations

import threading
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Callable, Mapping, Optional, Sequence

import structlog

from gamepack.core.config import Settings, get_settings
from gamepack.protocol.match_data import (
    MatchDataMessage,
    SetComplete,
    WriteGameEvents,
    WriteMoments,
    WriteStatistics,
)
from gamepack.protocol.types import (
    STATS_ENTRY_KEY,
    EntryType,
    Moment,
    SummarySource,
    TimelineEntry,
)


log = structlog.get_logger()

MatchKey = tuple[int, str]
TriggerCallback = Callable[[MatchKey, Moment], None]


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


@dataclass
class MatchSummary:
    """Latest known full stat projection for one match.

    Attributes:
        stats: Full current stat set.
        updated_at: Wall-clock time of the last change.
        source: Provenance of authoritative final stats; None while the
            summary is a live projection.
    """

    stats: dict[str, Any]
    updated_at: datetime
    source: Optional[SummarySource] = None


@dataclass
class MatchRecord:
    """One stored match."""

    subpack: int
    external_match_id: str
    created_at: datetime
    played_at: Optional[datetime] = None
    in_progress: bool = True
    completed_at: Optional[datetime] = None
    timeline: list[TimelineEntry] = field(default_factory=list)

    @property
    def key(self) -> MatchKey:
        return (self.subpack, self.external_match_id)


class InMemoryMatchStore:
    """Thread-safe in-memory implementation of MatchStoreProtocol."""

    def __init__(
        self,
        triggers: Optional[Mapping[str, bool]] = None,
        on_trigger: Optional[TriggerCallback] = None,
        default_limit: Optional[int] = None,
        clock: Callable[[], datetime] = _utcnow,
    ) -> None:
        """Initialize the store.

        Args:
            triggers: Trigger table, moment_id -> enabled.
            on_trigger: Called with (match key, moment) when a trigger fires.
            default_limit: Limit applied to timeline lookups without one.
            clock: Wall-clock source for captured_at timestamps.
        """
        self._lock = threading.Lock()
        self._matches: dict[MatchKey, MatchRecord] = {}
        self._summaries: dict[MatchKey, MatchSummary] = {}
        self._triggers: dict[str, bool] = dict(triggers or {})
        self._discovered_moments: set[str] = set()
        self._on_trigger = on_trigger
        self._default_limit = default_limit
        self._clock = clock

    @classmethod
    def from_settings(
        cls,
        settings: Optional[Settings] = None,
        triggers: Optional[Mapping[str, bool]] = None,
        on_trigger: Optional[TriggerCallback] = None,
    ) -> "InMemoryMatchStore":
        """Create a store using the storage section of the settings."""
        settings = settings or get_settings()
        return cls(
            triggers=triggers,
            on_trigger=on_trigger,
            default_limit=settings.storage.default_timeline_limit,
        )

    # ------------------------------------------------------------------
    # Trigger configuration
    # ------------------------------------------------------------------

    def set_trigger(self, moment_id: str, enabled: bool) -> None:
        with self._lock:
            self._triggers[moment_id] = enabled
            self._discovered_moments.discard(moment_id)

    @property
    def discovered_moments(self) -> set[str]:
        """Moment ids seen without a trigger entry (provisional ids)."""
        with self._lock:
            return set(self._discovered_moments)

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def persist(self, message: MatchDataMessage) -> bool:
        """Apply one match data message.

        Returns:
            True if anything was stored or changed, False for a no-op
            (unchanged statistics, repeated completion, empty batches).
        """
        fired: list[tuple[MatchKey, Moment]] = []
        with self._lock:
            match message:
                case WriteStatistics():
                    stored = self._write_statistics(message)
                case WriteGameEvents():
                    stored = self._write_game_events(message)
                case WriteMoments():
                    stored = self._write_moments(message, fired)
                case SetComplete():
                    stored = self._set_complete(message)
                case _:
                    raise TypeError(f"Unsupported match data message: {message!r}")

        # callbacks run outside the lock so they may read the store
        if self._on_trigger is not None:
            for key, moment in fired:
                self._on_trigger(key, moment)
        return stored

    def _get_or_create(self, subpack: int, external_match_id: str) -> MatchRecord:
        key = (subpack, external_match_id)
        record = self._matches.get(key)
        if record is None:
            record = MatchRecord(
                subpack=subpack,
                external_match_id=external_match_id,
                created_at=self._clock(),
            )
            self._matches[key] = record
            log.info("match_created", subpack=subpack, external_match_id=external_match_id)
        return record

    def _write_statistics(self, message: WriteStatistics) -> bool:
        record = self._get_or_create(message.subpack, message.external_match_id)
        if record.played_at is None and message.played_at is not None:
            record.played_at = message.played_at

        summary = self._summaries.get(record.key)
        previous = summary.stats if summary is not None else {}
        delta = {
            name: value
            for name, value in message.stats.items()
            if name not in previous or previous[name] != value
        }
        if not delta:
            return False

        now = self._clock()
        record.timeline.append(
            TimelineEntry(
                entry_type=EntryType.STATISTIC,
                entry_key=STATS_ENTRY_KEY,
                game_time_secs=message.game_time_secs,
                captured_at=now,
                data=delta,
            )
        )

        if summary is None:
            self._summaries[record.key] = MatchSummary(stats=dict(message.stats), updated_at=now)
        elif summary.source is not None:
            # authoritative final stats are not replaced by late live writes
            log.debug("summary_update_skipped_final", external_match_id=message.external_match_id)
        else:
            summary.stats.update(message.stats)
            summary.updated_at = now
        return True

    def _write_game_events(self, message: WriteGameEvents) -> bool:
        record = self._get_or_create(message.subpack, message.external_match_id)
        now = self._clock()
        for event in message.events:
            record.timeline.append(
                TimelineEntry(
                    entry_type=EntryType.EVENT,
                    entry_key=event.event_type,
                    game_time_secs=event.timestamp_secs,
                    captured_at=now,
                    data=event.data,
                )
            )
        return bool(message.events)

    def _write_moments(
        self, message: WriteMoments, fired: list[tuple[MatchKey, Moment]]
    ) -> bool:
        record = self._get_or_create(message.subpack, message.external_match_id)
        now = self._clock()
        for moment in message.moments:
            enabled = self._triggers.get(moment.moment_id)
            if enabled is None:
                self._discovered_moments.add(moment.moment_id)
            trigger_fired = bool(enabled)
            record.timeline.append(
                TimelineEntry(
                    entry_type=EntryType.MOMENT,
                    entry_key=moment.moment_id,
                    game_time_secs=moment.game_time_secs,
                    captured_at=now,
                    data=moment.data,
                    trigger_fired=trigger_fired,
                )
            )
            if trigger_fired:
                fired.append((record.key, moment))
                log.info(
                    "moment_trigger_fired",
                    external_match_id=message.external_match_id,
                    moment_id=moment.moment_id,
                )
        return bool(message.moments)

    def _set_complete(self, message: SetComplete) -> bool:
        record = self._get_or_create(message.subpack, message.external_match_id)
        changed = False
        now = self._clock()
        if record.in_progress:
            record.in_progress = False
            record.completed_at = now
            changed = True
            log.info(
                "match_completed",
                subpack=message.subpack,
                external_match_id=message.external_match_id,
                summary_source=str(message.summary_source),
            )
        if message.final_stats is not None:
            summary = self._summaries.get(record.key)
            if (
                summary is None
                or summary.stats != message.final_stats
                or summary.source != message.summary_source
            ):
                self._summaries[record.key] = MatchSummary(
                    stats=dict(message.final_stats),
                    updated_at=now,
                    source=message.summary_source,
                )
                changed = True
        return changed

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    def lookup_timeline(
        self,
        subpack: int,
        external_match_id: str,
        entry_types: Optional[Sequence[EntryType]] = None,
        limit: Optional[int] = None,
    ) -> tuple[bool, list[TimelineEntry]]:
        with self._lock:
            record = self._matches.get((subpack, external_match_id))
            if record is None:
                return False, []
            entries = list(record.timeline)

        if entry_types is not None:
            wanted = {EntryType(t) for t in entry_types}
            entries = [e for e in entries if e.entry_type in wanted]
        if limit is None:
            limit = self._default_limit
        if limit is not None:
            entries = entries[-limit:] if limit > 0 else []
        return True, entries

    def get_match(self, subpack: int, external_match_id: str) -> Optional[MatchRecord]:
        with self._lock:
            return self._matches.get((subpack, external_match_id))

    def get_summary(self, subpack: int, external_match_id: str) -> Optional[MatchSummary]:
        with self._lock:
            return self._summaries.get((subpack, external_match_id))

    def in_progress_matches(self) -> list[MatchKey]:
        """Keys of matches not yet completed: stale match recovery candidates."""
        with self._lock:
            return [key for key, record in self._matches.items() if record.in_progress]
