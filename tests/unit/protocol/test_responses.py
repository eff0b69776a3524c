"""Unit tests for pack -> daemon responses."""

import json
from datetime import datetime, timezone

import pytest

from gamepack.core.exceptions import ProtocolError
from gamepack.protocol.framing import encode_message
from gamepack.protocol.match_data import SetComplete, WriteStatistics
from gamepack.protocol.responses import (
    ErrorResponse,
    EventIconResolved,
    Events,
    GameStatusResponse,
    Initialized,
    LiveData,
    MatchInProgressStatus,
    MatchTimeline,
    ResponseType,
    RunningStatus,
    SampleMatchData,
    SessionEnded,
    SessionStarted,
    ShutdownComplete,
    WriteMatchData,
    is_unsolicited,
    parse_response,
)
from gamepack.protocol.types import EntryType, GameEvent, SummarySource, TimelineEntry


ALL_RESPONSES = [
    Initialized(request_id="r1", game_id=1, slug="league", protocol_version=1),
    RunningStatus(request_id="r2", running=True),
    GameStatusResponse(
        request_id="r3", connected=True, connection_status="Connected",
        game_phase="InProgress", is_in_game=True,
    ),
    Events(
        request_id="r4",
        events=[GameEvent(event_type="Kill", timestamp_secs=5.0, data={}, post_capture_secs=3.0)],
    ),
    Events(request_id="r4b", events=[]),
    LiveData(request_id="r5", data={"gold": 1200}),
    LiveData(request_id="r5b"),
    LiveData(request_id="r5c", data={}),
    SessionStarted(request_id="r6", context={"a": 1}),
    SessionEnded(request_id="r7", match_data={"result": "win"}),
    ErrorResponse(request_id="r8", message="nope", code="E1"),
    ErrorResponse(request_id="", message="Parse error"),
    ShutdownComplete(request_id="r9"),
    EventIconResolved(request_id="r10", event_key="Kill", icon_url="https://x/k.png"),
    EventIconResolved(request_id="r10b", event_key="Kill"),
    MatchInProgressStatus(request_id="r11", still_playing=True),
    MatchInProgressStatus(
        request_id="r12",
        still_playing=False,
        set_complete=SetComplete(
            subpack=0, external_match_id="m1",
            summary_source=SummarySource.API, final_stats={"kills": 9},
        ),
    ),
    MatchTimeline(
        request_id="r13",
        found=True,
        entries=[
            TimelineEntry(
                entry_type=EntryType.STATISTIC, entry_key="stats", game_time_secs=12.0,
                captured_at=datetime(2026, 1, 1, tzinfo=timezone.utc), data={"kills": 1},
            )
        ],
    ),
    SampleMatchData(request_id="r14", subpack=1, data={"kills": 3}),
    WriteMatchData(
        message=WriteStatistics(external_match_id="m1", game_time_secs=1.0, stats={"k": 1})
    ),
]


class TestResponseType:
    def test_every_discriminant_has_a_model(self) -> None:
        assert {r.type for r in ALL_RESPONSES} == {t.value for t in ResponseType}


class TestRoundTrip:
    @pytest.mark.parametrize("response", ALL_RESPONSES, ids=lambda r: r.request_id or r.type)
    def test_parse_of_serialized_is_identity(self, response) -> None:
        assert parse_response(encode_message(response)) == response


class TestWireShape:
    def test_game_status_omits_absent_phase(self) -> None:
        resp = GameStatusResponse(
            request_id="r1", connected=True, connection_status="Connected",
            game_phase=None, is_in_game=False,
        )
        assert json.loads(resp.model_dump_json()) == {
            "type": "game_status",
            "request_id": "r1",
            "connected": True,
            "connection_status": "Connected",
            "is_in_game": False,
        }

    def test_live_data_none_and_empty_are_distinct(self) -> None:
        absent = json.loads(LiveData(request_id="r").model_dump_json())
        empty = json.loads(LiveData(request_id="r", data={}).model_dump_json())
        assert "data" not in absent
        assert empty["data"] == {}

    def test_error_without_code(self) -> None:
        assert json.loads(ErrorResponse.create("r", "bad").model_dump_json()) == {
            "type": "error",
            "request_id": "r",
            "message": "bad",
        }

    def test_write_match_data_has_empty_request_id(self) -> None:
        msg = WriteMatchData(
            message=WriteStatistics(external_match_id="m1", game_time_secs=12.0, stats={"kills": 1})
        )
        assert json.loads(msg.model_dump_json()) == {
            "type": "write_match_data",
            "request_id": "",
            "message": {
                "type": "write_statistics",
                "subpack": 0,
                "external_match_id": "m1",
                "game_time_secs": 12.0,
                "stats": {"kills": 1},
            },
        }

    def test_explicit_null_optionals_accepted(self) -> None:
        resp = parse_response(
            '{"type":"event_icon_resolved","request_id":"r","event_key":"Kill","icon_url":null}'
        )
        assert resp == EventIconResolved(request_id="r", event_key="Kill")

    def test_embedded_set_complete_source_parsed_case_insensitively(self) -> None:
        resp = parse_response(
            {
                "type": "match_in_progress_status",
                "request_id": "r",
                "still_playing": False,
                "set_complete": {
                    "type": "set_complete",
                    "subpack": 0,
                    "external_match_id": "m1",
                    "summary_source": "LiveFallback",
                },
            }
        )
        assert resp.set_complete.summary_source is SummarySource.LIVE_FALLBACK


class TestHelpers:
    def test_is_unsolicited(self) -> None:
        assert is_unsolicited(ALL_RESPONSES[-1])
        assert not is_unsolicited(ShutdownComplete(request_id="r"))


class TestParseErrors:
    @pytest.mark.parametrize(
        "line",
        [
            "{",
            "42",
            '{"type":"initialized","request_id":"r"}',
            '{"type":"write_match_data","request_id":"","message":{"type":"nope"}}',
        ],
    )
    def test_invalid(self, line: str) -> None:
        with pytest.raises(ProtocolError):
            parse_response(line)
