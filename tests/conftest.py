"""
Gamepack Test Configuration

Shared pytest fixtures and configuration for all test types.
"""

import io
from typing import Any, Generator, Optional

import pytest
import structlog

from gamepack.core.config import reset_settings
from gamepack.core.exceptions import HandlerError
from gamepack.protocol.types import GameEvent, GameStatus, InitResponse, MatchData
from gamepack.worker.handler import GamepackHandler


def pytest_configure(config: pytest.Config) -> None:
    """Register custom markers for test categorization."""
    config.addinivalue_line("markers", "unit: Unit tests (fast, isolated)")
    config.addinivalue_line("markers", "integration: Integration tests (real subprocess pipes)")


@pytest.fixture(autouse=True)
def _fresh_settings() -> Generator[None, None, None]:
    """Each test starts from default settings."""
    reset_settings()
    yield
    reset_settings()


@pytest.fixture(autouse=True)
def _reset_structlog() -> Generator[None, None, None]:
    """Runners and the CLI configure logging onto captured streams."""
    yield
    structlog.reset_defaults()


class FakeHandler(GamepackHandler):
    """Handler with fixed answers, recording calls."""

    def __init__(self, init_error: Optional[HandlerError] = None, protocol_version: int = 3) -> None:
        self.init_error = init_error
        self.protocol_version = protocol_version
        self.calls: list[tuple[str, tuple[Any, ...]]] = []
        self.shutdown_called = False

    def init(self) -> InitResponse:
        self.calls.append(("init", ()))
        if self.init_error is not None:
            raise self.init_error
        return InitResponse(game_id=99, slug="test", protocol_version=self.protocol_version)

    def detect_running(self) -> bool:
        self.calls.append(("detect_running", ()))
        return True

    def get_status(self) -> GameStatus:
        self.calls.append(("get_status", ()))
        return GameStatus.connected_with("Connected")

    def poll_events(self) -> list[GameEvent]:
        self.calls.append(("poll_events", ()))
        return [GameEvent(event_type="ChampionKill", timestamp_secs=61.5, data={"killer": "a"})]

    def get_live_data(self) -> Optional[Any]:
        self.calls.append(("get_live_data", ()))
        return {"test": True}

    def on_session_start(self) -> Optional[Any]:
        self.calls.append(("on_session_start", ()))
        return {"started": True}

    def on_session_end(self, context: Any) -> Optional[MatchData]:
        self.calls.append(("on_session_end", (context,)))
        return MatchData(game_slug="test", game_id=99, result="win", details={})

    def shutdown(self) -> None:
        self.calls.append(("shutdown", ()))
        self.shutdown_called = True


class MinimalHandler(GamepackHandler):
    """Handler overriding only init."""

    def init(self) -> InitResponse:
        return InitResponse(game_id=1, slug="minimal")


@pytest.fixture
def fake_handler() -> FakeHandler:
    return FakeHandler()


@pytest.fixture
def minimal_handler() -> MinimalHandler:
    return MinimalHandler()


@pytest.fixture
def output_stream() -> io.BytesIO:
    return io.BytesIO()


def input_stream(*lines: str) -> io.BytesIO:
    """Build a binary input stream with one line per argument."""
    return io.BytesIO("".join(line + "\n" for line in lines).encode("utf-8"))


@pytest.fixture
def make_input():
    """Factory for binary input streams with one line per argument."""
    return input_stream
