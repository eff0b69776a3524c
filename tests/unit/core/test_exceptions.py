"""Unit tests for the gamepack exception hierarchy."""

import pytest

from gamepack.core.exceptions import (
    ConfigurationError,
    GamepackError,
    HandlerError,
    InvalidStateTransition,
    ProtocolError,
)


class TestGamepackError:
    """Tests for the base exception."""

    def test_default_message(self) -> None:
        err = GamepackError()
        assert err.message == "A gamepack error occurred."
        assert str(err) == "A gamepack error occurred."

    def test_custom_message_and_empty_context(self) -> None:
        err = GamepackError("boom")
        assert str(err) == "boom"
        assert err.context == {}
        assert repr(err) == "GamepackError('boom')"

    @pytest.mark.parametrize(
        "exc",
        [
            ConfigurationError("/tmp/c.yaml"),
            ProtocolError("bad"),
            HandlerError("nope"),
            InvalidStateTransition("STOPPED", "RUNNING"),
        ],
    )
    def test_subclasses_share_base(self, exc: GamepackError) -> None:
        assert isinstance(exc, GamepackError)


class TestProtocolError:
    def test_message_from_reason(self) -> None:
        err = ProtocolError("Unexpected token")
        assert err.reason == "Unexpected token"
        assert str(err) == "Protocol error: Unexpected token"
        assert err.context == {"reason": "Unexpected token"}

    def test_generic_message_without_reason(self) -> None:
        err = ProtocolError()
        assert "invalid or malformed" in str(err)


class TestHandlerError:
    def test_without_code(self) -> None:
        err = HandlerError("Game not installed")
        assert err.code is None
        assert err.message == "Game not installed"
        assert str(err) == "Game not installed"

    def test_with_code(self) -> None:
        err = HandlerError("Game not installed", code="not_installed")
        assert str(err) == "[not_installed] Game not installed"
        assert err.context == {"code": "not_installed"}
        assert "not_installed" in repr(err)


class TestConfigurationError:
    def test_generated_message(self) -> None:
        err = ConfigurationError("/etc/c.yaml", key="protocol", expected_type="mapping")
        assert str(err) == "Configuration error in '/etc/c.yaml' key 'protocol' (expected mapping)."
        assert err.context["key"] == "protocol"


class TestInvalidStateTransition:
    def test_message_and_context(self) -> None:
        err = InvalidStateTransition("STOPPED", "RUNNING")
        assert "STOPPED -> RUNNING" in str(err)
        assert err.context == {"from_state": "STOPPED", "to_state": "RUNNING"}
