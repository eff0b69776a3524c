"""Gamepack Exception Hierarchy.

This module defines the structured exception hierarchy for the gamepack
protocol. All custom exceptions inherit from GamepackError, enabling
consistent error handling across the codebase.

Exception Categories:
- Transport/format errors → ProtocolError (recoverable, answered with an
  Error response carrying an empty request_id)
- Domain errors → HandlerError (raised by handler capabilities, answered
  with an Error response carrying the original request_id)

Usage:
    from gamepack.core.exceptions import HandlerError

    raise HandlerError("Game client not installed", code="not_installed")
"""

from typing import Any, Optional


class GamepackError(Exception):
    """Base exception for all gamepack errors.

    Attributes:
        message: Human-readable error description.
    """

    def __init__(self, message: Optional[str] = None) -> None:
        """Initialize GamepackError.

        Args:
            message: Optional custom message. Defaults to a generic message.
        """
        self.message = message or "A gamepack error occurred."
        super().__init__(self.message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context dictionary for structured logging.

        Returns:
            dict: Key-value pairs of exception context.
        """
        return {}

    def __repr__(self) -> str:
        """Return debug representation."""
        return f"{self.__class__.__name__}({self.message!r})"


class ConfigurationError(GamepackError):
    """Configuration file or value is invalid.

    Raised when YAML configuration cannot be parsed or
    contains invalid values.

    Attributes:
        config_path: Path to the configuration file.
        key: The configuration key that caused the error.
        expected_type: The expected type for the value.
    """

    def __init__(
        self,
        config_path: str,
        key: Optional[str] = None,
        expected_type: Optional[str] = None,
        message: Optional[str] = None,
    ) -> None:
        self.config_path = config_path
        self.key = key
        self.expected_type = expected_type

        if message is None:
            key_info = f" key '{key}'" if key else ""
            type_info = f" (expected {expected_type})" if expected_type else ""
            message = f"Configuration error in '{config_path}'{key_info}{type_info}."

        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for configuration error."""
        return {
            "config_path": self.config_path,
            "key": self.key,
            "expected_type": self.expected_type,
        }

    def __repr__(self) -> str:
        return (
            f"ConfigurationError(config_path={self.config_path!r}, "
            f"key={self.key!r}, expected_type={self.expected_type!r})"
        )


class ProtocolError(GamepackError):
    """Invalid or malformed protocol message.

    Raised when a line cannot be decoded or validated. This includes
    JSON parse errors, non-object JSON, unknown `type` discriminants,
    invalid field values and oversized lines.

    Attributes:
        reason: Description of why the message is invalid.
    """

    def __init__(
        self,
        reason: str | None = None,
        message: str | None = None,
    ) -> None:
        """Initialize ProtocolError.

        Args:
            reason: Description of failure cause.
            message: Optional custom message.
        """
        self.reason = reason

        if message is None:
            if reason:
                message = f"Protocol error: {reason}"
            else:
                message = "Protocol error - invalid or malformed message."

        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for protocol error."""
        return {"reason": self.reason}


class HandlerError(GamepackError):
    """Domain error raised by a handler capability.

    Surfaced to the daemon as an Error response that keeps the request_id
    of the command being answered.

    Attributes:
        code: Optional machine-readable error code.
    """

    def __init__(self, message: str, code: Optional[str] = None) -> None:
        self.code = code
        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for handler error."""
        return {"code": self.code}

    def __str__(self) -> str:
        if self.code:
            return f"[{self.code}] {self.message}"
        return self.message

    def __repr__(self) -> str:
        return f"HandlerError(message={self.message!r}, code={self.code!r})"


class InvalidStateTransition(GamepackError):
    """Invalid runner state transition attempted.

    Raised when attempting a transition that violates the main loop
    state machine (nothing leaves STOPPED).

    Attributes:
        from_state: Current state.
        to_state: Attempted target state.
    """

    def __init__(
        self,
        from_state: str,
        to_state: str,
        message: str | None = None,
    ) -> None:
        self.from_state = from_state
        self.to_state = to_state

        if message is None:
            message = f"Invalid runner state transition: {from_state} -> {to_state}."

        super().__init__(message)

    @property
    def context(self) -> dict[str, Any]:
        """Return context for invalid state transition."""
        return {
            "from_state": self.from_state,
            "to_state": self.to_state,
        }

    def __repr__(self) -> str:
        return (
            f"InvalidStateTransition(from_state={self.from_state!r}, "
            f"to_state={self.to_state!r})"
        )
