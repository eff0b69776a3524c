"""Core module for gamepack.

Exports the core components: exceptions, configuration and logging setup.
"""

from gamepack.core.exceptions import (
    GamepackError,
    ConfigurationError,
    ProtocolError,
    HandlerError,
    InvalidStateTransition,
)
from gamepack.core.config import (
    get_settings,
    reset_settings,
    Settings,
    ProtocolConfig,
    LoggingConfig,
    StorageConfig,
)
from gamepack.core.logging import configure_logging

__all__ = [
    # Exceptions
    "GamepackError",
    "ConfigurationError",
    "ProtocolError",
    "HandlerError",
    "InvalidStateTransition",
    # Configuration
    "get_settings",
    "reset_settings",
    "Settings",
    "ProtocolConfig",
    "LoggingConfig",
    "StorageConfig",
    # Logging
    "configure_logging",
]
