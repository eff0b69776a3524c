"""Structured logging setup.

The protocol owns stdout, so every log line goes to stderr. This stderr
stream doubles as the diagnostic side channel for dropped messages.
"""

from __future__ import annotations

import logging
import sys
from typing import Optional, TextIO

import structlog

from gamepack.core.config import LoggingConfig


def configure_logging(
    config: Optional[LoggingConfig] = None,
    stream: Optional[TextIO] = None,
) -> None:
    """Configure structlog from a LoggingConfig.

    Args:
        config: Logging section of the settings. Defaults to LoggingConfig().
        stream: Output stream. Defaults to sys.stderr.
    """
    cfg = config or LoggingConfig()
    renderer: structlog.types.Processor
    if cfg.format == "console":
        renderer = structlog.dev.ConsoleRenderer(colors=False)
    else:
        renderer = structlog.processors.JSONRenderer()

    structlog.configure(
        processors=[
            structlog.contextvars.merge_contextvars,
            structlog.stdlib.add_log_level,
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            renderer,
        ],
        wrapper_class=structlog.make_filtering_bound_logger(
            logging.getLevelName(cfg.level)
        ),
        logger_factory=structlog.PrintLoggerFactory(file=stream or sys.stderr),
        cache_logger_on_first_use=False,
    )
