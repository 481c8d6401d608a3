"""
Structured logging setup.

Wraps structlog so every module logs through the same processor pipeline.
"""

from __future__ import annotations

import logging
from typing import Optional

import structlog


def configure_logging(level: str = "INFO", json_output: bool = False) -> None:
    """
    Initialize Python logging and structlog with consistent formatting.

    Uses the console renderer for interactive use and the JSON renderer when
    `json_output` is set, filtering below `level` in both cases.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)
    logging.basicConfig(level=numeric_level)
    processors = [
        structlog.processors.TimeStamper(fmt="iso"),
        structlog.stdlib.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.format_exc_info,
    ]
    if json_output:
        processors.append(structlog.processors.JSONRenderer())
    else:
        processors.append(structlog.dev.ConsoleRenderer())

    structlog.configure(
        wrapper_class=structlog.make_filtering_bound_logger(numeric_level),
        processors=processors,
        logger_factory=structlog.stdlib.LoggerFactory(),
    )


def get_logger(name: Optional[str] = None):
    """Return a structlog logger that inherits the global configuration."""
    return structlog.get_logger(name)


class StructlogFailureSink:
    """
    Default logging sink for typesetting failures.

    Called as `sink(description, content)`; emits one warning event per call.
    """

    def __init__(self, logger=None):
        self._logger = logger or get_logger("mathchat.render")

    def __call__(self, description: str, content: str) -> None:
        self._logger.warning("typeset_failed", description=description, content=content)
