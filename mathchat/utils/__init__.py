"""Utilities: error hierarchy and structured logging."""

from .errors import MathChatError, TypesetError, ConfigError
from .logging import configure_logging, get_logger

__all__ = ["MathChatError", "TypesetError", "ConfigError", "configure_logging", "get_logger"]
