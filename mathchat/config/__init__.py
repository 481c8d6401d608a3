"""Configuration: pydantic schema and YAML loader."""

from .loader import load_settings
from .schema import Settings, SegmenterConfig, RenderConfig, LoggingConfig

__all__ = ["load_settings", "Settings", "SegmenterConfig", "RenderConfig", "LoggingConfig"]
