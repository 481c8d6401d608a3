from __future__ import annotations

import json
import os
from pathlib import Path
from typing import Any, Dict

import yaml
from pydantic import ValidationError

from ..utils.errors import ConfigError
from .schema import Settings

DEFAULT_CONFIG_PATH = Path("config/default.yaml")
OVERRIDES_ENV = "MATHCHAT_CONFIG_OVERRIDES"


def read_yaml(path: Path) -> Dict[str, Any]:
    """Load a YAML file into a dictionary, returning an empty mapping when the file is blank."""
    if not path.exists():
        raise ConfigError(f"Config file not found: {path}")
    with path.open("r", encoding="utf-8") as handle:
        try:
            data = yaml.safe_load(handle) or {}
        except yaml.YAMLError as err:
            raise ConfigError(f"Invalid YAML in {path}", technical_details=str(err)) from err
    if not isinstance(data, dict):
        raise ConfigError(f"Config file {path} must contain a mapping")
    return data


def merge_dicts(base: Dict[str, Any], override: Dict[str, Any]) -> Dict[str, Any]:
    """Recursively merge two dictionaries, letting override values replace base entries."""
    result: Dict[str, Any] = dict(base)
    for key, value in override.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            result[key] = merge_dicts(base[key], value)
        else:
            result[key] = value
    return result


def load_settings(config_path: str | Path | None = None) -> Settings:
    """
    Read configuration, apply environment overrides, and return validated Settings.

    An explicit `config_path` must exist. Without one, `config/default.yaml` is
    used when present and built-in defaults otherwise. JSON overrides from
    `MATHCHAT_CONFIG_OVERRIDES` are merged on top before validation.
    """
    if config_path:
        data = read_yaml(Path(config_path))
    elif DEFAULT_CONFIG_PATH.exists():
        data = read_yaml(DEFAULT_CONFIG_PATH)
    else:
        data = {}

    overrides_env = os.getenv(OVERRIDES_ENV)
    if overrides_env:
        try:
            overrides = json.loads(overrides_env)
        except json.JSONDecodeError as err:
            raise ConfigError(
                f"Failed to parse {OVERRIDES_ENV} env var as JSON.",
                technical_details=str(err),
            ) from err
        data = merge_dicts(data, overrides)

    try:
        return Settings.model_validate(data)
    except ValidationError as exc:
        raise ConfigError("Invalid configuration", technical_details=str(exc)) from exc
