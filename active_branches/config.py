"""JSON configuration file loading for discovery runs.

A config file holds the same keys as ``DiscoveryConfig``; command-line
values are merged over it before validation.
"""

from __future__ import annotations

import json
from typing import Any

from pydantic import ValidationError

from active_branches.errors import ConfigurationError
from active_branches.models import DiscoveryConfig


def load_json(path: str) -> dict[str, Any]:
    """Load a JSON file, returning empty dict on missing/invalid file.

    Args:
        path: Path to JSON file to load.

    Returns:
        Dictionary containing JSON data, or empty dict if file is missing/invalid.
    """
    try:
        with open(path) as f:
            data = json.load(f)
        if isinstance(data, dict):
            return data
    except (FileNotFoundError, json.JSONDecodeError, OSError):
        pass
    return {}


def deep_merge(base: dict[str, Any], overlay: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dicts. Overlay values take precedence for non-dict conflicts.

    Args:
        base: Base dictionary.
        overlay: Dictionary to merge into base.

    Returns:
        Merged dictionary where overlay wins conflicts.
    """
    result = base.copy()
    for key, value in overlay.items():
        if key in result and isinstance(result[key], dict) and isinstance(value, dict):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value
    return result


def load_config_file(path: str) -> dict[str, Any]:
    """Load a config file the caller asked for by name.

    Unlike ``load_json``, a missing or unreadable file is an error rather
    than an empty config.

    Raises:
        ConfigurationError: If the file is missing, unreadable, not JSON,
            or not a JSON object.
    """
    try:
        with open(path) as f:
            data = json.load(f)
    except FileNotFoundError as exc:
        raise ConfigurationError(f"Config file not found: {path}") from exc
    except json.JSONDecodeError as exc:
        raise ConfigurationError(f"Config file {path} is not valid JSON: {exc}") from exc
    except OSError as exc:
        raise ConfigurationError(f"Unable to read config file {path}: {exc}") from exc
    if not isinstance(data, dict):
        raise ConfigurationError(f"Config file {path} must contain a JSON object")
    return data


def build_discovery_config(
    overrides: dict[str, Any], config_path: str | None = None
) -> DiscoveryConfig:
    """Build a ``DiscoveryConfig`` from an optional file plus explicit values.

    ``None`` values in *overrides* are treated as "not given" so they do not
    mask what the file sets.

    Raises:
        ConfigurationError: If *config_path* cannot be loaded or the merged
            values do not form a valid config.
    """
    base = load_config_file(config_path) if config_path else {}
    given = {k: v for k, v in overrides.items() if v is not None}
    merged = deep_merge(base, given)
    try:
        return DiscoveryConfig(**merged)
    except ValidationError as exc:
        raise ConfigurationError(f"Invalid discovery configuration: {exc}") from exc
