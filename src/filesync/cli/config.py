"""Configuration utilities for the filesync CLI.

Settings are read from a JSON file and never written back.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Any


def get_config_dir() -> Path:
    """Get the configuration directory for filesync.

    Returns:
        Path to ~/.filesync or equivalent.
    """
    return Path.home() / ".filesync"


def get_config_file() -> Path:
    """Get the path to the default config file."""
    return get_config_dir() / "config.json"


def load_config(path: Path | None = None) -> dict[str, Any]:
    """Load settings from a JSON config file.

    Args:
        path: Explicit config file. Defaults to ~/.filesync/config.json.

    Returns:
        Settings dict, empty if the default file does not exist.

    Raises:
        FileNotFoundError: If an explicit path does not exist.
        ValueError: If the file is not a JSON object.
    """
    config_file = path if path is not None else get_config_file()
    if path is None and not config_file.exists():
        return {}

    data = json.loads(config_file.read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"Config file {config_file} must contain a JSON object")
    return data
