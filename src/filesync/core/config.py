"""Configuration classes for filesync.

This module defines the immutable per-run inputs of a synchronization and
the defaults shared by the library and the CLI.
"""

from __future__ import annotations

import os
from collections.abc import Mapping
from dataclasses import dataclass
from typing import Any

DEFAULT_PATTERN = ".*"
DEFAULT_MAX_RETRIES = 0


def default_concurrency() -> int:
    """Concurrency bound used when none (or a non-positive one) is configured."""
    return os.cpu_count() or 4


def normalize_concurrency(max_concurrency: int | None) -> int:
    """Map None and non-positive values to the default concurrency."""
    if max_concurrency is None or max_concurrency <= 0:
        return default_concurrency()
    return max_concurrency


@dataclass(frozen=True)
class SyncConfig:
    """Inputs of one synchronization run.

    Attributes:
        source: Source root directory.
        destination: Destination root directory.
        patterns: Semicolon-separated include patterns.
        exclude_patterns: Semicolon-separated exclude patterns (optional).
        max_retries: Retries per file after the first attempt (>= 0).
        dry_run: Report actions without touching the destination tree.
        max_concurrency: Concurrency bound for a synchronizer built from
            this config. None or <= 0 means the default.
    """

    source: str
    destination: str
    patterns: str = DEFAULT_PATTERN
    exclude_patterns: str | None = None
    max_retries: int = DEFAULT_MAX_RETRIES
    dry_run: bool = False
    max_concurrency: int | None = None

    @classmethod
    def from_mapping(cls, data: Mapping[str, Any]) -> SyncConfig:
        """Build a config from settings-store keys.

        Recognized keys: source_directory, destination_directory,
        include_patterns, exclude_patterns, max_retries, dry_run,
        max_concurrency. Unknown keys are ignored.

        Raises:
            ValueError: If max_retries or max_concurrency is not an integer.
        """
        max_concurrency = data.get("max_concurrency")
        return cls(
            source=str(data.get("source_directory") or ""),
            destination=str(data.get("destination_directory") or ""),
            patterns=str(data.get("include_patterns") or DEFAULT_PATTERN),
            exclude_patterns=data.get("exclude_patterns") or None,
            max_retries=int(data.get("max_retries") or DEFAULT_MAX_RETRIES),
            dry_run=bool(data.get("dry_run", False)),
            max_concurrency=int(max_concurrency) if max_concurrency is not None else None,
        )

    @property
    def effective_concurrency(self) -> int:
        """Concurrency bound after normalization."""
        return normalize_concurrency(self.max_concurrency)
