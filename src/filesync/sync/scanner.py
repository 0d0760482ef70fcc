"""Source tree scanner.

This module provides:
- MatchedFile: A source file selected for synchronization
- scan_tree: Recursively enumerate files whose base name matches a PatternSet

Ordering of the returned list follows filesystem enumeration and must not
be relied upon.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from filesync.core.cancel import CancellationToken
    from filesync.core.patterns import PatternSet

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MatchedFile:
    """A matched source file.

    Attributes:
        source_path: Absolute path of the source file.
        relative_path: Path relative to the source root, reused unchanged
            as the path relative to the destination root.
    """

    source_path: Path
    relative_path: Path

    @property
    def name(self) -> str:
        """Base name of the file."""
        return self.source_path.name

    @property
    def display_path(self) -> str:
        """Relative path with forward slashes, for messages."""
        return self.relative_path.as_posix()

    def destination_path(self, destination_root: Path) -> Path:
        """Counterpart of this file under a destination root."""
        return destination_root / self.relative_path


def _raise_walk_error(error: OSError) -> None:
    raise error


def scan_tree(
    root: Path,
    include: PatternSet,
    cancel_token: CancellationToken | None = None,
    exclude: PatternSet | None = None,
) -> list[MatchedFile]:
    """Scan a directory tree for files matching the include patterns.

    Only base names are matched. Directories are never yielded and
    symlinked directories are not followed.

    Args:
        root: Source root directory.
        include: Patterns a file name must match.
        cancel_token: Checked before each file; aborts the whole scan.
        exclude: Optional patterns that drop an otherwise matched file.

    Returns:
        List of matched files.

    Raises:
        SyncCancelledError: If cancellation is requested during the scan.
        OSError: If a directory cannot be listed.
    """
    root = Path(root).resolve()
    matched: list[MatchedFile] = []
    scanned = 0

    for dirpath, _dirnames, filenames in os.walk(root, onerror=_raise_walk_error):
        for filename in filenames:
            if cancel_token is not None:
                cancel_token.raise_if_cancelled()
            scanned += 1

            if not include.matches(filename):
                continue
            if exclude is not None and exclude.matches(filename):
                logger.debug(f"Excluded: {filename}")
                continue

            source_path = Path(dirpath) / filename
            matched.append(
                MatchedFile(
                    source_path=source_path,
                    relative_path=source_path.relative_to(root),
                )
            )

    logger.debug(f"Scanned {scanned} files under {root}, {len(matched)} matched")
    return matched
