"""Decide what to do with one source file.

Decision table:
| Destination file             | Action  |
|------------------------------|---------|
| missing or not a file        | CREATED |
| older than source (strictly) | UPDATED |
| same mtime or newer          | SKIPPED |

Equal modification times always skip, so a second run over an unchanged
source is a no-op.
"""

from __future__ import annotations

import os
import stat
from pathlib import Path

from filesync.core.types import SyncAction


def resolve_action(source_file: Path, destination_file: Path) -> SyncAction:
    """Resolve the action for a source file and its destination counterpart.

    Read-only: only existence, file type and modification times are read.

    Args:
        source_file: Existing source file.
        destination_file: Destination path, which may not exist.

    Returns:
        SyncAction.CREATED, SyncAction.UPDATED or SyncAction.SKIPPED.

    Raises:
        OSError: If the source cannot be stat'ed.
    """
    try:
        destination_stat = os.stat(destination_file)
    except FileNotFoundError:
        return SyncAction.CREATED
    if not stat.S_ISREG(destination_stat.st_mode):
        # A directory in the way: the copy will fail and be counted
        return SyncAction.CREATED

    source_stat = os.stat(source_file)
    if source_stat.st_mtime_ns > destination_stat.st_mtime_ns:
        return SyncAction.UPDATED
    return SyncAction.SKIPPED
