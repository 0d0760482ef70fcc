"""filesync - One-directional, pattern-filtered directory synchronization."""

from filesync.core import (
    CancellationToken,
    FileOutcome,
    InvalidPatternError,
    SourceNotFoundError,
    SyncAction,
    SyncCancelledError,
    SyncConfig,
    SyncError,
    SyncProgress,
    SyncResult,
    ValidationError,
)
from filesync.sync import FileSynchronizer

__version__ = "0.1.0"

__all__ = [
    "CancellationToken",
    "FileOutcome",
    "FileSynchronizer",
    "InvalidPatternError",
    "SourceNotFoundError",
    "SyncAction",
    "SyncCancelledError",
    "SyncConfig",
    "SyncError",
    "SyncProgress",
    "SyncResult",
    "ValidationError",
    "__version__",
]
