"""Core module - Shared types, patterns, cancellation and configuration."""

from filesync.core.cancel import CancellationToken
from filesync.core.config import (
    DEFAULT_MAX_RETRIES,
    DEFAULT_PATTERN,
    SyncConfig,
    default_concurrency,
    normalize_concurrency,
)
from filesync.core.patterns import (
    PATTERN_SEPARATOR,
    PatternSet,
    compile_optional_patterns,
    compile_patterns,
)
from filesync.core.types import (
    FileOutcome,
    InvalidPatternError,
    ProgressCallback,
    SourceNotFoundError,
    SyncAction,
    SyncCancelledError,
    SyncError,
    SyncProgress,
    SyncResult,
    ValidationError,
)

__all__ = [
    # Cancellation
    "CancellationToken",
    # Config
    "DEFAULT_MAX_RETRIES",
    "DEFAULT_PATTERN",
    "SyncConfig",
    "default_concurrency",
    "normalize_concurrency",
    # Patterns
    "PATTERN_SEPARATOR",
    "PatternSet",
    "compile_optional_patterns",
    "compile_patterns",
    # Types
    "FileOutcome",
    "InvalidPatternError",
    "ProgressCallback",
    "SourceNotFoundError",
    "SyncAction",
    "SyncCancelledError",
    "SyncError",
    "SyncProgress",
    "SyncResult",
    "ValidationError",
]
