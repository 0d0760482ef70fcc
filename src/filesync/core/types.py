"""Shared types for filesync.

This module provides:
- SyncError and its subclasses: Exception hierarchy for a synchronization run
- SyncAction: Per-file outcome classification
- FileOutcome: Result of processing a single matched file
- SyncProgress: Immutable progress snapshot passed to progress callbacks
- SyncResult: Immutable summary of a completed run
"""

from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from enum import Enum

DRY_RUN_PREFIX = "[DRY RUN] "


class SyncError(Exception):
    """Base exception for synchronization errors."""


class ValidationError(SyncError, ValueError):
    """Invalid arguments, raised before any filesystem access."""


class InvalidPatternError(ValidationError):
    """Pattern string is empty or contains a malformed regular expression."""


class SourceNotFoundError(SyncError, FileNotFoundError):
    """Source root does not exist or is not a directory."""


class SyncCancelledError(SyncError):
    """Raised when a run is cancelled through its cancellation token."""


class SyncAction(str, Enum):
    """Action taken (or, in dry-run mode, that would be taken) on a file."""

    CREATED = "created"
    UPDATED = "updated"
    SKIPPED = "skipped"
    FAILED = "failed"

    def label(self, dry_run: bool = False) -> str:
        """Human-readable label used in progress messages.

        Failures read the same in both modes since nothing was attempted
        differently.
        """
        if self is SyncAction.FAILED:
            return "Failed"
        if dry_run:
            return f"{DRY_RUN_PREFIX}Would {_VERBS[self]}"
        return self.value.capitalize()


_VERBS = {
    SyncAction.CREATED: "Create",
    SyncAction.UPDATED: "Update",
    SyncAction.SKIPPED: "Skip",
}


@dataclass(frozen=True)
class FileOutcome:
    """Outcome of processing one matched file.

    Attributes:
        action: What happened to the file.
        relative_path: Path relative to the source (and destination) root.
        attempts: Attempts consumed, at least 1.
        error: Terminal error, only set when action is FAILED.
    """

    action: SyncAction
    relative_path: str
    attempts: int = 1
    error: BaseException | None = None

    @property
    def retries(self) -> int:
        """Number of attempts beyond the first."""
        return max(self.attempts - 1, 0)

    @property
    def error_message(self) -> str | None:
        """Error entry in "<relative path>: <message>" form, if failed."""
        if self.error is None:
            return None
        return f"{self.relative_path}: {self.error}"


@dataclass(frozen=True)
class SyncProgress:
    """Progress snapshot for a synchronization run."""

    processed_files: int
    total_files: int
    current_operation: str

    @property
    def percent_complete(self) -> float:
        """Completion percentage (0-100), 0 when there is nothing to do."""
        if self.total_files <= 0:
            return 0.0
        return self.processed_files / self.total_files * 100

    def __str__(self) -> str:
        return (
            f"{self.processed_files}/{self.total_files} "
            f"({self.percent_complete:.1f}%) - {self.current_operation}"
        )


# Type alias for progress callback
ProgressCallback = Callable[[SyncProgress], None]


@dataclass(frozen=True)
class SyncResult:
    """Summary of a synchronization run.

    Invariant once a run completes:
    files_created + files_updated + files_skipped + files_failed == total_files
    """

    dry_run: bool = False
    total_files: int = 0
    files_created: int = 0
    files_updated: int = 0
    files_skipped: int = 0
    files_failed: int = 0
    total_retry_attempts: int = 0
    errors: tuple[str, ...] = ()

    @property
    def is_success(self) -> bool:
        """True if no file failed."""
        return self.files_failed == 0

    @property
    def files_modified(self) -> int:
        """Files written (or that would be written) to the destination."""
        return self.files_created + self.files_updated

    def __str__(self) -> str:
        prefix = DRY_RUN_PREFIX if self.dry_run else ""
        message = (
            f"{prefix}Sync completed: {self.total_files} total, "
            f"{self.files_created} created, {self.files_updated} updated, "
            f"{self.files_skipped} skipped, {self.files_failed} failed"
        )
        if self.total_retry_attempts > 0:
            message += f", {self.total_retry_attempts} retries"
        return message
