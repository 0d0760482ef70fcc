"""Thread-safe accumulation of per-file outcomes.

This module provides:
- ResultAggregator: Counters, error list and progress emission for one run

A single lock guards every counter, the error list and the processed
count, so each progress event carries a distinct processed count.
"""

from __future__ import annotations

import logging
import threading
from pathlib import PurePath

from filesync.core.types import (
    DRY_RUN_PREFIX,
    FileOutcome,
    ProgressCallback,
    SyncAction,
    SyncProgress,
    SyncResult,
)

logger = logging.getLogger(__name__)

START_LABEL = "Starting synchronization..."
FINISH_LABEL = "Synchronization completed"
DRY_RUN_FINISH_LABEL = "Synchronization analysis completed"


class ResultAggregator:
    """Aggregates outcomes of one synchronization run.

    Owned by a single run; record() may be called from any worker thread.
    """

    def __init__(
        self,
        total_files: int,
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
    ) -> None:
        self._total = total_files
        self._dry_run = dry_run
        self._on_progress = on_progress
        self._lock = threading.Lock()

        self._processed = 0
        self._counts = {action: 0 for action in SyncAction}
        self._retries = 0
        self._errors: list[str] = []

    @property
    def processed(self) -> int:
        """Number of outcomes recorded so far."""
        with self._lock:
            return self._processed

    def start(self) -> SyncProgress:
        """Emit the start-of-run progress event."""
        prefix = DRY_RUN_PREFIX if self._dry_run else ""
        progress = SyncProgress(0, self._total, f"{prefix}{START_LABEL}")
        self._emit(progress)
        return progress

    def record(self, outcome: FileOutcome) -> SyncProgress:
        """Record one file outcome and emit its progress event.

        Args:
            outcome: Outcome produced for a matched file.

        Returns:
            The progress event emitted for this file.
        """
        name = PurePath(outcome.relative_path).name
        label = f"{outcome.action.label(self._dry_run)}: {name}"

        with self._lock:
            self._counts[outcome.action] += 1
            self._retries += outcome.retries
            if outcome.action is SyncAction.FAILED and outcome.error_message:
                self._errors.append(outcome.error_message)
            self._processed += 1
            progress = SyncProgress(self._processed, self._total, label)
            # Emitted under the lock so events leave in processed order
            self._emit(progress)

        return progress

    def finish(self) -> SyncProgress:
        """Emit the end-of-run progress event."""
        if self._dry_run:
            label = f"{DRY_RUN_PREFIX}{DRY_RUN_FINISH_LABEL}"
        else:
            label = FINISH_LABEL
        progress = SyncProgress(self._total, self._total, label)
        self._emit(progress)
        return progress

    def snapshot(self) -> SyncResult:
        """Immutable summary of everything recorded so far."""
        with self._lock:
            return SyncResult(
                dry_run=self._dry_run,
                total_files=self._total,
                files_created=self._counts[SyncAction.CREATED],
                files_updated=self._counts[SyncAction.UPDATED],
                files_skipped=self._counts[SyncAction.SKIPPED],
                files_failed=self._counts[SyncAction.FAILED],
                total_retry_attempts=self._retries,
                errors=tuple(self._errors),
            )

    def _emit(self, progress: SyncProgress) -> None:
        if self._on_progress is None:
            return
        try:
            self._on_progress(progress)
        except Exception:
            logger.exception(f"Progress callback failed for: {progress}")
