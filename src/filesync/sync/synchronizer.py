"""Synchronization orchestrator.

This module provides:
- FileSynchronizer: Public entry point for one-directional, pattern-filtered
  directory synchronization

Flow:
    validate arguments -> compile patterns -> check source -> ensure
    destination root -> scan source tree -> start progress -> dispatch
    every matched file (bounded) -> record outcomes -> finish progress ->
    SyncResult

Per-file failures are tallied in the result. Validation, setup and
cancellation errors abort the run and propagate to the caller.
"""

from __future__ import annotations

import logging
import threading
from concurrent.futures import Future, ThreadPoolExecutor
from functools import partial
from pathlib import Path
from typing import TYPE_CHECKING

from filesync.core.patterns import compile_optional_patterns, compile_patterns
from filesync.core.types import (
    FileOutcome,
    ProgressCallback,
    SourceNotFoundError,
    SyncCancelledError,
    SyncError,
    SyncResult,
    ValidationError,
)
from filesync.sync.aggregator import ResultAggregator
from filesync.sync.retry import process_file
from filesync.sync.scanner import MatchedFile, scan_tree
from filesync.sync.scheduler import BoundedScheduler

if TYPE_CHECKING:
    from filesync.core.cancel import CancellationToken
    from filesync.core.config import SyncConfig
    from filesync.core.patterns import PatternSet

logger = logging.getLogger(__name__)


def _require_text(value: str | Path | None, name: str) -> str:
    if value is None or not str(value).strip():
        raise ValidationError(f"{name} must not be empty")
    return str(value)


class FileSynchronizer:
    """Copies new and newer files from a source tree to a destination tree.

    Only files whose base name matches one of the regular expressions are
    considered. Relative paths are preserved. Nothing is ever deleted.

    Usage:
        with FileSynchronizer(max_concurrency=4) as synchronizer:
            result = synchronizer.synchronize("/data/in", "/data/out", r".*\\.txt")
            print(result)
    """

    def __init__(self, max_concurrency: int = 0) -> None:
        """Initialize the synchronizer.

        Args:
            max_concurrency: Maximum files processed at once. Values <= 0
                mean the number of available processors.
        """
        self._scheduler: BoundedScheduler[MatchedFile, FileOutcome] = BoundedScheduler(
            max_concurrency
        )
        self._closed = False
        self._background: ThreadPoolExecutor | None = None
        self._lock = threading.Lock()

    @property
    def max_concurrency(self) -> int:
        """Concurrency bound fixed at construction."""
        return self._scheduler.max_concurrency

    def __enter__(self) -> FileSynchronizer:
        return self

    def __exit__(self, *exc_info: object) -> None:
        self.close()

    def close(self) -> None:
        """Release background resources. Later runs are rejected."""
        with self._lock:
            self._closed = True
            background, self._background = self._background, None
        if background is not None:
            background.shutdown(wait=True)

    def synchronize(
        self,
        origin_path: str | Path,
        destination_path: str | Path,
        regex_patterns: str,
        max_retries: int = 0,
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
        exclude_patterns: str | None = None,
    ) -> SyncResult:
        """Synchronize files from origin to destination.

        Args:
            origin_path: Source directory.
            destination_path: Destination directory, created if missing
                (also in dry-run mode).
            regex_patterns: Semicolon-separated, case-insensitive regular
                expressions matched against file base names.
            max_retries: Retries per file after the first attempt.
            dry_run: Report what would happen without copying files or
                creating destination subdirectories.
            on_progress: Called with a SyncProgress at start, after each
                file, and at the end.
            cancel_token: Cancels the whole run when triggered.
            exclude_patterns: Optional semicolon-separated patterns; matching
                file names are left out.

        Returns:
            SyncResult summarizing the run.

        Raises:
            ValidationError: Empty arguments, negative max_retries, or an
                invalid pattern (InvalidPatternError). No I/O is done.
            SourceNotFoundError: Source directory does not exist.
            SyncCancelledError: The run was cancelled.
            OSError: Destination root could not be created or the source
                tree could not be scanned.
        """
        if self._closed:
            raise SyncError("Synchronizer is closed")

        origin = _require_text(origin_path, "Origin path")
        destination = _require_text(destination_path, "Destination path")
        pattern_string = _require_text(regex_patterns, "Regex patterns")
        if max_retries < 0:
            raise ValidationError(f"max_retries must be >= 0, got {max_retries}")

        include = compile_patterns(pattern_string)
        exclude = compile_optional_patterns(exclude_patterns)

        source_root = Path(origin)
        if not source_root.is_dir():
            raise SourceNotFoundError(f"Origin directory not found: {origin}")

        destination_root = Path(destination)
        destination_root.mkdir(parents=True, exist_ok=True)

        mode = "dry run" if dry_run else "sync"
        logger.info(
            f"Starting {mode}: {source_root} -> {destination_root} "
            f"(patterns={list(include.sources)}, max_retries={max_retries})"
        )

        try:
            matched = self._scan(source_root, include, exclude, cancel_token)

            aggregator = ResultAggregator(len(matched), dry_run, on_progress)
            aggregator.start()

            work = partial(
                process_file,
                destination_root=destination_root,
                max_retries=max_retries,
                dry_run=dry_run,
                cancel_token=cancel_token,
            )
            self._scheduler.run(
                matched,
                work,
                on_done=lambda _item, outcome: aggregator.record(outcome),
                cancel_token=cancel_token,
            )

            aggregator.finish()
        except SyncCancelledError:
            logger.warning("Synchronization cancelled")
            raise
        except Exception as e:
            logger.error(f"Synchronization failed: {e}")
            raise

        result = aggregator.snapshot()
        logger.info(str(result))
        return result

    def synchronize_config(
        self,
        config: SyncConfig,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> SyncResult:
        """Run synchronize() with the inputs held by a SyncConfig.

        The config's max_concurrency is ignored; the bound is fixed when
        the synchronizer is constructed.
        """
        return self.synchronize(
            config.source,
            config.destination,
            config.patterns,
            max_retries=config.max_retries,
            dry_run=config.dry_run,
            on_progress=on_progress,
            cancel_token=cancel_token,
            exclude_patterns=config.exclude_patterns,
        )

    def submit(
        self,
        origin_path: str | Path,
        destination_path: str | Path,
        regex_patterns: str,
        max_retries: int = 0,
        dry_run: bool = False,
        on_progress: ProgressCallback | None = None,
        cancel_token: CancellationToken | None = None,
        exclude_patterns: str | None = None,
    ) -> Future[SyncResult]:
        """Start synchronize() on a background thread.

        Returns:
            Future resolving to the SyncResult, or raising whatever
            synchronize() raises.
        """
        with self._lock:
            if self._closed:
                raise SyncError("Synchronizer is closed")
            if self._background is None:
                self._background = ThreadPoolExecutor(
                    max_workers=1, thread_name_prefix="filesync-run"
                )
            background = self._background

        return background.submit(
            self.synchronize,
            origin_path,
            destination_path,
            regex_patterns,
            max_retries=max_retries,
            dry_run=dry_run,
            on_progress=on_progress,
            cancel_token=cancel_token,
            exclude_patterns=exclude_patterns,
        )

    def _scan(
        self,
        source_root: Path,
        include: PatternSet,
        exclude: PatternSet | None,
        cancel_token: CancellationToken | None,
    ) -> list[MatchedFile]:
        matched = scan_tree(source_root, include, cancel_token, exclude)
        logger.info(f"Found {len(matched)} matching files in {source_root}")
        return matched
