"""Per-file processing with retry and exponential backoff.

This module provides:
- backoff_delay: Delay before a given retry
- process_file: Resolve and copy one matched file, retrying on any error

Each attempt runs: ensure destination directory -> resolve action -> copy.
Any exception during an attempt is retryable until max_retries is
exhausted; cancellation is never retried and always propagates.
"""

from __future__ import annotations

import logging
import time
from collections.abc import Callable
from pathlib import Path
from typing import TYPE_CHECKING

from filesync.core.types import FileOutcome, SyncAction, SyncCancelledError
from filesync.sync.copy import copy_file
from filesync.sync.resolver import resolve_action

if TYPE_CHECKING:
    from filesync.core.cancel import CancellationToken
    from filesync.sync.scanner import MatchedFile

logger = logging.getLogger(__name__)

# Backoff configuration: 100ms, 200ms, 400ms, ...
INITIAL_BACKOFF = 0.1  # seconds
BACKOFF_MULTIPLIER = 2.0


def backoff_delay(attempt: int) -> float:
    """Seconds to wait after a failed attempt (1-indexed)."""
    return INITIAL_BACKOFF * BACKOFF_MULTIPLIER ** (attempt - 1)


def _attempt(
    matched: MatchedFile,
    destination_root: Path,
    dry_run: bool,
    cancel_token: CancellationToken | None,
) -> SyncAction:
    destination_file = matched.destination_path(destination_root)

    # Directories are never created during a dry run
    if not dry_run:
        destination_file.parent.mkdir(parents=True, exist_ok=True)

    action = resolve_action(matched.source_path, destination_file)
    if action is not SyncAction.SKIPPED and not dry_run:
        copy_file(matched.source_path, destination_file, cancel_token)
    return action


def _wait(
    delay: float,
    cancel_token: CancellationToken | None,
    sleep: Callable[[float], None] | None,
) -> None:
    if sleep is not None:
        sleep(delay)
        if cancel_token is not None:
            cancel_token.raise_if_cancelled()
    elif cancel_token is not None:
        cancel_token.wait(delay)
    else:
        time.sleep(delay)


def process_file(
    matched: MatchedFile,
    destination_root: Path,
    max_retries: int = 0,
    dry_run: bool = False,
    cancel_token: CancellationToken | None = None,
    sleep: Callable[[float], None] | None = None,
) -> FileOutcome:
    """Process one matched file.

    Args:
        matched: The file to synchronize.
        destination_root: Destination root directory.
        max_retries: Retries after the first attempt (0 = one attempt).
        dry_run: Resolve the action without creating directories or copying.
        cancel_token: Cancellation token; honored during backoff sleeps.
        sleep: Optional sleep function for backoff (tests). Defaults to
            waiting on the cancel token, or time.sleep without one.

    Returns:
        FileOutcome with the action and attempts consumed. Failures are
        returned as FAILED outcomes, never raised.

    Raises:
        SyncCancelledError: If cancellation is observed during an attempt
            or a backoff sleep.
    """
    relative = matched.display_path
    attempt = 0

    while True:
        attempt += 1
        try:
            action = _attempt(matched, destination_root, dry_run, cancel_token)
        except SyncCancelledError:
            raise
        except Exception as e:
            if attempt > max_retries:
                if max_retries:
                    logger.error(f"{relative}: all {max_retries} retries failed: {e}")
                else:
                    logger.error(f"{relative}: {e}")
                return FileOutcome(
                    action=SyncAction.FAILED,
                    relative_path=relative,
                    attempts=attempt,
                    error=e,
                )

            delay = backoff_delay(attempt)
            logger.warning(
                f"{relative}: attempt {attempt}/{max_retries + 1} failed: {e}. "
                f"Retrying in {delay:.1f}s..."
            )
            _wait(delay, cancel_token, sleep)
            continue

        logger.debug(f"{relative}: {action.label(dry_run)} (attempt {attempt})")
        return FileOutcome(action=action, relative_path=relative, attempts=attempt)
