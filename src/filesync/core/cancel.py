"""Cancellation token shared by every stage of a synchronization run."""

from __future__ import annotations

import logging
import threading

from filesync.core.types import SyncCancelledError

logger = logging.getLogger(__name__)


class CancellationToken:
    """Thread-safe cancellation flag.

    A single token applies to a whole run. It is checked between files
    while scanning, at admission, between copy chunks and during retry
    backoff sleeps.

    Usage:
        token = CancellationToken()
        threading.Timer(5.0, token.cancel).start()
        synchronizer.synchronize(src, dst, ".*", cancel_token=token)
    """

    def __init__(self) -> None:
        self._event = threading.Event()

    @property
    def is_cancelled(self) -> bool:
        """Check if cancellation was requested."""
        return self._event.is_set()

    def cancel(self) -> None:
        """Request cancellation."""
        if not self._event.is_set():
            logger.info("Cancellation requested")
        self._event.set()

    def raise_if_cancelled(self) -> None:
        """Raise SyncCancelledError if cancellation was requested."""
        if self._event.is_set():
            raise SyncCancelledError("Synchronization was cancelled")

    def wait(self, timeout: float) -> None:
        """Sleep for up to timeout seconds, waking early on cancellation.

        Raises:
            SyncCancelledError: If cancellation is requested before or
                during the wait.
        """
        if self._event.wait(timeout):
            raise SyncCancelledError("Synchronization was cancelled")
