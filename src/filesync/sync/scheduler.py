"""Bounded concurrent execution of per-file work.

This module provides:
- BoundedScheduler: Runs a work function over many items with at most
  max_concurrency items in flight at any instant

Admission is a counting semaphore acquired before an item is handed to the
thread pool and released in a finally block when the item completes, so
neither failures nor cancellation can leak a slot.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from concurrent.futures import Future, ThreadPoolExecutor, wait
from typing import TYPE_CHECKING, Generic, TypeVar

from filesync.core.config import normalize_concurrency
from filesync.core.types import SyncCancelledError

if TYPE_CHECKING:
    from filesync.core.cancel import CancellationToken

logger = logging.getLogger(__name__)

T = TypeVar("T")
R = TypeVar("R")

# How often a blocked admission re-checks the cancellation token
ADMISSION_POLL_INTERVAL = 0.05  # seconds


class BoundedScheduler(Generic[T, R]):
    """Run work over items with a fixed concurrency bound.

    The bound belongs to the scheduler instance: concurrent runs on the
    same scheduler share its admission slots.

    Usage:
        scheduler = BoundedScheduler(max_concurrency=4)
        scheduler.run(files, process, on_done=record, cancel_token=token)
    """

    def __init__(self, max_concurrency: int | None = None) -> None:
        """Initialize the scheduler.

        Args:
            max_concurrency: Maximum items in flight. None or <= 0 means
                the number of available processors.
        """
        self._max_concurrency = normalize_concurrency(max_concurrency)
        self._slots = threading.BoundedSemaphore(self._max_concurrency)
        self._lock = threading.Lock()
        self._in_flight = 0
        self._peak_in_flight = 0

    @property
    def max_concurrency(self) -> int:
        """Concurrency bound."""
        return self._max_concurrency

    @property
    def in_flight(self) -> int:
        """Items currently admitted and not yet completed."""
        with self._lock:
            return self._in_flight

    @property
    def peak_in_flight(self) -> int:
        """Highest in-flight count observed since creation."""
        with self._lock:
            return self._peak_in_flight

    def run(
        self,
        items: Iterable[T],
        work: Callable[[T], R],
        on_done: Callable[[T, R], None] | None = None,
        cancel_token: CancellationToken | None = None,
    ) -> None:
        """Run work for every item and wait for all of them.

        on_done is called on the worker thread right after work returns,
        while the item still holds its slot.

        Args:
            items: Items to process.
            work: Function applied to each item.
            on_done: Optional completion callback (item, result).
            cancel_token: Checked at admission; stops dispatching new items.

        Raises:
            SyncCancelledError: If the run was cancelled, raised only after
                every dispatched item has settled.
            Exception: The first unexpected error raised by work or on_done,
                also raised after every dispatched item has settled.
        """
        futures: list[Future[None]] = []
        admission_error: BaseException | None = None

        with ThreadPoolExecutor(
            max_workers=self._max_concurrency,
            thread_name_prefix="filesync-worker",
        ) as executor:
            try:
                for item in items:
                    self._admit(cancel_token)
                    try:
                        futures.append(executor.submit(self._run_one, item, work, on_done))
                    except BaseException:
                        self._slots.release()
                        raise
            except SyncCancelledError as e:
                logger.info("Cancelled while dispatching, waiting for in-flight work")
                admission_error = e
            finally:
                wait(futures)

        errors = [e for e in (f.exception() for f in futures) if e is not None]
        cancelled = [e for e in errors if isinstance(e, SyncCancelledError)]
        if admission_error is not None:
            raise admission_error
        if cancelled:
            raise cancelled[0]
        if errors:
            raise errors[0]

    def _admit(self, cancel_token: CancellationToken | None) -> None:
        """Acquire a slot, giving up if the run is cancelled."""
        if cancel_token is None:
            self._slots.acquire()
            return

        cancel_token.raise_if_cancelled()
        while not self._slots.acquire(timeout=ADMISSION_POLL_INTERVAL):
            cancel_token.raise_if_cancelled()
        if cancel_token.is_cancelled:
            self._slots.release()
            cancel_token.raise_if_cancelled()

    def _run_one(
        self,
        item: T,
        work: Callable[[T], R],
        on_done: Callable[[T, R], None] | None,
    ) -> None:
        with self._lock:
            self._in_flight += 1
            self._peak_in_flight = max(self._peak_in_flight, self._in_flight)
        try:
            result = work(item)
            if on_done is not None:
                on_done(item, result)
        finally:
            with self._lock:
                self._in_flight -= 1
            self._slots.release()
