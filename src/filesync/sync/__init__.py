"""Synchronization engine.

This package provides:
- scan_tree / MatchedFile: Source tree enumeration and filtering
- resolve_action: Create/update/skip decision for one file
- copy_file: Streaming byte copy
- process_file: Per-file processing with retry and backoff
- BoundedScheduler: Concurrency-bounded fan-out
- ResultAggregator: Thread-safe outcome accumulation and progress
- FileSynchronizer: Public entry point

Usage:
    from filesync.sync import FileSynchronizer

    synchronizer = FileSynchronizer(max_concurrency=4)
    result = synchronizer.synchronize(src, dst, r".*\\.txt;.*\\.csv", max_retries=2)
"""

from filesync.sync.aggregator import ResultAggregator
from filesync.sync.copy import COPY_BUFFER_SIZE, copy_file
from filesync.sync.resolver import resolve_action
from filesync.sync.retry import backoff_delay, process_file
from filesync.sync.scanner import MatchedFile, scan_tree
from filesync.sync.scheduler import BoundedScheduler
from filesync.sync.synchronizer import FileSynchronizer

__all__ = [
    # Aggregation
    "ResultAggregator",
    # Copy
    "COPY_BUFFER_SIZE",
    "copy_file",
    # Resolution
    "resolve_action",
    # Retry
    "backoff_delay",
    "process_file",
    # Scanning
    "MatchedFile",
    "scan_tree",
    # Scheduling
    "BoundedScheduler",
    # Orchestration
    "FileSynchronizer",
]
