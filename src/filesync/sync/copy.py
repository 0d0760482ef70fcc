"""Streaming file copy.

Copies file content through a fixed-size buffer so memory use does not
grow with file size. Content is written to a temporary file next to the
destination and moved into place only once the last buffer is written,
so an interrupted copy never leaves a partial destination file.
"""

from __future__ import annotations

import contextlib
import logging
import os
import uuid
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from filesync.core.cancel import CancellationToken

logger = logging.getLogger(__name__)

COPY_BUFFER_SIZE = 64 * 1024  # 64 KiB
TEMP_SUFFIX = ".filesync-tmp"


def temp_path_for(destination: Path) -> Path:
    """Unique temporary path in the destination's directory."""
    return destination.with_name(f".{destination.name}.{uuid.uuid4().hex[:8]}{TEMP_SUFFIX}")


def copy_file(
    source: Path,
    destination: Path,
    cancel_token: CancellationToken | None = None,
    buffer_size: int = COPY_BUFFER_SIZE,
) -> int:
    """Copy source to destination byte-for-byte.

    Timestamps are not preserved: the destination ends up at least as
    new as the source, which makes the next run skip it. On failure or
    cancellation the destination is left as it was.

    Args:
        source: File to read.
        destination: File to create or overwrite. Its parent must exist.
        cancel_token: Checked between buffers.
        buffer_size: Read size in bytes.

    Returns:
        Number of bytes copied.

    Raises:
        SyncCancelledError: If cancellation is requested mid-copy.
        OSError: On any read, write or rename failure.
    """
    tmp_path = temp_path_for(destination)
    copied = 0
    try:
        with open(source, "rb") as src, open(tmp_path, "wb") as dst:
            while True:
                if cancel_token is not None:
                    cancel_token.raise_if_cancelled()
                chunk = src.read(buffer_size)
                if not chunk:
                    break
                dst.write(chunk)
                copied += len(chunk)

        # Replaces an existing destination file in one step
        os.replace(tmp_path, destination)
    except Exception:
        with contextlib.suppress(OSError):
            tmp_path.unlink(missing_ok=True)
        raise

    logger.debug(f"Copied {copied} bytes: {source} -> {destination}")
    return copied
