"""Shared fixtures for filesync tests."""

from __future__ import annotations

import os
from collections.abc import Callable
from pathlib import Path

import pytest

FileFactory = Callable[..., Path]


def write_file(
    root: Path,
    relative: str,
    content: bytes | str = b"",
    mtime: float | None = None,
) -> Path:
    """Create a file under root, creating parents, optionally setting mtime."""
    path = root / relative
    path.parent.mkdir(parents=True, exist_ok=True)
    if isinstance(content, str):
        content = content.encode("utf-8")
    path.write_bytes(content)
    if mtime is not None:
        os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def source_dir(tmp_path: Path) -> Path:
    """Create an empty source directory."""
    path = tmp_path / "source"
    path.mkdir()
    return path


@pytest.fixture
def dest_dir(tmp_path: Path) -> Path:
    """Path of the destination directory (not created)."""
    return tmp_path / "dest"


@pytest.fixture
def make_file() -> FileFactory:
    """Factory fixture wrapping write_file."""
    return write_file


def tree_snapshot(root: Path) -> dict[str, tuple[bytes, int]]:
    """Map every file and directory under root to (content, mtime_ns)."""
    snapshot: dict[str, tuple[bytes, int]] = {}
    if not root.exists():
        return snapshot
    for path in sorted(root.rglob("*")):
        rel = path.relative_to(root).as_posix()
        if path.is_dir():
            snapshot[rel + "/"] = (b"", 0)
        else:
            snapshot[rel] = (path.read_bytes(), path.stat().st_mtime_ns)
    return snapshot


@pytest.fixture
def snapshot() -> Callable[[Path], dict[str, tuple[bytes, int]]]:
    """Fixture exposing tree_snapshot."""
    return tree_snapshot
