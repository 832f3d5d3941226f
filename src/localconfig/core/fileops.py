# src/localconfig/core/fileops.py
"""File locking and atomic replacement for the settings files.

- settings_lock(): advisory exclusive lock on ``<settings>.lock`` held for the
  whole load -> reconcile -> write sequence, so two concurrent setup runs
  cannot interleave
- staged_write(): write to a temp file in the target directory, then
  atomically replace the target only when the caller's block succeeds
- append_text(): append-only writes for the legacy file
- file_size() and restore_size(): undo an append whose commit failed

On platforms without ``fcntl`` (e.g., Windows) the lock is a no-op.
"""

from __future__ import annotations

import contextlib
import os
import tempfile
from collections.abc import Iterator
from pathlib import Path
from typing import IO

try:  # pragma: no cover - Windows fallback
    import fcntl
except ImportError:  # pragma: no cover
    fcntl = None  # type: ignore[assignment]


def lock_path_for(path: Path) -> Path:
    """Lock file used to serialize updates of path."""
    return path.with_name(path.name + ".lock")


@contextlib.contextmanager
def settings_lock(path: Path) -> Iterator[None]:
    """Hold an exclusive advisory lock for path.

    Args:
        path: Settings file being updated (the lock lives next to it)

    Raises:
        OSError: If the lock file cannot be created
    """
    if fcntl is None:
        yield
        return

    lock_path = lock_path_for(path)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    with lock_path.open("a") as lock_file:
        fcntl.flock(lock_file.fileno(), fcntl.LOCK_EX)
        try:
            yield
        finally:
            fcntl.flock(lock_file.fileno(), fcntl.LOCK_UN)


@contextlib.contextmanager
def staged_write(path: Path) -> Iterator[IO[str]]:
    """Stage new contents for path and commit them atomically.

    The yielded handle writes to a temp file in path's directory. When the
    block exits cleanly the temp file is flushed, fsynced and moved over
    path with os.replace(); the previous file's permission bits are kept.
    When the block raises, the temp file is removed and path is untouched.

    Raises:
        OSError: If the temp file cannot be created, written or renamed
    """
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(dir=str(path.parent), prefix=f".{path.name}.", suffix=".tmp")
    tmp_path = Path(tmp_name)
    try:
        with os.fdopen(fd, "w", encoding="utf-8", newline="\n") as tmp:
            yield tmp
            tmp.flush()
            os.fsync(tmp.fileno())
        if path.exists():
            os.chmod(tmp_path, path.stat().st_mode & 0o7777)
        os.replace(tmp_path, path)
    finally:
        if tmp_path.exists():
            with contextlib.suppress(FileNotFoundError):
                tmp_path.unlink()


def append_text(path: Path, text: str) -> None:
    """Append text to path (UTF-8), creating it if needed. Never truncates.

    Raises:
        OSError: If the file cannot be opened or written
    """
    with path.open("a", encoding="utf-8", newline="\n") as fh:
        fh.write(text)
        fh.flush()
        os.fsync(fh.fileno())


def file_size(path: Path) -> int | None:
    """Size of path in bytes, or None if it does not exist."""
    try:
        return path.stat().st_size
    except FileNotFoundError:
        return None


def restore_size(path: Path, size: int | None) -> None:
    """Cut path back to size bytes; remove it when size is None.

    Raises:
        OSError: If the file cannot be truncated or removed
    """
    if size is None:
        path.unlink(missing_ok=True)
    else:
        os.truncate(path, size)
