"""Whole-file byte reads and writes.

A missing or unreadable file reads as None: callers treat absent content as
the expected empty case, and removing a missing file is a no-op. Writes
truncate in place and are not atomic, so they must never be used for lock
sentinel transitions (see lock.py).
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chatnet_ipc.errors import StorageUnavailableError

if TYPE_CHECKING:
    from pathlib import Path

logger = logging.getLogger("chatnet_ipc.rawfile")


def read_file(path: Path) -> bytes | None:
    """Return the full contents of path, or None if it cannot be read."""
    try:
        with path.open("rb") as f:
            return f.read()
    except OSError:
        logger.debug("reading file '%s' failed", path)
        return None


def write_file(path: Path, contents: bytes | str) -> None:
    """Truncate-and-create path, write contents verbatim, flush."""
    data = contents.encode() if isinstance(contents, str) else contents
    try:
        with path.open("wb") as f:
            f.write(data)
            f.flush()
    except OSError as exc:
        raise StorageUnavailableError(path, exc.strerror or str(exc)) from exc


def remove_file(path: Path) -> None:
    """Unlink path if present."""
    try:
        path.unlink(missing_ok=True)
    except OSError as exc:
        raise StorageUnavailableError(path, exc.strerror or str(exc)) from exc
