"""Rename-based lock shared with the peer process.

The lock is a zero-byte sentinel under the ipc dir whose *name* carries the
state:

    UNLOCK present, LOCK absent  ->  UNLOCKED
    LOCK present, UNLOCK absent  ->  LOCKED

acquire renames UNLOCK -> LOCK, release renames LOCK -> UNLOCK. A rename
within one directory is atomic, so of two processes racing to acquire, only
one rename finds its source; the other gets FileNotFoundError.

Discipline: whoever renamed UNLOCK to LOCK is the only writer of ipc.json
until it renames it back. Nothing at the OS level enforces this; both
processes must go through LockGate (or the equivalent in the peer).
"""

from __future__ import annotations

import contextlib
import enum
import logging
import os
import time
from typing import TYPE_CHECKING, Protocol

from chatnet_ipc.errors import LockConflictError, LockTimeoutError, StorageUnavailableError

if TYPE_CHECKING:
    from collections.abc import Iterator
    from pathlib import Path

    from chatnet_ipc.paths import IpcPaths

logger = logging.getLogger("chatnet_ipc.lock")

DEFAULT_TIMEOUT = 15.0
DEFAULT_POLL_INTERVAL = 0.05


class LockState(enum.Enum):
    UNLOCKED = "unlocked"
    LOCKED = "locked"
    UNINITIALIZED = "uninitialized"  # neither sentinel exists yet


class Filesystem(Protocol):
    """The two filesystem capabilities the lock needs."""

    def rename(self, src: Path, dst: Path) -> None: ...

    def exists(self, path: Path) -> bool: ...


class OsFilesystem:
    def rename(self, src: Path, dst: Path) -> None:
        os.rename(src, dst)

    def exists(self, path: Path) -> bool:
        return path.exists()


class LockGate:
    """Two-state advisory lock between this process and its peer."""

    def __init__(
        self,
        paths: IpcPaths,
        fs: Filesystem | None = None,
        *,
        timeout: float = DEFAULT_TIMEOUT,
        poll_interval: float = DEFAULT_POLL_INTERVAL,
    ) -> None:
        self.lock_path = paths.lock_path
        self.unlock_path = paths.unlock_path
        self.fs = fs or OsFilesystem()
        self.timeout = timeout
        self.poll_interval = poll_interval

    def state(self) -> LockState:
        if self.fs.exists(self.lock_path):
            return LockState.LOCKED
        if self.fs.exists(self.unlock_path):
            return LockState.UNLOCKED
        return LockState.UNINITIALIZED

    # ------------------------------------------------------------------
    # Single attempts
    # ------------------------------------------------------------------

    def _transition(self, src: Path, dst: Path) -> bool:
        try:
            self.fs.rename(src, dst)
        except FileNotFoundError:
            return False
        except OSError as exc:
            raise StorageUnavailableError(src, exc.strerror or str(exc)) from exc
        return True

    def try_acquire(self) -> bool:
        """Rename UNLOCK -> LOCK. False if UNLOCK is missing (held or uninitialized)."""
        ok = self._transition(self.unlock_path, self.lock_path)
        logger.debug("acquire %s", "ok" if ok else "missed")
        return ok

    def try_release(self) -> bool:
        """Rename LOCK -> UNLOCK. False if LOCK is missing."""
        ok = self._transition(self.lock_path, self.unlock_path)
        logger.debug("release %s", "ok" if ok else "missed")
        return ok

    def acquire(self) -> None:
        if not self.try_acquire():
            raise LockConflictError(self.unlock_path, f"cannot acquire: {self.state().value}")

    def release(self) -> None:
        if not self.try_release():
            raise LockConflictError(self.lock_path, f"cannot release: {self.state().value}")

    # ------------------------------------------------------------------
    # Retrying hold
    # ------------------------------------------------------------------

    @contextlib.contextmanager
    def hold(self, timeout: float | None = None, poll_interval: float | None = None) -> Iterator[None]:
        """Acquire, retrying until timeout, and release on exit."""
        timeout = self.timeout if timeout is None else timeout
        poll_interval = self.poll_interval if poll_interval is None else poll_interval
        deadline = time.monotonic() + timeout
        while not self.try_acquire():
            if time.monotonic() >= deadline:
                raise LockTimeoutError(self.unlock_path, timeout)
            logger.debug("database is locked, retrying")
            time.sleep(poll_interval)
        try:
            yield
        except BaseException:
            if not self.try_release():
                logger.error("lock sentinel missing on release: %s", self.lock_path)
            raise
        self.release()
