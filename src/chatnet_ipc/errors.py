"""Error taxonomy for the IPC store.

Absent resources (missing document, missing sentinel) are never errors at this
layer; they read back as empty. Everything below is a condition the caller
has to decide about.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pathlib import Path

# Process exit status for a corrupted shared document.
EXIT_MALFORMED_DOCUMENT = 4


class IpcError(Exception):
    """Base class for all chatnet_ipc errors."""


class IpcConfigError(IpcError):
    """Configuration could not be resolved (no HOME, bad client.toml, bad env)."""


class StorageUnavailableError(IpcError):
    """A directory or file under the store root could not be created or written."""

    def __init__(self, path: Path, reason: str = "") -> None:
        self.path = path
        self.reason = reason
        msg = f"storage unavailable: {path}"
        if reason:
            msg += f" ({reason})"
        super().__init__(msg)


class LockConflictError(IpcError):
    """A lock transition found its source sentinel missing."""

    def __init__(self, path: Path, message: str = "") -> None:
        self.path = path
        super().__init__(message or f"lock sentinel not found: {path}")


class LockTimeoutError(LockConflictError):
    """The lock could not be acquired before the deadline."""

    def __init__(self, path: Path, timeout: float) -> None:
        self.timeout = timeout
        super().__init__(path, f"database is locked: gave up after {timeout:.2f}s")


class MalformedDocumentError(IpcError):
    """The shared document is non-empty but not a JSON object.

    Carries the offending text and the stack at the point of detection so the
    top-level caller can log both before terminating with ``exit_code``.
    """

    exit_code = EXIT_MALFORMED_DOCUMENT

    def __init__(self, path: Path, content: str, stack: str = "") -> None:
        self.path = path
        self.content = content
        self.stack = stack
        super().__init__(f"json parse failed for {path}")
