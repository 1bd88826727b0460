"""File-backed IPC state shared between the chat client and its socket peer.

Layout:
    $HOME/.config/chatnet-client/
        ipc.json          # one JSON object: userstate, sendmsgbucket, recvmsgbucket, username
        LOCK | UNLOCK     # zero-byte sentinel; its name is the lock state
        CLIENTUP          # present while the client runs

Concurrent writes: plain reads/writes of ipc.json are not atomic. The only
cross-process synchronization point is the UNLOCK -> LOCK rename; the holder
of LOCK is the sole writer until it renames it back.
"""

from chatnet_ipc.bootstrap import bootstrap, reset, seed_initial_state
from chatnet_ipc.config import IpcConfig, load_config
from chatnet_ipc.document import IpcDocumentStore
from chatnet_ipc.errors import (
    EXIT_MALFORMED_DOCUMENT,
    IpcConfigError,
    IpcError,
    LockConflictError,
    LockTimeoutError,
    MalformedDocumentError,
    StorageUnavailableError,
)
from chatnet_ipc.lock import LockGate, LockState
from chatnet_ipc.paths import IpcPaths, resolve_paths

__all__ = [
    "EXIT_MALFORMED_DOCUMENT",
    "IpcConfig",
    "IpcConfigError",
    "IpcDocumentStore",
    "IpcError",
    "IpcPaths",
    "LockConflictError",
    "LockGate",
    "LockState",
    "LockTimeoutError",
    "MalformedDocumentError",
    "StorageUnavailableError",
    "bootstrap",
    "load_config",
    "reset",
    "resolve_paths",
    "seed_initial_state",
]
