"""Bootstrap: reset the ipc dir to a clean layout and seed the initial state.

Safe to run at every client startup. After ``reset`` the layout is always:

    ipc.json   {}
    UNLOCK     (empty)

and ``seed_initial_state`` fills in userstate, both message buckets and a
fresh username.
"""

from __future__ import annotations

import logging
import uuid
from typing import TYPE_CHECKING

from chatnet_ipc.document import IpcDocumentStore
from chatnet_ipc.errors import StorageUnavailableError
from chatnet_ipc.rawfile import read_file, remove_file, write_file

if TYPE_CHECKING:
    from pathlib import Path

    from chatnet_ipc.config import IpcConfig
    from chatnet_ipc.paths import IpcPaths

logger = logging.getLogger("chatnet_ipc.bootstrap")

_DIR_MODE = 0o700


def _ensure_dir(path: Path) -> None:
    try:
        path.mkdir(mode=_DIR_MODE, exist_ok=True)
    except OSError as exc:
        raise StorageUnavailableError(path, exc.strerror or str(exc)) from exc


def ensure_dirs(paths: IpcPaths) -> None:
    """Create the config dir and ipc dir, owner-only, if missing."""
    _ensure_dir(paths.config_dir)
    _ensure_dir(paths.ipc_dir)


def reset(paths: IpcPaths) -> None:
    """Recreate dirs, drop sentinels and document, write {} and UNLOCK."""
    ensure_dirs(paths)

    for stale in (paths.lock_path, paths.unlock_path, paths.document_path, paths.client_up_path):
        remove_file(stale)

    write_file(paths.document_path, "{}")
    write_file(paths.unlock_path, "")
    logger.debug("ipc path %s contains: %s", paths.document_path, read_file(paths.document_path))


def new_username() -> str:
    """Fresh identity: lowercase hyphenated UUID, 36 chars."""
    return str(uuid.uuid4())


def seed_initial_state(store: IpcDocumentStore) -> None:
    store.put("userstate", True)
    store.put("sendmsgbucket", [])
    store.put("recvmsgbucket", [])
    store.put("username", new_username())


def bootstrap(cfg: IpcConfig, *, seed: bool = True) -> IpcDocumentStore:
    """reset + seed_initial_state. Returns the store for the fresh layout."""
    reset(cfg.paths)
    store = IpcDocumentStore.from_config(cfg)
    if seed:
        seed_initial_state(store)
    logger.info("ipc store ready at %s", cfg.paths.ipc_dir)
    return store
