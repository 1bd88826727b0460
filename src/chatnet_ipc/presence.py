"""Client presence sentinel and the session flag.

CLIENTUP exists while the client process runs, so the peer can tell whether
anyone is draining the message buckets. ``userstate`` in ipc.json is the
session flag: the client keeps its loop going until it reads exactly False.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from chatnet_ipc.rawfile import remove_file, write_file

if TYPE_CHECKING:
    from chatnet_ipc.document import IpcDocumentStore
    from chatnet_ipc.paths import IpcPaths

logger = logging.getLogger("chatnet_ipc.presence")


def mark_client_up(paths: IpcPaths) -> None:
    if not paths.client_up_path.exists():
        write_file(paths.client_up_path, "")
    logger.debug("client up")


def mark_client_down(paths: IpcPaths) -> None:
    remove_file(paths.client_up_path)
    logger.debug("client down")


def client_is_up(paths: IpcPaths) -> bool:
    return paths.client_up_path.exists()


def session_active(store: IpcDocumentStore) -> bool:
    """False only when userstate is explicitly False; a missing key keeps going."""
    with store.locked():
        return store.get("userstate") is not False


def end_session(store: IpcDocumentStore) -> None:
    with store.locked():
        store.put("userstate", False)
