"""The shared ipc.json document.

One JSON object, read and written whole:

    {"userstate":true,"sendmsgbucket":[],"recvmsgbucket":[],"username":"..."}

get/put do not lock. Callers that race the peer wrap them in
``store.locked()`` (or use ``update``), which holds the LockGate for the
duration of the read-modify-write.
"""

from __future__ import annotations

import json
import logging
import traceback
from typing import TYPE_CHECKING, Any

from chatnet_ipc.errors import MalformedDocumentError
from chatnet_ipc.lock import LockGate
from chatnet_ipc.rawfile import read_file, write_file

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator
    from contextlib import AbstractContextManager

    from chatnet_ipc.config import IpcConfig
    from chatnet_ipc.paths import IpcPaths

logger = logging.getLogger("chatnet_ipc.document")


def _reject_constant(name: str) -> Any:
    # NaN and Infinity are not JSON; the peer cannot parse them
    msg = f"non-standard JSON constant: {name}"
    raise ValueError(msg)


class IpcDocumentStore:
    """get/put over the top-level keys of ipc.json."""

    def __init__(self, paths: IpcPaths, gate: LockGate | None = None) -> None:
        self.paths = paths
        self.path = paths.document_path
        self.gate = gate or LockGate(paths)

    @classmethod
    def from_config(cls, cfg: IpcConfig) -> IpcDocumentStore:
        gate = LockGate(cfg.paths, timeout=cfg.lock.timeout, poll_interval=cfg.lock.poll_interval)
        return cls(cfg.paths, gate)

    # ------------------------------------------------------------------
    # Whole document
    # ------------------------------------------------------------------

    def load(self) -> dict[str, Any]:
        """Parse the document. Absent or zero-length reads as {}."""
        raw = read_file(self.path)
        if not raw:
            return {}
        try:
            doc = json.loads(raw, parse_constant=_reject_constant)
        except ValueError:
            doc = None
        if not isinstance(doc, dict):
            text = raw.decode(errors="replace")
            raise MalformedDocumentError(self.path, text, "".join(traceback.format_stack()))
        return doc

    def _save(self, doc: dict[str, Any]) -> None:
        write_file(self.path, json.dumps(doc, separators=(",", ":"), allow_nan=False))

    # ------------------------------------------------------------------
    # Keys
    # ------------------------------------------------------------------

    def get(self, key: str, default: Any = None) -> Any:
        doc = self.load()
        logger.debug("get: key=%s ipc.json=%s", key, doc)
        return doc.get(key, default)

    def put(self, key: str, value: Any) -> None:
        """Set key to value by rewriting the whole document.

        Values that do not serialize to strict JSON (NaN, Infinity, arbitrary
        objects) raise before the file is touched.
        """
        doc = self.load()
        logger.debug("put: key=%s ipc.json=%s", key, doc)
        doc[key] = value
        self._save(doc)

    def locked(self, timeout: float | None = None) -> AbstractContextManager[None]:
        """Hold the peer lock around a block of get/put calls."""
        return self.gate.hold(timeout)

    def update(self, key: str, fn: Callable[[Any], Any], default: Any = None) -> Any:
        """Locked read-modify-write of one key. Returns the stored value."""
        with self.locked():
            value = fn(self.get(key, default))
            self.put(key, value)
        return value

    def keys(self) -> Iterator[str]:
        return iter(self.load())
