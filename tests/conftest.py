# tests/conftest.py

from __future__ import annotations

import logging
from pathlib import Path

import pytest

from chatnet_ipc.bootstrap import bootstrap
from chatnet_ipc.config import load_config
from chatnet_ipc.document import IpcDocumentStore
from chatnet_ipc.lock import LockGate


class MemoryFilesystem:
    """In-memory stand-in for the rename/exists capability LockGate needs."""

    def __init__(self, *names: Path) -> None:
        self.files: set[Path] = set(names)
        self.renames: list[tuple[Path, Path]] = []

    def rename(self, src: Path, dst: Path) -> None:
        if src not in self.files:
            raise FileNotFoundError(2, "No such file or directory", str(src))
        self.files.discard(src)
        self.files.add(dst)
        self.renames.append((src, dst))

    def exists(self, path: Path) -> bool:
        return path in self.files


@pytest.fixture(autouse=True)
def _clean_env(monkeypatch):
    monkeypatch.delenv("CHATNET_DEBUG", raising=False)
    monkeypatch.delenv("CHATNET_IPC_TIMEOUT", raising=False)
    yield
    logger = logging.getLogger("chatnet_ipc")
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()


@pytest.fixture
def home(tmp_path):
    return tmp_path


@pytest.fixture
def cfg(home):
    c = load_config(home)
    c.lock.timeout = 0.2
    c.lock.poll_interval = 0.01
    return c


@pytest.fixture
def paths(cfg):
    return cfg.paths


@pytest.fixture
def store(cfg) -> IpcDocumentStore:
    return bootstrap(cfg)


@pytest.fixture
def memfs(paths):
    return MemoryFilesystem(paths.unlock_path)


@pytest.fixture
def memgate(paths, memfs):
    return LockGate(paths, memfs, timeout=0.05, poll_interval=0.01)
