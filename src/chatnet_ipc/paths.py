"""Well-known locations of the client's IPC state.

Layout (all under the per-user config dir):

    $HOME/.config/
        chatnet-client/
            ipc.json          # shared state document
            LOCK | UNLOCK     # zero-byte lock sentinel, exactly one exists
            CLIENTUP          # present while the client process runs
            client.toml       # optional settings
            log-latest.txt    # current run's log
            log.0.txt         # previous run's log

Pure path composition: nothing here touches the filesystem.
"""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

CLIENT_SUBDIR = "chatnet-client"

_CONFIG_SUBDIR = ".config"
_DOCUMENT_NAME = "ipc.json"
_LOCK_NAME = "LOCK"
_UNLOCK_NAME = "UNLOCK"
_CLIENT_UP_NAME = "CLIENTUP"
_SETTINGS_NAME = "client.toml"
_LATEST_LOG_NAME = "log-latest.txt"
_PREVIOUS_LOG_NAME = "log.0.txt"


@dataclass(frozen=True)
class IpcPaths:
    """Every location derived from a single home directory."""

    config_dir: Path
    ipc_dir: Path

    @property
    def document_path(self) -> Path:
        return self.ipc_dir / _DOCUMENT_NAME

    @property
    def lock_path(self) -> Path:
        return self.ipc_dir / _LOCK_NAME

    @property
    def unlock_path(self) -> Path:
        return self.ipc_dir / _UNLOCK_NAME

    @property
    def client_up_path(self) -> Path:
        return self.ipc_dir / _CLIENT_UP_NAME

    @property
    def settings_path(self) -> Path:
        return self.ipc_dir / _SETTINGS_NAME

    @property
    def latest_log_path(self) -> Path:
        return self.ipc_dir / _LATEST_LOG_NAME

    @property
    def previous_log_path(self) -> Path:
        return self.ipc_dir / _PREVIOUS_LOG_NAME


def resolve_paths(home: str | Path, subdir: str = CLIENT_SUBDIR) -> IpcPaths:
    """Derive all IPC locations from the home directory value."""
    config_dir = Path(home) / _CONFIG_SUBDIR
    return IpcPaths(config_dir=config_dir, ipc_dir=config_dir / subdir)
