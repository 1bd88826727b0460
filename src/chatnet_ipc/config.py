"""IpcConfig: resolved settings for the IPC store, built once at startup.

Everything is derived from the home directory. An optional settings file
lives next to the document:

    $HOME/.config/chatnet-client/client.toml

client.toml example:

    [ipc]
    # subdir = "chatnet-client"   # default

    [lock]
    timeout = 15.0          # seconds to keep retrying a held lock
    poll_interval = 0.05    # seconds between retries

    [log]
    debug = false           # or set CHATNET_DEBUG=1
    level = "INFO"

Environment overrides: CHATNET_DEBUG (any non-empty value), CHATNET_IPC_TIMEOUT.
"""

from __future__ import annotations

import os
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any

from chatnet_ipc.errors import IpcConfigError
from chatnet_ipc.lock import DEFAULT_POLL_INTERVAL, DEFAULT_TIMEOUT
from chatnet_ipc.paths import CLIENT_SUBDIR, IpcPaths, resolve_paths

_ENV_DEBUG = "CHATNET_DEBUG"
_ENV_TIMEOUT = "CHATNET_IPC_TIMEOUT"


@dataclass
class LockConfig:
    timeout: float = DEFAULT_TIMEOUT
    poll_interval: float = DEFAULT_POLL_INTERVAL


@dataclass
class LogConfig:
    debug: bool = False
    level: str = "INFO"


@dataclass
class IpcConfig:
    """Resolved configuration, passed explicitly to every component."""

    home: Path
    paths: IpcPaths
    lock: LockConfig = field(default_factory=LockConfig)
    log: LogConfig = field(default_factory=LogConfig)


def _read_settings(path: Path) -> dict[str, Any]:
    if not path.exists():
        return {}
    try:
        with path.open("rb") as f:
            return tomllib.load(f)
    except tomllib.TOMLDecodeError as exc:
        msg = f"invalid {path.name}: {exc}"
        raise IpcConfigError(msg) from exc


def _section(raw: dict[str, Any], name: str) -> dict[str, Any]:
    section = raw.get(name, {})
    if not isinstance(section, dict):
        msg = f"[{name}] in client.toml must be a table, got {section!r}"
        raise IpcConfigError(msg)
    return section


def _float_setting(value: Any, name: str) -> float:
    try:
        return float(value)
    except (TypeError, ValueError) as exc:
        msg = f"{name} must be a number, got {value!r}"
        raise IpcConfigError(msg) from exc


def load_config(home: Path | str | None = None) -> IpcConfig:
    """Build IpcConfig from home (default $HOME), client.toml and the environment."""
    home_value = str(home) if home else os.environ.get("HOME", "")
    if not home_value:
        msg = "HOME is not set; cannot locate the ipc directory"
        raise IpcConfigError(msg)
    home_path = Path(home_value)

    # client.toml sits in the default location; [ipc] subdir can move the rest
    raw = _read_settings(resolve_paths(home_path).settings_path)
    ipc_section = _section(raw, "ipc")
    lock_section = _section(raw, "lock")
    log_section = _section(raw, "log")

    paths = resolve_paths(home_path, str(ipc_section.get("subdir", CLIENT_SUBDIR)))

    timeout = _float_setting(lock_section.get("timeout", DEFAULT_TIMEOUT), "lock.timeout")
    env_timeout = os.environ.get(_ENV_TIMEOUT)
    if env_timeout:
        timeout = _float_setting(env_timeout, _ENV_TIMEOUT)

    debug = bool(log_section.get("debug", False)) or bool(os.environ.get(_ENV_DEBUG))

    return IpcConfig(
        home=home_path,
        paths=paths,
        lock=LockConfig(
            timeout=timeout,
            poll_interval=_float_setting(
                lock_section.get("poll_interval", DEFAULT_POLL_INTERVAL), "lock.poll_interval",
            ),
        ),
        log=LogConfig(
            debug=debug,
            level=str(log_section.get("level", "INFO")).upper(),
        ),
    )
