"""Logging setup: log-latest.txt for this run, log.0.txt for the previous one."""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from chatnet_ipc.config import IpcConfig
    from chatnet_ipc.paths import IpcPaths

_LOGGER_NAME = "chatnet_ipc"
_FILE_FORMAT = "[ipc-client]  %(asctime)s  %(levelname)s %(name)s  %(message)s"
_STDERR_FORMAT = "%(levelname)s: %(message)s"


def rotate_logs(paths: IpcPaths) -> None:
    """Move log-latest.txt over log.0.txt, if there is one."""
    if paths.latest_log_path.exists():
        os.replace(paths.latest_log_path, paths.previous_log_path)


def setup_logging(cfg: IpcConfig) -> logging.Logger:
    """Install handlers on the chatnet_ipc logger, replacing earlier ones."""
    logger = logging.getLogger(_LOGGER_NAME)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    level = logging.DEBUG if cfg.log.debug else logging.getLevelName(cfg.log.level)
    if not isinstance(level, int):
        level = logging.INFO
    logger.setLevel(level)
    logger.propagate = False

    if cfg.paths.ipc_dir.is_dir():
        file_handler = logging.FileHandler(cfg.paths.latest_log_path, encoding="utf-8")
        file_handler.setFormatter(logging.Formatter(_FILE_FORMAT))
        logger.addHandler(file_handler)

    stderr_handler = logging.StreamHandler(sys.stderr)
    stderr_handler.setLevel(logging.ERROR)
    stderr_handler.setFormatter(logging.Formatter(_STDERR_FORMAT))
    logger.addHandler(stderr_handler)
    return logger
