"""
Logging setup: console output plus an optional rotating log file.
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"
LOG_FILE_NAME = "thumbnailer.log"


def setup_logging(
    log_dir: Path | None = None,
    level: str = "INFO",
    max_bytes: int = 5 * 1024 * 1024,
    backup_count: int = 3,
) -> Path | None:
    """
    Configure the root logger. Without `log_dir` only the console handler is
    installed; returns the log file path when one is used.
    """
    handlers: list[logging.Handler] = [logging.StreamHandler()]
    log_path: Path | None = None
    if log_dir is not None:
        log_dir.mkdir(parents=True, exist_ok=True)
        log_path = log_dir / LOG_FILE_NAME
        handlers.insert(0, RotatingFileHandler(log_path, maxBytes=max_bytes, backupCount=backup_count))
    logging.basicConfig(
        level=level.upper(),
        format=LOG_FORMAT,
        handlers=handlers,
        force=True,
    )
    # Pillow logs every plugin probe at DEBUG.
    logging.getLogger("PIL").setLevel(max(logging.INFO, logging.getLogger().level))
    return log_path
