"""Logging setup. The session owns the screen, so logs go to rotating files."""

from __future__ import annotations

import glob
import logging
import os
from datetime import datetime, timezone
from logging.handlers import RotatingFileHandler
from typing import Optional

DEFAULT_LOG_DIR = "~/.ansi-console/logs"
LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"


def setup_logging(
    log_dir: Optional[str] = None,
    level: int | str = logging.INFO,
    max_logs: int = 20,
) -> str:
    """
    Configure file logging with a timestamped, size-rotated log file.

    Returns the path of the log file in use.
    """
    log_dir = os.path.expanduser(log_dir or DEFAULT_LOG_DIR)
    os.makedirs(log_dir, exist_ok=True)

    timestamp = datetime.now(timezone.utc).strftime("%Y-%m-%d-%H-%M-%S-%f")[:23]
    log_file = os.path.join(log_dir, f"{timestamp}.log")

    # 1MB per file, current + 4 backups
    handler = RotatingFileHandler(
        log_file,
        maxBytes=1024 * 1024,
        backupCount=4,
        encoding="utf-8",
    )
    handler.setFormatter(logging.Formatter(LOG_FORMAT))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
        existing.close()
    root.addHandler(handler)
    root.setLevel(level.upper() if isinstance(level, str) else level)

    cleanup_old_logs(log_dir, max_logs=max_logs)
    return log_file


def cleanup_old_logs(log_dir: str, max_logs: int) -> None:
    """Remove oldest log files if we exceed maximum count."""
    log_files = glob.glob(os.path.join(log_dir, "*.log*"))
    log_files.sort(key=os.path.getmtime)

    while len(log_files) > max_logs:
        try:
            os.remove(log_files.pop(0))
        except OSError:
            pass  # Another process may have removed it
