"""Logging initialization utilities using loguru."""

from __future__ import annotations

import os
from pathlib import Path
import sys

from loguru import logger

APP_DIRECTORY_NAME = "PhotoAlbumCreator"


def init_logging(log_dir: str | None = None, level: str = "INFO", console: bool = False) -> None:
    """Initialize rotating file logging under the given directory.

    Args:
        log_dir: Directory for the log files, `get_log_directory()` when None.
        level: Minimum level written to the sinks.
        console: Also log to stderr (used by `--verbose`).
    """
    if log_dir is None:
        log_dir = get_log_directory()
    log_path = Path(log_dir)
    log_path.mkdir(parents=True, exist_ok=True)

    logger.remove()
    logger.add(
        str(log_path / "app_{time:YYYYMMDD}.log"),
        rotation="10 MB",
        retention="10 days",
        compression="zip",
        enqueue=True,
        backtrace=False,
        diagnose=False,
        level=level,
    )
    if console:
        logger.add(sys.stderr, level=level, format="<level>{level: <8}</level> {message}")


def get_log_directory() -> str:
    """Get the main log directory path."""
    base = os.environ.get("LOCALAPPDATA")
    if base:
        return str(Path(base) / APP_DIRECTORY_NAME / "logs")
    return str(Path.home() / ".local" / "share" / APP_DIRECTORY_NAME / "logs")
