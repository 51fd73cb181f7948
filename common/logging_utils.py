"""
Shared logging utilities for Wayback Saver.

Provides rotating file handlers and retention cleanup to avoid
unbounded log growth on disk.
"""

from __future__ import annotations

import logging
import sys
import shutil
from datetime import datetime, timedelta
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional


DEFAULT_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

# Third-party loggers that flood DEBUG output with wire traffic
NOISY_LOGGERS = ("selenium", "urllib3")


def _cleanup_old_log_dirs(log_root: Path, retention_days: int) -> None:
    """
    Remove dated log directories older than the retention window.
    Only deletes subdirectories named as YYYY-MM-DD.
    """
    if retention_days <= 0:
        return

    cutoff_date = datetime.now().date() - timedelta(days=retention_days)

    for child in log_root.iterdir():
        if not child.is_dir():
            continue
        try:
            dir_date = datetime.strptime(child.name, "%Y-%m-%d").date()
        except ValueError:
            # Skip non date-named folders
            continue

        if dir_date < cutoff_date:
            shutil.rmtree(child, ignore_errors=True)


def setup_rotating_file_logger(
    run_date: str,
    log_filename: str,
    *,
    log_root: Path | str = "logs",
    verbose: bool = False,
    log_level: int = logging.INFO,
    stream_level: Optional[int] = None,
    max_bytes: int = 5 * 1024 * 1024,  # 5 MB per file
    backup_count: int = 3,
    retention_days: int = 14,
    stream_to_stdout: bool = False,
) -> str:
    """
    Configure root logging with a rotating file handler and retention cleanup.

    Status lines for each URL are printed directly by the save loop, so the
    console handler usually only carries warnings and errors.

    Args:
        run_date: Date string (YYYY-MM-DD) used for log directory.
        log_filename: Name of the log file inside the date directory.
        log_root: Directory holding the dated log directories.
        verbose: If True, set log level to DEBUG on every handler.
        log_level: Base log level when verbose is False.
        stream_level: Console level when verbose is False (default: log_level).
        max_bytes: Maximum size per log file before rotating.
        backup_count: Number of rotated files to keep.
        retention_days: Remove log directories older than this many days.
        stream_to_stdout: Stream logs to stdout instead of stderr.

    Returns:
        Path to the active log file as string.
    """
    log_root = Path(log_root)
    log_root.mkdir(parents=True, exist_ok=True)

    _cleanup_old_log_dirs(log_root, retention_days)

    log_dir = log_root / run_date
    log_dir.mkdir(parents=True, exist_ok=True)

    log_file = log_dir / log_filename

    # Reset existing handlers to avoid duplicates on reconfig
    root_logger = logging.getLogger()
    root_logger.handlers.clear()
    effective_level = logging.DEBUG if verbose else log_level
    root_logger.setLevel(effective_level)

    formatter = logging.Formatter(DEFAULT_FORMAT)

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setLevel(effective_level)
    file_handler.setFormatter(formatter)

    if verbose or stream_level is None:
        console_level = effective_level
    else:
        console_level = stream_level

    stream_handler = logging.StreamHandler(sys.stdout if stream_to_stdout else sys.stderr)
    stream_handler.setLevel(console_level)
    stream_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(stream_handler)

    for name in NOISY_LOGGERS:
        logging.getLogger(name).setLevel(logging.WARNING)

    return str(log_file)
