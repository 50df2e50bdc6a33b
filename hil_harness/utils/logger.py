"""
Logging configuration for hardware test runs.
"""

import logging
import sys
import time
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Optional, Union

LOG_FORMAT = "%(asctime)s - %(name)s - %(levelname)s - %(message)s"

LOG_NAME = "hil_harness"

DEFAULT_LOG_DIR = Path.home() / ".hil_harness" / "logs"


def setup_logger(log_level=logging.INFO, log_dir: Optional[Union[str, Path]] = None,
                 max_size_mb: int = 10, backup_count: int = 5,
                 console: bool = True) -> Path:
    """
    Setup run logger with rotating file handlers.

    Args:
        log_level: Logging level (default: INFO)
        log_dir: Directory for log files (default: ~/.hil_harness/logs)
        max_size_mb: Maximum log file size in MB before rotation (default: 10)
        backup_count: Number of backup files to keep (default: 5)
        console: Also log to stdout

    Returns:
        Path of the main log file
    """
    log_dir = Path(log_dir) if log_dir is not None else DEFAULT_LOG_DIR
    log_dir.mkdir(parents=True, exist_ok=True)

    # Main log file (rotating)
    log_file = log_dir / f"{LOG_NAME}.log"

    # Error-only log file (rotating)
    error_log_file = log_dir / f"{LOG_NAME}_errors.log"

    formatter = logging.Formatter(LOG_FORMAT)

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    # Clear existing handlers (in case of re-initialization)
    root_logger.handlers.clear()

    file_handler = RotatingFileHandler(
        log_file,
        maxBytes=max_size_mb * 1024 * 1024,
        backupCount=backup_count,
        encoding='utf-8'
    )
    file_handler.setLevel(log_level)
    file_handler.setFormatter(formatter)
    root_logger.addHandler(file_handler)

    error_handler = RotatingFileHandler(
        error_log_file,
        maxBytes=5 * 1024 * 1024,  # 5 MB for errors
        backupCount=3,
        encoding='utf-8'
    )
    error_handler.setLevel(logging.ERROR)
    error_handler.setFormatter(formatter)
    root_logger.addHandler(error_handler)

    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(log_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    # pyserial is chatty at DEBUG
    logging.getLogger("serial").setLevel(logging.WARNING)

    cleanup_old_logs(log_dir, days=30)

    logger = logging.getLogger(__name__)
    logger.info(f"Logger initialized. Log file: {log_file}")
    return log_file


def cleanup_old_logs(log_dir: Path, days: int = 30) -> int:
    """Remove harness log files older than specified days. Returns the number removed."""
    cutoff_time = time.time() - (days * 24 * 60 * 60)
    removed = 0

    for log_file in log_dir.glob(f"{LOG_NAME}*.log*"):
        try:
            if log_file.stat().st_mtime < cutoff_time:
                log_file.unlink()
                removed += 1
        except OSError as e:
            logging.getLogger(__name__).warning(f"Cannot remove old log {log_file}: {e}")
    return removed
