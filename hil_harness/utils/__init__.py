"""
Utility modules for the harness.
"""

from .logger import setup_logger, cleanup_old_logs, LOG_FORMAT

__all__ = ["setup_logger", "cleanup_old_logs", "LOG_FORMAT"]
