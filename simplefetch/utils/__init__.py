"""Utility exports."""

from .file_helper import ensure_parent, read_lines, write_bytes
from .logging import configure_activity_logs, configure_logging, get_logger

__all__ = [
    "ensure_parent",
    "read_lines",
    "write_bytes",
    "configure_activity_logs",
    "configure_logging",
    "get_logger",
]
