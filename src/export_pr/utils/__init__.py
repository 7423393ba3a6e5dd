"""Utility modules for export-pr."""

from .logger import get_logger, enable_debug, LoggerSetup

__all__ = [
    "get_logger",
    "enable_debug",
    "LoggerSetup",
]
