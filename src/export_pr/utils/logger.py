"""
Logging utilities for export-pr.
"""
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import Optional

from export_pr.config import get_settings


class ColoredFormatter(logging.Formatter):
    """Custom formatter that adds colors to console output."""

    # ANSI color codes
    COLORS = {
        'DEBUG': '\033[36m',    # Cyan
        'INFO': '\033[32m',     # Green
        'WARNING': '\033[33m',  # Yellow
        'ERROR': '\033[31m',    # Red
        'CRITICAL': '\033[35m', # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        formatted = super().format(record)

        if getattr(record, 'console_output', False) and sys.stderr.isatty():
            color = self.COLORS.get(record.levelname, '')
            return f"{color}{formatted}{self.RESET}"

        return formatted


class ConsoleFilter(logging.Filter):
    """Marks records headed for the console handler."""

    def filter(self, record):
        record.console_output = True
        return True


class LoggerSetup:
    """Handles logger setup and configuration."""

    _loggers_configured = False
    _file_handler = None
    _console_handler = None

    @classmethod
    def setup_logging(cls, force_reconfigure: bool = False) -> None:
        """Set up logging configuration based on settings."""
        if cls._loggers_configured and not force_reconfigure:
            return

        settings = get_settings()

        root_logger = logging.getLogger()

        if force_reconfigure:
            for handler in (cls._file_handler, cls._console_handler):
                if handler is not None:
                    root_logger.removeHandler(handler)
                    handler.close()
            cls._file_handler = None
            cls._console_handler = None

        log_level = cls._level(settings)
        root_logger.setLevel(log_level)

        # Standard output carries the CSV export, so the console is stderr
        if cls._console_handler is None:
            cls._console_handler = logging.StreamHandler(sys.stderr)
            cls._console_handler.setFormatter(ColoredFormatter(
                fmt='%(levelname)-8s | %(name)-20s | %(message)s',
                datefmt='%H:%M:%S'
            ))
            cls._console_handler.setLevel(log_level)
            cls._console_handler.addFilter(ConsoleFilter())
            root_logger.addHandler(cls._console_handler)

        if cls._file_handler is None and settings.logging.file:
            log_file_path = Path(settings.logging.file).expanduser()
            log_file_path.parent.mkdir(parents=True, exist_ok=True)

            cls._file_handler = logging.handlers.RotatingFileHandler(
                filename=log_file_path,
                maxBytes=settings.logging.max_size_mb * 1024 * 1024,
                backupCount=settings.logging.backup_count,
                encoding='utf-8'
            )
            cls._file_handler.setFormatter(logging.Formatter(
                fmt=settings.logging.format,
                datefmt='%Y-%m-%d %H:%M:%S'
            ))
            cls._file_handler.setLevel(log_level)
            root_logger.addHandler(cls._file_handler)

        cls._setup_third_party_loggers(log_level)

        cls._loggers_configured = True

        logging.getLogger(__name__).debug(
            f"Logging configured - Level: {logging.getLevelName(log_level)}, "
            f"File: {settings.logging.file or 'none'}"
        )

    @staticmethod
    def _level(settings) -> int:
        """Effective level: DEBUG in debug mode, else the configured level."""
        if settings.app.debug:
            return logging.DEBUG
        return getattr(logging, str(settings.app.log_level).upper(), logging.WARNING)

    @classmethod
    def _setup_third_party_loggers(cls, our_level: int) -> None:
        """Configure logging levels for third-party libraries."""
        # Client libraries log every request at DEBUG/INFO
        for name in ("requests", "urllib3", "github", "gitlab"):
            logging.getLogger(name).setLevel(logging.WARNING)

        for module in ("export_pr", "__main__"):
            logging.getLogger(module).setLevel(our_level)

    @classmethod
    def get_logger(cls, name: str) -> logging.Logger:
        """Get a logger instance with automatic setup."""
        cls.setup_logging()
        return logging.getLogger(name)

    @classmethod
    def reconfigure(cls) -> None:
        """Reconfigure logging (useful when settings change)."""
        cls._loggers_configured = False
        cls.setup_logging(force_reconfigure=True)


def get_logger(name: Optional[str] = None) -> logging.Logger:
    """
    Convenience function to get a logger instance.

    Args:
        name: Logger name. If None, uses the calling module's name.

    Returns:
        Configured logger instance.
    """
    if name is None:
        import inspect
        frame = inspect.currentframe().f_back
        name = frame.f_globals.get('__name__', 'unknown')

    return LoggerSetup.get_logger(name)


def enable_debug() -> None:
    """Switch our loggers and the console handler to DEBUG."""
    settings = get_settings()
    settings.app.debug = True
    LoggerSetup.reconfigure()
