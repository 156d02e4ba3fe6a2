"""
Logging Configuration for Courtside Tracker

Sets up application-wide logging for the stat tracker:
- Colored console output for the operator's terminal
- Rotating file handlers so long tracking sessions never grow logs unbounded
- Separate main/debug/error files
- Quieter levels for the per-write database and dispatch loggers

Usage Example:
    import logging
    from logging_config import setup_logging

    setup_logging(level="INFO", log_dir="logs")

    logger = logging.getLogger(__name__)
    logger.info("Tracking session started")

Log Files Created:
- logs/courtside_tracker.log: Main application log (INFO+)
- logs/courtside_tracker_debug.log: Debug log (DEBUG+)
- logs/courtside_tracker_error.log: Error log (ERROR+)

Each file rotates at 10MB with 5 backup files.
"""

import logging
import logging.handlers
import os
from pathlib import Path
from typing import Optional


# Log format templates
DETAILED_FORMAT = (
    "%(asctime)s - %(name)s - %(levelname)s - "
    "[%(filename)s:%(lineno)d] - %(funcName)s() - %(message)s"
)

SIMPLE_FORMAT = "%(asctime)s - %(levelname)s - %(name)s - %(message)s"

CONSOLE_FORMAT = "%(levelname)s - %(name)s - %(message)s"

DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

LOG_FILE_PREFIX = "courtside_tracker"


class ColoredFormatter(logging.Formatter):
    """
    Console formatter that wraps the level name in ANSI colors.

    The record is copied before coloring so file handlers sharing the same
    record still see the plain level name.
    """

    COLORS = {
        'DEBUG': '\033[36m',      # Cyan
        'INFO': '\033[32m',       # Green
        'WARNING': '\033[33m',    # Yellow
        'ERROR': '\033[31m',      # Red
        'CRITICAL': '\033[35m',   # Magenta
    }
    RESET = '\033[0m'

    def format(self, record):
        color = self.COLORS.get(record.levelname)
        if color is None:
            return super().format(record)
        colored = logging.makeLogRecord(record.__dict__)
        colored.levelname = f"{color}{record.levelname}{self.RESET}"
        return super().format(colored)


def _rotating_handler(
    log_dir: str,
    suffix: str,
    level: int,
    log_format: str,
    max_bytes: int,
    backup_count: int
) -> logging.Handler:
    """Build one rotating file handler for the given level."""
    filename = f"{LOG_FILE_PREFIX}{suffix}.log"
    handler = logging.handlers.RotatingFileHandler(
        filename=os.path.join(log_dir, filename),
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding='utf-8'
    )
    handler.setLevel(level)
    handler.setFormatter(logging.Formatter(log_format, datefmt=DATE_FORMAT))
    return handler


def setup_logging(
    level: str = "INFO",
    log_dir: str = "logs",
    enable_console: bool = True,
    enable_file: bool = True,
    max_bytes: int = 10 * 1024 * 1024,  # 10MB
    backup_count: int = 5,
    format_style: str = "detailed"
) -> None:
    """
    Setup application-wide logging configuration.

    Call once when the tracker starts, before any session is created.

    Args:
        level: Minimum log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_dir: Directory for log files
        enable_console: Whether to log to console
        enable_file: Whether to log to file
        max_bytes: Maximum size per log file before rotation (default: 10MB)
        backup_count: Number of backup files to keep (default: 5)
        format_style: "detailed" or "simple" format for the main log

    Example:
        >>> setup_logging(level="DEBUG", log_dir="logs", enable_console=True)
        >>> logging.getLogger(__name__).info("Logging configured")
    """
    numeric_level = getattr(logging, level.upper())

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if enable_console:
        console_handler = logging.StreamHandler()
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(ColoredFormatter(CONSOLE_FORMAT, datefmt=DATE_FORMAT))
        root_logger.addHandler(console_handler)

    if enable_file:
        Path(log_dir).mkdir(parents=True, exist_ok=True)
        main_format = DETAILED_FORMAT if format_style == "detailed" else SIMPLE_FORMAT

        root_logger.addHandler(
            _rotating_handler(log_dir, "", logging.INFO, main_format, max_bytes, backup_count)
        )
        root_logger.addHandler(
            _rotating_handler(log_dir, "_debug", logging.DEBUG, DETAILED_FORMAT, max_bytes, backup_count)
        )
        root_logger.addHandler(
            _rotating_handler(log_dir, "_error", logging.ERROR, DETAILED_FORMAT, max_bytes, backup_count)
        )

    root_logger.info(
        f"Logging initialized - Level: {level}, "
        f"Console: {enable_console}, File: {enable_file}"
    )


def log_exception(
    logger: logging.Logger,
    exception: Exception,
    context: Optional[dict] = None,
    level: str = "ERROR"
) -> None:
    """
    Log an exception with traceback and tracking context.

    Args:
        logger: Logger instance
        exception: Exception to log
        context: Extra fields such as game_id, stat_type or video_id
        level: Log level (default: ERROR)

    Example:
        >>> try:
        ...     gateway.record_stat(event)
        ... except Exception as e:
        ...     log_exception(logger, e, context={"game_id": event.game_id})
    """
    context_str = ""
    if context:
        context_str = " [" + ", ".join(f"{k}={v}" for k, v in context.items()) + "]"

    logger.log(
        getattr(logging, level.upper()),
        f"Exception occurred{context_str}: {type(exception).__name__}: {exception}",
        exc_info=True
    )


def configure_module_logger(
    module_name: str,
    level: Optional[str] = None,
    propagate: bool = True
) -> logging.Logger:
    """
    Configure logging for a specific module.

    Args:
        module_name: Module name (e.g., "game_clock.freeze_controller")
        level: Log level for this module (None = inherit from root)
        propagate: Whether to propagate to parent loggers

    Returns:
        Configured logger
    """
    logger = logging.getLogger(module_name)
    if level:
        logger.setLevel(getattr(logging, level.upper()))
    logger.propagate = propagate
    return logger


# Module-specific logger configurations

def setup_database_logging(level: str = "WARNING") -> None:
    """
    Configure logging for database operations.

    Every stat write logs, so default to WARNING.
    """
    configure_module_logger("database", level=level)
    configure_module_logger("stat_recording", level=level)
