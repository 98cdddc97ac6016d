"""
Centralized logging configuration for the Voice Memos clip tools.

Provides structured JSON logging with rotation. Handlers are attached to the
package logger ("voicememos"), so records from library modules that log via
logging.getLogger(__name__) end up in the same file as the script's own.
"""

import json
import logging
import logging.handlers
import sys
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, Optional

from . import paths


PACKAGE_LOGGER = "voicememos"


class JSONFormatter(logging.Formatter):
    """Custom formatter that outputs newline-delimited JSON."""

    def __init__(self, component: str):
        """Initialize JSON formatter.

        Args:
            component: Component name (play, clip, slideshow)
        """
        super().__init__()
        self.component = component

    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON.

        Args:
            record: Log record to format

        Returns:
            JSON string representation of log record
        """
        log_entry: Dict[str, Any] = {
            "timestamp": datetime.now(timezone.utc).isoformat().replace("+00:00", "Z"),
            "level": record.levelname,
            "component": self.component,
            "logger": record.name,
            "message": record.getMessage(),
        }

        if hasattr(record, "metadata") and isinstance(record.metadata, dict):
            log_entry["metadata"] = record.metadata

        if record.exc_info:
            log_entry["exception"] = self.formatException(record.exc_info)

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logger(
    component: str,
    log_level: str = "INFO",
    max_bytes: int = 10 * 1024 * 1024,  # 10 MB
    backup_count: int = 5,
    console_output: bool = False,
    log_dir: Optional[Path] = None,
) -> logging.Logger:
    """Setup logger with JSON formatting and file rotation.

    Args:
        component: Component name (play, clip, slideshow)
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        max_bytes: Maximum size per log file in bytes (default: 10 MB)
        backup_count: Number of backup files to keep (default: 5)
        console_output: Whether to also output logs to stderr (default: False)
        log_dir: Directory for log files (default: ~/Library/Logs/VoiceMemoClips)

    Returns:
        Logger for the component, a child of the package logger
    """
    package_logger = logging.getLogger(PACKAGE_LOGGER)
    package_logger.setLevel(getattr(logging, log_level.upper()))
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    if log_dir is None:
        log_dir = paths.get_logs_directory()
    paths.ensure_directory_exists(log_dir)

    log_file = log_dir / f"{component}.log"
    file_handler = logging.handlers.RotatingFileHandler(
        log_file,
        maxBytes=max_bytes,
        backupCount=backup_count,
        encoding="utf-8",
    )
    file_handler.setFormatter(JSONFormatter(component))
    package_logger.addHandler(file_handler)

    # Console logs go to stderr; stdout carries the human-readable banner
    if console_output:
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(JSONFormatter(component))
        package_logger.addHandler(console_handler)

    return logging.getLogger(f"{PACKAGE_LOGGER}.{component}")


def log_with_metadata(logger: logging.Logger, level: str, message: str, **metadata: Any) -> None:
    """Log message with structured metadata.

    Args:
        logger: Logger instance
        level: Log level (debug, info, warning, error, critical)
        message: Log message
        **metadata: Additional key-value pairs to include in metadata field
    """
    log_method = getattr(logger, level.lower())
    log_method(message, extra={"metadata": metadata})


def log_error_with_context(
    logger: logging.Logger,
    message: str,
    exception: Optional[Exception] = None,
    **context: Any,
) -> None:
    """Log error with exception and context metadata.

    Args:
        logger: Logger instance
        message: Error message
        exception: Exception instance (optional)
        **context: Additional context key-value pairs
    """
    if exception:
        logger.error(message, exc_info=exception, extra={"metadata": context})
    else:
        log_with_metadata(logger, "error", message, **context)


# Convenience functions for common log levels

def log_info(logger: logging.Logger, message: str, **metadata: Any) -> None:
    """Log INFO level message with metadata."""
    log_with_metadata(logger, "info", message, **metadata)


def log_warning(logger: logging.Logger, message: str, **metadata: Any) -> None:
    """Log WARNING level message with metadata."""
    log_with_metadata(logger, "warning", message, **metadata)


def log_error(logger: logging.Logger, message: str, **metadata: Any) -> None:
    """Log ERROR level message with metadata."""
    log_with_metadata(logger, "error", message, **metadata)


def log_debug(logger: logging.Logger, message: str, **metadata: Any) -> None:
    """Log DEBUG level message with metadata."""
    log_with_metadata(logger, "debug", message, **metadata)
