"""Logging infrastructure for pocket with per-integration logs.

Logs go to ~/Library/Logs/ with automatic rotation:
- pocket.log: Bridge activity (script runs, degraded lookups)
- pocket-error.log: Errors from all integrations (ERROR+ level only)
- pocket-{integration}.log: Per-integration command logs

Usage:
    from pocket.logging import setup_logging, get_integration_logger

    # Initialize once at startup
    setup_logging()

    logger = get_integration_logger("calendar")
    logger.info("Creating event...")

    # Errors also go to the error log automatically
    logger.error("Something failed")
"""

from __future__ import annotations

import logging
from logging.handlers import RotatingFileHandler
from pathlib import Path

# Default log directory (macOS standard location)
DEFAULT_LOG_DIR = Path.home() / "Library" / "Logs"

# Default rotation settings
DEFAULT_MAX_BYTES = 5 * 1024 * 1024  # 5MB
DEFAULT_BACKUP_COUNT = 3

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"

# Module-level state
_loggers: dict[str, logging.Logger] = {}
_error_logger: logging.Logger | None = None
_log_dir: Path = DEFAULT_LOG_DIR
_max_bytes: int = DEFAULT_MAX_BYTES
_backup_count: int = DEFAULT_BACKUP_COUNT
_initialized: bool = False


class ErrorPropagatingHandler(logging.Handler):
    """Handler that propagates ERROR+ messages to the error logger."""

    def __init__(self, integration: str) -> None:
        super().__init__(level=logging.ERROR)
        self.integration = integration

    def emit(self, record: logging.LogRecord) -> None:
        """Forward error records to the error logger with integration context."""
        error_logger = get_error_logger()
        prefixed_record = logging.LogRecord(
            name=record.name,
            level=record.levelno,
            pathname=record.pathname,
            lineno=record.lineno,
            msg=f"[{self.integration}] {record.getMessage()}",
            args=(),  # Already formatted via getMessage()
            exc_info=record.exc_info,
        )
        error_logger.handle(prefixed_record)


def _has_handler(logger: logging.Logger, kind: type[logging.Handler]) -> bool:
    return any(isinstance(h, kind) for h in logger.handlers)


def _file_handler(path: Path) -> RotatingFileHandler:
    handler = RotatingFileHandler(path, maxBytes=_max_bytes, backupCount=_backup_count)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    return handler


def setup_logging(
    log_dir: Path | None = None,
    log_level: str = "INFO",
    max_bytes: int | None = None,
    backup_count: int | None = None,
) -> None:
    """Initialize the logging system.

    Args:
        log_dir: Directory for log files (default: ~/Library/Logs)
        log_level: Minimum log level (default: INFO)
        max_bytes: Max size per log file before rotation (default: 5MB)
        backup_count: Number of backup files to keep (default: 3)
    """
    global _log_dir, _max_bytes, _backup_count, _initialized

    _log_dir = log_dir or DEFAULT_LOG_DIR
    _max_bytes = max_bytes or DEFAULT_MAX_BYTES
    _backup_count = backup_count if backup_count is not None else DEFAULT_BACKUP_COUNT

    _log_dir.mkdir(parents=True, exist_ok=True)

    # Library modules log under "pocket.<module>" and land in pocket.log
    root_logger = logging.getLogger("pocket")
    root_logger.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    if not _has_handler(root_logger, RotatingFileHandler):
        root_logger.addHandler(_file_handler(_log_dir / "pocket.log"))

    _initialized = True


def get_error_logger() -> logging.Logger:
    """Get the shared error logger (ERROR+ level, all integrations).

    Returns:
        Logger that writes to pocket-error.log
    """
    global _error_logger

    if _error_logger is not None:
        return _error_logger

    if not _initialized:
        setup_logging()

    logger = logging.getLogger("pocket.errors")
    logger.setLevel(logging.ERROR)
    # Don't propagate to avoid duplicate messages in pocket.log
    logger.propagate = False

    if not _has_handler(logger, RotatingFileHandler):
        handler = _file_handler(_log_dir / "pocket-error.log")
        handler.setLevel(logging.ERROR)
        logger.addHandler(handler)

    _error_logger = logger
    return logger


def get_integration_logger(integration: str) -> logging.Logger:
    """Get or create a logger for a specific integration.

    Args:
        integration: Name of the integration (e.g., "calendar", "mail")

    Returns:
        Logger that writes to pocket-{integration}.log
    """
    if integration in _loggers:
        return _loggers[integration]

    if not _initialized:
        setup_logging()

    safe_name = "".join(c if c.isalnum() else "-" for c in integration)

    logger = logging.getLogger(f"pocket.integration.{safe_name}")
    logger.setLevel(logging.INFO)
    logger.propagate = False

    if not _has_handler(logger, RotatingFileHandler):
        logger.addHandler(_file_handler(_log_dir / f"pocket-{safe_name}.log"))
    if not _has_handler(logger, ErrorPropagatingHandler):
        logger.addHandler(ErrorPropagatingHandler(integration))

    _loggers[integration] = logger
    return logger


def reset_logging() -> None:
    """Reset logging state (primarily for testing).

    Removes the file and error-forwarding handlers this module attached to
    any ``pocket`` logger; handlers installed by others are left in place.
    """
    global _loggers, _error_logger, _initialized

    names = ["pocket"] + [name for name in logging.root.manager.loggerDict if name.startswith("pocket.")]
    for name in names:
        logger = logging.getLogger(name)
        for handler in logger.handlers[:]:
            if isinstance(handler, (RotatingFileHandler, ErrorPropagatingHandler)):
                handler.close()
                logger.removeHandler(handler)

    _loggers = {}
    _error_logger = None
    _initialized = False
