"""Logging setup for workflow-overlay.

Modules log through ``logging.getLogger(__name__)``; the host application
calls ``setup_from_settings`` (or ``setup_logger``) once to attach console
and rotating file handlers to the package logger.
"""

import logging
import logging.handlers
import os
from typing import Optional

PACKAGE_LOGGER = "workflow_overlay"

LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

DEFAULT_FORMAT = "%(asctime)s [%(levelname)s] [%(name)s] %(message)s"
ISO_8601_DATE_FORMAT = "%Y-%m-%dT%H:%M:%S"


def _resolve_level(level: str) -> int:
    level_upper = level.upper()
    if level_upper not in LOG_LEVELS:
        raise ValueError(
            f"Invalid log level: {level}. Must be one of: {', '.join(LOG_LEVELS)}"
        )
    return getattr(logging, level_upper)


def setup_logger(
    name: str = PACKAGE_LOGGER,
    log_dir: str = "/var/log/workflow-overlay",
    level: str = "INFO",
    log_format: Optional[str] = None,
    file_logging: bool = False,
    console_logging: bool = True,
    max_bytes: int = 10485760,  # 10MB
    backup_count: int = 5,
) -> logging.Logger:
    """Attach console and/or rotating file handlers to a logger.

    Handlers are only attached once per logger; later calls just update
    the level.

    Args:
        name: Logger name
        log_dir: Directory for ``<name>.log`` when file logging is on
        level: Logging level name (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_format: Custom log format string
        file_logging: Enable rotating file logging
        console_logging: Enable console logging
        max_bytes: Maximum log file size before rotation
        backup_count: Number of rotated files to keep

    Returns:
        Configured logger instance

    Raises:
        ValueError: If the level name is unknown
    """
    logger = logging.getLogger(name)
    logger.setLevel(_resolve_level(level))

    if logger.handlers:
        return logger

    formatter = logging.Formatter(log_format or DEFAULT_FORMAT, datefmt=ISO_8601_DATE_FORMAT)

    if file_logging:
        os.makedirs(log_dir, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            os.path.join(log_dir, f"{name}.log"),
            maxBytes=max_bytes,
            backupCount=backup_count,
        )
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    if console_logging:
        console_handler = logging.StreamHandler()
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    return logger


def setup_from_settings(settings) -> logging.Logger:
    """Configure the package logger from a ``Settings`` instance."""
    return setup_logger(
        PACKAGE_LOGGER,
        log_dir=settings.log_dir,
        level=settings.log_level,
        file_logging=settings.file_logging,
    )


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)
