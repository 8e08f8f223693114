"""
Logging configuration for the landmark database importer.

Provides centralized logging setup so every module reports through the
same handlers and format.
"""

import logging
import sys
from pathlib import Path
from typing import Optional

from .constants import LOG_FORMAT, LOG_DATE_FORMAT, DEFAULT_LOG_LEVEL, DEFAULT_LOGGER_NAME


_loggers: dict[str, logging.Logger] = {}


def _is_package_child(name: str) -> bool:
    return name.startswith(DEFAULT_LOGGER_NAME + '.')


def setup_logger(
    name: str = DEFAULT_LOGGER_NAME,
    level: str = DEFAULT_LOG_LEVEL,
    log_file: Optional[Path] = None,
    console: bool = True
) -> logging.Logger:
    """
    Set up a logger with consistent formatting.

    Calling again for an already configured name replaces its level and
    handlers, so the CLI can raise verbosity after module import time.

    Args:
        name: Logger name
        level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional path to log file
        console: Whether to log to console

    Returns:
        Configured logger instance
    """
    logger = logging.getLogger(name)
    logger.setLevel(getattr(logging, level.upper()))

    # Remove existing handlers to avoid duplicates
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    formatter = logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT)

    # Console handler
    if console:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setFormatter(formatter)
        logger.addHandler(console_handler)

    # File handler
    if log_file:
        log_file = Path(log_file)
        log_file.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.FileHandler(log_file, encoding='utf-8')
        file_handler.setFormatter(formatter)
        logger.addHandler(file_handler)

    # Prevent propagation to root logger
    logger.propagate = False

    _loggers[name] = logger
    return logger


def get_logger(name: str = DEFAULT_LOGGER_NAME) -> logging.Logger:
    """
    Get an existing logger or create a new one with default settings.

    Module loggers below the package namespace (``landmark_db.pipeline``)
    carry no handlers of their own and inherit level and handlers from the
    package logger.

    Args:
        name: Logger name

    Returns:
        Logger instance
    """
    if name in _loggers:
        return _loggers[name]

    if _is_package_child(name):
        get_logger(DEFAULT_LOGGER_NAME)
        logger = logging.getLogger(name)
        logger.setLevel(logging.NOTSET)
        logger.propagate = True
        _loggers[name] = logger
        return logger

    return setup_logger(name)

