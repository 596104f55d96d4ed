"""
Logging setup for applications embedding mtext_layout.

Library modules only create module loggers; handlers are attached here, by the
command-line entry point or by the host application.
"""

import logging
import os
import sys
from logging.handlers import RotatingFileHandler
from typing import Optional

LOG_LEVELS = ('DEBUG', 'INFO', 'WARNING', 'ERROR', 'CRITICAL')

DEFAULT_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'
DATE_FORMAT = '%Y-%m-%d %H:%M:%S'


def _level_number(level: str) -> int:
    name = (level or "").upper()
    if name not in LOG_LEVELS:
        raise ValueError(f"Invalid log level: {level}")
    return getattr(logging, name)


def configure_logging(level: str = "WARNING", log_file: Optional[str] = None,
                      format_string: Optional[str] = None,
                      max_file_size: int = 10 * 1024 * 1024, backup_count: int = 5) -> logging.Logger:
    """
    Route the ``mtext_layout`` loggers to stderr and optionally to a rotating file.

    Args:
        level: Log level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        log_file: Optional log file path
        format_string: Custom format string
        max_file_size: Maximum log file size in bytes
        backup_count: Number of rotated files to keep

    Returns:
        The package logger
    """
    level_number = _level_number(level)
    formatter = logging.Formatter(format_string or DEFAULT_FORMAT, datefmt=DATE_FORMAT)

    package_logger = logging.getLogger("mtext_layout")
    package_logger.setLevel(level_number)
    for handler in list(package_logger.handlers):
        package_logger.removeHandler(handler)
        handler.close()

    console_handler = logging.StreamHandler(sys.stderr)
    console_handler.setLevel(level_number)
    console_handler.setFormatter(formatter)
    package_logger.addHandler(console_handler)

    if log_file:
        log_dir = os.path.dirname(log_file)
        if log_dir:
            os.makedirs(log_dir, exist_ok=True)
        file_handler = RotatingFileHandler(log_file, maxBytes=max_file_size, backupCount=backup_count)
        file_handler.setLevel(level_number)
        file_handler.setFormatter(formatter)
        package_logger.addHandler(file_handler)

    return package_logger
