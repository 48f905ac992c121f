"""Module: logger_file_helper.py

Date: 2026-10-19

Attach rotating file handlers to a logger, optionally filtered by logger name.
"""

import logging
import os
from logging.handlers import RotatingFileHandler

from scenedrop.config import LOG_DATE_FORMAT, LOG_FORMAT


def add_file_handler(
    logger: logging.Logger,
    log_path: str,
    level: int = logging.INFO,
    max_bytes: int = 1_000_000,
    backup_count: int = 3,
    filter_by_name: str | None = None,
) -> RotatingFileHandler:
    """Attach a rotating file handler to a logger.

    Args:
        logger: The logger to attach the handler to.
        log_path: Path to the log file.
        level: Logging level for this handler.
        max_bytes: Maximum file size before rotating.
        backup_count: Number of backup files to keep.
        filter_by_name: Only log records from loggers whose name starts with this.

    Returns:
        The handler that was added.
    """
    directory = os.path.dirname(log_path)
    if directory:
        os.makedirs(directory, exist_ok=True)

    file_handler = RotatingFileHandler(
        log_path, maxBytes=max_bytes, backupCount=backup_count, encoding="utf-8"
    )
    file_handler.setLevel(level)
    file_handler.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))

    if filter_by_name:
        file_handler.addFilter(logging.Filter(filter_by_name))

    logger.addHandler(file_handler)
    return file_handler
