"""Module: init_logging.py

Date: 2026-10-19

Single entry point to initialize logging for an application embedding
scenedrop.

Functions:
    init_logging(app_name): Console handler with DevOnlyFilter plus rotating
        activity/error files under LOG_DIR when LOG_TO_FILE is enabled.
"""

import logging
import os

from scenedrop.config import (
    LOG_CONSOLE_LEVEL,
    LOG_DATE_FORMAT,
    LOG_DIR,
    LOG_FILE_BACKUP_COUNT,
    LOG_FILE_MAX_BYTES,
    LOG_FORMAT,
    LOG_TO_CONSOLE,
    LOG_TO_FILE,
)
from scenedrop.utils.logging.logger_factory import get_cached_logger
from scenedrop.utils.logging.logger_file_helper import add_file_handler
from scenedrop.utils.logging.logger_helper import DevOnlyFilter


def init_logging(
    app_name: str = "scenedrop",
    log_dir: str = LOG_DIR,
    to_file: bool = LOG_TO_FILE,
) -> logging.Logger:
    """Initialize root handlers for the application.

    Safe to call more than once: handlers are only added to a root logger that
    has none yet.

    Args:
        app_name: Base name for log files.
        log_dir: Directory for the rotating log files.
        to_file: Whether to add the activity/error file handlers.

    Returns:
        The logger of this module, ready for use.
    """
    root = logging.getLogger()
    root.setLevel(logging.DEBUG)  # Handlers filter levels

    if not root.handlers:
        if LOG_TO_CONSOLE:
            console = logging.StreamHandler()
            console.setLevel(getattr(logging, LOG_CONSOLE_LEVEL, logging.INFO))
            console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt=LOG_DATE_FORMAT))
            console.addFilter(DevOnlyFilter())
            root.addHandler(console)

        if to_file:
            add_file_handler(
                root,
                os.path.join(log_dir, f"{app_name}_activity.log"),
                level=logging.INFO,
                max_bytes=LOG_FILE_MAX_BYTES,
                backup_count=LOG_FILE_BACKUP_COUNT,
            )
            add_file_handler(
                root,
                os.path.join(log_dir, f"{app_name}_errors.log"),
                level=logging.ERROR,
                max_bytes=LOG_FILE_MAX_BYTES,
                backup_count=LOG_FILE_BACKUP_COUNT,
            )

    logger = get_cached_logger(__name__)
    logger.debug("[Logging] Initialized for %s", app_name, extra={"dev_only": True})
    return logger
