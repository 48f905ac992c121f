"""Module: logger_helper.py

Date: 2026-10-19

Utility functions for working with loggers in a safe and consistent way.

Functions:
    get_logger(name): Returns a logger that propagates to the root handlers
        and whose logging methods never raise UnicodeEncodeError.
    safe_text(text): Replaces problematic Unicode characters with ASCII.
    safe_log(logger_func, message): Logs a message, falling back to ASCII.

DevOnlyFilter:
    Hides records tagged ``extra={"dev_only": True}`` from the console while
    still letting file handlers store them.
"""

import logging
import re
from functools import partial

from scenedrop.config import SHOW_DEV_ONLY_IN_CONSOLE

_REPLACEMENTS = {
    "\u2192": "->",  # right arrow
    "\u2014": "--",  # em dash
    "\u2013": "-",  # en dash
    "\u2026": "...",  # ellipsis
}
_REPLACEMENT_PATTERN = re.compile("|".join(map(re.escape, _REPLACEMENTS.keys())))


def safe_text(text: str) -> str:
    """Replace unsupported Unicode characters with ASCII-safe alternatives.

    Args:
        text: The original text containing Unicode symbols.

    Returns:
        The text with replacements for problematic characters.
    """
    return _REPLACEMENT_PATTERN.sub(lambda m: _REPLACEMENTS[m.group(0)], text)


def safe_log(logger_func, message: str, *args, **kwargs) -> None:
    """Log through ``logger_func``, retrying with ASCII-safe text on encode errors.

    Args:
        logger_func: A logger method like ``logger.info``.
        message: The message (format string) to log.
    """
    try:
        if not isinstance(message, str):
            message = repr(message)
        logger_func(message, *args, **kwargs)
    except UnicodeEncodeError:
        logger_func(safe_text(str(message)), *args, **kwargs)


def patch_logger_safe_methods(logger: logging.Logger) -> None:
    """Replace the logger's level methods with safe_log-wrapped versions."""
    for method_name in ("debug", "info", "warning", "error", "critical"):
        orig_func = getattr(logger, method_name)
        setattr(logger, method_name, partial(safe_log, orig_func))


def get_logger(name: str | None = None) -> logging.Logger:
    """Return a logger that delegates output to the root logger.

    Args:
        name: Logger name, typically ``__name__`` of the calling module.

    Returns:
        Configured and patched logger instance.
    """
    logger = logging.getLogger(name or __name__)
    logger.setLevel(logging.DEBUG)

    # Root logger owns all handlers (console + files)
    logger.propagate = True
    if logger.hasHandlers():
        logger.handlers.clear()

    if not getattr(logger, "_patched_for_safe_log", False):
        patch_logger_safe_methods(logger)
        logger._patched_for_safe_log = True

    return logger


class DevOnlyFilter(logging.Filter):
    """Drop ``dev_only`` records unless SHOW_DEV_ONLY_IN_CONSOLE is enabled."""

    def filter(self, record: logging.LogRecord) -> bool:
        if SHOW_DEV_ONLY_IN_CONSOLE:
            return True
        return not getattr(record, "dev_only", False)
