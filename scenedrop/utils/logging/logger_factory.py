"""Module: logger_factory.py

Date: 2026-10-19

Logger factory with caching.

Keeps one logger instance per module name behind a lock, so modules can call
``get_cached_logger(__name__)`` at import time without re-patching handlers.
"""

import logging
import threading

from scenedrop.utils.logging.logger_helper import get_logger


class LoggerFactory:
    """Thread-safe logger factory with caching."""

    _loggers: dict[str, logging.Logger] = {}
    _lock = threading.Lock()
    _global_level: int | None = None

    @classmethod
    def get_logger(cls, name: str | None = None) -> logging.Logger:
        """Get or create a cached logger for the given name.

        Args:
            name: Logger name, typically ``__name__`` from the calling module.

        Returns:
            Cached logger instance.
        """
        if name is None:
            import inspect

            frame = inspect.currentframe().f_back
            name = frame.f_globals.get("__name__", "unknown")

        with cls._lock:
            if name not in cls._loggers:
                logger = get_logger(name)
                if cls._global_level is not None:
                    logger.setLevel(cls._global_level)
                cls._loggers[name] = logger

            return cls._loggers[name]

    @classmethod
    def set_global_level(cls, level: int) -> None:
        """Set logging level for all cached loggers and future ones."""
        with cls._lock:
            cls._global_level = level
            for logger in cls._loggers.values():
                logger.setLevel(level)

    @classmethod
    def get_logger_count(cls) -> int:
        """Number of cached loggers."""
        return len(cls._loggers)

    @classmethod
    def get_cached_names(cls) -> list[str]:
        """Names of all cached loggers."""
        with cls._lock:
            return list(cls._loggers.keys())

    @classmethod
    def clear_cache(cls) -> None:
        """Forget all cached loggers (the loggers themselves stay registered)."""
        with cls._lock:
            cls._loggers.clear()
            cls._global_level = None


def get_cached_logger(name: str | None = None) -> logging.Logger:
    """Convenience wrapper around LoggerFactory.get_logger."""
    return LoggerFactory.get_logger(name)
