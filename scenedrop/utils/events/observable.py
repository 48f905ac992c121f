"""Module: observable.py

Date: 2026-10-19

Pure Python observer pattern for the core layer.

Gives the drop controller and the document store Qt signal-like events
without pulling QObject into non-UI code:
- Signal descriptor declared on the class
- Per-instance SignalInstance with connect/disconnect/emit
- Callback list guarded by a lock; callbacks run outside the lock
"""

from __future__ import annotations

import threading
from collections.abc import Callable
from typing import Any

from scenedrop.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

__all__ = ["Observable", "Signal", "SignalInstance"]


class Signal:
    """Descriptor for defining observable signals.

    Usage:
        class Store(Observable):
            document_changed = Signal(int)

        store.document_changed.connect(on_changed)
        store.document_changed.emit(3)
    """

    def __init__(self, *arg_types: type):
        self.arg_types = arg_types
        self.name = ""

    def __set_name__(self, owner: type, name: str) -> None:
        self.name = name

    def __get__(self, obj: Any, _objtype: type | None = None) -> SignalInstance:
        if obj is None:
            return self  # type: ignore[return-value]

        attr_name = f"_signal_{self.name}"
        instance = obj.__dict__.get(attr_name)
        if instance is None:
            instance = SignalInstance(self.name, self.arg_types)
            obj.__dict__[attr_name] = instance
        return instance


class SignalInstance:
    """Bound signal of one object."""

    def __init__(self, name: str, arg_types: tuple[type, ...]):
        self.name = name
        self.arg_types = arg_types
        self._callbacks: list[Callable[..., Any]] = []
        self._lock = threading.Lock()

    def connect(self, callback: Callable[..., Any]) -> None:
        """Connect a callback; connecting the same callback twice is a no-op."""
        with self._lock:
            if callback not in self._callbacks:
                self._callbacks.append(callback)
        logger.debug(
            "Signal connected: %s -> %s",
            self.name,
            getattr(callback, "__name__", repr(callback)),
            extra={"dev_only": True},
        )

    def disconnect(self, callback: Callable[..., Any] | None = None) -> None:
        """Disconnect one callback, or every callback when None is given."""
        with self._lock:
            if callback is None:
                self._callbacks.clear()
            elif callback in self._callbacks:
                self._callbacks.remove(callback)

    def emit(self, *args: Any) -> None:
        """Call every connected callback with ``args``.

        A failing callback is logged and does not stop the others.
        """
        with self._lock:
            callbacks = self._callbacks.copy()

        for callback in callbacks:
            try:
                callback(*args)
            except Exception:
                logger.exception(
                    "Error in signal callback: %s -> %s",
                    self.name,
                    getattr(callback, "__name__", repr(callback)),
                )

    @property
    def receiver_count(self) -> int:
        """Number of connected callbacks."""
        with self._lock:
            return len(self._callbacks)


class Observable:
    """Base class for objects exposing Signal attributes."""
