"""Event utilities package."""

from scenedrop.utils.events.observable import Observable, Signal, SignalInstance

__all__ = ["Observable", "Signal", "SignalInstance"]
