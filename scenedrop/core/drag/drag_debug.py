"""Module: drag_debug.py

Date: 2026-10-19

Throttled diagnostics for the drag-and-drop engine.

Per-move messages are routed through the module logger as ``dev_only``
debug records and are rate limited to one every DEBUG_LOG_THROTTLE_MS, so
a fast drag does not flood the log. Nothing is formatted while the debug
flag is off.
"""

from __future__ import annotations

import time
from typing import TYPE_CHECKING

from scenedrop.config import DEBUG_LOG_THROTTLE_MS, DRAG_DROP_DEBUG
from scenedrop.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from scenedrop.models.drop_preview import DropPreview

logger = get_cached_logger(__name__)


class DragDebugLogger:
    """Class-level throttled logger; never instantiated."""

    enabled: bool = DRAG_DROP_DEBUG
    throttle_ms: int = DEBUG_LOG_THROTTLE_MS
    _last_log_time: float | None = None

    @classmethod
    def _should_log(cls) -> bool:
        if not cls.enabled:
            return False
        now = time.monotonic()
        if cls._last_log_time is not None and (now - cls._last_log_time) * 1000 < cls.throttle_ms:
            return False
        cls._last_log_time = now
        return True

    @classmethod
    def log(cls, message: str, *args) -> bool:
        """Throttled debug message. Returns whether it was emitted."""
        if not cls._should_log():
            return False
        logger.debug("[DragDrop] " + message, *args, extra={"dev_only": True})
        return True

    @classmethod
    def log_once(cls, message: str, *args) -> None:
        """Unthrottled message for one-off events (drag start/end)."""
        if cls.enabled:
            logger.debug("[DragDrop] " + message, *args, extra={"dev_only": True})

    @classmethod
    def log_drop_preview(
        cls,
        preview: DropPreview,
        hovered_expanded_id: str | None = None,
        hovered_doc_id: str | None = None,
    ) -> bool:
        """Consolidated dump of one preview and the container it came from."""
        if not cls._should_log():
            return False
        logger.debug(
            "[DragDrop] preview surface=%s hovered=%s/%s target=%s/%s children=%d "
            "index=%s intent=%s reason=%s indicator=%s reflow=%d",
            preview.surface_id,
            hovered_expanded_id,
            hovered_doc_id,
            preview.target_parent_expanded_id,
            preview.target_parent_doc_id,
            len(preview.target_children_expanded_ids),
            preview.insertion_index,
            preview.intent.value,
            preview.invalid_reason.value if preview.invalid_reason else None,
            preview.indicator_rect.to_tuple() if preview.indicator_rect else None,
            len(preview.reflow_offsets_by_expanded_id),
            extra={"dev_only": True},
        )
        return True

    @classmethod
    def reset_throttle(cls) -> None:
        """Let the next message through immediately (call at drag start)."""
        cls._last_log_time = None
