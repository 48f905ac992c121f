"""Module: drop_feedback.py

Date: 2026-10-19

Qt adapter for drop previews.

Converts the engine's DropPreview into what a Qt canvas paints:
- QRectF of the insertion line for the overlay
- QPointF nudges for sibling reflow animation
- Drag cursor: move for valid drops, forbidden for rejected ones

Cursors are set through QApplication override cursors and always restored
when the drag ends or is cancelled.
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING

from PyQt5.QtCore import QPointF, QRectF, Qt
from PyQt5.QtGui import QCursor
from PyQt5.QtWidgets import QApplication

from scenedrop.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from scenedrop.core.drag.drag_controller import DragDropController
    from scenedrop.models.drop_preview import DropPreview

logger = get_cached_logger(__name__)


class DropZoneState(Enum):
    """States of drop zones"""

    VALID = "valid"
    INVALID = "invalid"
    NEUTRAL = "neutral"


_CURSOR_SHAPES = {
    DropZoneState.VALID: Qt.DragMoveCursor,
    DropZoneState.INVALID: Qt.ForbiddenCursor,
    DropZoneState.NEUTRAL: Qt.ArrowCursor,
}


class DropFeedbackPresenter:
    """Translates previews into Qt geometry and cursor feedback."""

    _instance: DropFeedbackPresenter | None = None

    def __init__(self) -> None:
        self._override_active = False
        self._current_state: DropZoneState | None = None

    @classmethod
    def get_instance(cls) -> DropFeedbackPresenter:
        """Get the shared instance."""
        if cls._instance is None:
            cls._instance = cls()
        return cls._instance

    # =====================================
    # Preview Conversion
    # =====================================

    @staticmethod
    def state_for(preview: DropPreview | None) -> DropZoneState:
        if preview is None:
            return DropZoneState.NEUTRAL
        return DropZoneState.VALID if preview.is_valid else DropZoneState.INVALID

    @staticmethod
    def indicator_rect(preview: DropPreview | None) -> QRectF | None:
        """Insertion line in world coordinates, None when nothing is drawn."""
        if preview is None or not preview.should_show_indicator:
            return None
        rect = preview.indicator_rect
        return QRectF(rect.left, rect.top, rect.width, rect.height)

    @staticmethod
    def reflow_offsets(preview: DropPreview | None) -> dict[str, QPointF]:
        """Sibling offsets keyed by expanded id; empty for invalid previews."""
        if preview is None or not preview.is_valid:
            return {}
        return {
            expanded_id: QPointF(offset.x, offset.y)
            for expanded_id, offset in preview.reflow_offsets_by_expanded_id.items()
        }

    def cursor_shape(self, preview: DropPreview | None) -> Qt.CursorShape:
        return _CURSOR_SHAPES[self.state_for(preview)]

    # =====================================
    # Cursor Management
    # =====================================

    def apply_cursor(self, preview: DropPreview | None) -> None:
        """Show the cursor matching ``preview``; repeated states are ignored."""
        state = self.state_for(preview)
        if state is self._current_state and self._override_active:
            return

        cursor = QCursor(_CURSOR_SHAPES[state])
        if self._override_active:
            QApplication.changeOverrideCursor(cursor)
        else:
            QApplication.setOverrideCursor(cursor)
            self._override_active = True
        self._current_state = state
        logger.debug(
            "[DropFeedbackPresenter] Cursor state: %s", state.value, extra={"dev_only": True}
        )

    def restore_cursor(self, *_args) -> None:
        """Remove every override cursor set during the drag."""
        cursor_count = 0
        while QApplication.overrideCursor() and cursor_count < 10:
            QApplication.restoreOverrideCursor()
            cursor_count += 1

        if cursor_count > 0:
            logger.debug(
                "[DropFeedbackPresenter] Restored %d override cursors",
                cursor_count,
                extra={"dev_only": True},
            )
        self._override_active = False
        self._current_state = None

    def bind(self, controller: DragDropController) -> None:
        """Follow ``controller``: update on previews, restore when the drag ends."""
        controller.preview_changed.connect(self.apply_cursor)
        controller.drop_committed.connect(self.restore_cursor)
        controller.drag_cancelled.connect(self.restore_cursor)

    def unbind(self, controller: DragDropController) -> None:
        controller.preview_changed.disconnect(self.apply_cursor)
        controller.drop_committed.disconnect(self.restore_cursor)
        controller.drag_cancelled.disconnect(self.restore_cursor)
