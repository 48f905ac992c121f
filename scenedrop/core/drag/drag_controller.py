"""Module: drag_controller.py

Date: 2026-10-19

Gesture-level coordinator of node drags.

Ties pointer events to the drop engine:
- begin_drag: lock the surface and scene generation, capture the dragged set
- update_drag: once past the start threshold, compute a fresh preview per move
- end_drag: turn the last preview into patches and apply them as one batch
- cancel_drag: drop the session without touching the document

A document change while a drag is active makes the session stale; every
later preview is invalid and releasing is a no-op.
"""

from __future__ import annotations

from collections.abc import Sequence
from typing import TYPE_CHECKING

from scenedrop.config import DRAG_START_THRESHOLD_PX
from scenedrop.core.drag.drag_debug import DragDebugLogger
from scenedrop.core.drag.drag_session import DragSession
from scenedrop.core.drag.drop_patches import DropCommitPlan
from scenedrop.core.drag.drop_preview_builder import DropPreviewBuilder
from scenedrop.core.patch import PatchApplyError
from scenedrop.core.scene.scene_cache import SceneCache
from scenedrop.models.drop_preview import DropPreview, InvalidReason
from scenedrop.utils.events import Observable, Signal
from scenedrop.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from scenedrop.core.document_store import DocumentStore
    from scenedrop.models.document import SceneDocument
    from scenedrop.models.geometry import Vector2
    from scenedrop.models.ids import ExpandedId
    from scenedrop.models.patch_ops import PatchOp

logger = get_cached_logger(__name__)


class DragDropController(Observable):
    """Drives one drag at a time against a DocumentStore.

    Signals:
        drag_started(session): the cursor crossed the start threshold
        preview_changed(preview): a new preview was computed
        drop_committed(patches, preview): a drop was applied to the store
        drag_cancelled(reason): the drag ended without changing the document
            (an invalid reason, "cancelled" or "patch-rejected")
    """

    drag_started = Signal(object)
    preview_changed = Signal(object)
    drop_committed = Signal(list, object)
    drag_cancelled = Signal(str)

    def __init__(
        self,
        store: DocumentStore,
        scene_cache: SceneCache | None = None,
        builder: DropPreviewBuilder | None = None,
        drag_threshold: float = DRAG_START_THRESHOLD_PX,
    ):
        """Initialize the controller.

        Args:
            store: Document store patches are applied to
            scene_cache: Source of rendered scenes per surface
            builder: Preview builder (stateless)
            drag_threshold: Screen pixels before a press becomes a drag

        """
        self._store = store
        self._scene_cache = scene_cache if scene_cache is not None else SceneCache()
        self._builder = builder if builder is not None else DropPreviewBuilder()
        self._drag_threshold = drag_threshold

        self._session: DragSession | None = None
        self._press_position: Vector2 | None = None
        self._is_dragging = False
        self._is_stale = False

        store.document_changed.connect(self._on_document_changed)
        logger.debug("[DragDropController] Initialized", extra={"dev_only": True})

    # =====================================
    # Properties
    # =====================================

    @property
    def session(self) -> DragSession | None:
        return self._session

    @property
    def is_dragging(self) -> bool:
        """True once the cursor has moved past the start threshold."""
        return self._is_dragging

    @property
    def is_stale(self) -> bool:
        return self._is_stale

    @property
    def current_preview(self) -> DropPreview | None:
        return self._session.drop_preview if self._session else None

    # =====================================
    # Gesture Lifecycle
    # =====================================

    def begin_drag(
        self,
        surface_id: str,
        dragged_expanded_ids: Sequence[ExpandedId],
        cursor_world: Vector2,
    ) -> DragSession:
        """Start tracking a press on ``dragged_expanded_ids``.

        Raises:
            ValueError: If the dragged set cannot be dragged (see DragSession.start).
        """
        if self._session is not None:
            logger.warning("[DragDropController] Drag already active, cancelling it")
            self.cancel_drag()

        state = self._scene_cache.get_state(
            self._store.document, surface_id, self._store.generation
        )
        self._session = DragSession.start(surface_id, dragged_expanded_ids, state)
        self._press_position = cursor_world
        self._is_dragging = False
        self._is_stale = False
        logger.debug(
            "[DragDropController] Drag tracking started on %s for %s",
            surface_id,
            list(dragged_expanded_ids),
            extra={"dev_only": True},
        )
        return self._session

    def update_drag(self, cursor_world: Vector2, zoom: float = 1.0) -> DropPreview | None:
        """Process a pointer move.

        Args:
            cursor_world: Cursor in world coordinates
            zoom: Current canvas zoom

        Returns:
            The new preview, or None while the press is below the drag threshold

        Raises:
            RuntimeError: If no drag was begun.
            ValueError: If zoom is not positive.
        """
        session = self._require_session()
        if zoom <= 0:
            raise ValueError(f"Zoom must be positive, got {zoom}")

        if not self._is_dragging:
            distance = cursor_world.distance_to(self._press_position) * zoom
            if distance <= self._drag_threshold:
                return None
            self._is_dragging = True
            DragDebugLogger.reset_throttle()
            DragDebugLogger.log_once("drag started on %s", session.locked_surface_id)
            logger.debug(
                "[DragDropController] Drag started (moved %.1f px)",
                distance,
                extra={"dev_only": True},
            )
            self.drag_started.emit(session)

        preview = self._compute_preview(session, cursor_world, zoom)
        session.record(preview, cursor_world)
        self.preview_changed.emit(preview)
        return preview

    def end_drag(self) -> list[PatchOp]:
        """Commit the last preview.

        Returns:
            Patches applied to the store; empty when the drop was a no-op or
            the store rejected the batch (the document is then unchanged)
        """
        session = self._session
        was_dragging = self._is_dragging
        was_stale = self._is_stale
        self._reset()

        if session is None:
            logger.debug(
                "[DragDropController] Drag end called but no drag active", extra={"dev_only": True}
            )
            return []
        if not was_dragging:
            return []
        if was_stale:
            logger.info("[DragDropController] Drop ignored: document changed during drag")
            self.drag_cancelled.emit(InvalidReason.STALE_SCENE.value)
            return []

        plan = DropCommitPlan.from_preview(session.drop_preview, session.original_parents)
        patches = plan.to_patches()
        if not patches:
            reason = plan.reason.value if isinstance(plan.reason, InvalidReason) else plan.reason
            self.drag_cancelled.emit(str(reason))
            return []

        try:
            self._store.apply_batch(patches)
        except PatchApplyError as e:
            logger.error("[DragDropController] Drop rejected by the document: %s", e)
            self.drag_cancelled.emit("patch-rejected")
            return []

        logger.info(
            "[DragDropController] %s of %d node(s) into %s at %d",
            "Reparent" if plan.is_reparent else "Reorder",
            len(plan.dragged_doc_ids_ordered),
            plan.target_parent_doc_id,
            plan.insertion_index,
        )
        self.drop_committed.emit(patches, session.drop_preview)
        return patches

    def cancel_drag(self) -> None:
        """Abandon the active drag, if any."""
        if self._session is None:
            return
        self._reset()
        logger.debug("[DragDropController] Drag cancelled", extra={"dev_only": True})
        self.drag_cancelled.emit("cancelled")

    # =====================================
    # Internals
    # =====================================

    def _compute_preview(
        self, session: DragSession, cursor_world: Vector2, zoom: float
    ) -> DropPreview:
        if self._is_stale:
            return self._stale_preview(session)

        state = self._scene_cache.get_state(
            self._store.document, session.locked_surface_id, self._store.generation
        )
        if session.is_stale(state):
            self._is_stale = True
            return self._stale_preview(session)

        return self._builder.compute(
            locked_surface_id=session.locked_surface_id,
            cursor_world=cursor_world,
            dragged_doc_ids=session.dragged_doc_ids,
            dragged_expanded_ids=session.dragged_expanded_ids,
            original_parents=session.original_parents,
            last_insertion_index=session.last_insertion_index,
            last_insertion_cursor=session.last_insertion_cursor,
            zoom=zoom,
            scene_state=state,
            last_target_expanded_id=session.last_target_expanded_id,
            origin_parent_expanded_id=session.origin_parent_expanded_id,
            origin_parent_content_world_rect=session.origin_parent_content_world_rect,
        )

    @staticmethod
    def _stale_preview(session: DragSession) -> DropPreview:
        return DropPreview.none(
            session.locked_surface_id,
            InvalidReason.STALE_SCENE,
            session.dragged_doc_ids,
            session.dragged_expanded_ids,
        )

    def _on_document_changed(self, _document: SceneDocument, generation: int) -> None:
        self._scene_cache.sync(generation)
        if self._session is not None and generation != self._session.scene_generation:
            if not self._is_stale:
                logger.warning(
                    "[DragDropController] Document changed during drag (generation %d)",
                    generation,
                )
            self._is_stale = True

    def _require_session(self) -> DragSession:
        if self._session is None:
            raise RuntimeError("update_drag() called without an active drag")
        return self._session

    def _reset(self) -> None:
        self._session = None
        self._press_position = None
        self._is_dragging = False
        self._is_stale = False
