"""Module: drag_session.py

Date: 2026-10-19

Gesture-lifetime state of one node drag.

The session holds only what must survive between pointer moves: the locked
surface and scene generation, the dragged set and its origin, the hysteresis
memory and the latest preview. Everything else is recomputed per move.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from scenedrop.core.drag.target_resolver import origin_parent_of
from scenedrop.models.ids import DocId, ExpandedId, owning_instance
from scenedrop.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from scenedrop.core.drag.drop_preview_builder import SceneState
    from scenedrop.models.drop_preview import DropPreview
    from scenedrop.models.geometry import Rect, Vector2

logger = get_cached_logger(__name__)


@dataclass(slots=True)
class DragSession:
    """Mutable state of an active drag.

    Attributes:
        locked_surface_id: Surface captured at drag start, never re-derived
        dragged_doc_ids: Dragged document ids, in drag order
        dragged_expanded_ids: Parallel rendered ids
        original_parents: Document parent of each dragged node at drag start
        origin_parent_doc_id: Shared origin parent, None when parents differ
        origin_parent_expanded_id: Rendered parent the drag started in
        origin_parent_content_world_rect: Its content box, for stickiness
        scene_generation: Scene version the session is locked to
        last_insertion_index: Hysteresis memory
        last_insertion_cursor: Hysteresis memory
        last_target_expanded_id: Target the memory belongs to
        drop_preview: Latest preview
    """

    locked_surface_id: str
    dragged_doc_ids: tuple[DocId, ...]
    dragged_expanded_ids: tuple[ExpandedId, ...]
    original_parents: dict[DocId, DocId | None] = field(default_factory=dict)
    origin_parent_doc_id: DocId | None = None
    origin_parent_expanded_id: ExpandedId | None = None
    origin_parent_content_world_rect: Rect | None = None
    scene_generation: int = 0
    last_insertion_index: int | None = None
    last_insertion_cursor: Vector2 | None = None
    last_target_expanded_id: ExpandedId | None = None
    drop_preview: DropPreview | None = None

    @classmethod
    def start(
        cls,
        surface_id: str,
        dragged_expanded_ids: Sequence[ExpandedId],
        scene_state: SceneState,
    ) -> DragSession:
        """Create a session for dragging ``dragged_expanded_ids``.

        A node rendered inside a component instance cannot move on its own;
        it is replaced by the outermost instance that owns it, which is the
        document node its edits patch. Ids that collapse onto the same node
        are kept once, in first-seen order.

        The origin parent's expanded id is taken from the rendered parent of
        the dragged nodes, never from the document id, so the correct
        rendering is used when the parent is rendered more than once.

        Raises:
            ValueError: If the set is empty, belongs to another surface, or
                contains unknown or unpatchable nodes.
        """
        if not dragged_expanded_ids:
            raise ValueError("Cannot start a drag without nodes")
        if scene_state.surface_id != surface_id:
            raise ValueError(
                f"Scene of {scene_state.surface_id!r} given for surface {surface_id!r}"
            )

        lookups = scene_state.lookups
        expanded_ids: list[ExpandedId] = []
        doc_ids: list[DocId] = []
        for requested_id in dragged_expanded_ids:
            if requested_id not in scene_state.scene.nodes:
                raise ValueError(f"Node {requested_id!r} is not rendered on {surface_id!r}")
            expanded_id = owning_instance(requested_id) or requested_id
            doc_id = lookups.get_doc_id(expanded_id)
            if doc_id is None:
                raise ValueError(f"Node {requested_id!r} cannot be edited")
            if expanded_id != requested_id:
                logger.debug(
                    "[DragSession] %s is inside instance %s, dragging the instance",
                    requested_id,
                    expanded_id,
                    extra={"dev_only": True},
                )
            if expanded_id in expanded_ids:
                continue
            expanded_ids.append(expanded_id)
            doc_ids.append(doc_id)

        document = scene_state.document
        original_parents = {doc_id: document.parent_of(doc_id) for doc_id in doc_ids}
        origin_doc = origin_parent_of(doc_ids, original_parents)

        expanded_parents = {lookups.get_parent(eid) for eid in expanded_ids}
        origin_expanded = next(iter(expanded_parents)) if len(expanded_parents) == 1 else None

        content_rect = None
        origin_node = None
        if origin_expanded is not None:
            origin_node = document.get_node(lookups.get_doc_id(origin_expanded))
        if origin_node is not None and origin_node.auto_layout is not None:
            content_rect = scene_state.scene.world_bounds_of(origin_expanded).inset(
                origin_node.auto_layout.padding
            )

        session = cls(
            locked_surface_id=surface_id,
            dragged_doc_ids=tuple(doc_ids),
            dragged_expanded_ids=tuple(expanded_ids),
            original_parents=original_parents,
            origin_parent_doc_id=origin_doc,
            origin_parent_expanded_id=origin_expanded,
            origin_parent_content_world_rect=content_rect,
            scene_generation=scene_state.generation,
        )
        logger.debug(
            "[DragSession] Started on %s: %s from %s (generation %d)",
            surface_id,
            list(doc_ids),
            origin_doc,
            scene_state.generation,
            extra={"dev_only": True},
        )
        return session

    @property
    def is_multi_select(self) -> bool:
        return len(self.dragged_doc_ids) > 1

    def is_stale(self, scene_state: SceneState) -> bool:
        """Whether ``scene_state`` is not the scene version the drag locked."""
        return (
            scene_state.generation != self.scene_generation
            or scene_state.surface_id != self.locked_surface_id
        )

    def record(self, preview: DropPreview, cursor_world: Vector2) -> None:
        """Store the latest preview and update the hysteresis memory."""
        self.drop_preview = preview
        if preview.is_valid:
            self.last_insertion_index = preview.insertion_index
            self.last_insertion_cursor = cursor_world
            self.last_target_expanded_id = preview.target_parent_expanded_id
        else:
            self.clear_hysteresis()

    def clear_hysteresis(self) -> None:
        self.last_insertion_index = None
        self.last_insertion_cursor = None
        self.last_target_expanded_id = None
