"""Module: drop_preview_builder.py

Date: 2026-10-19

The orchestrating computation of a drag: one DropPreview per pointer move.

The builder is a pure function of its inputs. Every move re-runs the whole
pipeline from scratch:

1. Validate the dragged set (existence, single origin parent)
2. Use the surface locked at drag start
3. Origin stickiness: stay on the origin parent while the cursor is inside
   its content box (plus the hysteresis margin)
4. Otherwise hit-test containers, expanded identity first
5. Climb to the nearest auto-layout ancestor
6. Validate the target (patchable, not circular, same surface)
7. Filter the target's rendered children
8. Insertion index with hysteresis
9. Indicator line; no indicator makes the preview invalid
10. Intent: reorder when the target is the origin parent, else reparent
11. Reflow offsets for valid previews
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from scenedrop.config import (
    EXCLUDE_DRAGGED_SUBTREES,
    ORIGIN_STICKINESS_ENABLED,
    REFLOW_ON_REPARENT,
)
from scenedrop.core.drag.container_hit import (
    ContainerHit,
    collect_subtrees,
    hit_test_container,
)
from scenedrop.core.drag.drag_debug import DragDebugLogger
from scenedrop.core.drag.indicator import compute_indicator, compute_reflow_offsets
from scenedrop.core.drag.insertion_index import (
    compute_insertion_index,
    filter_target_children,
    hysteresis_threshold,
    slot_boundaries,
)
from scenedrop.core.drag.scene_lookups import SceneLookups
from scenedrop.core.drag.target_resolver import (
    is_eligible_container,
    origin_parent_of,
    resolve_eligible_target,
    validate_drag_set,
    validate_target,
)
from scenedrop.models.drop_preview import DropIntent, DropPreview, InvalidReason
from scenedrop.models.ids import DocId, ExpandedId

if TYPE_CHECKING:
    from scenedrop.models.document import SceneDocument
    from scenedrop.models.geometry import Rect, Vector2
    from scenedrop.models.rendered_scene import RenderedScene


@dataclass(frozen=True, eq=False)
class SceneState:
    """Read-only inputs of a preview computation for one surface."""

    document: SceneDocument
    scene: RenderedScene
    lookups: SceneLookups

    def __post_init__(self) -> None:
        assert self.lookups.surface_id == self.scene.surface_id, "lookups of another surface"
        assert self.lookups.generation == self.scene.generation, "lookups of another scene"

    @classmethod
    def from_scene(cls, document: SceneDocument, scene: RenderedScene) -> SceneState:
        return cls(document=document, scene=scene, lookups=SceneLookups.build(scene))

    @property
    def surface_id(self) -> str:
        return self.scene.surface_id

    @property
    def generation(self) -> int:
        return self.scene.generation


class DropPreviewBuilder:
    """Stateless DropPreview factory."""

    def compute(
        self,
        *,
        locked_surface_id: str,
        cursor_world: Vector2,
        dragged_doc_ids: Sequence[DocId],
        dragged_expanded_ids: Sequence[ExpandedId],
        original_parents: Mapping[DocId, DocId | None],
        last_insertion_index: int | None,
        last_insertion_cursor: Vector2 | None,
        zoom: float,
        scene_state: SceneState,
        last_target_expanded_id: ExpandedId | None = None,
        origin_parent_expanded_id: ExpandedId | None = None,
        origin_parent_content_world_rect: Rect | None = None,
    ) -> DropPreview:
        """Compute the preview for one pointer position.

        Args:
            locked_surface_id: Surface captured at drag start
            cursor_world: Cursor in world coordinates
            dragged_doc_ids: Dragged document ids, in drag order
            dragged_expanded_ids: Parallel rendered ids of the dragged nodes
            original_parents: Document parent of every dragged node at drag start
            last_insertion_index: Index of the previous move (hysteresis)
            last_insertion_cursor: Cursor of the previous move (hysteresis)
            zoom: Current canvas zoom
            scene_state: Document, rendered scene and lookups of the surface
            last_target_expanded_id: Target of the previous move; hysteresis
                memory is only reused on the same target
            origin_parent_expanded_id: Rendered origin parent (stickiness)
            origin_parent_content_world_rect: Its content box in world
                coordinates; derived from the scene when omitted

        Returns:
            A valid preview, or an invalid one carrying the failing reason

        Raises:
            ValueError: On an empty or non-parallel dragged set, or zoom <= 0.
        """
        if not dragged_doc_ids or len(dragged_doc_ids) != len(dragged_expanded_ids):
            raise ValueError("Dragged id lists must be non-empty and parallel")
        threshold = hysteresis_threshold(zoom)

        dragged_docs = tuple(dragged_doc_ids)
        dragged_expanded = tuple(dragged_expanded_ids)
        document = scene_state.document
        scene = scene_state.scene
        lookups = scene_state.lookups

        def invalid(
            reason: InvalidReason, target: ContainerHit | None = None
        ) -> DropPreview:
            preview = DropPreview.none(
                locked_surface_id,
                reason,
                dragged_docs,
                dragged_expanded,
                target_parent_doc_id=target.doc_id if target else None,
                target_parent_expanded_id=target.expanded_id if target else None,
            )
            DragDebugLogger.log("invalid preview: %s", reason.value)
            return preview

        reason = validate_drag_set(dragged_docs, original_parents, document)
        if reason is not None:
            return invalid(reason)

        if scene.surface_id != locked_surface_id:
            return invalid(InvalidReason.CROSS_SURFACE)

        cursor_local = scene.to_local(cursor_world)

        target = None
        if ORIGIN_STICKINESS_ENABLED and origin_parent_expanded_id is not None:
            target = self._sticky_origin(
                origin_parent_expanded_id,
                origin_parent_content_world_rect,
                cursor_world,
                threshold,
                scene_state,
                dragged_expanded,
            )
        hovered = target

        if target is None:
            if EXCLUDE_DRAGGED_SUBTREES:
                exclude = collect_subtrees(scene, dragged_expanded) | set(dragged_expanded)
            else:
                exclude = frozenset(dragged_expanded)
            hovered = hit_test_container(scene, lookups, cursor_local, exclude)
            if hovered is None:
                return invalid(InvalidReason.NO_CONTAINER_HIT)
            target = resolve_eligible_target(hovered, document, lookups, dragged_expanded)
            if target is None:
                return invalid(InvalidReason.NO_AUTOLAYOUT_TARGET)

        reason = validate_target(
            target, document, lookups, dragged_docs, dragged_expanded, locked_surface_id
        )
        if reason is not None:
            if reason is InvalidReason.UNPATCHABLE_TARGET:
                return invalid(reason)
            return invalid(reason, target)

        children = filter_target_children(
            scene, lookups, target.expanded_id, dragged_docs, dragged_expanded
        )
        assert all(
            eid in scene.nodes[target.expanded_id].child_ids for eid in children.expanded_ids
        ), "filtered children must come from the rendered child list"

        layout = document.get_node(target.doc_id).auto_layout
        target_bounds = scene.nodes[target.expanded_id].bounds
        child_bounds = [scene.nodes[eid].bounds for eid in children.expanded_ids]
        boundaries = slot_boundaries(child_bounds, layout.axis)

        has_memory = last_insertion_cursor is not None and (
            last_target_expanded_id is None or last_target_expanded_id == target.expanded_id
        )
        insertion_index = compute_insertion_index(
            layout.axis.main(cursor_local),
            boundaries,
            len(children),
            last_insertion_index if has_memory else None,
            zoom,
        )

        indicator = compute_indicator(
            child_bounds, insertion_index, target_bounds, layout, zoom, scene.origin
        )
        if indicator is None:
            return invalid(InvalidReason.INDICATOR_UNAVAILABLE, target)

        origin_parent = origin_parent_of(dragged_docs, original_parents)
        intent = DropIntent.REORDER if target.doc_id == origin_parent else DropIntent.REPARENT

        reflow = {}
        if intent is DropIntent.REORDER or REFLOW_ON_REPARENT:
            reflow = compute_reflow_offsets(
                scene, lookups, children.expanded_ids, insertion_index, dragged_expanded, layout
            )

        preview = DropPreview(
            intent=intent,
            is_valid=True,
            invalid_reason=None,
            surface_id=locked_surface_id,
            dragged_doc_ids_ordered=dragged_docs,
            dragged_expanded_ids_ordered=dragged_expanded,
            target_parent_doc_id=target.doc_id,
            target_parent_expanded_id=target.expanded_id,
            target_children_expanded_ids=children.expanded_ids,
            target_children_doc_ids=children.doc_ids,
            insertion_index=insertion_index,
            indicator_rect=indicator.rect,
            indicator_axis=indicator.axis,
            reflow_offsets_by_expanded_id=reflow,
        )
        DragDebugLogger.log_drop_preview(
            preview,
            hovered_expanded_id=hovered.expanded_id if hovered else None,
            hovered_doc_id=hovered.doc_id if hovered else None,
        )
        return preview

    @staticmethod
    def _sticky_origin(
        origin_expanded_id: ExpandedId,
        content_world_rect: Rect | None,
        cursor_world: Vector2,
        threshold: float,
        scene_state: SceneState,
        dragged_expanded_ids: Sequence[ExpandedId],
    ) -> ContainerHit | None:
        """Origin parent as target while the cursor stays inside its content box."""
        if origin_expanded_id not in scene_state.scene.nodes:
            return None
        if not is_eligible_container(
            origin_expanded_id, scene_state.document, scene_state.lookups, dragged_expanded_ids
        ):
            return None

        doc_id = scene_state.lookups.get_doc_id(origin_expanded_id)
        if content_world_rect is None:
            layout = scene_state.document.get_node(doc_id).auto_layout
            content_world_rect = scene_state.scene.world_bounds_of(origin_expanded_id).inset(
                layout.padding
            )

        if not content_world_rect.inflate(threshold).contains(cursor_world):
            return None
        DragDebugLogger.log("origin stickiness: target stays on %s", origin_expanded_id)
        return ContainerHit(expanded_id=origin_expanded_id, doc_id=doc_id)
