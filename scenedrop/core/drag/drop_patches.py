"""Module: drop_patches.py

Date: 2026-10-19

Turns a committed drop into document patch operations.

A drop is never a sequence of per-node moves: removing one dragged node
shifts the index another should land at. Instead every dragged node is first
detached from the origin parent, then all of them are attached, in drag
order, at consecutive indices of the target. The insertion index already
counts the target's children without the dragged nodes, so no adjustment is
needed between the two phases.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass

from scenedrop.core.drag.target_resolver import origin_parent_of
from scenedrop.models.drop_preview import DropPreview, InvalidReason
from scenedrop.models.ids import DocId
from scenedrop.models.patch_ops import AttachChild, DetachChild, PatchOp
from scenedrop.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


def generate_drop_patches(
    dragged_doc_ids_ordered: Sequence[DocId],
    origin_parent_doc_id: DocId,
    target_parent_doc_id: DocId,
    insertion_index: int,
    current_filtered_child_doc_ids: Sequence[DocId],
) -> list[PatchOp]:
    """Two-phase detach/attach patch list for a drop.

    Args:
        dragged_doc_ids_ordered: Nodes to move, in the order they should land
        origin_parent_doc_id: Parent all dragged nodes are detached from
        target_parent_doc_id: Parent they are attached to
        insertion_index: Index into the target's children without the dragged nodes
        current_filtered_child_doc_ids: The target's children without the dragged nodes

    Returns:
        All DetachChild operations followed by all AttachChild operations

    Raises:
        ValueError: If insertion_index is outside [0, len(filtered children)].
    """
    if not 0 <= insertion_index <= len(current_filtered_child_doc_ids):
        raise ValueError(
            f"Insertion index {insertion_index} outside "
            f"[0, {len(current_filtered_child_doc_ids)}]"
        )

    patches: list[PatchOp] = [
        DetachChild(parent_id=origin_parent_doc_id, child_id=doc_id)
        for doc_id in dragged_doc_ids_ordered
    ]
    patches.extend(
        AttachChild(parent_id=target_parent_doc_id, child_id=doc_id, index=insertion_index + i)
        for i, doc_id in enumerate(dragged_doc_ids_ordered)
    )
    return patches


@dataclass(frozen=True, slots=True)
class DropCommitPlan:
    """What pointer-up would do, extracted once from the last preview.

    Attributes:
        can_commit: False for invalid previews; such plans produce no patches
        reason: Why the drop cannot be committed
        origin_parent_doc_id: Parent the nodes come from
        target_parent_doc_id: Parent the nodes go to
        insertion_index: Index in filtered-children coordinates
        dragged_doc_ids_ordered: Nodes to move, in landing order
        target_children_doc_ids: Target's children without the dragged nodes
        is_reparent: Whether origin and target differ
    """

    can_commit: bool
    reason: InvalidReason | str | None = None
    origin_parent_doc_id: DocId | None = None
    target_parent_doc_id: DocId | None = None
    insertion_index: int = 0
    dragged_doc_ids_ordered: tuple[DocId, ...] = ()
    target_children_doc_ids: tuple[DocId, ...] = ()
    is_reparent: bool = False

    @classmethod
    def none(cls, reason: InvalidReason | str | None = None) -> DropCommitPlan:
        return cls(can_commit=False, reason=reason)

    @classmethod
    def from_preview(
        cls, preview: DropPreview | None, original_parents: Mapping[DocId, DocId | None]
    ) -> DropCommitPlan:
        """Plan for committing ``preview``.

        Args:
            preview: Last preview of the drag, if any
            original_parents: Parent of every dragged node at drag start
        """
        if preview is None:
            return cls.none("no preview")
        if (
            not preview.is_valid
            or preview.target_parent_doc_id is None
            or preview.insertion_index is None
        ):
            return cls(
                can_commit=False,
                reason=preview.invalid_reason or "invalid drop preview",
                dragged_doc_ids_ordered=preview.dragged_doc_ids_ordered,
            )

        origin = origin_parent_of(preview.dragged_doc_ids_ordered, original_parents)
        if origin is None:
            return cls(
                can_commit=False,
                reason=InvalidReason.MIXED_ORIGIN_MULTISELECT,
                target_parent_doc_id=preview.target_parent_doc_id,
                insertion_index=preview.insertion_index,
                dragged_doc_ids_ordered=preview.dragged_doc_ids_ordered,
            )

        return cls(
            can_commit=True,
            origin_parent_doc_id=origin,
            target_parent_doc_id=preview.target_parent_doc_id,
            insertion_index=preview.insertion_index,
            dragged_doc_ids_ordered=preview.dragged_doc_ids_ordered,
            target_children_doc_ids=preview.target_children_doc_ids,
            is_reparent=origin != preview.target_parent_doc_id,
        )

    def to_patches(self) -> list[PatchOp]:
        """Patch list for this plan; empty when it cannot be committed."""
        if not self.can_commit:
            logger.debug(
                "[DropCommitPlan] Nothing to commit: %s", self.reason, extra={"dev_only": True}
            )
            return []
        return generate_drop_patches(
            self.dragged_doc_ids_ordered,
            self.origin_parent_doc_id,
            self.target_parent_doc_id,
            self.insertion_index,
            self.target_children_doc_ids,
        )
