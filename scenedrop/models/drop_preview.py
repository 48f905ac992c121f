"""Module: drop_preview.py

Date: 2026-10-19

DropPreview: the single authoritative result of one pointer-move.

A preview is produced from scratch on every move and replaced wholesale. The
overlay reads the indicator fields, the animation layer reads the reflow
offsets, and the commit path reads the target and insertion index; none of
them may derive those values independently.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from dataclasses import dataclass, field
from enum import Enum
from types import MappingProxyType
from typing import Any

from scenedrop.models.geometry import IndicatorAxis, Rect, Vector2
from scenedrop.models.ids import DocId, ExpandedId

__all__ = ["DropIntent", "DropPreview", "IndicatorAxis", "InvalidReason"]


class DropIntent(Enum):
    """What a drop would do."""

    NONE = "none"
    REORDER = "reorder"
    REPARENT = "reparent"


class InvalidReason(str, Enum):
    """Machine-readable reason attached to invalid previews."""

    NO_CONTAINER_HIT = "no-container-hit"
    NO_AUTOLAYOUT_TARGET = "no_autolayout_target"
    MIXED_ORIGIN_MULTISELECT = "mixed-origin-multiselect"
    CIRCULAR_TARGET = "circular-target"
    UNPATCHABLE_TARGET = "unpatchable-target"
    CROSS_SURFACE = "cross-surface"
    INDICATOR_UNAVAILABLE = "indicator-unavailable"
    DRAGGED_NODE_MISSING = "dragged-node-missing"
    STALE_SCENE = "stale-scene"


_EMPTY_OFFSETS: Mapping[ExpandedId, Vector2] = MappingProxyType({})


@dataclass(frozen=True)
class DropPreview:
    """Immutable snapshot of the current drop intent.

    Attributes:
        intent: NONE for invalid previews, otherwise REORDER or REPARENT
        is_valid: Whether releasing now would change the document
        invalid_reason: Why the preview is invalid (None when valid)
        surface_id: Surface locked by the drag session
        dragged_doc_ids_ordered: Dragged document ids, in drag order
        dragged_expanded_ids_ordered: Parallel rendered ids of the dragged nodes
        target_parent_doc_id: Document id that receives the dragged nodes
        target_parent_expanded_id: Rendered container the cursor resolved to
        target_children_expanded_ids: Filtered, ordered target children
        target_children_doc_ids: Parallel document ids of those children
        insertion_index: Index into the filtered child list
        indicator_rect: Clipped insertion line in surface-world coordinates
        indicator_axis: Orientation of the insertion line
        reflow_offsets_by_expanded_id: Preview-only sibling displacement
    """

    intent: DropIntent
    is_valid: bool
    invalid_reason: InvalidReason | None
    surface_id: str
    dragged_doc_ids_ordered: tuple[DocId, ...] = ()
    dragged_expanded_ids_ordered: tuple[ExpandedId, ...] = ()
    target_parent_doc_id: DocId | None = None
    target_parent_expanded_id: ExpandedId | None = None
    target_children_expanded_ids: tuple[ExpandedId, ...] = ()
    target_children_doc_ids: tuple[DocId, ...] = ()
    insertion_index: int | None = None
    indicator_rect: Rect | None = None
    indicator_axis: IndicatorAxis | None = None
    reflow_offsets_by_expanded_id: Mapping[ExpandedId, Vector2] = field(
        default_factory=lambda: _EMPTY_OFFSETS
    )

    def __post_init__(self) -> None:
        for name in (
            "dragged_doc_ids_ordered",
            "dragged_expanded_ids_ordered",
            "target_children_expanded_ids",
            "target_children_doc_ids",
        ):
            value = getattr(self, name)
            if not isinstance(value, tuple):
                object.__setattr__(self, name, tuple(value))
        if not isinstance(self.reflow_offsets_by_expanded_id, MappingProxyType):
            object.__setattr__(
                self,
                "reflow_offsets_by_expanded_id",
                MappingProxyType(dict(self.reflow_offsets_by_expanded_id)),
            )

        if self.is_valid:
            assert (
                self.target_parent_doc_id is not None
                and self.target_parent_expanded_id is not None
            ), "valid preview without a target parent"
            assert self.invalid_reason is None, "valid preview carries a reason"
            assert self.intent is not DropIntent.NONE, "valid preview without intent"
            assert self.insertion_index is not None, "valid preview without index"
            assert self.indicator_rect is not None, "valid preview without indicator"
        else:
            assert self.invalid_reason is not None, "invalid preview without reason"
            assert self.intent is DropIntent.NONE, "invalid preview with an intent"
            assert not self.reflow_offsets_by_expanded_id, "invalid preview with reflow"
        assert len(self.target_children_expanded_ids) == len(
            self.target_children_doc_ids
        ), "target child lists are not parallel"

    @classmethod
    def none(
        cls,
        surface_id: str,
        reason: InvalidReason,
        dragged_doc_ids: Sequence[DocId] = (),
        dragged_expanded_ids: Sequence[ExpandedId] = (),
        target_parent_doc_id: DocId | None = None,
        target_parent_expanded_id: ExpandedId | None = None,
    ) -> DropPreview:
        """Invalid preview: no indicator, no reflow, release is a no-op."""
        return cls(
            intent=DropIntent.NONE,
            is_valid=False,
            invalid_reason=reason,
            surface_id=surface_id,
            dragged_doc_ids_ordered=tuple(dragged_doc_ids),
            dragged_expanded_ids_ordered=tuple(dragged_expanded_ids),
            target_parent_doc_id=target_parent_doc_id,
            target_parent_expanded_id=target_parent_expanded_id,
        )

    @property
    def should_show_indicator(self) -> bool:
        return self.is_valid and self.indicator_rect is not None

    @property
    def is_reorder(self) -> bool:
        return self.intent is DropIntent.REORDER

    @property
    def is_reparent(self) -> bool:
        return self.intent is DropIntent.REPARENT

    def to_debug_dict(self) -> dict[str, Any]:
        """Flat, log-friendly summary."""
        return {
            "intent": self.intent.value,
            "valid": self.is_valid,
            "reason": self.invalid_reason.value if self.invalid_reason else None,
            "surface": self.surface_id,
            "dragged": list(self.dragged_doc_ids_ordered),
            "target": self.target_parent_expanded_id,
            "target_doc": self.target_parent_doc_id,
            "children": list(self.target_children_expanded_ids),
            "index": self.insertion_index,
            "indicator": self.indicator_rect.to_tuple() if self.indicator_rect else None,
            "reflow": {k: v.to_tuple() for k, v in self.reflow_offsets_by_expanded_id.items()},
        }
