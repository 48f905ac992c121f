"""Module: insertion_index.py

Date: 2026-10-19

Insertion index calculation with directional hysteresis.

The target's children are taken from the rendered scene (never from the
document tree) and filtered to drop the dragged nodes and unpatchable
children. The index addresses this filtered list, so it is already in
"dragged nodes removed" coordinates.

Slot boundaries along the main axis, in surface-local coordinates:

    [center(0), gap_mid(0, 1), ..., gap_mid(N-2, N-1)]

The raw index is the number of boundaries the cursor has passed, clamped to
[0, N]. Slot 0 starts over the leading half of the first child, so it can be
reached even when the container has no padding. Hysteresis keeps the previous
index until the cursor is at least ``HYSTERESIS_PX / zoom`` past the boundary
that separates it from the new one.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from scenedrop.config import HYSTERESIS_PX
from scenedrop.models.ids import DocId, ExpandedId

if TYPE_CHECKING:
    from scenedrop.core.drag.scene_lookups import SceneLookups
    from scenedrop.models.geometry import LayoutAxis, Rect
    from scenedrop.models.rendered_scene import RenderedScene


@dataclass(frozen=True, slots=True)
class FilteredChildren:
    """Parallel expanded/document id lists of a target's remaining children."""

    expanded_ids: tuple[ExpandedId, ...] = ()
    doc_ids: tuple[DocId, ...] = ()

    def __len__(self) -> int:
        return len(self.expanded_ids)


def filter_target_children(
    scene: RenderedScene,
    lookups: SceneLookups,
    target_expanded_id: ExpandedId,
    dragged_doc_ids: Iterable[DocId],
    dragged_expanded_ids: Iterable[ExpandedId],
) -> FilteredChildren:
    """Rendered children of the target minus dragged and unpatchable ones.

    A child is dropped when its document id is dragged, when its expanded id
    is dragged, or when it has no patch target.
    """
    dragged_docs = frozenset(dragged_doc_ids)
    dragged_expanded = frozenset(dragged_expanded_ids)

    expanded_ids: list[ExpandedId] = []
    doc_ids: list[DocId] = []
    for child_id in scene.nodes[target_expanded_id].child_ids:
        if child_id in dragged_expanded:
            continue
        doc_id = lookups.get_doc_id(child_id)
        if doc_id is None or doc_id in dragged_docs:
            continue
        expanded_ids.append(child_id)
        doc_ids.append(doc_id)

    return FilteredChildren(tuple(expanded_ids), tuple(doc_ids))


def slot_boundaries(child_bounds: Sequence[Rect], axis: LayoutAxis) -> list[float]:
    """Main-axis slot boundaries for ``child_bounds``; empty without children."""
    if not child_bounds:
        return []
    boundaries = [axis.main_center(child_bounds[0])]
    for previous, current in zip(child_bounds, child_bounds[1:]):
        boundaries.append((axis.main_end(previous) + axis.main_start(current)) / 2)
    return boundaries


def raw_insertion_index(cursor_main: float, boundaries: Sequence[float], child_count: int) -> int:
    """Number of boundaries passed by the cursor, clamped to [0, child_count]."""
    if child_count <= 0:
        return 0
    passed = sum(1 for boundary in boundaries if cursor_main >= boundary)
    return max(0, min(passed, child_count))


def hysteresis_threshold(zoom: float) -> float:
    """Hysteresis distance in surface units at ``zoom``.

    Raises:
        ValueError: If zoom is not positive.
    """
    if zoom <= 0:
        raise ValueError(f"Zoom must be positive, got {zoom}")
    return HYSTERESIS_PX / zoom


def apply_hysteresis(
    raw_index: int,
    cursor_main: float,
    boundaries: Sequence[float],
    child_count: int,
    last_index: int | None,
    zoom: float,
) -> int:
    """Keep ``last_index`` until the cursor is clearly past a boundary.

    Moving to a higher index only counts boundaries the cursor is at least
    the threshold past; moving lower only un-counts boundaries the cursor is
    at least the threshold before. The result never overshoots ``raw_index``.

    Args:
        raw_index: Index without hysteresis
        cursor_main: Cursor main-axis coordinate (surface-local)
        boundaries: Slot boundaries from ``slot_boundaries``
        child_count: Length of the filtered child list
        last_index: Previous index on the same target, None when unknown
        zoom: Current canvas zoom

    Returns:
        The index to use for this pointer move
    """
    threshold = hysteresis_threshold(zoom)
    if last_index is None or child_count <= 0:
        return raw_index

    last_index = max(0, min(last_index, child_count))
    if raw_index == last_index:
        return raw_index

    if raw_index > last_index:
        confirmed = sum(1 for b in boundaries if cursor_main >= b + threshold)
        return max(last_index, min(confirmed, raw_index))

    confirmed = sum(1 for b in boundaries if cursor_main > b - threshold)
    return min(last_index, max(confirmed, raw_index))


def compute_insertion_index(
    cursor_main: float,
    boundaries: Sequence[float],
    child_count: int,
    last_index: int | None,
    zoom: float,
) -> int:
    """Raw index followed by hysteresis against ``last_index``."""
    raw_index = raw_insertion_index(cursor_main, boundaries, child_count)
    return apply_hysteresis(raw_index, cursor_main, boundaries, child_count, last_index, zoom)
