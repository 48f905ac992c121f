"""Module: indicator.py

Date: 2026-10-19

Insertion indicator geometry and sibling reflow offsets.

The indicator is a thin line perpendicular to the layout axis at the
insertion boundary, confined to the target's content box. A target whose
content box is collapsed cannot show an indicator, and a drop without an
indicator is never valid.

Reflow offsets are preview-only displacements for the animation layer; they
are never written to the document.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import TYPE_CHECKING

from scenedrop.config import INDICATOR_THICKNESS_PX, MIN_INDICATOR_SIZE_PX
from scenedrop.models.geometry import IndicatorAxis, LayoutAxis, Rect, Vector2
from scenedrop.models.ids import ExpandedId

if TYPE_CHECKING:
    from scenedrop.core.drag.scene_lookups import SceneLookups
    from scenedrop.models.rendered_scene import RenderedScene
    from scenedrop.models.scene_node import AutoLayout


@dataclass(frozen=True, slots=True)
class Indicator:
    """Insertion line in surface-world coordinates."""

    rect: Rect
    axis: IndicatorAxis


def content_box(bounds: Rect, layout: AutoLayout) -> Rect | None:
    """``bounds`` inset by the layout padding, None when collapsed."""
    box = bounds.inset(layout.padding)
    if box.is_empty:
        return None
    return box


def indicator_position(
    child_bounds: Sequence[Rect],
    insertion_index: int,
    content: Rect,
    axis: LayoutAxis,
    gap: float,
) -> float:
    """Main-axis coordinate of the insertion boundary (surface-local).

    The position is clamped into the content box, so a last child flush with
    the content end still gets a drawable line.
    """
    if not child_bounds or insertion_index <= 0:
        return axis.main_start(content)
    if insertion_index >= len(child_bounds):
        position = axis.main_end(child_bounds[-1]) + gap / 2
    else:
        previous = child_bounds[insertion_index - 1]
        following = child_bounds[insertion_index]
        position = (axis.main_end(previous) + axis.main_start(following)) / 2
    return max(axis.main_start(content), min(position, axis.main_end(content)))


def _line_rect(position: float, thickness: float, content: Rect, axis: LayoutAxis) -> Rect:
    if axis is LayoutAxis.HORIZONTAL:
        return Rect(position - thickness / 2, content.top, thickness, content.height)
    return Rect(content.left, position - thickness / 2, content.width, thickness)


def compute_indicator(
    child_bounds: Sequence[Rect],
    insertion_index: int,
    target_bounds: Rect,
    layout: AutoLayout,
    zoom: float,
    origin: Vector2,
) -> Indicator | None:
    """Insertion line for ``insertion_index``, or None if it cannot be drawn.

    Args:
        child_bounds: Surface-local bounds of the filtered children, in order
        insertion_index: Index into the filtered children
        target_bounds: Surface-local bounds of the target container
        layout: Auto-layout descriptor of the target
        zoom: Current canvas zoom (line sizes are screen pixels)
        origin: World position of the surface

    Returns:
        Indicator clipped to the content box, or None when the content box is
        collapsed or the line falls outside it
    """
    if zoom <= 0:
        raise ValueError(f"Zoom must be positive, got {zoom}")

    content = content_box(target_bounds, layout)
    if content is None:
        return None

    axis = layout.axis
    position = indicator_position(child_bounds, insertion_index, content, axis, layout.gap)
    line = _line_rect(position, INDICATOR_THICKNESS_PX / zoom, content, axis)
    line = line.intersect(content) or line

    min_size = MIN_INDICATOR_SIZE_PX / zoom
    if axis is LayoutAxis.HORIZONTAL and line.width < min_size:
        line = Rect.from_center(line.center, min_size, line.height)
    elif axis is LayoutAxis.VERTICAL and line.height < min_size:
        line = Rect.from_center(line.center, line.width, min_size)

    clipped = line.intersect(content)
    if clipped is None:
        return None
    return Indicator(rect=clipped.shift(origin), axis=axis.indicator_axis)


def bundle_extent(
    scene: RenderedScene, dragged_expanded_ids: Sequence[ExpandedId], axis: LayoutAxis, gap: float
) -> float:
    """Main-axis space the dragged bundle occupies once dropped.

    The bundle is assumed to stay contiguous: one gap is added per dragged
    node, none for the spacing between non-adjacent originals.
    """
    extent = 0.0
    counted = 0
    for expanded_id in dragged_expanded_ids:
        node = scene.get_node(expanded_id)
        if node is None:
            continue
        extent += axis.main_extent(node.bounds)
        counted += 1
    return extent + gap * counted


def compute_reflow_offsets(
    scene: RenderedScene,
    lookups: SceneLookups,
    children_expanded_ids: Sequence[ExpandedId],
    insertion_index: int,
    dragged_expanded_ids: Sequence[ExpandedId],
    layout: AutoLayout,
) -> dict[ExpandedId, Vector2]:
    """Offset for every filtered child at or after ``insertion_index``."""
    if not children_expanded_ids or not dragged_expanded_ids:
        return {}

    offset = layout.axis.offset(
        bundle_extent(scene, dragged_expanded_ids, layout.axis, layout.gap)
    )
    offsets = {
        expanded_id: offset
        for expanded_id in children_expanded_ids[insertion_index:]
        if expanded_id in scene.nodes
    }
    assert lookups.validate_reflow_keys(offsets, scene), "reflow keys outside the scene"
    return offsets
