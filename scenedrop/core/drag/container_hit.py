"""Module: container_hit.py

Date: 2026-10-19

Hit-testing of containers in a rendered scene.

Resolution is expanded-identity first: the hit is the rendered node under the
cursor and its document id is read from that node. One document id may be
rendered by several instances, so resolving a document id first and picking
one of its renderings afterwards would be ambiguous.
"""

from __future__ import annotations

from collections.abc import Iterable
from dataclasses import dataclass
from typing import TYPE_CHECKING

from scenedrop.models.ids import DocId, ExpandedId

if TYPE_CHECKING:
    from scenedrop.core.drag.scene_lookups import SceneLookups
    from scenedrop.models.geometry import Vector2
    from scenedrop.models.rendered_scene import RenderedScene


@dataclass(frozen=True, slots=True)
class ContainerHit:
    """A rendered container and its patch target."""

    expanded_id: ExpandedId
    doc_id: DocId


def hit_test_container(
    scene: RenderedScene,
    lookups: SceneLookups,
    cursor_local: Vector2,
    exclude: Iterable[ExpandedId] = (),
) -> ContainerHit | None:
    """Topmost patchable container whose bounds contain the cursor.

    Args:
        scene: Rendered scene of the locked surface
        lookups: Lookup tables of the same scene
        cursor_local: Cursor in surface-local coordinates
        exclude: Expanded ids that can never be hit (dragged nodes)

    Returns:
        The first match walking the paint order front-to-back, or None
    """
    excluded = exclude if isinstance(exclude, (set, frozenset)) else set(exclude)

    for expanded_id in reversed(scene.paint_order):
        if expanded_id in excluded:
            continue
        node = scene.nodes[expanded_id]
        if not node.is_container:
            continue
        doc_id = lookups.get_doc_id(expanded_id)
        if doc_id is None:
            continue
        if node.bounds.contains(cursor_local):
            return ContainerHit(expanded_id=expanded_id, doc_id=doc_id)
    return None


def collect_subtrees(scene: RenderedScene, roots: Iterable[ExpandedId]) -> frozenset[ExpandedId]:
    """``roots`` plus every rendered descendant of them."""
    collected: set[ExpandedId] = set()
    stack = [eid for eid in roots if eid in scene.nodes]
    while stack:
        current = stack.pop()
        if current in collected:
            continue
        collected.add(current)
        stack.extend(scene.nodes[current].child_ids)
    return frozenset(collected)
