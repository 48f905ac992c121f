"""Module: rendered_scene.py

Date: 2026-10-19

Flattened, laid-out view of one surface, keyed by expanded id.

The rendering layer owns layout; this module only stores its result. Child
order of a RenderedNode is authoritative for insertion math, and bounds are
surface-local. ``origin`` places the surface in world space.
"""

from __future__ import annotations

from collections.abc import Iterator, Mapping
from dataclasses import dataclass, field
from types import MappingProxyType

from scenedrop.models.geometry import Rect, Vector2
from scenedrop.models.ids import DocId, ExpandedId
from scenedrop.models.scene_node import NodeType


@dataclass(frozen=True, slots=True)
class RenderedNode:
    """A node after component-instance flattening.

    Attributes:
        expanded_id: Rendered identity (namespaced inside instances)
        node_type: Type of the underlying document node
        child_ids: Ordered rendered children
        bounds: Surface-local bounds
        patch_target: Document id edits aimed at this node apply to, or None
    """

    expanded_id: ExpandedId
    node_type: NodeType
    child_ids: tuple[ExpandedId, ...]
    bounds: Rect
    patch_target: DocId | None

    @property
    def is_container(self) -> bool:
        return self.node_type.is_container

    @property
    def is_patchable(self) -> bool:
        return self.patch_target is not None


@dataclass(frozen=True, eq=False)
class RenderedScene:
    """All rendered nodes of a surface plus their paint order.

    ``paint_order`` lists expanded ids back-to-front. When omitted it is the
    pre-order traversal from ``root_id``, which paints parents before
    children and earlier siblings before later ones.
    """

    surface_id: str
    root_id: ExpandedId
    nodes: Mapping[ExpandedId, RenderedNode]
    paint_order: tuple[ExpandedId, ...] = ()
    origin: Vector2 = field(default_factory=Vector2)
    generation: int = 0

    def __post_init__(self) -> None:
        if self.root_id not in self.nodes:
            raise ValueError(f"Root {self.root_id!r} is not part of the scene")
        object.__setattr__(self, "nodes", MappingProxyType(dict(self.nodes)))
        if not self.paint_order:
            object.__setattr__(self, "paint_order", tuple(self._preorder()))
        else:
            unknown = [eid for eid in self.paint_order if eid not in self.nodes]
            if unknown:
                raise ValueError(f"Paint order references unknown nodes: {unknown}")
            object.__setattr__(self, "paint_order", tuple(self.paint_order))

    def __contains__(self, expanded_id: object) -> bool:
        return expanded_id in self.nodes

    def __len__(self) -> int:
        return len(self.nodes)

    def get_node(self, expanded_id: ExpandedId | None) -> RenderedNode | None:
        if expanded_id is None:
            return None
        return self.nodes.get(expanded_id)

    def world_bounds_of(self, expanded_id: ExpandedId) -> Rect:
        return self.nodes[expanded_id].bounds.shift(self.origin)

    def to_local(self, point_world: Vector2) -> Vector2:
        return point_world - self.origin

    def to_world(self, point_local: Vector2) -> Vector2:
        return point_local + self.origin

    def _preorder(self) -> Iterator[ExpandedId]:
        stack = [self.root_id]
        seen: set[ExpandedId] = set()
        while stack:
            current = stack.pop()
            if current in seen or current not in self.nodes:
                continue
            seen.add(current)
            yield current
            stack.extend(reversed(self.nodes[current].child_ids))
