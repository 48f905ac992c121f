"""Module: scene_node.py

Date: 2026-10-19

Document tree node and its layout metadata.

A SceneNode is identified by its document id and lists its children by
document id. The presence of an ``auto_layout`` descriptor is what makes a
container eligible for ordered insertion; containers without one position
their children freely and are never drop targets.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any

from scenedrop.models.geometry import LayoutAxis
from scenedrop.models.ids import DocId, validate_doc_id


class NodeType(Enum):
    """Kind of a scene node."""

    CONTAINER = "container"
    TEXT = "text"
    IMAGE = "image"
    ICON = "icon"
    SPACER = "spacer"
    INSTANCE = "instance"

    @property
    def is_container(self) -> bool:
        """Containers and component instances can hold children."""
        return self in (NodeType.CONTAINER, NodeType.INSTANCE)


class Alignment(Enum):
    """Alignment of children along either layout axis."""

    START = "start"
    CENTER = "center"
    END = "end"
    SPACE_BETWEEN = "space_between"
    STRETCH = "stretch"


@dataclass(frozen=True, slots=True)
class EdgePadding:
    """Inner padding of a container, in surface units."""

    left: float = 0.0
    top: float = 0.0
    right: float = 0.0
    bottom: float = 0.0

    @classmethod
    def uniform(cls, value: float) -> EdgePadding:
        return cls(value, value, value, value)

    @classmethod
    def from_dict(cls, data: dict[str, Any] | float | None) -> EdgePadding:
        if data is None:
            return cls()
        if isinstance(data, (int, float)):
            return cls.uniform(float(data))
        return cls(
            left=float(data.get("left", 0.0)),
            top=float(data.get("top", 0.0)),
            right=float(data.get("right", 0.0)),
            bottom=float(data.get("bottom", 0.0)),
        )

    def to_dict(self) -> dict[str, float]:
        return {"left": self.left, "top": self.top, "right": self.right, "bottom": self.bottom}


@dataclass(frozen=True, slots=True)
class AutoLayout:
    """Ordered one-axis layout descriptor (stack / flex-like container).

    Attributes:
        axis: Main axis along which children are placed
        gap: Space between consecutive children on the main axis
        padding: Inset of the content box from the container bounds
        main_align: Alignment along the main axis
        cross_align: Alignment along the cross axis
    """

    axis: LayoutAxis = LayoutAxis.VERTICAL
    gap: float = 0.0
    padding: EdgePadding = field(default_factory=EdgePadding)
    main_align: Alignment = Alignment.START
    cross_align: Alignment = Alignment.START

    def __post_init__(self) -> None:
        if self.gap < 0:
            raise ValueError(f"AutoLayout gap must be >= 0, got {self.gap}")

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> AutoLayout:
        return cls(
            axis=LayoutAxis.from_direction(data.get("axis", data.get("direction", "column"))),
            gap=float(data.get("gap", 0.0)),
            padding=EdgePadding.from_dict(data.get("padding")),
            main_align=Alignment(data.get("main_align", "start")),
            cross_align=Alignment(data.get("cross_align", "start")),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "axis": self.axis.value,
            "gap": self.gap,
            "padding": self.padding.to_dict(),
            "main_align": self.main_align.value,
            "cross_align": self.cross_align.value,
        }


@dataclass(frozen=True, slots=True)
class SceneNode:
    """A node of the document tree.

    Attributes:
        doc_id: Stable document identity
        node_type: Container, leaf kind, or component instance
        child_ids: Ordered child document ids
        auto_layout: Ordered layout descriptor, None for free positioning
        component_id: Component rendered by an INSTANCE node
    """

    doc_id: DocId
    node_type: NodeType = NodeType.CONTAINER
    child_ids: tuple[DocId, ...] = ()
    auto_layout: AutoLayout | None = None
    component_id: str | None = None

    def __post_init__(self) -> None:
        validate_doc_id(self.doc_id)
        if not isinstance(self.child_ids, tuple):
            object.__setattr__(self, "child_ids", tuple(self.child_ids))
        if self.node_type is NodeType.INSTANCE and not self.component_id:
            raise ValueError(f"Instance node {self.doc_id!r} needs a component_id")
        if self.child_ids and not self.node_type.is_container:
            raise ValueError(
                f"Leaf node {self.doc_id!r} ({self.node_type.value}) cannot have children"
            )

    @property
    def is_auto_layout(self) -> bool:
        return self.auto_layout is not None

    def with_children(self, child_ids: list[DocId] | tuple[DocId, ...]) -> SceneNode:
        """Copy of this node with a new child list."""
        return SceneNode(
            doc_id=self.doc_id,
            node_type=self.node_type,
            child_ids=tuple(child_ids),
            auto_layout=self.auto_layout,
            component_id=self.component_id,
        )

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneNode:
        layout = data.get("auto_layout")
        return cls(
            doc_id=DocId(data["id"]),
            node_type=NodeType(data.get("type", "container")),
            child_ids=tuple(DocId(c) for c in data.get("children", ())),
            auto_layout=AutoLayout.from_dict(layout) if layout is not None else None,
            component_id=data.get("component_id"),
        )

    def to_dict(self) -> dict[str, Any]:
        data: dict[str, Any] = {
            "id": self.doc_id,
            "type": self.node_type.value,
            "children": list(self.child_ids),
        }
        if self.auto_layout is not None:
            data["auto_layout"] = self.auto_layout.to_dict()
        if self.component_id is not None:
            data["component_id"] = self.component_id
        return data
