"""Module: document.py

Date: 2026-10-19

SceneDocument: the tree of scene nodes the engine validates against and
patches.

Surfaces are the top-level frames of the canvas; each maps to the document id
of its root node. Components map to the root of their definition subtree,
which is rendered once per instance by the scene expander.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator
from dataclasses import dataclass, field
from typing import Any

from scenedrop.models.ids import DocId
from scenedrop.models.scene_node import SceneNode
from scenedrop.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


@dataclass
class SceneDocument:
    """Node table plus surface and component roots.

    The parent index is built on first use and dropped by ``copy()``; a
    document is treated as immutable once handed to the drag engine.
    """

    nodes: dict[DocId, SceneNode] = field(default_factory=dict)
    surfaces: dict[str, DocId] = field(default_factory=dict)
    components: dict[str, DocId] = field(default_factory=dict)
    _parent_index: dict[DocId, DocId] | None = field(
        default=None, init=False, repr=False, compare=False
    )

    @classmethod
    def from_nodes(
        cls,
        nodes: Iterable[SceneNode],
        surfaces: dict[str, str] | None = None,
        components: dict[str, str] | None = None,
    ) -> SceneDocument:
        """Build a document from a node iterable.

        Raises:
            ValueError: On duplicate ids or roots that are not in the node table.
        """
        table: dict[DocId, SceneNode] = {}
        for node in nodes:
            if node.doc_id in table:
                raise ValueError(f"Duplicate document id {node.doc_id!r}")
            table[node.doc_id] = node

        doc = cls(
            nodes=table,
            surfaces={k: DocId(v) for k, v in (surfaces or {}).items()},
            components={k: DocId(v) for k, v in (components or {}).items()},
        )
        for kind, roots in (("surface", doc.surfaces), ("component", doc.components)):
            for name, root_id in roots.items():
                if root_id not in table:
                    raise ValueError(f"Root {root_id!r} of {kind} {name!r} is not a node")
        return doc

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> SceneDocument:
        return cls.from_nodes(
            (SceneNode.from_dict(n) for n in data.get("nodes", ())),
            surfaces=data.get("surfaces"),
            components=data.get("components"),
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "nodes": [node.to_dict() for node in self.nodes.values()],
            "surfaces": dict(self.surfaces),
            "components": dict(self.components),
        }

    # =====================================
    # Queries
    # =====================================

    def __contains__(self, doc_id: object) -> bool:
        return doc_id in self.nodes

    def __iter__(self) -> Iterator[SceneNode]:
        return iter(self.nodes.values())

    def __len__(self) -> int:
        return len(self.nodes)

    def get_node(self, doc_id: DocId | None) -> SceneNode | None:
        if doc_id is None:
            return None
        return self.nodes.get(doc_id)

    def children_of(self, doc_id: DocId) -> tuple[DocId, ...]:
        node = self.nodes.get(doc_id)
        return node.child_ids if node is not None else ()

    def parent_of(self, doc_id: DocId) -> DocId | None:
        """Document parent of ``doc_id``, None for roots and unknown ids."""
        return self._get_parent_index().get(doc_id)

    def is_ancestor_or_self(self, ancestor_id: DocId, doc_id: DocId) -> bool:
        """Whether ``ancestor_id`` is ``doc_id`` or one of its document ancestors."""
        current: DocId | None = doc_id
        seen: set[DocId] = set()
        while current is not None and current not in seen:
            if current == ancestor_id:
                return True
            seen.add(current)
            current = self.parent_of(current)
        return False

    def surface_of(self, doc_id: DocId) -> str | None:
        """Surface whose tree contains ``doc_id``."""
        roots = {root: surface for surface, root in self.surfaces.items()}
        current: DocId | None = doc_id
        seen: set[DocId] = set()
        while current is not None and current not in seen:
            if current in roots:
                return roots[current]
            seen.add(current)
            current = self.parent_of(current)
        return None

    def copy(self) -> SceneDocument:
        """Shallow copy; nodes are immutable so they are shared."""
        return SceneDocument(
            nodes=dict(self.nodes),
            surfaces=dict(self.surfaces),
            components=dict(self.components),
        )

    def replace_node(self, node: SceneNode) -> None:
        """Swap in a new version of an existing node (used on copies only)."""
        if node.doc_id not in self.nodes:
            raise KeyError(node.doc_id)
        self.nodes[node.doc_id] = node
        self._parent_index = None

    def _get_parent_index(self) -> dict[DocId, DocId]:
        if self._parent_index is None:
            index: dict[DocId, DocId] = {}
            for node in self.nodes.values():
                for child_id in node.child_ids:
                    if child_id in index:
                        logger.warning(
                            "[SceneDocument] Node %s listed under both %s and %s",
                            child_id,
                            index[child_id],
                            node.doc_id,
                        )
                        continue
                    index[child_id] = node.doc_id
            self._parent_index = index
        return self._parent_index
