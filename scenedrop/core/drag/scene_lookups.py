"""Module: scene_lookups.py

Date: 2026-10-19

Precomputed id tables of one rendered scene.

Three tables are built once per surface and scene version and then only
read during a drag:

- expanded_to_doc: expanded id -> patch-target document id (None = unpatchable)
- doc_to_expanded: document id -> every expanded id that patches it
- expanded_parent: expanded id -> rendered parent (None for the root)

Nothing in the drag path scans the scene to answer these questions.
"""

from __future__ import annotations

from collections.abc import Callable, Iterable, Mapping
from dataclasses import dataclass
from types import MappingProxyType
from typing import TYPE_CHECKING

from scenedrop.models.ids import DocId, ExpandedId
from scenedrop.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from scenedrop.models.geometry import Vector2
    from scenedrop.models.rendered_scene import RenderedScene

logger = get_cached_logger(__name__)


@dataclass(frozen=True, eq=False)
class SceneLookups:
    """Read-only lookup tables for one RenderedScene."""

    surface_id: str
    generation: int
    expanded_to_doc: Mapping[ExpandedId, DocId | None]
    doc_to_expanded: Mapping[DocId, tuple[ExpandedId, ...]]
    expanded_parent: Mapping[ExpandedId, ExpandedId | None]

    @classmethod
    def build(cls, scene: RenderedScene) -> SceneLookups:
        """Build all three tables in one pass over the scene."""
        expanded_to_doc: dict[ExpandedId, DocId | None] = {}
        doc_to_expanded: dict[DocId, list[ExpandedId]] = {}
        expanded_parent: dict[ExpandedId, ExpandedId | None] = {scene.root_id: None}

        for expanded_id in scene.paint_order:
            node = scene.nodes[expanded_id]
            expanded_to_doc[expanded_id] = node.patch_target
            if node.patch_target is not None:
                doc_to_expanded.setdefault(node.patch_target, []).append(expanded_id)
            for child_id in node.child_ids:
                previous = expanded_parent.get(child_id)
                if previous is not None and previous != expanded_id:
                    raise ValueError(
                        f"Rendered node {child_id!r} has two parents: "
                        f"{previous!r} and {expanded_id!r}"
                    )
                expanded_parent[child_id] = expanded_id

        # Nodes outside the paint order are still addressable
        for expanded_id, node in scene.nodes.items():
            if expanded_id not in expanded_to_doc:
                expanded_to_doc[expanded_id] = node.patch_target
                if node.patch_target is not None:
                    doc_to_expanded.setdefault(node.patch_target, []).append(expanded_id)
                for child_id in node.child_ids:
                    expanded_parent.setdefault(child_id, expanded_id)

        logger.debug(
            "[SceneLookups] Built tables for %s: %d expanded, %d documents",
            scene.surface_id,
            len(expanded_to_doc),
            len(doc_to_expanded),
            extra={"dev_only": True},
        )
        return cls(
            surface_id=scene.surface_id,
            generation=scene.generation,
            expanded_to_doc=MappingProxyType(expanded_to_doc),
            doc_to_expanded=MappingProxyType(
                {doc_id: tuple(ids) for doc_id, ids in doc_to_expanded.items()}
            ),
            expanded_parent=MappingProxyType(expanded_parent),
        )

    # =====================================
    # Queries
    # =====================================

    def __contains__(self, expanded_id: object) -> bool:
        return expanded_id in self.expanded_to_doc

    def get_doc_id(self, expanded_id: ExpandedId) -> DocId | None:
        """Patch target of ``expanded_id``; None if unpatchable or unknown."""
        return self.expanded_to_doc.get(expanded_id)

    def get_expanded_ids(self, doc_id: DocId) -> tuple[ExpandedId, ...]:
        """Every rendering of ``doc_id``. Never use this to resolve a hit."""
        return self.doc_to_expanded.get(doc_id, ())

    def get_parent(self, expanded_id: ExpandedId) -> ExpandedId | None:
        return self.expanded_parent.get(expanded_id)

    def get_ancestors(self, expanded_id: ExpandedId) -> list[ExpandedId]:
        """Rendered ancestors of ``expanded_id``, nearest first."""
        ancestors = []
        current = self.get_parent(expanded_id)
        while current is not None:
            ancestors.append(current)
            current = self.get_parent(current)
        return ancestors

    def find_ancestor(
        self,
        expanded_id: ExpandedId,
        predicate: Callable[[ExpandedId], bool],
        include_self: bool = True,
    ) -> ExpandedId | None:
        """First node on the parent chain matching ``predicate``."""
        current = expanded_id if include_self else self.get_parent(expanded_id)
        while current is not None:
            if predicate(current):
                return current
            current = self.get_parent(current)
        return None

    def is_within(self, expanded_id: ExpandedId, roots: Iterable[ExpandedId]) -> bool:
        """Whether ``expanded_id`` is one of ``roots`` or rendered below one."""
        root_set = set(roots)
        if not root_set:
            return False
        return self.find_ancestor(expanded_id, root_set.__contains__) is not None

    def validate_reflow_keys(
        self, offsets: Mapping[ExpandedId, Vector2], scene: RenderedScene
    ) -> bool:
        """True when every reflow key is a node of ``scene``."""
        missing = [eid for eid in offsets if eid not in scene.nodes]
        if missing:
            logger.error("[SceneLookups] Reflow keys not in scene: %s", missing)
            return False
        return True
