"""Module: target_resolver.py

Date: 2026-10-19

Ancestor climbing and validation of drop targets.

Only auto-layout containers accept ordered children. Component instances
and the nodes rendered inside them are never targets: their edits patch the
instance document, which has no children of its own. A hit on any other
container climbs the rendered parent chain to the nearest auto-layout
ancestor, so the drop lands in the closest valid container instead of
failing. Unpatchable ancestors are passed through without resolving a
document id.

Validation rules, checked in order:
1. Every dragged node still exists and all share one origin parent
2. The target is patchable, present in the document and not inside an instance
3. The target is not a dragged node or inside one
4. The target belongs to the surface locked by the drag session
"""

from __future__ import annotations

from collections.abc import Iterable, Mapping, Sequence
from typing import TYPE_CHECKING

from scenedrop.core.drag.container_hit import ContainerHit
from scenedrop.models.drop_preview import InvalidReason
from scenedrop.models.ids import DocId, ExpandedId, is_inside_instance, local_id
from scenedrop.models.scene_node import NodeType
from scenedrop.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from scenedrop.core.drag.scene_lookups import SceneLookups
    from scenedrop.models.document import SceneDocument

logger = get_cached_logger(__name__)


def is_eligible_container(
    expanded_id: ExpandedId,
    document: SceneDocument,
    lookups: SceneLookups,
    dragged_expanded_ids: Iterable[ExpandedId] = (),
) -> bool:
    """Patchable as itself, not dragged, not an instance, and auto-layout.

    A node rendered inside an instance patches the instance document, so it
    is skipped even when its own layout would accept children.
    """
    if expanded_id in dragged_expanded_ids or is_inside_instance(expanded_id):
        return False
    doc_id = lookups.get_doc_id(expanded_id)
    if doc_id is None or doc_id != local_id(expanded_id):
        return False
    node = document.get_node(doc_id)
    if node is None or node.node_type is NodeType.INSTANCE:
        return False
    return node.is_auto_layout


def resolve_eligible_target(
    hit: ContainerHit | None,
    document: SceneDocument,
    lookups: SceneLookups,
    dragged_expanded_ids: Iterable[ExpandedId] = (),
) -> ContainerHit | None:
    """Climb from ``hit`` to the nearest eligible container.

    Args:
        hit: Result of hit-testing, or None
        document: Document providing auto-layout descriptors
        lookups: Lookup tables of the locked scene
        dragged_expanded_ids: Rendered ids of the dragged nodes

    Returns:
        The eligible container (possibly ``hit`` itself), or None when the
        chain is exhausted
    """
    if hit is None:
        return None

    dragged = frozenset(dragged_expanded_ids)
    current: ExpandedId | None = hit.expanded_id
    while current is not None:
        if is_eligible_container(current, document, lookups, dragged):
            doc_id = lookups.get_doc_id(current)
            if current != hit.expanded_id:
                logger.debug(
                    "[TargetResolver] Climbed from %s to %s",
                    hit.expanded_id,
                    current,
                    extra={"dev_only": True},
                )
            return ContainerHit(expanded_id=current, doc_id=doc_id)
        current = lookups.get_parent(current)

    logger.debug(
        "[TargetResolver] No auto-layout ancestor above %s",
        hit.expanded_id,
        extra={"dev_only": True},
    )
    return None


def origin_parent_of(
    dragged_doc_ids: Sequence[DocId], original_parents: Mapping[DocId, DocId | None]
) -> DocId | None:
    """The single origin parent shared by all dragged nodes, else None."""
    parents = {original_parents.get(doc_id) for doc_id in dragged_doc_ids}
    if len(parents) != 1:
        return None
    return next(iter(parents))


def validate_drag_set(
    dragged_doc_ids: Sequence[DocId],
    original_parents: Mapping[DocId, DocId | None],
    document: SceneDocument,
) -> InvalidReason | None:
    """Check the dragged set itself, independent of the cursor."""
    if any(doc_id not in document for doc_id in dragged_doc_ids):
        return InvalidReason.DRAGGED_NODE_MISSING
    if not dragged_doc_ids or origin_parent_of(dragged_doc_ids, original_parents) is None:
        return InvalidReason.MIXED_ORIGIN_MULTISELECT
    return None


def validate_target(
    target: ContainerHit,
    document: SceneDocument,
    lookups: SceneLookups,
    dragged_doc_ids: Sequence[DocId],
    dragged_expanded_ids: Sequence[ExpandedId],
    locked_surface_id: str,
) -> InvalidReason | None:
    """Check a resolved target against the dragged set and session.

    Returns:
        The first failing rule's reason, or None when the target is valid
    """
    if lookups.get_doc_id(target.expanded_id) is None or target.doc_id not in document:
        return InvalidReason.UNPATCHABLE_TARGET
    if is_inside_instance(target.expanded_id):
        return InvalidReason.UNPATCHABLE_TARGET

    if lookups.is_within(target.expanded_id, dragged_expanded_ids):
        return InvalidReason.CIRCULAR_TARGET
    for doc_id in dragged_doc_ids:
        if document.is_ancestor_or_self(doc_id, target.doc_id):
            return InvalidReason.CIRCULAR_TARGET

    if lookups.surface_id != locked_surface_id:
        return InvalidReason.CROSS_SURFACE
    return None
