"""Module: patch_applier.py

Date: 2026-10-19

Pure application of patch operations to a SceneDocument.

The input document is never modified: a batch is applied to one copy, which
is returned only if every operation succeeded.
"""

from __future__ import annotations

from collections.abc import Iterable

from scenedrop.models.document import SceneDocument
from scenedrop.models.patch_ops import AttachChild, DetachChild, PatchOp
from scenedrop.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class PatchApplyError(Exception):
    """Raised when a patch operation does not fit the document."""

    def __init__(self, op: PatchOp, message: str):
        super().__init__(f"{type(op).__name__}({op.parent_id!r}, {op.child_id!r}): {message}")
        self.op = op


def _detach(document: SceneDocument, op: DetachChild) -> None:
    parent = document.get_node(op.parent_id)
    if parent is None:
        raise PatchApplyError(op, "unknown parent")
    if op.child_id not in parent.child_ids:
        raise PatchApplyError(op, "child is not attached to this parent")
    document.replace_node(
        parent.with_children([c for c in parent.child_ids if c != op.child_id])
    )


def _attach(document: SceneDocument, op: AttachChild) -> None:
    parent = document.get_node(op.parent_id)
    if parent is None:
        raise PatchApplyError(op, "unknown parent")
    if not parent.node_type.is_container:
        raise PatchApplyError(op, f"{parent.node_type.value} nodes cannot have children")
    if op.child_id not in document:
        raise PatchApplyError(op, "unknown child")
    current_parent = document.parent_of(op.child_id)
    if current_parent is not None:
        raise PatchApplyError(op, f"child is still attached to {current_parent!r}")
    if document.is_ancestor_or_self(op.child_id, op.parent_id):
        raise PatchApplyError(op, "would attach a node below itself")
    if not 0 <= op.index <= len(parent.child_ids):
        raise PatchApplyError(op, f"index {op.index} outside [0, {len(parent.child_ids)}]")

    children = list(parent.child_ids)
    children.insert(op.index, op.child_id)
    document.replace_node(parent.with_children(children))


def _apply_in_place(document: SceneDocument, op: PatchOp) -> None:
    if isinstance(op, DetachChild):
        _detach(document, op)
    elif isinstance(op, AttachChild):
        _attach(document, op)
    else:
        raise PatchApplyError(op, "unsupported operation")


def apply_patch(document: SceneDocument, op: PatchOp) -> SceneDocument:
    """Return a copy of ``document`` with ``op`` applied.

    Raises:
        PatchApplyError: If the operation does not fit the document.
    """
    return apply_patches(document, (op,))


def apply_patches(document: SceneDocument, ops: Iterable[PatchOp]) -> SceneDocument:
    """Return a copy of ``document`` with every op applied in order.

    Raises:
        PatchApplyError: On the first operation that does not fit; the input
            document is left untouched.
    """
    result = document.copy()
    count = 0
    for op in ops:
        _apply_in_place(result, op)
        count += 1
    logger.debug("[PatchApplier] Applied %d operations", count, extra={"dev_only": True})
    return result
