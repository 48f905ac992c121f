"""Module: patch_ops.py

Date: 2026-10-19

Tree-edit operations produced by a drop commit.

A move is never a single operation: a drop is expressed as detaches followed
by attaches so that multi-node moves do not shift each other's indices.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any, ClassVar

from scenedrop.models.ids import DocId


@dataclass(frozen=True, slots=True)
class PatchOp:
    """Base class of all patch operations."""

    op_type: ClassVar[str] = ""

    parent_id: DocId
    child_id: DocId

    def to_dict(self) -> dict[str, Any]:
        return {"type": self.op_type, "parent_id": self.parent_id, "child_id": self.child_id}


@dataclass(frozen=True, slots=True)
class DetachChild(PatchOp):
    """Remove ``child_id`` from the child list of ``parent_id``."""

    op_type: ClassVar[str] = "detach_child"


@dataclass(frozen=True, slots=True)
class AttachChild(PatchOp):
    """Insert ``child_id`` at ``index`` of the child list of ``parent_id``."""

    op_type: ClassVar[str] = "attach_child"

    index: int = 0

    def to_dict(self) -> dict[str, Any]:
        data = PatchOp.to_dict(self)
        data["index"] = self.index
        return data


_OP_TYPES: dict[str, type[PatchOp]] = {
    DetachChild.op_type: DetachChild,
    AttachChild.op_type: AttachChild,
}


def patch_from_dict(data: dict[str, Any]) -> PatchOp:
    """Rebuild a patch operation from its ``to_dict()`` form.

    Raises:
        ValueError: If the type tag is missing or unknown.
    """
    op_type = data.get("type")
    op_cls = _OP_TYPES.get(op_type)  # type: ignore[arg-type]
    if op_cls is None:
        raise ValueError(f"Unknown patch operation type: {op_type!r}")
    parent_id = DocId(data["parent_id"])
    child_id = DocId(data["child_id"])
    if op_cls is AttachChild:
        return AttachChild(parent_id, child_id, int(data["index"]))
    return op_cls(parent_id, child_id)
