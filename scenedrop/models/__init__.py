"""Value types shared by the scene, drag and patch layers."""

from scenedrop.models.document import SceneDocument
from scenedrop.models.drop_preview import DropIntent, DropPreview, InvalidReason
from scenedrop.models.geometry import IndicatorAxis, LayoutAxis, Rect, Vector2
from scenedrop.models.ids import DocId, ExpandedId
from scenedrop.models.patch_ops import AttachChild, DetachChild, PatchOp, patch_from_dict
from scenedrop.models.rendered_scene import RenderedNode, RenderedScene
from scenedrop.models.scene_node import (
    Alignment,
    AutoLayout,
    EdgePadding,
    NodeType,
    SceneNode,
)

__all__ = [
    "Alignment",
    "AttachChild",
    "AutoLayout",
    "DetachChild",
    "DocId",
    "DropIntent",
    "DropPreview",
    "EdgePadding",
    "ExpandedId",
    "IndicatorAxis",
    "InvalidReason",
    "LayoutAxis",
    "PatchOp",
    "Rect",
    "RenderedNode",
    "RenderedScene",
    "SceneDocument",
    "SceneNode",
    "Vector2",
    "patch_from_dict",
]
