"""
Drag & drop resolution.

This package turns pointer positions over a rendered scene into drop
previews and document patches:
- SceneLookups: expanded/document id tables of one scene
- DropPreviewBuilder: per-move preview computation
- DragSession: gesture-lifetime state
- generate_drop_patches / DropCommitPlan: commit to patches

The gesture-level DragDropController lives in
``scenedrop.core.drag.drag_controller``.
"""

from __future__ import annotations

from scenedrop.core.drag.container_hit import ContainerHit, collect_subtrees, hit_test_container
from scenedrop.core.drag.drag_session import DragSession
from scenedrop.core.drag.drop_patches import DropCommitPlan, generate_drop_patches
from scenedrop.core.drag.drop_preview_builder import DropPreviewBuilder, SceneState
from scenedrop.core.drag.scene_lookups import SceneLookups
from scenedrop.core.drag.target_resolver import resolve_eligible_target

__all__ = [
    "ContainerHit",
    "DragSession",
    "DropCommitPlan",
    "DropPreviewBuilder",
    "SceneLookups",
    "SceneState",
    "collect_subtrees",
    "generate_drop_patches",
    "hit_test_container",
    "resolve_eligible_target",
]
