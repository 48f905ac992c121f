"""Patch application for scene documents."""

from scenedrop.core.patch.patch_applier import PatchApplyError, apply_patch, apply_patches

__all__ = ["PatchApplyError", "apply_patch", "apply_patches"]
