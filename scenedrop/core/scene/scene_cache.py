"""Module: scene_cache.py

Date: 2026-10-19

Per-surface cache of rendered scenes and their lookup tables.

Scenes either arrive from the rendering layer (``store``) or are expanded on
demand through a layout resolver. Entries are tied to the document
generation they were built for; when the document changes the whole cache
is dropped and rebuilt lazily.
"""

from __future__ import annotations

from collections.abc import Callable, Mapping
from typing import TYPE_CHECKING

from scenedrop.core.drag.drop_preview_builder import SceneState
from scenedrop.core.drag.scene_lookups import SceneLookups
from scenedrop.core.scene.scene_expander import SceneBuildError, expand_surface
from scenedrop.utils.logging.logger_factory import get_cached_logger

if TYPE_CHECKING:
    from scenedrop.models.document import SceneDocument
    from scenedrop.models.geometry import Rect, Vector2
    from scenedrop.models.rendered_scene import RenderedScene

    LayoutResolver = Callable[[SceneDocument, str], tuple[Mapping[str, Rect], Vector2]]

logger = get_cached_logger(__name__)


class SceneCache:
    """Scenes and lookups per surface for one document generation."""

    def __init__(self, layout_resolver: LayoutResolver | None = None) -> None:
        """Initialize the cache.

        Args:
            layout_resolver: ``(document, surface_id) -> (bounds, origin)``
                used to expand surfaces that were not stored explicitly

        """
        self._layout_resolver = layout_resolver
        self._entries: dict[str, tuple[RenderedScene, SceneLookups]] = {}
        self._generation: int | None = None
        self._hits = 0
        self._misses = 0

    @property
    def generation(self) -> int | None:
        """Document generation the cached entries belong to."""
        return self._generation

    def __contains__(self, surface_id: object) -> bool:
        return surface_id in self._entries

    def __len__(self) -> int:
        return len(self._entries)

    def store(self, scene: RenderedScene) -> SceneLookups:
        """Cache a scene produced by the rendering layer and build its lookups."""
        self.sync(scene.generation)
        lookups = SceneLookups.build(scene)
        self._entries[scene.surface_id] = (scene, lookups)
        return lookups

    def get(self, surface_id: str) -> tuple[RenderedScene, SceneLookups] | None:
        return self._entries.get(surface_id)

    def get_state(
        self, document: SceneDocument, surface_id: str, generation: int
    ) -> SceneState:
        """SceneState of ``surface_id`` for document ``generation``.

        Raises:
            SceneBuildError: If the surface is not cached and cannot be expanded.
        """
        self.sync(generation)
        entry = self._entries.get(surface_id)
        if entry is not None:
            self._hits += 1
            scene, lookups = entry
            return SceneState(document=document, scene=scene, lookups=lookups)

        self._misses += 1
        if self._layout_resolver is None:
            raise SceneBuildError(f"No scene for surface {surface_id!r} and no layout resolver")

        bounds, origin = self._layout_resolver(document, surface_id)
        scene = expand_surface(document, surface_id, bounds, origin, generation)
        lookups = self.store(scene)
        return SceneState(document=document, scene=scene, lookups=lookups)

    def sync(self, generation: int) -> None:
        """Drop every entry built for another generation."""
        if self._generation != generation:
            if self._entries:
                logger.debug(
                    "[SceneCache] Generation %s -> %d, dropping %d scenes",
                    self._generation,
                    generation,
                    len(self._entries),
                    extra={"dev_only": True},
                )
            self._entries.clear()
            self._generation = generation

    def invalidate(self, surface_id: str | None = None) -> None:
        """Drop one surface, or everything when ``surface_id`` is None."""
        if surface_id is None:
            self._entries.clear()
        else:
            self._entries.pop(surface_id, None)

    def get_stats(self) -> dict[str, int]:
        return {"entries": len(self._entries), "hits": self._hits, "misses": self._misses}
