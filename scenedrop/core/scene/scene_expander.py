"""Module: scene_expander.py

Date: 2026-10-19

Flattens a surface of the document tree into a RenderedScene.

Component instances are expanded in place: the instance node keeps its own
expanded id and receives the children of the component root, namespaced with
the instance's expanded id:

- Regular node: ``card``
- Inside instance ``inst_a``: ``inst_a::row_1``
- Nested instances: ``inst_a::inst_b::label``

Patch targeting:
- Regular nodes patch themselves.
- Every node inside an instance patches the outermost instance node, since
  instance contents are not editable in place.

Layout is owned by the rendering layer, so bounds are supplied by the caller
per expanded id.
"""

from __future__ import annotations

from collections.abc import Mapping

from scenedrop.models.document import SceneDocument
from scenedrop.models.geometry import Rect, Vector2
from scenedrop.models.ids import DocId, ExpandedId, namespace_id
from scenedrop.models.rendered_scene import RenderedNode, RenderedScene
from scenedrop.models.scene_node import NodeType, SceneNode
from scenedrop.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class SceneBuildError(Exception):
    """Raised when a rendered scene cannot be built for a surface."""


class SceneExpander:
    """Single-use builder holding the state of one expansion pass."""

    def __init__(
        self,
        document: SceneDocument,
        bounds: Mapping[str, Rect],
    ) -> None:
        self._document = document
        self._bounds = bounds
        self._nodes: dict[ExpandedId, RenderedNode] = {}
        self._placeholders: list[ExpandedId] = []

    @property
    def placeholders(self) -> list[ExpandedId]:
        """Instances rendered empty because their component is unusable."""
        return list(self._placeholders)

    def expand(self, root: SceneNode) -> dict[ExpandedId, RenderedNode]:
        self._expand_node(root, namespace=None, instance_target=None, component_stack=())
        return self._nodes

    def _expand_node(
        self,
        node: SceneNode,
        namespace: str | None,
        instance_target: DocId | None,
        component_stack: tuple[str, ...],
    ) -> ExpandedId:
        expanded_id = namespace_id(node.doc_id, namespace)
        if expanded_id in self._nodes:
            raise SceneBuildError(f"Node {expanded_id!r} is rendered twice")

        patch_target = instance_target if instance_target is not None else node.doc_id

        if node.node_type is NodeType.INSTANCE:
            child_ids = self._expand_instance(node, expanded_id, patch_target, component_stack)
        else:
            child_ids = []
            for child_id in node.child_ids:
                child = self._document.get_node(child_id)
                if child is None:
                    logger.warning(
                        "[SceneExpander] %s lists missing child %s", node.doc_id, child_id
                    )
                    continue
                child_ids.append(
                    self._expand_node(child, namespace, instance_target, component_stack)
                )

        self._nodes[expanded_id] = RenderedNode(
            expanded_id=expanded_id,
            node_type=node.node_type,
            child_ids=tuple(child_ids),
            bounds=self._bounds_for(expanded_id),
            patch_target=patch_target,
        )
        return expanded_id

    def _expand_instance(
        self,
        instance: SceneNode,
        expanded_id: ExpandedId,
        patch_target: DocId,
        component_stack: tuple[str, ...],
    ) -> list[ExpandedId]:
        component_id = instance.component_id or ""
        root_id = self._document.components.get(component_id)
        component_root = self._document.get_node(root_id)

        if component_root is None:
            logger.warning(
                "[SceneExpander] Component %s of instance %s not found, rendering placeholder",
                component_id,
                expanded_id,
            )
            self._placeholders.append(expanded_id)
            return []
        if component_id in component_stack:
            logger.warning(
                "[SceneExpander] Recursive component %s in instance %s, rendering placeholder",
                component_id,
                expanded_id,
            )
            self._placeholders.append(expanded_id)
            return []

        stack = component_stack + (component_id,)
        child_ids = []
        for child_id in component_root.child_ids:
            child = self._document.get_node(child_id)
            if child is None:
                continue
            child_ids.append(self._expand_node(child, expanded_id, patch_target, stack))
        return child_ids

    def _bounds_for(self, expanded_id: ExpandedId) -> Rect:
        try:
            return self._bounds[expanded_id]
        except KeyError:
            raise SceneBuildError(f"No layout bounds for {expanded_id!r}") from None


def expand_surface(
    document: SceneDocument,
    surface_id: str,
    bounds: Mapping[str, Rect],
    origin: Vector2 | None = None,
    generation: int = 0,
) -> RenderedScene:
    """Build the rendered scene of one surface.

    Args:
        document: Document to expand
        surface_id: Surface whose tree is expanded
        bounds: Surface-local bounds per expanded id, from the layout engine
        origin: World position of the surface
        generation: Document version the scene is built from

    Returns:
        RenderedScene with pre-order paint order

    Raises:
        SceneBuildError: If the surface is unknown or a node has no bounds.
    """
    root_id = document.surfaces.get(surface_id)
    root = document.get_node(root_id)
    if root is None:
        raise SceneBuildError(f"Unknown surface {surface_id!r}")

    expander = SceneExpander(document, bounds)
    nodes = expander.expand(root)

    logger.debug(
        "[SceneExpander] Expanded surface %s: %d nodes, %d placeholders (generation %d)",
        surface_id,
        len(nodes),
        len(expander.placeholders),
        generation,
        extra={"dev_only": True},
    )
    return RenderedScene(
        surface_id=surface_id,
        root_id=ExpandedId(root.doc_id),
        nodes=nodes,
        origin=origin or Vector2(),
        generation=generation,
    )
