"""Tests for SceneLookups and container hit-testing.

Date: 2026-10-19
"""

import pytest

from scenedrop.core.drag.container_hit import ContainerHit, collect_subtrees, hit_test_container
from scenedrop.core.drag.scene_lookups import SceneLookups
from scenedrop.models.geometry import Rect, Vector2
from scenedrop.models.ids import ExpandedId
from scenedrop.models.rendered_scene import RenderedNode, RenderedScene
from scenedrop.models.scene_node import NodeType
from tests.mocks import SURFACE, abc_row, twin_instances, two_lists


class TestSceneLookups:
    """Test the three lookup tables."""

    def test_doc_and_parent_tables(self):
        state = two_lists().state()
        lookups = state.lookups

        assert lookups.get_doc_id("A") == "A"
        assert lookups.get_parent("A") == "L1"
        assert lookups.get_parent("root") is None
        assert lookups.get_ancestors("A") == ["L1", "root"]

    def test_instance_contents_patch_the_instance(self):
        """Test nodes inside an instance map to the instance document."""
        lookups = twin_instances().state().lookups

        assert lookups.get_expanded_ids("inst_y") == (
            "inst_y",
            "inst_y::row_1",
            "inst_y::label_a",
            "inst_y::label_b",
        )
        assert lookups.get_doc_id("inst_y::label_a") == "inst_y"
        assert lookups.get_parent("inst_y::label_a") == "inst_y::row_1"
        assert lookups.get_expanded_ids("row_1") == ()
        assert lookups.get_expanded_ids("missing") == ()

    def test_find_ancestor(self):
        lookups = two_lists().state().lookups

        assert lookups.find_ancestor("A", lambda eid: eid.startswith("L")) == "L1"
        assert lookups.find_ancestor("L1", lambda eid: eid == "L1", include_self=False) is None

    def test_is_within(self):
        """Test subtree membership via the parent table."""
        lookups = two_lists().state().lookups

        assert lookups.is_within("A", ["L1"])
        assert lookups.is_within("L1", ["L1"])
        assert not lookups.is_within("C", ["L1"])
        assert not lookups.is_within("A", [])

    def test_generation_follows_scene(self):
        lookups = abc_row().state(generation=7).lookups
        assert lookups.generation == 7
        assert lookups.surface_id == SURFACE

    def test_two_parents_rejected(self):
        """Test a rendered node listed under two parents cannot be indexed."""
        nodes = {
            "root": RenderedNode(
                ExpandedId("root"), NodeType.CONTAINER, ("a", "b"), Rect(0, 0, 10, 10), "root"
            ),
            "a": RenderedNode(ExpandedId("a"), NodeType.CONTAINER, ("x",), Rect(0, 0, 5, 5), "a"),
            "b": RenderedNode(ExpandedId("b"), NodeType.CONTAINER, ("x",), Rect(5, 5, 5, 5), "b"),
            "x": RenderedNode(ExpandedId("x"), NodeType.TEXT, (), Rect(0, 0, 1, 1), "x"),
        }
        scene = RenderedScene(
            surface_id=SURFACE,
            root_id=ExpandedId("root"),
            nodes=nodes,
            paint_order=("root", "a", "x", "b"),
        )
        with pytest.raises(ValueError):
            SceneLookups.build(scene)

    def test_reflow_key_validation(self):
        state = abc_row().state()
        assert state.lookups.validate_reflow_keys({"A": Vector2(1, 0)}, state.scene)
        assert not state.lookups.validate_reflow_keys({"nope": Vector2(1, 0)}, state.scene)


class TestHitTest:
    """Test topmost container resolution."""

    def test_topmost_container_wins(self):
        """Test the deepest painted container under the cursor is hit."""
        state = two_lists().state()
        hit = hit_test_container(state.scene, state.lookups, Vector2(50, 50))
        assert hit == ContainerHit("L1", "L1")

    def test_leaves_are_skipped(self):
        """Test a cursor over a leaf hits its container."""
        state = abc_row().state()
        hit = hit_test_container(state.scene, state.lookups, Vector2(50, 50))
        assert hit.expanded_id == "root"

    def test_excluded_nodes_are_skipped(self):
        state = two_lists().state()
        hit = hit_test_container(state.scene, state.lookups, Vector2(50, 50), exclude={"L1"})
        assert hit.expanded_id == "root"

    def test_miss(self):
        state = abc_row().state()
        assert hit_test_container(state.scene, state.lookups, Vector2(-1, -1)) is None

    def test_hit_keeps_the_rendered_identity(self):
        """Test hitting the second copy of an instance returns that copy."""
        state = twin_instances().state()
        hit = hit_test_container(state.scene, state.lookups, Vector2(300, 150))
        assert hit == ContainerHit("inst_y::row_1", "inst_y")

    def test_collect_subtrees(self):
        scene = two_lists().scene()
        assert collect_subtrees(scene, ["L1"]) == frozenset({"L1", "A", "B"})
        assert collect_subtrees(scene, ["missing"]) == frozenset()

    def test_repeated_hits_agree(self):
        """Test the same cursor over the same scene always resolves the same way."""
        state = two_lists().state()
        cursor = Vector2(100, 150)
        hits = {hit_test_container(state.scene, state.lookups, cursor) for _ in range(5)}
        assert hits == {ContainerHit("L2", "L2")}
