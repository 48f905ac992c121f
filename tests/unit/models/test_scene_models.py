"""Tests for ids, scene nodes, documents and patch operations.

Date: 2026-10-19
"""

import pytest

from scenedrop.models.document import SceneDocument
from scenedrop.models.ids import (
    is_inside_instance,
    local_id,
    namespace_id,
    owning_instance,
    validate_doc_id,
)
from scenedrop.models.patch_ops import AttachChild, DetachChild, patch_from_dict
from scenedrop.models.scene_node import AutoLayout, NodeType, SceneNode
from tests.mocks import container, instance, row, text


class TestIds:
    """Test the two id spaces."""

    def test_namespacing(self):
        """Test expanded ids are namespaced only inside instances."""
        assert namespace_id("card", None) == "card"
        assert namespace_id("row_1", "inst_a") == "inst_a::row_1"
        assert namespace_id("label", "inst_a::inst_b") == "inst_a::inst_b::label"

    def test_instance_helpers(self):
        """Test owning instance and local id extraction."""
        assert not is_inside_instance("card")
        assert owning_instance("card") is None
        assert owning_instance("inst_a::inst_b::label") == "inst_a"
        assert local_id("inst_a::row_1") == "row_1"

    def test_separator_rejected_in_doc_ids(self):
        """Test document ids cannot contain the expanded-id separator."""
        with pytest.raises(ValueError):
            validate_doc_id("a::b")
        with pytest.raises(ValueError):
            validate_doc_id("")


class TestSceneNode:
    """Test SceneNode construction rules."""

    def test_leaf_cannot_have_children(self):
        """Test leaves reject child lists."""
        with pytest.raises(ValueError):
            SceneNode(doc_id="t", node_type=NodeType.TEXT, child_ids=("x",))

    def test_instance_requires_component(self):
        """Test instance nodes need a component id."""
        with pytest.raises(ValueError):
            SceneNode(doc_id="i", node_type=NodeType.INSTANCE)

    def test_negative_gap_rejected(self):
        """Test auto-layout gap must not be negative."""
        with pytest.raises(ValueError):
            AutoLayout(gap=-1)

    def test_dict_round_trip(self):
        """Test a container with auto-layout survives to_dict/from_dict."""
        node = container("root", "a", "b", layout=row(gap=4, padding=2))
        assert SceneNode.from_dict(node.to_dict()) == node

    def test_from_dict_accepts_direction_alias(self):
        """Test layout direction may be given as row/column."""
        node = SceneNode.from_dict(
            {"id": "r", "children": [], "auto_layout": {"direction": "row", "gap": 8}}
        )
        assert node.auto_layout.axis.value == "horizontal"
        assert node.auto_layout.gap == 8


class TestSceneDocument:
    """Test document queries."""

    @pytest.fixture
    def document(self):
        return SceneDocument.from_nodes(
            [
                container("root", "list", "card_i", layout=row()),
                container("list", "a", "b", layout=row()),
                text("a"), text("b"),
                instance("card_i", "card"),
                container("card_root", "title"),
                text("title"),
            ],
            surfaces={"s1": "root"},
            components={"card": "card_root"},
        )

    def test_parent_and_children(self, document):
        """Test parent index and child lists."""
        assert document.parent_of("a") == "list"
        assert document.parent_of("root") is None
        assert document.children_of("list") == ("a", "b")

    def test_ancestry(self, document):
        """Test is_ancestor_or_self walks document parents."""
        assert document.is_ancestor_or_self("root", "a")
        assert document.is_ancestor_or_self("a", "a")
        assert not document.is_ancestor_or_self("a", "root")

    def test_surface_of(self, document):
        """Test nodes resolve to their surface; component trees have none."""
        assert document.surface_of("b") == "s1"
        assert document.surface_of("title") is None

    def test_duplicate_ids_rejected(self):
        """Test duplicate node ids are an error."""
        with pytest.raises(ValueError):
            SceneDocument.from_nodes([text("a"), text("a")])

    def test_unknown_root_rejected(self):
        """Test surfaces must point at existing nodes."""
        with pytest.raises(ValueError):
            SceneDocument.from_nodes([text("a")], surfaces={"s1": "missing"})

    def test_copy_is_independent(self, document):
        """Test replacing a node on a copy leaves the original alone."""
        copy = document.copy()
        copy.replace_node(copy.get_node("list").with_children(["b"]))
        assert document.children_of("list") == ("a", "b")
        assert copy.children_of("list") == ("b",)
        assert copy.parent_of("a") is None

    def test_dict_round_trip(self, document):
        """Test to_dict/from_dict keep nodes, surfaces and components."""
        restored = SceneDocument.from_dict(document.to_dict())
        assert restored.nodes == document.nodes
        assert restored.surfaces == document.surfaces
        assert restored.components == document.components


class TestPatchOps:
    """Test patch operation serialization."""

    def test_to_dict_carries_type_tag(self):
        """Test every op is tagged with its type."""
        assert DetachChild("p", "c").to_dict() == {
            "type": "detach_child",
            "parent_id": "p",
            "child_id": "c",
        }
        assert AttachChild("p", "c", 2).to_dict()["index"] == 2

    def test_from_dict(self):
        """Test tagged dicts rebuild the right op."""
        op = patch_from_dict(
            {"type": "attach_child", "parent_id": "p", "child_id": "c", "index": 1}
        )
        assert op == AttachChild("p", "c", 1)

    def test_unknown_tag_rejected(self):
        """Test unknown op types raise ValueError."""
        with pytest.raises(ValueError):
            patch_from_dict({"type": "move_child", "parent_id": "p", "child_id": "c"})
