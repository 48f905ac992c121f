"""Tests for ancestor climbing and target validation.

Date: 2026-10-19
"""

from scenedrop.core.drag.container_hit import ContainerHit
from scenedrop.core.drag.target_resolver import (
    is_eligible_container,
    origin_parent_of,
    resolve_eligible_target,
    validate_drag_set,
    validate_target,
)
from scenedrop.models.drop_preview import InvalidReason
from tests.mocks import SURFACE, free_inside_stack, instance_with_layout, two_lists


class TestEligibility:
    def test_auto_layout_container_is_eligible(self):
        state = two_lists().state()
        assert is_eligible_container("L1", state.document, state.lookups)

    def test_free_container_is_not(self):
        state = free_inside_stack().state()
        assert not is_eligible_container("F", state.document, state.lookups)

    def test_dragged_container_is_not(self):
        state = two_lists().state()
        assert not is_eligible_container("L1", state.document, state.lookups, ["L1"])

    def test_instance_and_its_contents_are_not(self):
        """Test neither an instance nor its rendered auto-layout contents accept drops."""
        state = instance_with_layout().state()

        assert not is_eligible_container("inst_x", state.document, state.lookups)
        assert not is_eligible_container("inst_x::row_1", state.document, state.lookups)
        assert is_eligible_container("page", state.document, state.lookups)


class TestResolveEligibleTarget:
    """Test climbing to the nearest auto-layout ancestor."""

    def test_hit_is_already_eligible(self):
        state = two_lists().state()
        hit = ContainerHit("L2", "L2")
        assert resolve_eligible_target(hit, state.document, state.lookups) == hit

    def test_climbs_through_free_containers(self):
        """Test G and F are passed over until root."""
        state = free_inside_stack().state()
        target = resolve_eligible_target(ContainerHit("G", "G"), state.document, state.lookups)
        assert target == ContainerHit("root", "root")

    def test_climbs_past_dragged_container(self):
        state = two_lists().state()
        target = resolve_eligible_target(
            ContainerHit("L1", "L1"), state.document, state.lookups, ["L1"]
        )
        assert target.expanded_id == "root"

    def test_no_hit(self):
        state = two_lists().state()
        assert resolve_eligible_target(None, state.document, state.lookups) is None

    def test_climbs_out_of_instance(self):
        """Test a hit inside an instance resolves to the page holding the instance."""
        state = instance_with_layout().state()
        target = resolve_eligible_target(
            ContainerHit("inst_x::row_1", "inst_x"), state.document, state.lookups
        )
        assert target == ContainerHit("page", "page")


class TestValidation:
    """Test drag-set and target validation rules."""

    def test_origin_parent(self):
        assert origin_parent_of(["A", "B"], {"A": "L1", "B": "L1"}) == "L1"
        assert origin_parent_of(["A", "C"], {"A": "L1", "C": "L2"}) is None

    def test_drag_set(self):
        document = two_lists().document
        assert validate_drag_set(["A", "B"], {"A": "L1", "B": "L1"}, document) is None
        assert (
            validate_drag_set(["A", "C"], {"A": "L1", "C": "L2"}, document)
            is InvalidReason.MIXED_ORIGIN_MULTISELECT
        )
        assert (
            validate_drag_set(["A", "gone"], {"A": "L1", "gone": "L1"}, document)
            is InvalidReason.DRAGGED_NODE_MISSING
        )

    def test_valid_target(self):
        state = two_lists().state()
        reason = validate_target(
            ContainerHit("L2", "L2"), state.document, state.lookups, ["A"], ["A"], SURFACE
        )
        assert reason is None

    def test_unpatchable_target(self):
        """Test a target without a document node is rejected."""
        state = two_lists().state()
        reason = validate_target(
            ContainerHit("ghost", "ghost"), state.document, state.lookups, ["A"], ["A"], SURFACE
        )
        assert reason is InvalidReason.UNPATCHABLE_TARGET

    def test_target_inside_dragged_node(self):
        """Test dropping a list into its own child is circular."""
        state = two_lists().state()
        reason = validate_target(
            ContainerHit("L1", "L1"), state.document, state.lookups, ["root"], ["root"], SURFACE
        )
        assert reason is InvalidReason.CIRCULAR_TARGET

    def test_target_is_dragged_node(self):
        state = two_lists().state()
        reason = validate_target(
            ContainerHit("L1", "L1"), state.document, state.lookups, ["L1"], ["L1"], SURFACE
        )
        assert reason is InvalidReason.CIRCULAR_TARGET

    def test_other_surface(self):
        state = two_lists().state()
        reason = validate_target(
            ContainerHit("L2", "L2"), state.document, state.lookups, ["A"], ["A"], "s2"
        )
        assert reason is InvalidReason.CROSS_SURFACE

    def test_target_inside_instance(self):
        """Test a rendered node inside an instance is never a valid target."""
        state = instance_with_layout().state()
        reason = validate_target(
            ContainerHit("inst_x::row_1", "inst_x"),
            state.document,
            state.lookups,
            ["Z"],
            ["Z"],
            SURFACE,
        )
        assert reason is InvalidReason.UNPATCHABLE_TARGET
