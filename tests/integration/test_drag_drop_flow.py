"""Integration tests for the drag-and-drop flow.

Date: 2026-10-19

Drives DragDropController against a real DocumentStore and SceneCache:
pointer down, moves and release, and checks both the previews shown along
the way and the document that results.
"""

from unittest.mock import MagicMock

import pytest

from scenedrop.core.document_store import DocumentStore
from scenedrop.core.drag.drag_controller import DragDropController
from scenedrop.core.scene.scene_cache import SceneCache
from scenedrop.models.drop_preview import DropIntent, DropPreview, InvalidReason
from scenedrop.models.geometry import IndicatorAxis, Rect, Vector2
from scenedrop.models.patch_ops import AttachChild, DetachChild
from tests.mocks import (
    SURFACE,
    abc_row,
    instance_with_layout,
    midpoint_row,
    twin_instances,
    two_lists,
)


def make_controller(mini):
    store = DocumentStore(mini.document)
    cache = SceneCache(layout_resolver=lambda _doc, _surface: (mini.bounds, mini.origin))
    return store, DragDropController(store, cache)


def drag(controller, ids, start, *moves, zoom=1.0):
    controller.begin_drag(SURFACE, ids, Vector2(*start))
    preview = None
    for point in moves:
        preview = controller.update_drag(Vector2(*point), zoom)
    return preview


class TestGesture:
    """Test the press-move-release lifecycle."""

    def test_below_threshold_is_a_click(self):
        """Test small movements never start a drag or change the document."""
        store, controller = make_controller(abc_row())
        controller.begin_drag(SURFACE, ["A"], Vector2(50, 50))

        assert controller.update_drag(Vector2(53, 53)) is None
        assert not controller.is_dragging
        assert controller.end_drag() == []
        assert store.generation == 0

    def test_threshold_is_in_screen_pixels(self):
        """Test zooming in makes the same world distance start a drag."""
        _, controller = make_controller(abc_row())
        controller.begin_drag(SURFACE, ["A"], Vector2(50, 50))

        assert controller.update_drag(Vector2(53, 50), zoom=2.0) is not None
        assert controller.is_dragging

    def test_update_without_drag(self):
        _, controller = make_controller(abc_row())
        with pytest.raises(RuntimeError):
            controller.update_drag(Vector2(0, 0))

    def test_signals(self):
        """Test started, preview and committed signals fire in order."""
        _, controller = make_controller(abc_row())
        started, changed, committed = MagicMock(), MagicMock(), MagicMock()
        controller.drag_started.connect(started)
        controller.preview_changed.connect(changed)
        controller.drop_committed.connect(committed)

        preview = drag(controller, ["A"], (60, 50), (200, 50), (235, 50))
        patches = controller.end_drag()

        started.assert_called_once()
        assert changed.call_count == 2
        committed.assert_called_once_with(patches, preview)


class TestCommit:
    """Test drops end up in the document."""

    def test_reorder(self):
        """Test dropping A between B and C."""
        store, controller = make_controller(abc_row())
        preview = drag(controller, ["A"], (60, 50), (235, 50))
        patches = controller.end_drag()

        assert preview.is_reorder
        assert patches == [DetachChild("root", "A"), AttachChild("root", "A", 1)]
        assert store.document.children_of("root") == ("B", "A", "C")
        assert store.generation == 1
        assert controller.session is None

    def test_reparent(self):
        """Test dragging A from L1 to the end of L2."""
        store, controller = make_controller(two_lists())
        preview = drag(controller, ["A"], (50, 50), (120, 120), (200, 170))
        controller.end_drag()

        assert preview.is_reparent
        assert store.document.children_of("L1") == ("B",)
        assert store.document.children_of("L2") == ("C", "A")

    def test_multi_select(self):
        """Test [C, A] dropped at the start lands in drag order."""
        store, controller = make_controller(abc_row())
        drag(controller, ["C", "A"], (300, 50), (5, 50))
        controller.end_drag()

        assert store.document.children_of("root") == ("C", "A", "B")

    def test_hysteresis_through_moves(self):
        """Test small wiggles around a boundary keep the index."""
        store, controller = make_controller(midpoint_row())
        preview = drag(controller, ["D"], (270, 50), (140, 50), (151, 50), (146, 50))
        assert preview.insertion_index == 1

        controller.end_drag()
        assert store.document.children_of("root") == ("P", "D", "Q")

    def test_second_drag_uses_new_generation(self):
        """Test a drag after a commit sees the updated document."""
        store, controller = make_controller(abc_row())
        drag(controller, ["A"], (60, 50), (235, 50))
        controller.end_drag()

        preview = drag(controller, ["C"], (300, 50), (5, 50))
        controller.end_drag()

        assert preview.target_children_doc_ids == ("B", "A")
        assert store.document.children_of("root") == ("C", "B", "A")
        assert store.generation == 2


class TestNoOps:
    """Test releases that must not change the document."""

    def test_invalid_drop(self):
        store, controller = make_controller(abc_row())
        cancelled = MagicMock()
        controller.drag_cancelled.connect(cancelled)

        preview = drag(controller, ["A"], (60, 50), (1000, 1000))
        assert controller.end_drag() == []

        assert preview.invalid_reason is InvalidReason.NO_CONTAINER_HIT
        cancelled.assert_called_once_with("no-container-hit")
        assert store.generation == 0

    def test_cancel(self):
        store, controller = make_controller(abc_row())
        cancelled = MagicMock()
        controller.drag_cancelled.connect(cancelled)

        drag(controller, ["A"], (60, 50), (235, 50))
        controller.cancel_drag()

        cancelled.assert_called_once_with("cancelled")
        assert controller.session is None
        assert controller.end_drag() == []
        assert store.document.children_of("root") == ("A", "B", "C")

    def test_document_change_makes_drag_stale(self):
        """Test an outside edit turns every later preview invalid."""
        store, controller = make_controller(abc_row())
        cancelled = MagicMock()
        controller.drag_cancelled.connect(cancelled)

        drag(controller, ["A"], (60, 50), (235, 50))
        store.replace_document(store.document.copy())

        assert controller.is_stale
        preview = controller.update_drag(Vector2(300, 50))
        assert preview.invalid_reason is InvalidReason.STALE_SCENE
        assert controller.end_drag() == []

        cancelled.assert_called_once_with("stale-scene")
        assert store.document.children_of("root") == ("A", "B", "C")
        assert store.generation == 1

    def test_begin_while_active_cancels_previous(self):
        _, controller = make_controller(abc_row())
        cancelled = MagicMock()
        controller.drag_cancelled.connect(cancelled)

        drag(controller, ["A"], (60, 50), (235, 50))
        controller.begin_drag(SURFACE, ["B"], Vector2(180, 50))

        cancelled.assert_called_once_with("cancelled")
        assert controller.session.dragged_doc_ids == ("B",)
        assert not controller.is_dragging

    def test_rejected_batch_leaves_document(self):
        """Test a preview the document cannot take is cancelled, not raised."""
        mini = abc_row()
        builder = MagicMock()
        builder.compute.return_value = DropPreview(
            intent=DropIntent.REPARENT,
            is_valid=True,
            invalid_reason=None,
            surface_id=SURFACE,
            dragged_doc_ids_ordered=("A",),
            dragged_expanded_ids_ordered=("A",),
            target_parent_doc_id="ghost",
            target_parent_expanded_id="ghost",
            insertion_index=0,
            indicator_rect=Rect(10, 10, 2, 80),
            indicator_axis=IndicatorAxis.VERTICAL,
        )
        store = DocumentStore(mini.document)
        cache = SceneCache(layout_resolver=lambda _doc, _surface: (mini.bounds, mini.origin))
        controller = DragDropController(store, cache, builder=builder)
        cancelled, committed = MagicMock(), MagicMock()
        controller.drag_cancelled.connect(cancelled)
        controller.drop_committed.connect(committed)

        drag(controller, ["A"], (60, 50), (235, 50))
        assert controller.end_drag() == []

        cancelled.assert_called_once_with("patch-rejected")
        committed.assert_not_called()
        assert store.generation == 0
        assert store.document.children_of("root") == ("A", "B", "C")
        assert controller.session is None


class TestInstances:
    """Test drags around component instances."""

    def test_drop_beside_instance(self):
        """Test an instance with its own layout is passed over for its parent."""
        store, controller = make_controller(instance_with_layout())
        preview = drag(controller, ["Z"], (50, 25), (300, 250))
        patches = controller.end_drag()

        assert preview.target_parent_doc_id == "page"
        assert patches == [DetachChild("holder", "Z"), AttachChild("page", "Z", 2)]
        assert store.document.children_of("page") == ("holder", "inst_x", "Z")
        assert store.document.children_of("holder") == ()

    def test_drag_from_inside_instance_moves_it(self):
        """Test pressing on an instance's content drags the whole instance."""
        store, controller = make_controller(twin_instances())
        preview = drag(controller, ["inst_x::label_a"], (100, 50), (350, 110))
        patches = controller.end_drag()

        assert preview.dragged_doc_ids_ordered == ("inst_x",)
        assert preview.insertion_index == 1
        assert patches == [DetachChild("page", "inst_x"), AttachChild("page", "inst_x", 1)]
        assert store.document.children_of("page") == ("inst_y", "inst_x")
