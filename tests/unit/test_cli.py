"""Tests for the gesture replay command.

Date: 2026-10-19
"""

import json

import pytest

from scenedrop.cli import EXIT_BAD_INPUT, EXIT_NO_DROP, EXIT_OK, main
from tests.mocks import SURFACE, abc_row


def _gesture(moves, nodes=("A",), press=(60, 50)):
    mini = abc_row()
    return {
        "document": mini.document.to_dict(),
        "surface": SURFACE,
        "bounds": {
            eid: [rect.left, rect.top, rect.width, rect.height]
            for eid, rect in mini.bounds.items()
        },
        "origin": [0, 0],
        "drag": {"nodes": list(nodes), "press": list(press), "moves": [list(m) for m in moves]},
    }


@pytest.fixture
def gesture_file(tmp_path):
    def write(data):
        path = tmp_path / "gesture.json"
        path.write_text(json.dumps(data), encoding="utf-8")
        return str(path)

    return write


def _children(document, doc_id):
    return next(n["children"] for n in document["nodes"] if n["id"] == doc_id)


class TestReplay:
    """Test replaying gestures from a file."""

    def test_reorder_written_to_output(self, gesture_file, tmp_path):
        out = tmp_path / "result.json"
        path = gesture_file(_gesture([(235, 50)]))

        assert main([path, "--output", str(out)]) == EXIT_OK

        result = json.loads(out.read_text(encoding="utf-8"))
        assert _children(result, "root") == ["B", "A", "C"]

    def test_result_on_stdout(self, gesture_file, capsys):
        path = gesture_file(_gesture([(200, 50), (5, 50)], nodes=("C",), press=(300, 50)))

        assert main([path]) == EXIT_OK

        result = json.loads(capsys.readouterr().out)
        assert _children(result, "root") == ["C", "A", "B"]

    def test_invalid_drop_is_no_op(self, gesture_file, tmp_path):
        """Test a release outside every container leaves the document alone."""
        out = tmp_path / "result.json"
        path = gesture_file(_gesture([(1000, 1000)]))

        assert main([path, "--output", str(out)]) == EXIT_NO_DROP

        result = json.loads(out.read_text(encoding="utf-8"))
        assert _children(result, "root") == ["A", "B", "C"]


class TestBadInput:
    """Test unusable gesture files."""

    def test_missing_file(self, tmp_path):
        assert main([str(tmp_path / "missing.json")]) == EXIT_BAD_INPUT

    def test_not_json(self, tmp_path):
        path = tmp_path / "gesture.json"
        path.write_text("{not json", encoding="utf-8")
        assert main([str(path)]) == EXIT_BAD_INPUT

    def test_missing_drag(self, gesture_file):
        data = _gesture([(235, 50)])
        del data["drag"]
        assert main([gesture_file(data)]) == EXIT_BAD_INPUT

    def test_no_dragged_nodes(self, gesture_file):
        assert main([gesture_file(_gesture([(235, 50)], nodes=()))]) == EXIT_BAD_INPUT
