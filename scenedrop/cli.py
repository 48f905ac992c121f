"""Module: cli.py

Date: 2026-10-19

Command line replay of a recorded drag gesture.

Reads a JSON file holding a document, the laid-out bounds of one surface and a
gesture (dragged nodes, press point, pointer moves), runs it through
DragDropController and writes the resulting document as JSON.

Usage:
    scenedrop-replay gesture.json [--zoom 1.0] [--output result.json]
                                  [--log-to-file] [--log-dir logs]

Gesture file layout:
    {
        "document": {"nodes": [...], "surfaces": {...}, "components": {...}},
        "surface": "page",
        "bounds": {"root": [0, 0, 400, 100], "inst::row_1": [...]},
        "origin": [0, 0],
        "drag": {"nodes": ["A"], "press": [60, 50], "moves": [[235, 50]]}
    }
"""

from __future__ import annotations

import argparse
import json
import sys
from collections.abc import Sequence
from typing import Any

from scenedrop.config import APP_NAME, LOG_DIR
from scenedrop.core.document_store import DocumentStore
from scenedrop.core.drag.drag_controller import DragDropController
from scenedrop.core.scene.scene_cache import SceneCache
from scenedrop.core.scene.scene_expander import SceneBuildError
from scenedrop.models.document import SceneDocument
from scenedrop.models.geometry import Rect, Vector2
from scenedrop.models.ids import ExpandedId
from scenedrop.utils.logging.init_logging import init_logging
from scenedrop.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)

EXIT_OK = 0
EXIT_NO_DROP = 1
EXIT_BAD_INPUT = 2


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="scenedrop-replay",
        description="Replay a drag gesture against a scene document.",
    )
    parser.add_argument("gesture", help="JSON file with document, bounds and gesture")
    parser.add_argument("--zoom", type=float, default=1.0, help="Canvas zoom for every move")
    parser.add_argument("--output", help="Write the resulting document here instead of stdout")
    parser.add_argument("--log-to-file", action="store_true", help="Also log to rotating files")
    parser.add_argument("--log-dir", default=LOG_DIR, help="Directory for log files")
    return parser


def load_gesture(data: dict[str, Any]) -> tuple[SceneDocument, SceneCache, dict[str, Any]]:
    """Split a gesture file into document, scene cache and drag description.

    Raises:
        KeyError: If a required section is missing.
        ValueError: If the document or bounds are malformed.
    """
    document = SceneDocument.from_dict(data["document"])
    bounds = {eid: Rect(*values) for eid, values in data["bounds"].items()}
    origin = Vector2(*data.get("origin", (0.0, 0.0)))

    drag = data["drag"]
    if not drag.get("nodes"):
        raise ValueError("Gesture has no dragged nodes")
    cache = SceneCache(layout_resolver=lambda _document, _surface: (bounds, origin))
    return document, cache, drag


def replay(
    document: SceneDocument,
    cache: SceneCache,
    surface_id: str,
    drag: dict[str, Any],
    zoom: float = 1.0,
) -> tuple[DocumentStore, list]:
    """Run one press-move-release gesture and return the store and patches."""
    store = DocumentStore(document)
    controller = DragDropController(store, cache)

    dragged = [ExpandedId(eid) for eid in drag["nodes"]]
    controller.begin_drag(surface_id, dragged, Vector2(*drag["press"]))
    for point in drag.get("moves", ()):
        preview = controller.update_drag(Vector2(*point), zoom)
        if preview is not None:
            logger.debug("[Replay] %s", preview.to_debug_dict(), extra={"dev_only": True})

    patches = controller.end_drag()
    return store, patches


def main(argv: Sequence[str] | None = None) -> int:
    """Entry point of ``scenedrop-replay``.

    Returns:
        0 when the drop changed the document, 1 when it was a no-op,
        2 when the gesture file could not be used
    """
    args = build_parser().parse_args(argv)
    init_logging(APP_NAME, log_dir=args.log_dir, to_file=args.log_to_file)

    try:
        with open(args.gesture, encoding="utf-8") as f:
            data = json.load(f)
        document, cache, drag = load_gesture(data)
        surface_id = data.get("surface") or next(iter(document.surfaces))
        store, patches = replay(document, cache, surface_id, drag, args.zoom)
    except (OSError, json.JSONDecodeError) as e:
        logger.error("[Replay] Cannot read %s: %s", args.gesture, e)
        return EXIT_BAD_INPUT
    except (KeyError, ValueError, StopIteration, SceneBuildError) as e:
        logger.error("[Replay] Invalid gesture file %s: %s", args.gesture, e)
        return EXIT_BAD_INPUT

    result = json.dumps(store.document.to_dict(), indent=2)
    if args.output:
        with open(args.output, "w", encoding="utf-8") as f:
            f.write(result + "\n")
    else:
        print(result)

    if not patches:
        logger.info("[Replay] Drop left the document unchanged")
        return EXIT_NO_DROP
    logger.info("[Replay] Applied %d patch operations", len(patches))
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
