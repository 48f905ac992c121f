"""Qt-facing adapters for the drag-and-drop engine."""
