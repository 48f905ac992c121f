"""Core engine: scene expansion, drag resolution, patching and the document store."""
