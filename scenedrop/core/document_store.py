"""Module: document_store.py

Date: 2026-10-19

Holder of the current SceneDocument.

Every change bumps a monotonically increasing generation; rendered scenes and
drag sessions remember the generation they were built from, which is how a
change from outside a drag invalidates it. A patch batch is atomic: it is
applied to a copy that replaces the current document only if every
operation succeeded, so one batch is one step for an external undo history.
"""

from __future__ import annotations

from collections.abc import Sequence

from scenedrop.core.patch.patch_applier import PatchApplyError, apply_patches
from scenedrop.models.document import SceneDocument
from scenedrop.models.patch_ops import PatchOp
from scenedrop.utils.events import Observable, Signal
from scenedrop.utils.logging.logger_factory import get_cached_logger

logger = get_cached_logger(__name__)


class DocumentStore(Observable):
    """Current document, its generation and change notifications.

    Signals:
        document_changed(document, generation): after any change
        batch_applied(patches, generation): after a successful patch batch
    """

    document_changed = Signal(object, int)
    batch_applied = Signal(list, int)

    def __init__(self, document: SceneDocument | None = None, generation: int = 0):
        self._document = document if document is not None else SceneDocument()
        self._generation = generation

    @property
    def document(self) -> SceneDocument:
        return self._document

    @property
    def generation(self) -> int:
        return self._generation

    def apply_batch(self, patches: Sequence[PatchOp]) -> SceneDocument:
        """Apply ``patches`` atomically.

        Args:
            patches: Operations to apply in order

        Returns:
            The new current document (unchanged for an empty batch)

        Raises:
            PatchApplyError: If any operation fails; nothing is applied.
        """
        if not patches:
            return self._document

        try:
            updated = apply_patches(self._document, patches)
        except PatchApplyError as e:
            logger.error("[DocumentStore] Batch of %d rejected: %s", len(patches), e)
            raise

        self._document = updated
        self._generation += 1
        logger.info(
            "[DocumentStore] Applied batch of %d operations (generation %d)",
            len(patches),
            self._generation,
        )
        self.batch_applied.emit(list(patches), self._generation)
        self.document_changed.emit(self._document, self._generation)
        return self._document

    def replace_document(self, document: SceneDocument) -> None:
        """Swap in a document edited elsewhere."""
        self._document = document
        self._generation += 1
        logger.debug(
            "[DocumentStore] Document replaced (generation %d)",
            self._generation,
            extra={"dev_only": True},
        )
        self.document_changed.emit(self._document, self._generation)
