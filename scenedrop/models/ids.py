"""Module: ids.py

Date: 2026-10-19

The two identifier spaces of the engine.

DocId is the stable identity of a document tree node; every persisted edit
targets a DocId. ExpandedId is the identity of a node as rendered: equal to
the DocId for plain nodes, namespaced as ``<instance expanded id>::<local id>``
for nodes produced by flattening a component instance. One DocId may render
under several ExpandedIds, so the two are never interchangeable.
"""

from typing import NewType

from scenedrop.config import EXPANDED_ID_SEPARATOR

DocId = NewType("DocId", str)
ExpandedId = NewType("ExpandedId", str)


def validate_doc_id(doc_id: str) -> DocId:
    """Return ``doc_id`` as a DocId.

    Raises:
        ValueError: If the id is empty or contains the expanded-id separator.
    """
    if not doc_id:
        raise ValueError("Document id must not be empty")
    if EXPANDED_ID_SEPARATOR in doc_id:
        raise ValueError(
            f"Document id {doc_id!r} must not contain {EXPANDED_ID_SEPARATOR!r}"
        )
    return DocId(doc_id)


def namespace_id(local_id: str, namespace: str | None) -> ExpandedId:
    """Expanded id of ``local_id`` rendered inside ``namespace`` (if any)."""
    if namespace is None:
        return ExpandedId(local_id)
    return ExpandedId(f"{namespace}{EXPANDED_ID_SEPARATOR}{local_id}")


def is_inside_instance(expanded_id: str) -> bool:
    """Whether the expanded id was produced by instance flattening."""
    return EXPANDED_ID_SEPARATOR in expanded_id


def owning_instance(expanded_id: str) -> ExpandedId | None:
    """Outermost instance segment of a namespaced id, None for plain ids.

    ``inst_a::inst_b::label`` -> ``inst_a``
    """
    if not is_inside_instance(expanded_id):
        return None
    return ExpandedId(expanded_id.split(EXPANDED_ID_SEPARATOR, 1)[0])


def local_id(expanded_id: str) -> DocId:
    """Document id of the last segment: ``inst_a::row_1`` -> ``row_1``."""
    return DocId(expanded_id.rsplit(EXPANDED_ID_SEPARATOR, 1)[-1])
