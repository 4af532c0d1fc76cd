"""Graph extraction from raw animation graph documents."""

from .document import (
    load_document,
    get_root_collection,
    get_root_entry,
)

from .traversal import (
    ExtractionContext,
    node_handle,
    walk,
    resolve_pending_refs,
    extract,
)

__all__ = [
    # Document access
    "load_document",
    "get_root_collection",
    "get_root_entry",
    # Traversal
    "ExtractionContext",
    "node_handle",
    "walk",
    "resolve_pending_refs",
    "extract",
]
