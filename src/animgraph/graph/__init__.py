"""Graph data structures produced by extraction."""

from .nodes import (
    # Data structures
    NodeRecord,
    # Construction
    build_node_record,
    # Attribute shape
    is_listed_property,
    is_node_reference,
    unwrap_value,
    node_label,
)

from .edges import (
    Edge,
    generate_edge_id,
    indexed_socket,
    connected_node_ids,
)

from .model import (
    Graph,
    ExtractionWarning,
    WARNING_MAX_DEPTH,
    WARNING_CYCLE,
    WARNING_UNRESOLVED_REF,
)

__all__ = [
    # Node data structures
    "NodeRecord",
    "build_node_record",
    # Attribute shape
    "is_listed_property",
    "is_node_reference",
    "unwrap_value",
    "node_label",
    # Edges
    "Edge",
    "generate_edge_id",
    "indexed_socket",
    "connected_node_ids",
    # Graph
    "Graph",
    "ExtractionWarning",
    "WARNING_MAX_DEPTH",
    "WARNING_CYCLE",
    "WARNING_UNRESOLVED_REF",
]
