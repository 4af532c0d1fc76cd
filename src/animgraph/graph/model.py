"""
The extracted graph: node registry, edge list, and extraction warnings.

A Graph is built fresh on every document load and discarded wholesale on
the next one. There is no incremental update path.
"""

from collections import Counter
from dataclasses import dataclass, field
from typing import Dict, List, Optional

from animgraph.graph.edges import Edge
from animgraph.graph.nodes import NodeRecord

WARNING_MAX_DEPTH = "max_depth"
WARNING_CYCLE = "cycle"
WARNING_UNRESOLVED_REF = "unresolved_ref"


@dataclass(frozen=True)
class ExtractionWarning:
    """
    A partial-extraction notice.

    Attributes:
        kind: "max_depth", "cycle", or "unresolved_ref".
        path: Document path where the walk stopped ("Data/states[1]/...").
        detail: Human-readable description.
    """

    kind: str
    path: str
    detail: str = ""


@dataclass
class Graph:
    """
    Result of graph extraction.

    Attributes:
        registry: Node id -> NodeRecord, in registration order.
        edges: Edges in discovery order.
        root_id: HandleId of the root entry, if it was a registered node.
        warnings: Partial-extraction notices (truncated subtrees, cycles).
    """

    registry: Dict[str, NodeRecord] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    root_id: Optional[str] = None
    warnings: List[ExtractionWarning] = field(default_factory=list)

    @property
    def node_count(self) -> int:
        return len(self.registry)

    @property
    def edge_count(self) -> int:
        return len(self.edges)

    @property
    def truncated(self) -> bool:
        """True if any subtree was cut off by the depth or cycle guard."""
        return any(w.kind in (WARNING_MAX_DEPTH, WARNING_CYCLE) for w in self.warnings)

    def node_types(self) -> List[str]:
        """Sorted unique display types present in the registry."""
        return sorted({record.node_type for record in self.registry.values()})

    def type_counts(self) -> Counter:
        return Counter(record.node_type for record in self.registry.values())

    def __repr__(self) -> str:
        return (
            f"Graph(nodes={self.node_count}, edges={self.edge_count}, "
            f"warnings={len(self.warnings)})"
        )
