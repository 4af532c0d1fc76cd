"""
Graph edge records.

Edges are inferred from document structure. An edge points from the
referenced (child) node to the node that references it, reflecting "this
output feeds that input":

    source: node found under a socket field
    target: node owning that socket field
    socket: field name, with "[i]" suffixes inside ordered sequences

Edges are append-only. Identical (source, target, socket) triples are kept
once per structural occurrence; multiple references are genuine fan-in.
"""

from dataclasses import dataclass
from typing import Any, Dict, Iterable, Optional, Set


@dataclass(frozen=True)
class Edge:
    """
    A single graph edge.

    Attributes:
        source: Node id feeding the socket.
        target: Node id owning the socket.
        socket: Socket label ("inputNode", "inputNodes[2]").
    """

    source: str
    target: str
    socket: str

    def to_dict(self, edge_id: Optional[str] = None) -> Dict[str, Any]:
        """Convert to dictionary for DataFrame construction."""
        row = {
            "source": self.source,
            "target": self.target,
            "socket": self.socket,
        }
        if edge_id is not None:
            row = {"edge_id": edge_id, **row}
        return row


def generate_edge_id(index: int) -> str:
    """Edge ID from its position in the edge list ("edge-0", "edge-1", ...)."""
    return f"edge-{index}"


def indexed_socket(socket: Optional[str], index: int) -> str:
    """
    Socket label for an element of an ordered sequence.

    Example:
        >>> indexed_socket("inputNodes", 2)
        'inputNodes[2]'
        >>> indexed_socket(None, 0)
        '[0]'
    """
    return f"{socket or ''}[{index}]"


def connected_node_ids(edges: Iterable[Edge]) -> Set[str]:
    """Ids appearing as the source or target of at least one edge."""
    ids: Set[str] = set()
    for edge in edges:
        ids.add(edge.source)
        ids.add(edge.target)
    return ids

