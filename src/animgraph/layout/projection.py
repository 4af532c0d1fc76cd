"""
Projection of an extracted graph onto visual nodes.

Each registered node becomes one VisualNode carrying its display type,
label, type color, and estimated box. Initial positions are a 5-wide
placeholder grid; arrange() replaces them.
"""

from typing import List, Optional, Tuple

from animgraph.classify import get_color
from animgraph.config import LayoutConfig
from animgraph.graph.edges import Edge
from animgraph.graph.model import Graph
from animgraph.graph.nodes import NodeRecord, node_label
from animgraph.layout.geometry import estimate_node_size
from animgraph.layout.visual import VisualNode

PLACEHOLDER_COLUMNS = 5
PLACEHOLDER_PITCH = (450.0, 300.0)


def project_node(
    record: NodeRecord,
    index: int = 0,
    config: Optional[LayoutConfig] = None,
) -> VisualNode:
    """VisualNode for one record, at its placeholder grid slot."""
    width, height = estimate_node_size(record.attributes, config)
    return VisualNode(
        node_id=record.node_id,
        x=(index % PLACEHOLDER_COLUMNS) * PLACEHOLDER_PITCH[0],
        y=(index // PLACEHOLDER_COLUMNS) * PLACEHOLDER_PITCH[1],
        width=width,
        height=height,
        node_type=record.node_type,
        label=node_label(record),
        color=get_color(record.node_type),
        attributes=record.attributes,
    )


def project_graph(
    graph: Graph,
    config: Optional[LayoutConfig] = None,
) -> Tuple[List[VisualNode], List[Edge]]:
    """
    Visual nodes and edges for a graph, in registry and edge-list order.

    Returns:
        Tuple of (visual nodes, edges).
    """
    nodes = [
        project_node(record, idx, config)
        for idx, record in enumerate(graph.registry.values())
    ]
    return nodes, list(graph.edges)
