"""
Layout engine: positions for every node of an extracted graph.

Layout Strategy:
1. Partition nodes into connected (an end of some edge) and disconnected
2. Layered placement of the connected nodes
3. If layered placement fails, grid-place all nodes and stop
4. Otherwise pack the disconnected nodes to the right of the layered
   layout's bounding box, separated by a fixed gap
5. Return connected nodes followed by disconnected nodes

The engine is total: every input node comes back with a finite position.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple

from animgraph.config import LayoutConfig
from animgraph.constants import LAYOUT_GRID, LAYOUT_LAYERED
from animgraph.graph.edges import Edge, connected_node_ids
from animgraph.layout.geometry import Bounds, bounding_box
from animgraph.layout.grid import grid_arrange, pack_disconnected
from animgraph.layout.layered import LayoutFailed, layered_layout
from animgraph.layout.visual import VisualNode

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    """
    Result of arranging a node list.

    Attributes:
        nodes: Positioned nodes (connected first, then disconnected).
        method: "layered" or "grid".
        bounds: (min_x, min_y, max_x, max_y) over all node boxes.
        connected_count: Number of nodes placed by layered placement.
        disconnected_count: Number of nodes packed beside it.
        failure: Why layered placement was abandoned, if it was.
    """

    nodes: List[VisualNode] = field(default_factory=list)
    method: str = LAYOUT_LAYERED
    bounds: Optional[Bounds] = None
    connected_count: int = 0
    disconnected_count: int = 0
    failure: Optional[LayoutFailed] = None

    @property
    def positions(self) -> Dict[str, Tuple[float, float]]:
        """Node id -> (x, y)."""
        return {node.node_id: node.position for node in self.nodes}

    def __repr__(self) -> str:
        return (
            f"LayoutResult(method={self.method}, nodes={len(self.nodes)}, "
            f"connected={self.connected_count}, disconnected={self.disconnected_count})"
        )


def partition_nodes(
    nodes: Sequence[VisualNode],
    edges: Iterable[Edge],
) -> Tuple[List[VisualNode], List[VisualNode], List[Edge]]:
    """
    Split nodes into connected and disconnected sets.

    Only edges with both ends among nodes count.

    Returns:
        Tuple of (connected nodes, disconnected nodes, usable edges), node
        lists in input order.
    """
    known = {node.node_id for node in nodes}
    usable = [edge for edge in edges if edge.source in known and edge.target in known]

    linked = connected_node_ids(usable)
    connected = [node for node in nodes if node.node_id in linked]
    disconnected = [node for node in nodes if node.node_id not in linked]
    return connected, disconnected, usable


def compute_layout(
    nodes: Sequence[VisualNode],
    edges: Iterable[Edge],
    config: Optional[LayoutConfig] = None,
) -> LayoutResult:
    """
    Arrange nodes and report how it was done.

    Args:
        nodes: Nodes to place.
        edges: Graph edges (source feeds target).
        config: Layout configuration.

    Returns:
        LayoutResult with a position for every input node.
    """
    config = config or LayoutConfig()
    nodes = list(nodes)
    if not nodes:
        return LayoutResult(method=LAYOUT_LAYERED)

    connected, disconnected, usable = partition_nodes(nodes, edges)

    placed_connected: List[VisualNode] = []
    if connected:
        outcome = layered_layout(connected, usable, config)
        if isinstance(outcome, LayoutFailed):
            logger.warning(f"Layered layout failed ({outcome.reason}: {outcome.detail}), using grid layout")
            placed = grid_arrange(nodes, config)
            return LayoutResult(
                nodes=placed,
                method=LAYOUT_GRID,
                bounds=bounding_box(placed, config),
                connected_count=0,
                disconnected_count=len(placed),
                failure=outcome,
            )
        placed_connected = [
            node.with_position(*outcome.positions[node.node_id]) for node in connected
        ]

    placed_disconnected: List[VisualNode] = []
    if disconnected:
        max_x = 0.0
        connected_bounds = bounding_box(placed_connected, config)
        if connected_bounds is not None:
            max_x = max(max_x, connected_bounds[2])
        placed_disconnected = pack_disconnected(
            disconnected,
            start_x=max_x + config.disconnected_gap,
            start_y=0.0,
            config=config,
        )

    placed = placed_connected + placed_disconnected
    logger.info(
        f"Layout completed: {len(placed_connected)} connected nodes, "
        f"{len(placed_disconnected)} disconnected nodes"
    )
    return LayoutResult(
        nodes=placed,
        method=LAYOUT_LAYERED,
        bounds=bounding_box(placed, config),
        connected_count=len(placed_connected),
        disconnected_count=len(placed_disconnected),
    )


def arrange(
    nodes: Sequence[VisualNode],
    edges: Iterable[Edge],
    config: Optional[LayoutConfig] = None,
) -> List[VisualNode]:
    """
    Position every node: layered for connected nodes, packed grid for the rest.

    Falls back to grid_arrange over all nodes if layered placement fails.

    Args:
        nodes: Nodes to place.
        edges: Graph edges.
        config: Layout configuration.

    Returns:
        Positioned copies of every input node, connected nodes first.
    """
    return compute_layout(nodes, edges, config).nodes
