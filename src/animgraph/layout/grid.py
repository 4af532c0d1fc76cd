"""
Grid placement.

Two uses:
- grid_arrange: topology-blind fallback for a whole node list. It has no
  failure mode and is the backstop when layered placement fails.
- pack_disconnected: square-ish grid for nodes without edges, started at a
  given origin (to the right of the layered layout).

Both use cols = ceil(sqrt(n)) and fill row by row in input order.
"""

from typing import List, Optional, Sequence

from animgraph.config import LayoutConfig
from animgraph.layout.geometry import grid_columns
from animgraph.layout.visual import VisualNode


def grid_cell(index: int, cols: int) -> tuple:
    """
    (row, col) of the index-th cell in a grid with cols columns.

    Example:
        >>> grid_cell(5, 3)
        (1, 2)
    """
    return index // cols, index % cols


def grid_arrange(
    nodes: Sequence[VisualNode],
    config: Optional[LayoutConfig] = None,
) -> List[VisualNode]:
    """
    Place every node on a uniform grid.

    Args:
        nodes: Nodes to place.
        config: Layout configuration (cell size and spacing).

    Returns:
        Copies of nodes, in input order, at their grid positions.
    """
    config = config or LayoutConfig()
    cols = grid_columns(len(nodes))
    pitch_x = config.grid_cell_width + config.grid_spacing
    pitch_y = config.grid_cell_height + config.grid_spacing

    placed = []
    for idx, node in enumerate(nodes):
        row, col = grid_cell(idx, cols)
        placed.append(node.with_position(col * pitch_x, row * pitch_y))
    return placed


def pack_disconnected(
    nodes: Sequence[VisualNode],
    start_x: float,
    start_y: float = 0.0,
    config: Optional[LayoutConfig] = None,
) -> List[VisualNode]:
    """
    Pack nodes into a square-ish grid starting at (start_x, start_y).

    Args:
        nodes: Nodes without edges.
        start_x: Left edge of the grid.
        start_y: Top edge of the grid.
        config: Layout configuration (cell pitch).

    Returns:
        Copies of nodes, in input order, at their packed positions.
    """
    config = config or LayoutConfig()
    cols = grid_columns(len(nodes))
    spacing = config.disconnected_spacing

    placed = []
    for idx, node in enumerate(nodes):
        row, col = grid_cell(idx, cols)
        placed.append(node.with_position(start_x + col * spacing, start_y + row * spacing))
    return placed
