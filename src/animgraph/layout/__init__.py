"""Node layout: layered placement, grid fallback, and disconnected packing."""

from .visual import VisualNode

from .geometry import (
    Box,
    Bounds,
    count_fields,
    estimate_node_size,
    node_box,
    bounding_box,
    all_finite,
    grid_columns,
)

from .layered import (
    LayeredPositions,
    LayoutFailed,
    layered_layout,
)

from .grid import (
    grid_arrange,
    pack_disconnected,
)

from .engine import (
    LayoutResult,
    partition_nodes,
    compute_layout,
    arrange,
)

from .projection import (
    project_node,
    project_graph,
)

__all__ = [
    "VisualNode",
    # Geometry
    "Box",
    "Bounds",
    "count_fields",
    "estimate_node_size",
    "node_box",
    "bounding_box",
    "all_finite",
    "grid_columns",
    # Layered placement
    "LayeredPositions",
    "LayoutFailed",
    "layered_layout",
    # Grid placement
    "grid_arrange",
    "pack_disconnected",
    # Engine
    "LayoutResult",
    "partition_nodes",
    "compute_layout",
    "arrange",
    # Projection
    "project_node",
    "project_graph",
]
