"""
Geometry utilities for node layout.

This module estimates node boxes and computes bounds over placed nodes.
Rendered nodes list their socket fields and their plain properties in two
sections, so a node grows taller with every listed field and mildly wider
with the larger section, up to a cap.

Key concepts:
- Box: (width, height) of a node
- Position: (x, y) of a node's top-left corner
- Bounds: (min_x, min_y, max_x, max_y) over a set of placed nodes
"""

import math
from typing import Any, Iterable, Mapping, Optional, Tuple

import numpy as np

from animgraph.config import LayoutConfig
from animgraph.graph.nodes import is_listed_property, is_node_reference
from animgraph.layout.visual import VisualNode

# Type aliases
Box = Tuple[float, float]
Bounds = Tuple[float, float, float, float]


def count_fields(attributes: Mapping[str, Any]) -> Tuple[int, int]:
    """
    Count socket-like and plain fields of a node payload.

    Args:
        attributes: Node payload.

    Returns:
        Tuple of (socket_count, property_count).

    Example:
        >>> count_fields({
        ...     "$type": "animAnimNode_Output",
        ...     "node": {"$type": "animPoseLink", "node": {"HandleRefId": "3"}},
        ...     "id": 4,
        ... })
        (1, 1)
    """
    sockets = 0
    properties = 0
    for key, value in attributes.items():
        if not is_listed_property(key):
            continue
        if is_node_reference(value):
            sockets += 1
        else:
            properties += 1
    return sockets, properties


def estimate_node_size(
    attributes: Optional[Mapping[str, Any]],
    config: Optional[LayoutConfig] = None,
) -> Box:
    """
    Estimate the rendered box of a node from its payload shape.

    Height is the base height plus one row per listed field, a header per
    non-empty section, and the output section. Width grows with the larger
    section, clamped to [base_width, max_width].

    Args:
        attributes: Node payload (None is treated as empty).
        config: Layout configuration.

    Returns:
        Tuple of (width, height).

    Example:
        >>> estimate_node_size({})
        (450.0, 240.0)
    """
    config = config or LayoutConfig()
    sockets, properties = count_fields(attributes or {})

    socket_height = sockets * config.row_height + config.section_header_height if sockets else 0.0
    property_height = (
        properties * config.row_height + config.section_header_height if properties else 0.0
    )
    height = config.base_height + socket_height + property_height + config.output_section_height

    width = config.base_width + max(sockets, properties) * config.width_per_property
    width = max(config.base_width, min(config.max_width, width))
    return float(width), float(height)


def node_box(node: VisualNode, config: Optional[LayoutConfig] = None) -> Box:
    """Explicit node dimensions where set, estimated ones otherwise."""
    if node.width is not None and node.height is not None:
        return float(node.width), float(node.height)
    est_width, est_height = estimate_node_size(node.attributes, config)
    width = node.width if node.width is not None else est_width
    height = node.height if node.height is not None else est_height
    return float(width), float(height)


def bounding_box(
    nodes: Iterable[VisualNode],
    config: Optional[LayoutConfig] = None,
) -> Optional[Bounds]:
    """
    Bounds enclosing every node box.

    Args:
        nodes: Placed nodes.
        config: Layout configuration, for size estimation.

    Returns:
        (min_x, min_y, max_x, max_y), or None if nodes is empty.
    """
    rows = []
    for node in nodes:
        width, height = node_box(node, config)
        rows.append((node.x, node.y, node.x + width, node.y + height))
    if not rows:
        return None
    arr = np.asarray(rows, dtype=float)
    return (
        float(arr[:, 0].min()),
        float(arr[:, 1].min()),
        float(arr[:, 2].max()),
        float(arr[:, 3].max()),
    )


def all_finite(values: Iterable[float]) -> bool:
    """True if every value is a finite number."""
    arr = np.asarray(list(values), dtype=float)
    return bool(np.isfinite(arr).all())


def grid_columns(count: int) -> int:
    """Square-ish column count: ceil(sqrt(count)), at least 1."""
    if count <= 0:
        return 1
    cols = math.isqrt(count)
    return cols if cols * cols == count else cols + 1
