"""
Serialization utilities for animgraph outputs.

This module converts extracted graphs and layouts to pandas DataFrames for
parquet output. Parquet has strict type requirements, so node payloads are
stored as JSON strings and numpy scalars are converted to plain Python types.
"""

import json
from collections.abc import Mapping
from typing import Any, Iterable, Tuple

import numpy as np
import pandas as pd

from animgraph.graph.edges import generate_edge_id
from animgraph.graph.model import Graph
from animgraph.layout.visual import VisualNode

NODE_COLUMNS = [
    "node_id", "node_type", "raw_type", "label",
    "socket_count", "property_count", "attributes_json",
]
EDGE_COLUMNS = ["edge_id", "source", "target", "socket"]
LAYOUT_COLUMNS = ["node_id", "x", "y", "width", "height", "node_type", "label", "color"]
WARNING_COLUMNS = ["kind", "path", "detail"]


def to_jsonable(value: Any) -> Any:
    """
    Convert numpy scalars and arrays to plain Python values.

    Example:
        >>> to_jsonable(np.float64(1.5))
        1.5
        >>> to_jsonable({"a": np.array([1, 2])})
        {'a': [1, 2]}
    """
    if isinstance(value, Mapping):
        return {str(k): to_jsonable(v) for k, v in value.items()}
    if isinstance(value, (list, tuple)):
        return [to_jsonable(v) for v in value]
    if isinstance(value, np.ndarray):
        return value.tolist()
    if isinstance(value, np.integer):
        return int(value)
    if isinstance(value, np.floating):
        return float(value)
    return value


def attributes_json(attributes: Any) -> str:
    """Stable JSON encoding of a node payload."""
    return json.dumps(to_jsonable(attributes), sort_keys=True)


def graph_to_frames(graph: Graph) -> Tuple[pd.DataFrame, pd.DataFrame]:
    """
    Node and edge tables for a graph.

    Args:
        graph: Extracted graph.

    Returns:
        Tuple of (nodes_df, edges_df), rows in registry and edge-list order.
    """
    node_rows = []
    for record in graph.registry.values():
        row = record.to_dict()
        row["attributes_json"] = attributes_json(record.attributes)
        node_rows.append(row)
    nodes_df = pd.DataFrame(node_rows, columns=NODE_COLUMNS)

    edge_rows = [edge.to_dict(generate_edge_id(i)) for i, edge in enumerate(graph.edges)]
    edges_df = pd.DataFrame(edge_rows, columns=EDGE_COLUMNS)
    return nodes_df, edges_df


def warnings_to_frame(graph: Graph) -> pd.DataFrame:
    """Table of partial-extraction warnings."""
    rows = [
        {"kind": w.kind, "path": w.path, "detail": w.detail}
        for w in graph.warnings
    ]
    return pd.DataFrame(rows, columns=WARNING_COLUMNS)


def layout_to_frame(nodes: Iterable[VisualNode]) -> pd.DataFrame:
    """Table of node positions, one row per node."""
    rows = [node.to_dict() for node in nodes]
    df = pd.DataFrame(rows, columns=LAYOUT_COLUMNS)
    for col in ("x", "y", "width", "height"):
        df[col] = df[col].astype(float)
    return df
