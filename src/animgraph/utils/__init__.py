"""
Utility modules for animgraph.

Submodules:
    serialize: DataFrame conversion of graphs and layouts for parquet output
"""

from animgraph.utils.serialize import (
    to_jsonable,
    attributes_json,
    graph_to_frames,
    warnings_to_frame,
    layout_to_frame,
)

__all__ = [
    "to_jsonable",
    "attributes_json",
    "graph_to_frames",
    "warnings_to_frame",
    "layout_to_frame",
]
