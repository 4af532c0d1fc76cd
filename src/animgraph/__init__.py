"""
animgraph: node and edge recovery and layout for animation graph documents.

Typical use:

    from animgraph import extract, arrange, project_graph

    graph = extract(document)
    nodes, edges = project_graph(graph)
    placed = arrange(nodes, edges)
"""

from animgraph.classify import NodeKind, classify, is_link, is_node
from animgraph.config import ExtractionConfig, LayoutConfig, PipelineConfig
from animgraph.constants import LINK_TYPES, NODE_TYPES
from animgraph.exceptions import AnimGraphError, InvalidDocument
from animgraph.extraction import extract, load_document
from animgraph.graph import Edge, Graph, NodeRecord
from animgraph.layout import (
    LayoutResult,
    VisualNode,
    arrange,
    compute_layout,
    grid_arrange,
    project_graph,
)

__version__ = "0.1.0"

__all__ = [
    # Classifier
    "NODE_TYPES",
    "LINK_TYPES",
    "NodeKind",
    "classify",
    "is_node",
    "is_link",
    # Configuration
    "ExtractionConfig",
    "LayoutConfig",
    "PipelineConfig",
    # Errors
    "AnimGraphError",
    "InvalidDocument",
    # Extraction
    "extract",
    "load_document",
    "Graph",
    "NodeRecord",
    "Edge",
    # Layout
    "VisualNode",
    "LayoutResult",
    "arrange",
    "compute_layout",
    "grid_arrange",
    "project_graph",
]
