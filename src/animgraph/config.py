"""
Configuration for animgraph extraction and layout.

This module defines the dataclasses that capture every tunable parameter of
the pipeline: traversal limits and classifier overrides for the extractor,
spacing and box estimation constants for the layout engine, and the file
locations used by the batch runner.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import FrozenSet, Optional

from animgraph.constants import LINK_TYPES, MAX_DEPTH_CEILING, NODE_TYPE_PREFIX, NODE_TYPES

logger = logging.getLogger(__name__)


@dataclass
class ExtractionConfig:
    """
    Configuration for the graph extractor.

    Attributes:
        max_depth: Maximum nesting depth walked below the root entry. Deeper
            subtrees are truncated and reported as warnings. Values above
            MAX_DEPTH_CEILING are clamped to it.
        resolve_forward_refs: Resolve HandleRefId references to nodes that are
            registered later in the walk.
        walk_all_entries: Also walk every other nodesToInit entry as a root.
        node_types: Node type allow-list.
        link_types: Link wrapper type allow-list.
        type_prefix: Namespace prefix stripped from node types for display.
    """

    max_depth: int = 200
    resolve_forward_refs: bool = True
    walk_all_entries: bool = False
    node_types: FrozenSet[str] = NODE_TYPES
    link_types: FrozenSet[str] = LINK_TYPES
    type_prefix: str = NODE_TYPE_PREFIX

    def __post_init__(self):
        if self.max_depth < 1:
            raise ValueError(f"max_depth must be positive, got {self.max_depth}")
        if self.max_depth > MAX_DEPTH_CEILING:
            logger.warning(
                f"max_depth {self.max_depth} exceeds the recursion-safe ceiling, "
                f"using {MAX_DEPTH_CEILING}"
            )
            self.max_depth = MAX_DEPTH_CEILING
        self.node_types = frozenset(self.node_types)
        self.link_types = frozenset(self.link_types)


@dataclass
class LayoutConfig:
    """
    Configuration for the layout engine.

    Attributes:
        rankdir: Rank direction. Only "LR" (left to right) and "TB" are supported.
        nodesep: Separation between nodes in the same rank.
        ranksep: Separation between adjacent ranks.
        marginx: Horizontal margin around the layered layout.
        marginy: Vertical margin around the layered layout.

        base_width: Minimum estimated node width.
        max_width: Maximum estimated node width.
        width_per_property: Width added per property (largest section).
        base_height: Estimated height of an empty node.
        row_height: Height added per listed property.
        section_header_height: Height added per non-empty property section.
        output_section_height: Height of the output section.

        disconnected_gap: Horizontal gap between the layered layout and the
            packed disconnected nodes.
        disconnected_spacing: Cell pitch of the disconnected grid.

        grid_cell_width: Node width used by the grid fallback.
        grid_cell_height: Node height used by the grid fallback.
        grid_spacing: Spacing added to each grid fallback cell.

        order_iterations: Number of ordering sweeps for crossing reduction.
        break_cycles: Reverse back edges before ranking. When False a cyclic
            edge set fails the layered placement and the grid fallback is used.
    """

    rankdir: str = "LR"
    nodesep: float = 100.0
    ranksep: float = 300.0
    marginx: float = 100.0
    marginy: float = 100.0

    # Node box estimation
    base_width: float = 450.0
    max_width: float = 700.0
    width_per_property: float = 20.0
    base_height: float = 180.0
    row_height: float = 44.0
    section_header_height: float = 40.0
    output_section_height: float = 60.0

    # Disconnected packing
    disconnected_gap: float = 400.0
    disconnected_spacing: float = 500.0

    # Grid fallback
    grid_cell_width: float = 450.0
    grid_cell_height: float = 180.0
    grid_spacing: float = 200.0

    # Layered placement
    order_iterations: int = 8
    break_cycles: bool = True

    def __post_init__(self):
        if self.rankdir not in ("LR", "TB"):
            raise ValueError(f"Unsupported rankdir: {self.rankdir}")
        if self.order_iterations < 0:
            raise ValueError("order_iterations must be >= 0")


@dataclass
class PipelineConfig:
    """
    Configuration for a batch extraction + layout run.

    Attributes:
        json_path: Path to the input graph JSON document.
        graph_id: Run identifier. If None, derived from the json_path stem.
        output_dir: Directory for output parquet files and the manifest.
        extraction: Extractor configuration.
        layout: Layout engine configuration.
        arrange: Compute node positions after extraction.
    """

    json_path: Path
    graph_id: Optional[str] = None
    output_dir: Path = field(default_factory=lambda: Path("output"))
    extraction: ExtractionConfig = field(default_factory=ExtractionConfig)
    layout: LayoutConfig = field(default_factory=LayoutConfig)
    arrange: bool = True

    def __post_init__(self):
        """Normalize paths and derive graph_id from json_path if not provided."""
        if isinstance(self.json_path, str):
            self.json_path = Path(self.json_path)

        if isinstance(self.output_dir, str):
            self.output_dir = Path(self.output_dir)

        if self.graph_id is None:
            # e.g., "player_locomotion.animgraph.json" -> "player_locomotion"
            self.graph_id = self.json_path.name.split(".")[0] or "graph"

    @classmethod
    def for_inspection(cls, json_path: str, output_dir: str = "output") -> "PipelineConfig":
        """
        Create configuration that extracts without arranging.

        Args:
            json_path: Path to the graph JSON document.
            output_dir: Output directory.

        Returns:
            PipelineConfig with layout disabled and every root entry walked.
        """
        return cls(
            json_path=Path(json_path),
            output_dir=Path(output_dir),
            extraction=ExtractionConfig(walk_all_entries=True),
            arrange=False,
        )
