#!/usr/bin/env python3
"""
Run graph extraction and layout on an animation graph JSON document.

Writes node, edge, warning, and layout tables as parquet plus a run
manifest to the output directory.

Usage:
    python -m animgraph.run_pipeline GRAPH_JSON [--output DIR] [--no-layout]
        [--all-entries] [--max-depth N] [--log-level LEVEL]
"""

import argparse
import logging
from collections import Counter
from typing import Any, Dict, List, Optional

from animgraph.config import ExtractionConfig, PipelineConfig
from animgraph.extraction import extract, load_document
from animgraph.graph.model import Graph
from animgraph.layout import LayoutResult, compute_layout, project_graph
from animgraph.manifest import (
    EXTRACTION_TABLES,
    LAYOUT_TABLES,
    build_manifest,
    write_manifest,
)
from animgraph.utils.serialize import graph_to_frames, layout_to_frame, warnings_to_frame


# =============================================================================
# PIPELINE STAGES
# =============================================================================

def stage_1_extract(config: PipelineConfig) -> Graph:
    """Stage 1: Load the document and extract nodes and edges."""
    print("=" * 70)
    print("STAGE 1: Extracting graph")
    print("=" * 70)

    document = load_document(config.json_path)
    graph = extract(document, config.extraction)
    print(f"Nodes: {graph.node_count}")
    print(f"Edges: {graph.edge_count}")
    if graph.warnings:
        print(f"Warnings: {len(graph.warnings)} (partial extraction)")

    return graph


def stage_2_arrange(graph: Graph, config: PipelineConfig) -> LayoutResult:
    """Stage 2: Project nodes and compute positions."""
    print("\n" + "=" * 70)
    print("STAGE 2: Arranging layout")
    print("=" * 70)

    nodes, edges = project_graph(graph, config.layout)
    result = compute_layout(nodes, edges, config.layout)
    print(f"Method: {result.method}")
    print(f"Connected: {result.connected_count}, disconnected: {result.disconnected_count}")
    if result.failure is not None:
        print(f"Layered placement failed: {result.failure.reason}")

    return result


def stage_3_write(
    graph: Graph,
    layout: Optional[LayoutResult],
    config: PipelineConfig,
) -> List[str]:
    """Stage 3: Write tables and manifest."""
    print("\n" + "=" * 70)
    print("STAGE 3: Writing outputs")
    print("=" * 70)

    output_dir = config.output_dir
    output_dir.mkdir(parents=True, exist_ok=True)

    nodes_df, edges_df = graph_to_frames(graph)
    nodes_df.to_parquet(output_dir / "graph_nodes.parquet", index=False)
    edges_df.to_parquet(output_dir / "graph_edges.parquet", index=False)
    warnings_to_frame(graph).to_parquet(output_dir / "extraction_warnings.parquet", index=False)
    tables = list(EXTRACTION_TABLES)

    if layout is not None:
        layout_to_frame(layout.nodes).to_parquet(output_dir / "node_layout.parquet", index=False)
        tables.extend(LAYOUT_TABLES)

    manifest = build_manifest(
        config.graph_id,
        tables,
        counts={"nodes": graph.node_count, "edges": graph.edge_count},
        layout_method=layout.method if layout is not None else None,
    )
    path = write_manifest(output_dir, manifest)
    print(f"Outputs saved to {output_dir}/ (manifest: {path.name})")

    return tables


# =============================================================================
# MAIN PIPELINE
# =============================================================================

def run_pipeline(config: PipelineConfig) -> Dict[str, Any]:
    """
    Run extraction, layout, and output stages.

    Args:
        config: Pipeline configuration.

    Returns:
        Summary counts for the run.
    """
    graph = stage_1_extract(config)
    layout = stage_2_arrange(graph, config) if config.arrange else None
    tables = stage_3_write(graph, layout, config)

    results = {
        "nodes": graph.node_count,
        "edges": graph.edge_count,
        "warnings": len(graph.warnings),
        "layout_method": layout.method if layout is not None else None,
        "tables": len(tables),
        "node_type_counts": Counter(graph.type_counts()),
    }

    print("\n--- Pipeline Summary ---")
    for key, value in results.items():
        if key == "node_type_counts":
            continue
        print(f"  {key}: {value}")
    top_types = results["node_type_counts"].most_common(5)
    if top_types:
        print(f"  top_node_types: {', '.join(f'{t}:{n}' for t, n in top_types)}")

    return results


# =============================================================================
# CLI
# =============================================================================

def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        description="Extract and lay out an animation graph JSON document"
    )
    parser.add_argument("json_path", help="Path to graph JSON document")
    parser.add_argument("--output", default="output", help="Output directory")
    parser.add_argument(
        "--no-layout",
        action="store_true",
        help="Extract only, skip layout",
    )
    parser.add_argument(
        "--all-entries",
        action="store_true",
        help="Walk every nodesToInit entry, not just the root",
    )
    parser.add_argument(
        "--max-depth",
        type=int,
        default=ExtractionConfig.max_depth,
        help="Maximum document nesting depth to walk",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level",
    )
    return parser


def main(argv: Optional[List[str]] = None) -> None:
    args = build_parser().parse_args(argv)
    logging.basicConfig(
        level=getattr(logging, args.log_level),
        format="%(levelname)s %(name)s: %(message)s",
    )

    config = PipelineConfig(
        json_path=args.json_path,
        output_dir=args.output,
        extraction=ExtractionConfig(
            max_depth=args.max_depth,
            walk_all_entries=args.all_entries,
        ),
        arrange=not args.no_layout,
    )

    results = run_pipeline(config)
    print(f"\nPipeline complete: {results['nodes']} nodes, {results['edges']} edges")


if __name__ == "__main__":
    main()
