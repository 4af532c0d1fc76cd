"""
Run manifest utilities.

The manifest records which tables a run produced, with the classifier
version used to extract them and the layout method that placed the nodes.
"""

from __future__ import annotations

import json
from pathlib import Path
from typing import Dict, List, Optional

from animgraph.constants import CLASSIFIER_VERSION

MANIFEST_FILENAME = "animgraph_manifest.json"

EXTRACTION_TABLES = [
    "graph_nodes.parquet",
    "graph_edges.parquet",
    "extraction_warnings.parquet",
]
LAYOUT_TABLES = ["node_layout.parquet"]


def build_manifest(
    graph_id: str,
    tables: List[str],
    counts: Optional[Dict[str, int]] = None,
    layout_method: Optional[str] = None,
) -> Dict[str, object]:
    """Create a manifest dictionary for the given graph."""
    return {
        "classifier_version": CLASSIFIER_VERSION,
        "graph_id": graph_id,
        "tables": sorted(tables),
        "counts": dict(counts or {}),
        "layout_method": layout_method,
    }


def write_manifest(output_dir: Path, manifest: Dict[str, object]) -> Path:
    """Persist manifest to disk."""
    output_dir.mkdir(parents=True, exist_ok=True)
    path = output_dir / MANIFEST_FILENAME
    with open(path, "w", encoding="utf-8") as fh:
        json.dump(manifest, fh, indent=2, sort_keys=True)
    return path


def load_manifest(output_dir: Path) -> Dict[str, object]:
    """Load manifest from disk."""
    path = output_dir / MANIFEST_FILENAME
    if not path.exists():
        raise FileNotFoundError(f"No manifest found at {path}")
    with open(path, "r", encoding="utf-8") as fh:
        return json.load(fh)


def required_tables(arranged: bool) -> List[str]:
    """Tables a run must produce."""
    if arranged:
        return EXTRACTION_TABLES + LAYOUT_TABLES
    return list(EXTRACTION_TABLES)


__all__ = [
    "MANIFEST_FILENAME",
    "build_manifest",
    "write_manifest",
    "load_manifest",
    "required_tables",
]
