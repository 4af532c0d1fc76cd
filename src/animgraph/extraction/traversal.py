"""
Graph extraction by structural traversal.

This module recovers graph nodes and edges from a raw document. There is no
adjacency list in the document; edges are inferred from where node objects
appear relative to each other.

Traversal Rules (depth-first, single pass):
1. Start at the root entry with no parent and no socket.
2. Node boundary (object with HandleId and a "Data" payload whose $type is a
   node type):
   - register the node on first sight (later sightings are not re-walked)
   - walk each payload field with this node as parent and the field name as
     socket
   - if a parent and socket are set, emit an edge node -> parent
3. Link wrapper (object whose $type is a link type): follow its "node"
   field, keeping the current parent and socket.
4. Handle reference ({"HandleRefId": id}): emit an edge id -> parent if id
   is registered; otherwise hold it until the walk ends.
5. Plain structure: lists recurse per element with "socket[i]" labels,
   objects recurse per field with the field name as socket. Scalars stop.

Guards:
- Subtrees deeper than ExtractionConfig.max_depth are truncated.
- A container already on the current walk path is skipped.
Both are reported as Graph.warnings instead of raising.
"""

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional, Set, Tuple

from animgraph.classify import NodeKind, classify
from animgraph.config import ExtractionConfig
from animgraph.constants import (
    FIELD_HANDLE_ID,
    FIELD_HANDLE_REF_ID,
    FIELD_LINK_NODE,
    FIELD_PAYLOAD,
    FIELD_TYPE,
)
from animgraph.extraction.document import get_root_collection, get_root_entry
from animgraph.graph.edges import Edge, indexed_socket
from animgraph.graph.model import (
    WARNING_CYCLE,
    WARNING_MAX_DEPTH,
    WARNING_UNRESOLVED_REF,
    ExtractionWarning,
    Graph,
)
from animgraph.graph.nodes import NodeRecord, build_node_record

logger = logging.getLogger(__name__)


# =============================================================================
# EXTRACTION CONTEXT
# =============================================================================

@dataclass
class ExtractionContext:
    """
    Mutable state threaded through one extraction walk.

    Attributes:
        config: Extraction configuration.
        registry: Node id -> NodeRecord, in registration order.
        edges: Edges in emission order.
        visited: Node ids whose payload has been walked.
        warnings: Partial-extraction notices.
        pending_refs: (ref_id, parent_id, socket) references seen before
            their node was registered.
        active: id() of containers on the current walk path.
    """

    config: ExtractionConfig = field(default_factory=ExtractionConfig)
    registry: Dict[str, NodeRecord] = field(default_factory=dict)
    edges: List[Edge] = field(default_factory=list)
    visited: Set[str] = field(default_factory=set)
    warnings: List[ExtractionWarning] = field(default_factory=list)
    pending_refs: List[Tuple[str, str, str]] = field(default_factory=list)
    active: Set[int] = field(default_factory=set)

    def kind_of(self, obj: Dict[str, Any]) -> NodeKind:
        return classify(obj.get(FIELD_TYPE), self.config.node_types, self.config.link_types)

    def register(self, node_id: str, payload: Dict[str, Any]) -> None:
        self.registry[node_id] = build_node_record(node_id, payload, self.config.type_prefix)
        self.visited.add(node_id)

    def link(self, source: str, target: str, socket: str) -> None:
        """Record an edge; both ends must already be registered."""
        if source not in self.registry or target not in self.registry:
            logger.debug(f"Skipped edge {source} -> {target} via {socket}: unregistered end")
            return
        self.edges.append(Edge(source=source, target=target, socket=socket))

    def warn(self, kind: str, path: str, detail: str) -> None:
        logger.warning(f"Partial extraction at {path}: {detail}")
        self.warnings.append(ExtractionWarning(kind=kind, path=path, detail=detail))

    def to_graph(self, root_id: Optional[str] = None) -> Graph:
        return Graph(
            registry=self.registry,
            edges=self.edges,
            root_id=root_id,
            warnings=self.warnings,
        )


# =============================================================================
# WALK
# =============================================================================

def node_handle(obj: Dict[str, Any], ctx: ExtractionContext) -> Optional[str]:
    """
    HandleId of obj if it is a node boundary, else None.

    A node boundary carries a HandleId and a "Data" payload whose $type is in
    the node allow-list.
    """
    handle_id = obj.get(FIELD_HANDLE_ID)
    payload = obj.get(FIELD_PAYLOAD)
    if handle_id is None or not isinstance(payload, dict):
        return None
    if ctx.kind_of(payload) is not NodeKind.NODE:
        return None
    return str(handle_id)


def walk(
    obj: Any,
    ctx: ExtractionContext,
    parent_id: Optional[str] = None,
    socket: Optional[str] = None,
    depth: int = 0,
    path: str = "",
) -> None:
    """
    Walk one document value, registering nodes and emitting edges into ctx.

    Args:
        obj: Document value (object, list, or scalar).
        ctx: Extraction context to update.
        parent_id: Id of the nearest enclosing node, if any.
        socket: Socket label the value was reached under.
        depth: Nesting depth below the walk start.
        path: Document path of obj, for warnings.
    """
    if not isinstance(obj, (dict, list)):
        return

    if depth > ctx.config.max_depth:
        ctx.warn(WARNING_MAX_DEPTH, path, f"subtree deeper than {ctx.config.max_depth} truncated")
        return

    # Node boundaries are guarded by the visited set, not the path set
    handle_id = node_handle(obj, ctx) if isinstance(obj, dict) else None
    if handle_id is not None:
        _visit_node(handle_id, obj[FIELD_PAYLOAD], ctx, parent_id, socket, depth, path)
        return

    marker = id(obj)
    if marker in ctx.active:
        ctx.warn(WARNING_CYCLE, path, "container already on walk path skipped")
        return

    ctx.active.add(marker)
    try:
        if isinstance(obj, list):
            for idx, item in enumerate(obj):
                walk(item, ctx, parent_id, indexed_socket(socket, idx), depth + 1, f"{path}[{idx}]")
        else:
            _walk_object(obj, ctx, parent_id, socket, depth, path)
    finally:
        ctx.active.discard(marker)


def _walk_object(
    obj: Dict[str, Any],
    ctx: ExtractionContext,
    parent_id: Optional[str],
    socket: Optional[str],
    depth: int,
    path: str,
) -> None:
    ref_id = obj.get(FIELD_HANDLE_REF_ID)
    if ref_id is not None:
        _visit_reference(str(ref_id), ctx, parent_id, socket)
        return

    if ctx.kind_of(obj) is NodeKind.LINK:
        # Referenced node(s) feed the enclosing node under the current socket
        walk(obj.get(FIELD_LINK_NODE), ctx, parent_id, socket, depth + 1, f"{path}/{FIELD_LINK_NODE}")
        return

    for key, value in obj.items():
        walk(value, ctx, parent_id, key, depth + 1, f"{path}/{key}")


def _visit_node(
    node_id: str,
    payload: Dict[str, Any],
    ctx: ExtractionContext,
    parent_id: Optional[str],
    socket: Optional[str],
    depth: int,
    path: str,
) -> None:
    if node_id not in ctx.visited:
        ctx.register(node_id, payload)
        payload_path = f"{path}/{FIELD_PAYLOAD}"
        for key, value in payload.items():
            walk(value, ctx, node_id, key, depth + 1, f"{payload_path}/{key}")

    # Emitted after the payload walk so upstream edges precede this one
    if parent_id is not None and socket:
        ctx.link(node_id, parent_id, socket)


def _visit_reference(
    ref_id: str,
    ctx: ExtractionContext,
    parent_id: Optional[str],
    socket: Optional[str],
) -> None:
    if parent_id is None or not socket:
        return
    if ref_id in ctx.registry:
        ctx.link(ref_id, parent_id, socket)
    elif ctx.config.resolve_forward_refs:
        ctx.pending_refs.append((ref_id, parent_id, socket))
    else:
        logger.debug(f"Dropped reference to unregistered node {ref_id} via {socket}")


def resolve_pending_refs(ctx: ExtractionContext) -> int:
    """
    Emit edges for references whose node was registered after they were seen.

    Returns:
        Number of edges emitted.
    """
    resolved = 0
    for ref_id, parent_id, socket in ctx.pending_refs:
        if ref_id in ctx.registry:
            ctx.link(ref_id, parent_id, socket)
            resolved += 1
        else:
            logger.debug(f"Unresolved reference {ref_id} -> {parent_id} via {socket}")
            ctx.warnings.append(ExtractionWarning(
                kind=WARNING_UNRESOLVED_REF,
                path=socket,
                detail=f"HandleRefId {ref_id} never defined",
            ))
    ctx.pending_refs = []
    return resolved


# =============================================================================
# ENTRY POINT
# =============================================================================

def extract(document: Any, config: Optional[ExtractionConfig] = None) -> Graph:
    """
    Extract the node registry and edge list from a graph document.

    Args:
        document: Parsed JSON document.
        config: Extraction configuration (defaults apply if None).

    Returns:
        Graph with registry, edges, and any partial-extraction warnings.
        The graph is empty if no object matches the node allow-list.

    Raises:
        InvalidDocument: If the document has no root entry with a payload.
    """
    ctx = ExtractionContext(config=config or ExtractionConfig())
    root_entry = get_root_entry(document)

    walk(root_entry, ctx, path="nodesToInit[0]")

    if ctx.config.walk_all_entries:
        for idx, entry in enumerate(get_root_collection(document)[1:], start=1):
            walk(entry, ctx, path=f"nodesToInit[{idx}]")

    resolved = resolve_pending_refs(ctx)

    root_handle = root_entry.get(FIELD_HANDLE_ID)
    root_id = str(root_handle) if root_handle is not None and str(root_handle) in ctx.registry else None
    graph = ctx.to_graph(root_id=root_id)

    logger.info(
        f"Extracted {graph.node_count} nodes, {graph.edge_count} edges "
        f"({resolved} forward refs resolved, {len(graph.warnings)} warnings)"
    )
    return graph
