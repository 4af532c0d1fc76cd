"""
Layered placement for directed graphs.

This module places the connected part of a graph in ranks, left to right by
default, so that every edge points from a lower rank to a higher one where
the edge set allows it.

Algorithm Overview:
1. Build a weighted DiGraph (parallel edges add weight, self-loops dropped)
2. Reverse DFS back edges so the graph is acyclic (or fail if cycles are
   not to be broken)
3. Rank by longest path from the sources; pull sources toward their
   successors
4. Split edges spanning several ranks with dummy nodes
5. Order each rank: DFS initial order, then barycenter sweeps, keeping the
   order with fewest crossings
6. Assign coordinates: ranks at fixed offsets along the rank axis, nodes
   within a rank separated by nodesep and pulled toward their neighbors
7. Convert center-anchored coordinates to top-left positions

The result is explicit: LayeredPositions on success, LayoutFailed when the
placement cannot produce finite coordinates for every node.
"""

import logging
from dataclasses import dataclass, field
from typing import Dict, Iterable, List, Optional, Sequence, Tuple, Union

import networkx as nx
import numpy as np

from animgraph.config import LayoutConfig
from animgraph.graph.edges import Edge
from animgraph.layout.geometry import Box, node_box
from animgraph.layout.visual import VisualNode

logger = logging.getLogger(__name__)

FAILURE_CYCLIC = "cyclic"
FAILURE_NON_FINITE = "non_finite"


@dataclass(frozen=True, order=True)
class DummyNode:
    """Placeholder splitting a long edge, one per intermediate rank."""

    index: int


# Layered graph vertex: a document node id or a long-edge placeholder
LayerNode = Union[str, DummyNode]


# =============================================================================
# RESULT TYPES
# =============================================================================

@dataclass
class LayeredPositions:
    """
    Successful layered placement.

    Attributes:
        positions: Node id -> (x, y) top-left position.
        ranks: Node id -> rank index.
        crossings: Weighted edge crossings of the final ordering.
        reversed_edges: Edges reversed to break cycles.
    """

    positions: Dict[str, Tuple[float, float]] = field(default_factory=dict)
    ranks: Dict[str, int] = field(default_factory=dict)
    crossings: int = 0
    reversed_edges: List[Tuple[str, str]] = field(default_factory=list)

    @property
    def rank_count(self) -> int:
        return len(set(self.ranks.values()))


@dataclass
class LayoutFailed:
    """
    Failed layered placement.

    Attributes:
        reason: "cyclic" or "non_finite".
        detail: Human-readable description.
    """

    reason: str
    detail: str = ""


LayeredResult = Union[LayeredPositions, LayoutFailed]


# =============================================================================
# GRAPH CONSTRUCTION
# =============================================================================

def build_layout_graph(node_ids: Sequence[str], edges: Iterable[Edge]) -> nx.DiGraph:
    """
    Weighted directed graph over node_ids.

    Parallel edges are merged into one with summed weight. Self-loops and
    edges with an end outside node_ids are dropped.
    """
    graph = nx.DiGraph()
    graph.add_nodes_from(node_ids)
    for edge in edges:
        if edge.source == edge.target:
            continue
        if edge.source not in graph or edge.target not in graph:
            continue
        if graph.has_edge(edge.source, edge.target):
            graph[edge.source][edge.target]["weight"] += 1
        else:
            graph.add_edge(edge.source, edge.target, weight=1)
    return graph


def find_back_edges(graph: nx.DiGraph, order: Sequence[str]) -> List[Tuple[str, str]]:
    """
    Back edges of a depth-first search started from nodes in order.

    Reversing every returned edge makes the graph acyclic.
    """
    on_stack = 1
    done = 2
    state: Dict[str, int] = {}
    back: List[Tuple[str, str]] = []

    for start in order:
        if start in state:
            continue
        state[start] = on_stack
        stack = [(start, iter(list(graph.successors(start))))]
        while stack:
            node, successors = stack[-1]
            for succ in successors:
                succ_state = state.get(succ)
                if succ_state is None:
                    state[succ] = on_stack
                    stack.append((succ, iter(list(graph.successors(succ)))))
                    break
                if succ_state == on_stack:
                    back.append((node, succ))
            else:
                state[node] = done
                stack.pop()
    return back


def make_acyclic(graph: nx.DiGraph, order: Sequence[str]) -> Tuple[nx.DiGraph, List[Tuple[str, str]]]:
    """
    Copy of graph with DFS back edges reversed.

    Returns:
        Tuple of (acyclic graph, reversed edges).
    """
    back = find_back_edges(graph, order)
    if not back:
        return graph, []

    dag = graph.copy()
    for u, v in back:
        weight = dag[u][v]["weight"]
        dag.remove_edge(u, v)
        if dag.has_edge(v, u):
            dag[v][u]["weight"] += weight
        else:
            dag.add_edge(v, u, weight=weight)
    logger.debug(f"Reversed {len(back)} back edges")
    return dag, back


# =============================================================================
# RANKING
# =============================================================================

def assign_ranks(dag: nx.DiGraph, index: Dict[str, int]) -> Dict[str, int]:
    """
    Longest-path ranks, with sources pulled next to their nearest successor.

    Raises:
        nx.NetworkXUnfeasible: If dag contains a cycle.
    """
    topo = list(nx.lexicographical_topological_sort(dag, key=lambda n: index[n]))

    ranks: Dict[str, int] = {}
    for node in topo:
        ranks[node] = max((ranks[p] + 1 for p in dag.predecessors(node)), default=0)

    # Sources sit at rank 0 under longest-path; move them up to their successors
    for node in reversed(topo):
        if dag.in_degree(node) == 0 and dag.out_degree(node) > 0:
            ranks[node] = min(ranks[s] for s in dag.successors(node)) - 1

    low = min(ranks.values(), default=0)
    return {node: rank - low for node, rank in ranks.items()}


def split_long_edges(
    dag: nx.DiGraph,
    ranks: Dict[str, int],
) -> Tuple[nx.DiGraph, Dict[LayerNode, int]]:
    """
    Replace edges spanning more than one rank with chains of dummy nodes.

    Returns:
        Tuple of (proper layered graph, ranks including dummies).
    """
    layered = nx.DiGraph()
    layered.add_nodes_from(dag.nodes)
    all_ranks = dict(ranks)
    counter = 0

    for u, v, data in dag.edges(data=True):
        weight = data.get("weight", 1)
        span = ranks[v] - ranks[u]
        prev = u
        for step in range(1, span):
            dummy = DummyNode(counter)
            counter += 1
            layered.add_node(dummy)
            all_ranks[dummy] = ranks[u] + step
            layered.add_edge(prev, dummy, weight=weight)
            prev = dummy
        layered.add_edge(prev, v, weight=weight)

    return layered, all_ranks


# =============================================================================
# ORDERING
# =============================================================================

def initial_order(
    layered: nx.DiGraph,
    ranks: Dict[LayerNode, int],
    index: Dict[str, int],
) -> List[List[LayerNode]]:
    """Rank lists filled in depth-first visit order from low-rank nodes."""
    rank_count = max(ranks.values(), default=-1) + 1
    layers: List[List[LayerNode]] = [[] for _ in range(rank_count)]
    seen = set()

    def sort_key(node: LayerNode) -> Tuple[int, int]:
        if isinstance(node, DummyNode):
            return (ranks[node], len(index) + node.index)
        return (ranks[node], index[node])

    for start in sorted(layered.nodes, key=sort_key):
        if start in seen:
            continue
        stack = [start]
        while stack:
            node = stack.pop()
            if node in seen:
                continue
            seen.add(node)
            layers[ranks[node]].append(node)
            # Reverse so the first successor is visited first
            stack.extend(sorted(layered.successors(node), key=sort_key, reverse=True))
    return layers


def _barycenters(
    layer: List[LayerNode],
    fixed_pos: Dict[LayerNode, int],
    neighbors,
    weights,
) -> List[Tuple[float, int, LayerNode]]:
    keyed = []
    for pos, node in enumerate(layer):
        total = 0.0
        weight_sum = 0.0
        for other in neighbors(node):
            w = weights(node, other)
            total += fixed_pos[other] * w
            weight_sum += w
        bary = total / weight_sum if weight_sum else float(pos)
        keyed.append((bary, pos, node))
    return keyed


def count_layer_crossings(
    north: List[LayerNode],
    south: List[LayerNode],
    layered: nx.DiGraph,
) -> int:
    """
    Weighted crossings between two adjacent ranks.

    Uses an accumulator tree over south positions: edges are taken in north
    order, and each edge crosses every earlier edge ending further south.
    """
    south_pos = {node: i for i, node in enumerate(south)}
    entries = []
    for node in north:
        targets = [(south_pos[s], layered[node][s]["weight"]) for s in layered.successors(node) if s in south_pos]
        entries.extend(sorted(targets))

    if not entries:
        return 0

    size = 1
    while size < len(south):
        size *= 2
    # Heap layout: root at 0, leaves at size - 1 .. 2 * size - 2
    tree = np.zeros(2 * size - 1, dtype=np.int64)
    crossings = 0
    for pos, weight in entries:
        idx = pos + size - 1
        tree[idx] += weight
        weight_sum = 0
        while idx > 0:
            if idx % 2:
                # Left child: everything under the right sibling ends further south
                weight_sum += int(tree[idx + 1])
            idx = (idx - 1) // 2
            tree[idx] += weight
        crossings += weight * weight_sum
    return int(crossings)


def count_crossings(layers: List[List[LayerNode]], layered: nx.DiGraph) -> int:
    return sum(
        count_layer_crossings(layers[r], layers[r + 1], layered)
        for r in range(len(layers) - 1)
    )


def order_layers(
    layered: nx.DiGraph,
    layers: List[List[LayerNode]],
    iterations: int,
) -> Tuple[List[List[LayerNode]], int]:
    """
    Reduce crossings with alternating barycenter sweeps.

    Returns:
        Tuple of (best ordering found, its crossing count).
    """
    best = [list(layer) for layer in layers]
    best_crossings = count_crossings(best, layered)
    current = [list(layer) for layer in layers]

    def in_weight(node, other):
        return layered[other][node]["weight"]

    def out_weight(node, other):
        return layered[node][other]["weight"]

    for i in range(iterations):
        if best_crossings == 0:
            break
        if i % 2 == 0:
            sweep = range(1, len(current))
            fixed_offset = -1
            neighbors = layered.predecessors
            weights = in_weight
        else:
            sweep = range(len(current) - 2, -1, -1)
            fixed_offset = 1
            neighbors = layered.successors
            weights = out_weight

        for r in sweep:
            fixed_pos = {node: p for p, node in enumerate(current[r + fixed_offset])}
            keyed = _barycenters(current[r], fixed_pos, neighbors, weights)
            current[r] = [node for _, _, node in sorted(keyed)]

        crossings = count_crossings(current, layered)
        if crossings < best_crossings:
            best = [list(layer) for layer in current]
            best_crossings = crossings

    return best, best_crossings


# =============================================================================
# COORDINATE ASSIGNMENT
# =============================================================================

def _place_layer(desired: np.ndarray, extents: np.ndarray, nodesep: float) -> np.ndarray:
    """
    Centers as close to desired as min separation allows, order preserved.

    A forward pass enforces separation, then the layer is shifted as a block
    so its mean displacement from desired is zero.
    """
    centers = desired.astype(float).copy()
    for i in range(1, len(centers)):
        min_center = centers[i - 1] + (extents[i - 1] + extents[i]) / 2.0 + nodesep
        if centers[i] < min_center:
            centers[i] = min_center
    if len(centers):
        centers += float(np.mean(desired - centers))
    return centers


def assign_coordinates(
    layered: nx.DiGraph,
    layers: List[List[LayerNode]],
    boxes: Dict[str, Box],
    config: LayoutConfig,
) -> Dict[LayerNode, Tuple[float, float]]:
    """
    Center coordinates for every node in the layered graph.

    Returns:
        Node id -> (x, y) center, in screen coordinates.
    """
    horizontal = config.rankdir == "LR"

    def rank_extent(node: LayerNode) -> float:
        width, height = boxes.get(node, (0.0, 0.0))
        return width if horizontal else height

    def cross_extent(node: LayerNode) -> float:
        width, height = boxes.get(node, (0.0, 0.0))
        return height if horizontal else width

    # Rank axis: fixed offset per rank
    rank_sizes = [max((rank_extent(n) for n in layer), default=0.0) for layer in layers]
    rank_axis: Dict[LayerNode, float] = {}
    offset = 0.0
    for layer, size in zip(layers, rank_sizes):
        for node in layer:
            rank_axis[node] = offset + size / 2.0
        offset += size + config.ranksep

    # Cross axis: packed, then pulled toward neighbors in alternating sweeps
    cross_axis: Dict[LayerNode, float] = {}
    for layer in layers:
        extents = np.array([cross_extent(n) for n in layer], dtype=float)
        centers = _place_layer(np.zeros(len(layer)), extents, config.nodesep)
        cross_axis.update(zip(layer, centers))

    sweeps = max(2, config.order_iterations)
    for i in range(sweeps):
        downward = i % 2 == 0
        sweep = range(1, len(layers)) if downward else range(len(layers) - 2, -1, -1)
        for r in sweep:
            layer = layers[r]
            desired = []
            for node in layer:
                if downward:
                    pairs = [(p, layered[p][node]["weight"]) for p in layered.predecessors(node)]
                else:
                    pairs = [(s, layered[node][s]["weight"]) for s in layered.successors(node)]
                if pairs:
                    total = sum(w for _, w in pairs)
                    desired.append(sum(cross_axis[n] * w for n, w in pairs) / total)
                else:
                    desired.append(cross_axis[node])
            extents = np.array([cross_extent(n) for n in layer], dtype=float)
            centers = _place_layer(np.asarray(desired, dtype=float), extents, config.nodesep)
            cross_axis.update(zip(layer, centers))

    # Shift so boxes start at the margins
    real = [n for n in rank_axis if not isinstance(n, DummyNode)] or list(rank_axis)
    cross_low = min((cross_axis[n] - cross_extent(n) / 2.0 for n in real), default=0.0)
    rank_low = min((rank_axis[n] - rank_extent(n) / 2.0 for n in real), default=0.0)

    centers: Dict[LayerNode, Tuple[float, float]] = {}
    for node in rank_axis:
        along = rank_axis[node] - rank_low
        across = cross_axis[node] - cross_low
        if horizontal:
            centers[node] = (along + config.marginx, across + config.marginy)
        else:
            centers[node] = (across + config.marginx, along + config.marginy)
    return centers


# =============================================================================
# ENTRY POINT
# =============================================================================

def layered_layout(
    nodes: Sequence[VisualNode],
    edges: Iterable[Edge],
    config: Optional[LayoutConfig] = None,
) -> LayeredResult:
    """
    Layered placement of nodes.

    Args:
        nodes: Nodes to place (normally the connected ones).
        edges: Edges between them; edges with an end outside nodes are ignored.
        config: Layout configuration.

    Returns:
        LayeredPositions with a finite top-left position for every node, or
        LayoutFailed.
    """
    config = config or LayoutConfig()
    node_ids = [node.node_id for node in nodes]
    index = {node_id: i for i, node_id in enumerate(node_ids)}
    boxes = {node.node_id: node_box(node, config) for node in nodes}

    graph = build_layout_graph(node_ids, edges)

    if config.break_cycles:
        dag, reversed_edges = make_acyclic(graph, node_ids)
    else:
        if not nx.is_directed_acyclic_graph(graph):
            return LayoutFailed(FAILURE_CYCLIC, "edge set has cycles and break_cycles is off")
        dag, reversed_edges = graph, []

    try:
        ranks = assign_ranks(dag, index)
    except nx.NetworkXUnfeasible as e:
        return LayoutFailed(FAILURE_CYCLIC, str(e))

    layered, all_ranks = split_long_edges(dag, ranks)
    layers = initial_order(layered, all_ranks, index)
    layers, crossings = order_layers(layered, layers, config.order_iterations)
    centers = assign_coordinates(layered, layers, boxes, config)

    ids = np.array(node_ids, dtype=object)
    center_arr = np.array([centers[n] for n in node_ids], dtype=float).reshape(-1, 2)
    box_arr = np.array([boxes[n] for n in node_ids], dtype=float).reshape(-1, 2)
    top_left = center_arr - box_arr / 2.0

    if not np.isfinite(top_left).all():
        bad = ids[~np.isfinite(top_left).all(axis=1)].tolist()
        return LayoutFailed(FAILURE_NON_FINITE, f"non-finite coordinates for {bad[:5]}")

    positions = {
        node_id: (float(x), float(y))
        for node_id, (x, y) in zip(node_ids, top_left)
    }
    logger.debug(
        f"Layered {len(node_ids)} nodes into {len(layers)} ranks "
        f"({crossings} crossings, {len(reversed_edges)} reversed edges)"
    )
    return LayeredPositions(
        positions=positions,
        ranks={n: ranks[n] for n in node_ids},
        crossings=crossings,
        reversed_edges=reversed_edges,
    )
