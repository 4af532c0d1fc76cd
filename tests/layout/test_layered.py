from __future__ import annotations

import math

import networkx as nx
import pytest

from animgraph.config import LayoutConfig
from animgraph.graph import Edge
from animgraph.layout import LayeredPositions, LayoutFailed, VisualNode, layered_layout
from animgraph.layout.layered import (
    FAILURE_CYCLIC,
    FAILURE_NON_FINITE,
    DummyNode,
    build_layout_graph,
    count_layer_crossings,
    find_back_edges,
    split_long_edges,
)

W, H = 450.0, 200.0


def box(node_id, width=W, height=H):
    return VisualNode(node_id=node_id, width=width, height=height)


def test_chain_is_left_to_right_with_rank_separation():
    config = LayoutConfig()
    result = layered_layout([box("A"), box("B")], [Edge("A", "B", "input")], config)

    assert isinstance(result, LayeredPositions)
    ax, ay = result.positions["A"]
    bx, by = result.positions["B"]
    assert ax < bx
    assert bx - (ax + W) == pytest.approx(config.ranksep)
    assert ay == pytest.approx(by)
    assert (ax, ay) == pytest.approx((config.marginx, config.marginy))
    assert result.ranks == {"A": 0, "B": 1}


def test_top_to_bottom_direction():
    config = LayoutConfig(rankdir="TB")
    result = layered_layout([box("A"), box("B")], [Edge("A", "B", "input")], config)
    ax, ay = result.positions["A"]
    bx, by = result.positions["B"]
    assert ay < by
    assert by - (ay + H) == pytest.approx(config.ranksep)
    assert ax == pytest.approx(bx)


def test_same_rank_nodes_do_not_overlap():
    config = LayoutConfig()
    nodes = [box("A"), box("B"), box("R")]
    edges = [Edge("A", "R", "first"), Edge("B", "R", "second")]
    result = layered_layout(nodes, edges, config)

    assert result.ranks["A"] == result.ranks["B"] == 0
    ay = result.positions["A"][1]
    by = result.positions["B"][1]
    assert abs(ay - by) >= H + config.nodesep - 1e-6


def test_cycle_is_broken_by_default():
    nodes = [box("A"), box("B")]
    edges = [Edge("A", "B", "x"), Edge("B", "A", "y")]
    result = layered_layout(nodes, edges)

    assert isinstance(result, LayeredPositions)
    assert result.reversed_edges == [("B", "A")]
    assert all(math.isfinite(v) for xy in result.positions.values() for v in xy)


def test_cycle_fails_when_not_broken():
    nodes = [box("A"), box("B")]
    edges = [Edge("A", "B", "x"), Edge("B", "A", "y")]
    result = layered_layout(nodes, edges, LayoutConfig(break_cycles=False))

    assert isinstance(result, LayoutFailed)
    assert result.reason == FAILURE_CYCLIC


def test_non_finite_size_fails():
    nodes = [box("A", width=float("nan")), box("B")]
    result = layered_layout(nodes, [Edge("A", "B", "x")])

    assert isinstance(result, LayoutFailed)
    assert result.reason == FAILURE_NON_FINITE


def test_self_loops_and_outside_edges_are_ignored():
    graph = build_layout_graph(["A", "B"], [
        Edge("A", "A", "loop"),
        Edge("A", "B", "x"),
        Edge("A", "B", "x"),
        Edge("Z", "B", "x"),
    ])
    assert list(graph.edges(data="weight")) == [("A", "B", 2)]


def test_long_edges_are_split():
    dag = nx.DiGraph([("A", "B"), ("B", "C"), ("A", "C")])
    nx.set_edge_attributes(dag, 1, "weight")
    layered, ranks = split_long_edges(dag, {"A": 0, "B": 1, "C": 2})

    dummies = [n for n in layered if n not in dag]
    assert len(dummies) == 1
    assert ranks[dummies[0]] == 1
    assert all(ranks[v] - ranks[u] == 1 for u, v in layered.edges)


def test_find_back_edges():
    graph = nx.DiGraph([("A", "B"), ("B", "C"), ("C", "A"), ("A", "C")])
    back = find_back_edges(graph, ["A", "B", "C"])
    assert back == [("C", "A")]
    assert find_back_edges(nx.DiGraph([("A", "B")]), ["A", "B"]) == []


def test_count_layer_crossings():
    crossed = nx.DiGraph([("a", "d"), ("b", "c")])
    nx.set_edge_attributes(crossed, 1, "weight")
    assert count_layer_crossings(["a", "b"], ["c", "d"], crossed) == 1
    assert count_layer_crossings(["a", "b"], ["d", "c"], crossed) == 0

    fan = nx.DiGraph([("a", "e"), ("b", "d"), ("c", "c2")])
    nx.set_edge_attributes(fan, 1, "weight")
    assert count_layer_crossings(["a", "b", "c"], ["c2", "d", "e"], fan) == 3


def test_ordering_removes_avoidable_crossings():
    # A feeds the second child and B the first; ordering should uncross them
    nodes = [box(n) for n in ["A", "B", "C", "D", "R"]]
    edges = [
        Edge("A", "D", "x"),
        Edge("B", "C", "x"),
        Edge("C", "R", "first"),
        Edge("D", "R", "second"),
    ]
    result = layered_layout(nodes, edges)
    assert result.crossings == 0


def test_placeholder_names_cannot_collide_with_node_ids():
    config = LayoutConfig()
    nodes = [box("A"), box("B"), box("C"), box("__dummy__0")]
    edges = [
        Edge("A", "B", "x"),
        Edge("B", "C", "x"),
        Edge("A", "C", "skip"),
        Edge("__dummy__0", "C", "y"),
    ]
    graph = build_layout_graph([n.node_id for n in nodes], edges)
    layered, ranks = split_long_edges(graph, {"A": 0, "B": 1, "C": 2, "__dummy__0": 1})

    assert not layered.has_edge("A", "__dummy__0")
    assert list(layered.predecessors("__dummy__0")) == []
    placeholders = [n for n in layered if isinstance(n, DummyNode)]
    assert len(placeholders) == 1
    assert list(layered.predecessors(placeholders[0])) == ["A"]

    result = layered_layout(nodes, edges, config)
    assert result.ranks["__dummy__0"] == 1
    by = result.positions["B"][1]
    dy = result.positions["__dummy__0"][1]
    assert abs(by - dy) >= H + config.nodesep - 1e-6
    assert min(x for x, _ in result.positions.values()) == pytest.approx(config.marginx)
    assert min(y for _, y in result.positions.values()) == pytest.approx(config.marginy)
