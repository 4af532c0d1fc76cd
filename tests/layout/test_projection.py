from __future__ import annotations

from animgraph.constants import COLOR_MAP
from animgraph.extraction import extract
from animgraph.graph import build_node_record
from animgraph.layout import project_graph, project_node


def test_project_node_carries_display_fields():
    record = build_node_record(
        "14",
        {"$type": "animAnimNode_State", "name": {"$type": "CName", "$value": "Move"}},
    )
    visual = project_node(record, index=7)

    assert visual.node_id == "14"
    assert visual.node_type == "State"
    assert visual.label == "State: Move"
    assert visual.color == COLOR_MAP.get("State", COLOR_MAP["Default"])
    assert visual.position == (900.0, 300.0)
    assert visual.width == 450.0 + 20.0
    assert visual.height is not None


def test_project_graph_follows_registry_order(locomotion_document):
    graph = extract(locomotion_document)
    nodes, edges = project_graph(graph)

    assert [n.node_id for n in nodes] == list(graph.registry)
    assert edges == graph.edges
    assert edges is not graph.edges
