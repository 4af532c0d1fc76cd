from __future__ import annotations

from collections import Counter

import pytest

from animgraph.config import ExtractionConfig
from animgraph.exceptions import InvalidDocument
from animgraph.extraction import ExtractionContext, extract, walk
from animgraph.graph import Edge, WARNING_CYCLE, WARNING_MAX_DEPTH, WARNING_UNRESOLVED_REF


def test_root_link_chain_yields_registry_and_edges(abr_document):
    graph = extract(abr_document)

    assert set(graph.registry) == {"A", "B", "R"}
    assert graph.edges == [
        Edge(source="A", target="B", socket="input"),
        Edge(source="B", target="R", socket="node"),
    ]
    assert graph.root_id == "R"
    assert graph.registry["B"].node_type == "BlendAdditive"
    assert graph.registry["B"].raw_type == "animAnimNode_BlendAdditive"
    assert graph.warnings == []


def test_missing_root_collection_raises(build):
    with pytest.raises(InvalidDocument):
        extract({"Data": {"RootChunk": {"$type": "animAnimGraph"}}})


def test_root_without_payload_raises(build):
    doc = build.document({"HandleId": "0", "Payload": {"$type": "animAnimNode_Output"}})
    with pytest.raises(InvalidDocument):
        extract(doc)


def test_every_edge_end_is_registered(locomotion_document):
    graph = extract(locomotion_document)
    for edge in graph.edges:
        assert edge.source in graph.registry
        assert edge.target in graph.registry


def test_locomotion_edges_follow_sockets(locomotion_document):
    graph = extract(locomotion_document)

    assert list(graph.registry) == ["16", "15", "14", "13", "10", "11", "12"]
    assert [(e.source, e.target, e.socket) for e in graph.edges] == [
        ("10", "13", "weightNode"),
        ("11", "13", "inputNodes[0]"),
        ("12", "13", "inputNodes[1]"),
        ("11", "13", "inputNodes[2]"),
        ("13", "14", "rootNode"),
        ("14", "15", "states[0]"),
        ("10", "15", "valueNode"),
        ("15", "16", "node"),
    ]


def test_unlisted_type_is_not_registered_even_with_handle(locomotion_document):
    graph = extract(locomotion_document)
    # debugInfo carries HandleId "99" but animDebugData is not a node type
    assert "99" not in graph.registry


def test_tag_match_is_case_sensitive(build):
    inner = build.node("X", "animanimnode_floatconstant")
    doc = build.document(build.node("R", "animAnimNode_Output", node=build.link(inner)))
    graph = extract(doc)
    assert set(graph.registry) == {"R"}
    assert graph.edges == []


def test_unknown_root_type_is_plain_structure(build):
    doc = build.document(build.node("R", "animSomethingElse", node=build.link(build.node("A", "animAnimNode_SkAnim"))))
    graph = extract(doc)
    # A is still discovered through plain structure, but has no enclosing node
    assert set(graph.registry) == {"A"}
    assert graph.edges == []
    assert graph.root_id is None


def test_extract_is_idempotent(locomotion_document):
    first = extract(locomotion_document)
    second = extract(locomotion_document)
    assert set(first.registry) == set(second.registry)
    assert Counter(first.edges) == Counter(second.edges)


def test_duplicate_references_keep_multiplicity(build):
    shared = build.node("S", "animAnimNode_FloatConstant")
    owner = build.node(
        "O",
        "animAnimNode_Blend2",
        settings={"a": {"weight": shared}, "b": {"weight": build.ref("S")}},
    )
    graph = extract(build.document(owner))
    assert graph.edges == [
        Edge("S", "O", "weight"),
        Edge("S", "O", "weight"),
    ]


def test_nested_node_in_plain_field_is_discovered(build):
    deep = build.node("D", "animAnimNode_IntConstant", value=3)
    owner = build.node("O", "animAnimNode_Switch", extra={"payload": [{"wrapped": deep}]})
    graph = extract(build.document(owner))
    assert "D" in graph.registry
    assert graph.edges == [Edge("D", "O", "wrapped")]


def test_forward_reference_resolved_after_walk(build):
    later = build.node("L", "animAnimNode_BoolConstant", value=True)
    owner = build.node(
        "O",
        "animAnimNode_Blend2",
        firstInputNode=build.link(build.ref("L"), "animBoolLink"),
        secondInputNode=build.link(later, "animBoolLink"),
    )
    graph = extract(build.document(owner))
    assert graph.edges == [
        Edge("L", "O", "secondInputNode"),
        Edge("L", "O", "firstInputNode"),
    ]


def test_forward_reference_dropped_when_disabled(build):
    later = build.node("L", "animAnimNode_BoolConstant")
    owner = build.node(
        "O",
        "animAnimNode_Blend2",
        firstInputNode=build.link(build.ref("L")),
        secondInputNode=build.link(later),
    )
    config = ExtractionConfig(resolve_forward_refs=False)
    graph = extract(build.document(owner), config)
    assert graph.edges == [Edge("L", "O", "secondInputNode")]


def test_undefined_reference_is_reported(build):
    owner = build.node("O", "animAnimNode_Output", node=build.link(build.ref("missing")))
    graph = extract(build.document(owner))
    assert graph.edges == []
    assert [w.kind for w in graph.warnings] == [WARNING_UNRESOLVED_REF]
    assert not graph.truncated


def test_reentry_of_registered_node_adds_edge_without_rewalk(build):
    leaf = build.node("L", "animAnimNode_FloatConstant")
    first = build.node("F", "animAnimNode_State", rootNode=build.link(leaf))
    second = build.node("S", "animAnimNode_State", rootNode=build.link(build.node("L", "animAnimNode_FloatConstant")))
    machine = build.node("M", "animAnimNode_StateMachine", states=[first, second])
    graph = extract(build.document(machine))

    assert list(graph.registry) == ["M", "F", "L", "S"]
    assert Edge("L", "F", "rootNode") in graph.edges
    assert Edge("L", "S", "rootNode") in graph.edges


def test_self_reference_terminates(build):
    loop = {"HandleId": "N", "Data": {"$type": "animAnimNode_Blend2"}}
    loop["Data"]["inputNode"] = build.link(loop)
    graph = extract(build.document(loop))
    assert set(graph.registry) == {"N"}
    assert graph.edges == [Edge("N", "N", "inputNode")]


def test_plain_structure_cycle_is_cut(build):
    wrapper = {"$type": "animWrapper"}
    wrapper["self"] = wrapper
    owner = build.node("O", "animAnimNode_Output", extra=wrapper)
    graph = extract(build.document(owner))
    assert set(graph.registry) == {"O"}
    assert [w.kind for w in graph.warnings] == [WARNING_CYCLE]
    assert graph.truncated


def test_depth_limit_truncates_with_warning(build):
    deep = build.node("D", "animAnimNode_FloatConstant")
    nested = deep
    for _ in range(30):
        nested = {"level": nested}
    owner = build.node("O", "animAnimNode_Output", node=nested)

    shallow = extract(build.document(owner), ExtractionConfig(max_depth=10))
    assert set(shallow.registry) == {"O"}
    assert shallow.truncated
    assert shallow.warnings[0].kind == WARNING_MAX_DEPTH

    full = extract(build.document(owner))
    assert set(full.registry) == {"O", "D"}
    assert full.edges == [Edge("D", "O", "level")]


def test_walk_all_entries_registers_other_roots(locomotion_document):
    graph = extract(locomotion_document, ExtractionConfig(walk_all_entries=True))
    assert "17" in graph.registry
    assert graph.registry["17"].node_type == "ReferencePoseTerminator"
    assert graph.edge_count == 8


def test_walk_uses_explicit_context(build):
    ctx = ExtractionContext()
    walk(build.node("A", "animAnimNode_FloatConstant"), ctx, parent_id=None, socket=None)
    assert set(ctx.registry) == {"A"}
    assert ctx.visited == {"A"}
    assert ctx.active == set()


def test_custom_node_types(build):
    custom = build.node("C", "myCustomNode")
    doc = build.document(build.node("R", "animAnimNode_Output", node=build.link(custom)))
    config = ExtractionConfig(node_types={"animAnimNode_Output", "myCustomNode"})
    graph = extract(doc, config)
    assert set(graph.registry) == {"R", "C"}
    assert graph.registry["C"].node_type == "myCustomNode"


def test_document_deeper_than_depth_ceiling_is_truncated(build):
    deep = build.node("D", "animAnimNode_FloatConstant")
    nested = deep
    for _ in range(600):
        nested = {"level": nested}
    owner = build.node("O", "animAnimNode_Output", node=nested)

    graph = extract(build.document(owner), ExtractionConfig(max_depth=1000))
    assert set(graph.registry) == {"O"}
    assert [w.kind for w in graph.warnings] == [WARNING_MAX_DEPTH]
