from __future__ import annotations

import pytest


def node(handle_id, node_type, **fields):
    """Inline node definition: {"HandleId": ..., "Data": {"$type": ..., ...}}."""
    return {"HandleId": str(handle_id), "Data": {"$type": node_type, **fields}}


def link(target, link_type="animPoseLink"):
    """Link wrapper around an inline node or a {"HandleRefId": ...} reference."""
    return {"$type": link_type, "node": target}


def ref(handle_id):
    return {"HandleRefId": str(handle_id)}


def document(*entries):
    return {
        "Header": {"WolvenKitVersion": "8.x"},
        "Data": {"Version": 195, "RootChunk": {"$type": "animAnimGraph", "nodesToInit": list(entries)}},
    }


class DocBuilder:
    node = staticmethod(node)
    link = staticmethod(link)
    ref = staticmethod(ref)
    document = staticmethod(document)


@pytest.fixture
def build():
    """Document construction helpers."""
    return DocBuilder


@pytest.fixture
def abr_document():
    """R (Output) -node-> B (BlendAdditive) -input-> A (FloatConstant)."""
    a = node("A", "animAnimNode_FloatConstant", value=0.5)
    b = node("B", "animAnimNode_BlendAdditive", input=link(a, "animFloatLink"))
    r = node("R", "animAnimNode_Output", node=link(b))
    return document(r)


@pytest.fixture
def locomotion_document():
    """A small state machine with shared inputs, back references, and noise."""
    speed = node("10", "animAnimNode_FloatInput", name={"$type": "CName", "$value": "speed"})
    idle = node("11", "animAnimNode_SkAnim", animation={"$type": "CName", "$value": "idle"})
    walk = node("12", "animAnimNode_SkAnim", animation={"$type": "CName", "$value": "walk"})
    blend = node(
        "13",
        "animAnimNode_BlendMultiple",
        weightNode=link(speed, "animFloatLink"),
        inputNodes=[link(idle), link(walk), link(ref("11"))],
    )
    state = node("14", "animAnimNode_State", name={"$type": "CName", "$value": "Move"}, rootNode=link(blend))
    machine = node(
        "15",
        "animAnimNode_StateMachine",
        states=[state],
        transitions=[
            {
                "$type": "animStateTransitionDescription",
                "condition": {
                    "$type": "animStateTransitionCondition_FloatFeature",
                    "valueNode": link(ref("10"), "animFloatLink"),
                },
            }
        ],
        debugInfo={"$type": "animDebugInfo", "HandleId": "99", "Data": {"$type": "animDebugData"}},
    )
    output = node("16", "animAnimNode_Output", node=link(machine))
    return document(output, node("17", "animAnimNode_ReferencePoseTerminator"))
