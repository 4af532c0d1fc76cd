"""
Shared constants across animgraph modules.

This module is the single source of truth for:
- Document field names (handle ids, payloads, type tags)
- Node type allow-list (objects registered as graph nodes)
- Link type allow-list (wrappers whose referenced nodes become edges)
- Display constants (type prefix, node colors)

The two allow-lists are versioned configuration data. Any tag missing from
NODE_TYPES makes that object plain structure, even when it carries a
HandleId. Matching is exact and case-sensitive.
"""

# =============================================================================
# DOCUMENT FIELDS
# =============================================================================

FIELD_HANDLE_ID = "HandleId"
FIELD_HANDLE_REF_ID = "HandleRefId"
FIELD_PAYLOAD = "Data"
FIELD_TYPE = "$type"
FIELD_VALUE = "$value"
FIELD_LINK_NODE = "node"

# Path to the node-init collection: document["Data"]["RootChunk"]["nodesToInit"]
ROOT_PATH = ("Data", "RootChunk", "nodesToInit")

# Upper bound for ExtractionConfig.max_depth. The walk recurses at most two
# Python frames per nesting level, which keeps it under the default
# interpreter recursion limit of 1000.
MAX_DEPTH_CEILING = 300


# =============================================================================
# TYPE CLASSIFIER DATA
# =============================================================================

CLASSIFIER_VERSION = "1"

NODE_TYPES = frozenset({
    # Graph terminals
    "animAnimNode_Root",
    "animAnimNode_Output",
    "animAnimNode_GraphSlot",
    "animAnimNode_ReferencePoseTerminator",
    "animAnimNode_IdentityPoseTerminator",
    # Pose sources
    "animAnimNode_SkAnim",
    "animAnimNode_MixerSlot",
    "animAnimNode_FacialMixerSlot",
    "animAnimNode_SharedMetaPose",
    "animAnimNode_FacialSharedMetaPose",
    # State machines
    "animAnimNode_StateMachine",
    "animAnimNode_State",
    # Blending
    "animAnimNode_Blend2",
    "animAnimNode_BlendMultiple",
    "animAnimNode_BlendAdditive",
    "animAnimNode_BlendOverride",
    "animAnimNode_BlendFromPose",
    "animAnimNode_Switch",
    # Values
    "animAnimNode_FloatConstant",
    "animAnimNode_FloatInput",
    "animAnimNode_FloatVariable",
    "animAnimNode_FloatRandom",
    "animAnimNode_BoolConstant",
    "animAnimNode_BoolInput",
    "animAnimNode_BoolToFloatConverter",
    "animAnimNode_IntConstant",
    "animAnimNode_VectorConstant",
})

LINK_TYPES = frozenset({
    "animPoseLink",
    "animFloatLink",
    "animBoolLink",
    "animIntLink",
    "animVectorLink",
    "animQuaternionLink",
    "animTransformLink",
})


# =============================================================================
# DISPLAY
# =============================================================================

NODE_TYPE_PREFIX = "animAnimNode_"

DEFAULT_COLOR_KEY = "Default"

# Display type (prefix stripped) to node color
COLOR_MAP = {
    "Root": "#e74c3c",
    "Output": "#e67e22",
    "SkAnim": "#3498db",
    "MixerSlot": "#9b59b6",
    "SharedMetaPose": "#1abc9c",
    "FacialSharedMetaPose": "#16a085",
    "FacialMixerSlot": "#8e44ad",
    "ReferencePoseTerminator": "#95a5a6",
    "IdentityPoseTerminator": "#7f8c8d",
    "StateMachine": "#f39c12",
    "State": "#f1c40f",
    "BlendFromPose": "#2ecc71",
    "BlendAdditive": "#27ae60",
    "BlendOverride": "#2980b9",
    "FloatConstant": "#e74c3c",
    "FloatInput": "#c0392b",
    "FloatRandom": "#d35400",
    "BoolConstant": "#8e44ad",
    "BoolInput": "#9b59b6",
    "BoolToFloatConverter": "#a569bd",
    "IntConstant": "#d35400",
    "Blend2": "#27ae60",
    "Switch": "#34495e",
    "GraphSlot": "#2c3e50",
    DEFAULT_COLOR_KEY: "#7f8c8d",
}


# =============================================================================
# LAYOUT METHODS
# =============================================================================

LAYOUT_LAYERED = "layered"
LAYOUT_GRID = "grid"
