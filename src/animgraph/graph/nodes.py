"""
Graph node records.

A NodeRecord is created once per unique HandleId, the first time the
extractor meets that id, and is never mutated afterwards. Later encounters of
the same id only contribute edges.

Node Record Fields:
- node_id: The document HandleId (stable across loads of the same file)
- node_type: Display type, namespace prefix stripped ("Blend2")
- attributes: The node's raw payload ("Data" object)
"""

import logging
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Any, Dict, List, Mapping

from animgraph.classify import strip_type_prefix
from animgraph.constants import (
    FIELD_HANDLE_ID,
    FIELD_HANDLE_REF_ID,
    FIELD_LINK_NODE,
    FIELD_TYPE,
    FIELD_VALUE,
    NODE_TYPE_PREFIX,
)

logger = logging.getLogger(__name__)


# =============================================================================
# DATA STRUCTURES
# =============================================================================

@dataclass(frozen=True)
class NodeRecord:
    """
    A single registered graph node.

    Attributes:
        node_id: HandleId of the node.
        node_type: Display type with the namespace prefix stripped.
        attributes: Raw payload of the node (field name -> value).
    """

    node_id: str
    node_type: str
    attributes: Mapping[str, Any] = field(default_factory=dict)

    @property
    def raw_type(self) -> str:
        """Unstripped type tag from the payload."""
        return self.attributes.get(FIELD_TYPE, "")

    def socket_fields(self) -> List[str]:
        """Payload fields whose value references another node."""
        return [key for key, value in self.attributes.items() if is_node_reference(value)]

    def property_fields(self) -> List[str]:
        """Payload fields shown as plain properties."""
        return [
            key for key, value in self.attributes.items()
            if is_listed_property(key) and not is_node_reference(value)
        ]

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for DataFrame construction."""
        return {
            "node_id": self.node_id,
            "node_type": self.node_type,
            "raw_type": self.raw_type,
            "label": node_label(self),
            "socket_count": len(self.socket_fields()),
            "property_count": len(self.property_fields()),
        }


# =============================================================================
# CONSTRUCTION
# =============================================================================

def build_node_record(
    node_id: str,
    payload: Mapping[str, Any],
    type_prefix: str = NODE_TYPE_PREFIX,
) -> NodeRecord:
    """
    Build a NodeRecord from a node payload.

    Args:
        node_id: HandleId of the node.
        payload: The node's "Data" object.
        type_prefix: Namespace prefix stripped from the display type.

    Returns:
        NodeRecord holding a read-only copy of the payload as its
        attributes. Nested values are shared with the document.
    """
    node_type = strip_type_prefix(payload.get(FIELD_TYPE), type_prefix)
    logger.debug(f"Registered node {node_id} ({node_type})")
    return NodeRecord(
        node_id=str(node_id),
        node_type=node_type,
        attributes=MappingProxyType(dict(payload)),
    )


# =============================================================================
# ATTRIBUTE SHAPE
# =============================================================================

def is_listed_property(key: str) -> bool:
    """Metadata fields ("$type", "HandleId") are not listed as properties."""
    return not key.startswith("$") and key != FIELD_HANDLE_ID


def is_node_reference(value: Any) -> bool:
    """
    True if a payload value structurally references another node.

    A reference is an object whose "node" field carries a HandleId (inline
    definition) or a HandleRefId (back reference).

    Example:
        >>> is_node_reference({"$type": "animPoseLink", "node": {"HandleRefId": "7"}})
        True
        >>> is_node_reference({"$value": "idle"})
        False
    """
    if not isinstance(value, dict):
        return False
    target = value.get(FIELD_LINK_NODE)
    if not isinstance(target, dict):
        return False
    return bool(target.get(FIELD_HANDLE_ID) or target.get(FIELD_HANDLE_REF_ID))


def unwrap_value(value: Any) -> Any:
    """Return value["$value"] for wrapped scalars, otherwise value unchanged."""
    if isinstance(value, dict) and FIELD_VALUE in value:
        return value[FIELD_VALUE]
    return value


def node_label(record: NodeRecord) -> str:
    """
    Display label for a node.

    State nodes are labelled with their state name; every other node uses its
    display type.
    """
    if record.node_type == "State":
        name = unwrap_value(record.attributes.get("name"))
        if name:
            return f"State: {name}"
    return record.node_type
