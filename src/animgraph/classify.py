"""
Type classification for document objects.

Every object met during traversal is dispatched through classify(): a tag in
the node allow-list marks a node boundary, a tag in the link allow-list marks
a link wrapper, and anything else (including a missing or non-string tag) is
plain structure to recurse through.
"""

from enum import Enum
from typing import AbstractSet, Any, Optional

from animgraph.constants import (
    COLOR_MAP,
    DEFAULT_COLOR_KEY,
    LINK_TYPES,
    NODE_TYPE_PREFIX,
    NODE_TYPES,
)


class NodeKind(str, Enum):
    """Structural role of a tagged object."""

    NODE = "node"
    LINK = "link"
    PLAIN = "plain"


def classify(
    tag: Any,
    node_types: AbstractSet[str] = NODE_TYPES,
    link_types: AbstractSet[str] = LINK_TYPES,
) -> NodeKind:
    """
    Classify a type tag.

    Args:
        tag: Value of an object's "$type" field (may be None or non-string).
        node_types: Node allow-list.
        link_types: Link wrapper allow-list.

    Returns:
        NodeKind.NODE, NodeKind.LINK, or NodeKind.PLAIN.

    Example:
        >>> classify("animAnimNode_Blend2")
        <NodeKind.NODE: 'node'>
        >>> classify("animPoseLink")
        <NodeKind.LINK: 'link'>
        >>> classify("animanimnode_blend2")
        <NodeKind.PLAIN: 'plain'>
    """
    if not isinstance(tag, str):
        return NodeKind.PLAIN
    if tag in node_types:
        return NodeKind.NODE
    if tag in link_types:
        return NodeKind.LINK
    return NodeKind.PLAIN


def is_node(tag: Any) -> bool:
    """True if tag is in the node allow-list."""
    return classify(tag) is NodeKind.NODE


def is_link(tag: Any) -> bool:
    """True if tag is in the link allow-list."""
    return classify(tag) is NodeKind.LINK


def strip_type_prefix(tag: Optional[str], prefix: str = NODE_TYPE_PREFIX) -> str:
    """
    Strip the conventional namespace prefix from a node type tag.

    Example:
        >>> strip_type_prefix("animAnimNode_StateMachine")
        'StateMachine'
        >>> strip_type_prefix(None)
        'Unknown'
    """
    if not tag:
        return "Unknown"
    if tag.startswith(prefix):
        return tag[len(prefix):]
    return tag


def get_color(display_type: str) -> str:
    """Color for a display type, falling back to the default color."""
    return COLOR_MAP.get(display_type, COLOR_MAP[DEFAULT_COLOR_KEY])
