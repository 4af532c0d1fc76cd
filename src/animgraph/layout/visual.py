"""Visual node: the layout engine's view of a graph node."""

from dataclasses import dataclass, field, replace
from typing import Any, Dict, Mapping, Optional, Tuple

from animgraph.classify import get_color


@dataclass(frozen=True)
class VisualNode:
    """
    A node as placed on the canvas.

    Attributes:
        node_id: Id of the graph node this was derived from.
        x: Left edge of the node.
        y: Top edge of the node.
        width: Explicit width. If None the layout estimates it from attributes.
        height: Explicit height. If None the layout estimates it from attributes.
        node_type: Display type ("Blend2").
        label: Display label.
        color: Fill color for the node type.
        attributes: Raw payload, used for size estimation.
    """

    node_id: str
    x: float = 0.0
    y: float = 0.0
    width: Optional[float] = None
    height: Optional[float] = None
    node_type: str = "Unknown"
    label: str = ""
    color: str = field(default_factory=lambda: get_color("Default"))
    attributes: Mapping[str, Any] = field(default_factory=dict, compare=False)

    @property
    def position(self) -> Tuple[float, float]:
        return (self.x, self.y)

    def with_position(self, x: float, y: float) -> "VisualNode":
        """Copy of this node moved to (x, y)."""
        return replace(self, x=float(x), y=float(y))

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for DataFrame construction."""
        return {
            "node_id": self.node_id,
            "x": self.x,
            "y": self.y,
            "width": self.width,
            "height": self.height,
            "node_type": self.node_type,
            "label": self.label,
            "color": self.color,
        }
