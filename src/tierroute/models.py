"""
Data models for dependency graph layout.

This module contains the dataclasses and enums shared by every stage of the
layout pipeline: the nodes and edges of a service-dependency graph, the layout
direction, and the derived tier and gap geometry used for edge routing.

Classes:
    Direction: Global flow direction of a layout pass (TB or LR).
    EdgeStyle: How edges are drawn (orthogonal lanes or bezier curves).
    Position: An (x, y) coordinate pair.
    Node: A positioned service node with a fixed footprint.
    Edge: An immutable "depends_on" relationship between two nodes.
    Tier: A group of nodes sharing a primary-axis coordinate.
    GapBoundary: Geometry of the routing gap between two adjacent tiers.
"""

from dataclasses import dataclass, field, replace
from enum import Enum
from typing import Any, Dict, List

# Every service node is drawn with the same footprint
NODE_WIDTH = 180
NODE_HEIGHT = 100

_DIRECTION_ALIASES = {
    "TB": "TB",
    "TOPTOBOTTOM": "TB",
    "LR": "LR",
    "LEFTTORIGHT": "LR",
}


class Direction(Enum):
    """Flow direction of a layout pass."""

    TB = "TB"
    LR = "LR"

    @classmethod
    def from_value(cls, value) -> "Direction":
        """
        Normalize a direction value.

        Accepts a Direction, or the strings "TB", "LR", "TopToBottom" and
        "LeftToRight" in any case.

        Raises:
            ValueError: If the value is not a known direction.
        """
        if isinstance(value, Direction):
            return value
        key = str(value).replace("_", "").replace("-", "").upper()
        if key not in _DIRECTION_ALIASES:
            raise ValueError(
                "direction must be 'TB' (top-to-bottom) or 'LR' (left-to-right)"
            )
        return cls(_DIRECTION_ALIASES[key])

    @property
    def is_vertical(self) -> bool:
        return self is Direction.TB

    @property
    def primary_footprint(self) -> int:
        """Node extent along the tier axis."""
        return NODE_HEIGHT if self is Direction.TB else NODE_WIDTH

    @property
    def cross_footprint(self) -> int:
        """Node extent along the lane axis."""
        return NODE_WIDTH if self is Direction.TB else NODE_HEIGHT


class EdgeStyle(Enum):
    """Edge drawing style for a layout pass."""

    ORTHOGONAL = "orthogonal"
    BEZIER = "bezier"

    @classmethod
    def from_value(cls, value) -> "EdgeStyle":
        if isinstance(value, EdgeStyle):
            return value
        try:
            return cls(str(value).lower())
        except ValueError:
            raise ValueError("edge_style must be 'orthogonal' or 'bezier'") from None


@dataclass(frozen=True)
class Position:
    """An (x, y) coordinate on the layout surface."""

    x: float = 0.0
    y: float = 0.0

    def primary(self, direction: Direction) -> float:
        """Coordinate along the tier axis (y for TB, x for LR)."""
        return self.y if direction is Direction.TB else self.x

    def cross(self, direction: Direction) -> float:
        """Coordinate along the lane axis (x for TB, y for LR)."""
        return self.x if direction is Direction.TB else self.y

    def shifted(self, direction: Direction, delta: float) -> "Position":
        """Return a copy moved by delta along the primary axis only."""
        if direction is Direction.TB:
            return Position(self.x, self.y + delta)
        return Position(self.x + delta, self.y)


@dataclass
class Node:
    """
    A service node in the dependency graph.

    Attributes:
        id: Unique node identifier.
        position: Top-left corner of the node box.
        data: Free-form service attributes carried through to rendering.
    """

    id: str
    position: Position = field(default_factory=Position)
    data: Dict[str, Any] = field(default_factory=dict)

    def with_position(self, position: Position) -> "Node":
        return replace(self, position=position)


@dataclass(frozen=True)
class Edge:
    """
    A "depends_on" relationship: source depends on target.

    Edges are never modified by layout or routing; derived per-pass data is
    kept in a side-table keyed by edge id.
    """

    id: str
    source: str
    target: str
    data: Dict[str, Any] = field(default_factory=dict, hash=False, compare=False)


@dataclass
class Tier:
    """
    A set of nodes sharing (within tolerance) one primary-axis coordinate.

    Attributes:
        index: Position of this tier in ascending coordinate order.
        position: Primary-axis coordinate recorded when the tier was opened.
        node_ids: Ids of the nodes in this tier, in detection order.
    """

    index: int
    position: float
    node_ids: List[str] = field(default_factory=list)


@dataclass
class GapBoundary:
    """
    Boundary information for the routing gap below a tier.

    Horizontal (TB) or vertical (LR) lane segments are placed inside the
    gap, where no node boxes exist.

    Attributes:
        gap_idx: Index of the gap (equal to the index of the lower tier).
        gap_start: Primary coordinate where the lower tier's boxes end.
        gap_end: Primary coordinate where the upper tier's boxes start.
    """

    gap_idx: int
    gap_start: float
    gap_end: float

    @property
    def center(self) -> float:
        return (self.gap_start + self.gap_end) / 2

    @property
    def size(self) -> float:
        return self.gap_end - self.gap_start
