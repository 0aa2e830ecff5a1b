"""
Layout pass configuration.

Everything that used to be ambient UI state (flow direction, edge style,
tier spacing, latency threshold, manually placed nodes) is carried by an
explicit LayoutConfig handed to each layout pass.
"""

from dataclasses import dataclass, field
from typing import Dict

from .edge_data import DEFAULT_LATENCY_THRESHOLD
from .edge_routing import DEFAULT_LANE_SPACING
from .models import Direction, EdgeStyle, Position
from .spacing import DEFAULT_PADDING

# Coarse layout spacing between tiers
DEFAULT_TIER_SPACING = 180
MIN_TIER_SPACING = 80
MAX_TIER_SPACING = 400

# Coarse layout spacing between nodes of one tier
DEFAULT_NODE_SPACING = 100

MIN_LATENCY_THRESHOLD = 10
MAX_LATENCY_THRESHOLD = 200


def _clamp(value, low, high):
    return max(low, min(high, value))


@dataclass
class LayoutConfig:
    """
    Settings for one layout pass.

    Attributes:
        direction: Flow direction, "TB" or "LR" (strings are normalized).
        edge_style: "orthogonal" for routed lanes, "bezier" to skip routing.
        lane_spacing: Distance between neighbouring routing lanes.
        padding: Clearance on each side of a gap's lane bundle.
        tier_spacing: Spacing between tiers requested from the coarse layout,
            clamped to [MIN_TIER_SPACING, MAX_TIER_SPACING].
        node_spacing: Spacing between nodes of one tier in the coarse layout.
        latency_threshold: Percent above the 24h average that counts as high
            latency, clamped to [MIN_LATENCY_THRESHOLD, MAX_LATENCY_THRESHOLD].
        position_overrides: Node id to position, applied over the coarse
            layout before spacing and routing.
    """

    direction: Direction = Direction.TB
    edge_style: EdgeStyle = EdgeStyle.ORTHOGONAL
    lane_spacing: float = DEFAULT_LANE_SPACING
    padding: float = DEFAULT_PADDING
    tier_spacing: int = DEFAULT_TIER_SPACING
    node_spacing: int = DEFAULT_NODE_SPACING
    latency_threshold: int = DEFAULT_LATENCY_THRESHOLD
    position_overrides: Dict[str, Position] = field(default_factory=dict)

    def __post_init__(self):
        self.direction = Direction.from_value(self.direction)
        self.edge_style = EdgeStyle.from_value(self.edge_style)
        self.tier_spacing = _clamp(self.tier_spacing, MIN_TIER_SPACING, MAX_TIER_SPACING)
        self.latency_threshold = _clamp(
            self.latency_threshold, MIN_LATENCY_THRESHOLD, MAX_LATENCY_THRESHOLD
        )
