"""
Edge routing module for dependency graph layout.

Assigns each inter-tier edge a routing lane: the cross-axis coordinate at
which its orthogonal path travels through the gap between two tiers.

- Edges are bucketed by the gap they cross (see tiers.py)
- Within a gap, edges are ordered by where they land, so lanes do not cross
- Lanes fan out around the gap center with floor-median centering
"""

from typing import Dict, Sequence

from .models import Direction, Edge, Node
from .tiers import (
    assign_edges_to_gaps,
    build_tier_index,
    calculate_gap_boundaries,
    detect_tiers,
)

# =============================================================================
# ROUTING CONFIGURATION
# =============================================================================

# Distance between neighbouring lanes inside one gap
DEFAULT_LANE_SPACING = 15

# =============================================================================


def lane_offset(index: int, count: int) -> int:
    """
    Number of lane spacings between lane `index` and the gap center.

    The edge at index (count - 1) // 2 sits on the center. For an even count
    that is the lower of the two middle edges.
    """
    return index - (count - 1) // 2


def compute_edge_routes(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    direction: Direction,
    lane_spacing: float = DEFAULT_LANE_SPACING,
) -> Dict[str, float]:
    """
    Compute orthogonal routing lanes for edges between tiers.

    Must run after adjust_layer_spacing() and position overrides, since lanes
    are centered on the final gap geometry.

    Args:
        nodes: Positioned nodes.
        edges: Edges to route.
        direction: TB lanes are y coordinates, LR lanes are x coordinates.
        lane_spacing: Distance between neighbouring lanes.

    Returns:
        Mapping of edge id to lane coordinate. Edges with a missing endpoint
        or with both endpoints in one tier are absent.
    """
    if not nodes or not edges:
        return {}

    positions = {node.id: node.position for node in nodes}
    tiers = detect_tiers(nodes, direction)
    gaps = assign_edges_to_gaps(edges, build_tier_index(tiers))
    boundaries = calculate_gap_boundaries(tiers, direction)

    def sort_key(edge: Edge):
        # Target first, source breaks ties when edges converge on one node
        return (
            positions[edge.target].cross(direction),
            positions[edge.source].cross(direction),
        )

    routes: Dict[str, float] = {}
    for gap_idx, gap_edges in gaps.items():
        ordered = sorted(gap_edges, key=sort_key)
        gap_center = boundaries[gap_idx].center

        count = len(ordered)
        for i, edge in enumerate(ordered):
            routes[edge.id] = gap_center + lane_offset(i, count) * lane_spacing

    return routes
