"""
Layer spacing adjustment.

A gap crossed by many routed edges needs more room than one crossed by a
few, or the rounded bends of neighbouring lanes run into each other. This
module re-spaces the tiers produced by the coarse layout so that every gap
can hold its lanes plus padding on both sides.
"""

from typing import List, Sequence

from .edge_routing import DEFAULT_LANE_SPACING
from .models import Direction, Edge, Node
from .tiers import assign_edges_to_gaps, build_tier_index, detect_tiers

# Smallest gap between two tiers, even when no edge crosses it
MIN_LAYER_GAP = 100

# Clearance between the outermost lanes and the tiers around them
DEFAULT_PADDING = 30


def required_gap(
    edge_count: int,
    lane_spacing: float = DEFAULT_LANE_SPACING,
    padding: float = DEFAULT_PADDING,
) -> float:
    """Gap size needed to route edge_count lanes with padding."""
    return max(MIN_LAYER_GAP, edge_count * lane_spacing + 2 * padding)


def adjust_layer_spacing(
    nodes: Sequence[Node],
    edges: Sequence[Edge],
    direction: Direction,
    lane_spacing: float = DEFAULT_LANE_SPACING,
    padding: float = DEFAULT_PADDING,
) -> List[Node]:
    """
    Resize the gaps between tiers to fit their routing lanes.

    The first tier keeps its coordinate. Each following tier is placed one
    node footprint plus the required gap after the previous one, and every
    node in it is shifted by the same amount along the primary axis. Cross
    axis coordinates are never changed.

    Args:
        nodes: Nodes positioned by the coarse layout.
        edges: Edges of the graph (used only to count lanes per gap).
        direction: Layout direction, selects the primary axis.
        lane_spacing: Distance between neighbouring lanes.
        padding: Clearance on each side of the lane bundle.

    Returns:
        New node objects with adjusted positions, or the input itself when
        there are fewer than two tiers.
    """
    tiers = detect_tiers(nodes, direction)
    if len(tiers) <= 1:
        return nodes

    gaps = assign_edges_to_gaps(edges, build_tier_index(tiers))
    footprint = direction.primary_footprint

    new_positions = [tiers[0].position]
    for idx in range(1, len(tiers)):
        gap = required_gap(len(gaps.get(idx - 1, [])), lane_spacing, padding)
        new_positions.append(new_positions[idx - 1] + footprint + gap)

    offsets = {}
    for tier, new_position in zip(tiers, new_positions):
        delta = new_position - tier.position
        for node_id in tier.node_ids:
            offsets[node_id] = delta

    return [
        node.with_position(node.position.shifted(direction, offsets[node.id]))
        for node in nodes
    ]
