"""
Tier detection and gap assignment.

The coarse layout places nodes on discrete tiers along the primary axis, but
only reports raw coordinates. This module recovers the tiers from those
coordinates and works out which inter-tier gap each edge has to cross. Both
the layer spacing adjuster and the lane allocator build on it.
"""

import logging
from typing import Dict, Iterable, List, Sequence

from .models import Direction, Edge, GapBoundary, Node, Tier

logger = logging.getLogger(__name__)

# Nodes within this distance on the primary axis belong to the same tier
LAYER_TOLERANCE = 5


def detect_tiers(
    nodes: Sequence[Node],
    direction: Direction,
    tolerance: float = LAYER_TOLERANCE,
) -> List[Tier]:
    """
    Group positioned nodes into tiers ordered along the primary axis.

    Each node is compared against the coordinate recorded for every existing
    tier (not against individual nodes) and joins the first tier within
    tolerance; otherwise it opens a new tier at its own coordinate.

    Args:
        nodes: Nodes with positions already assigned.
        direction: Layout direction, selects the primary axis.
        tolerance: Maximum primary-axis distance to share a tier.

    Returns:
        Tiers sorted by ascending coordinate, with indices assigned.
    """
    sorted_nodes = sorted(nodes, key=lambda n: n.position.primary(direction))

    tiers: List[Tier] = []
    for node in sorted_nodes:
        coord = node.position.primary(direction)
        for tier in tiers:
            if abs(tier.position - coord) <= tolerance:
                tier.node_ids.append(node.id)
                break
        else:
            tiers.append(Tier(index=len(tiers), position=coord, node_ids=[node.id]))

    # Input was sorted, but ordering must not depend on it
    tiers.sort(key=lambda t: t.position)
    for idx, tier in enumerate(tiers):
        tier.index = idx

    return tiers


def build_tier_index(tiers: Iterable[Tier]) -> Dict[str, int]:
    """Map each node id to the index of its tier."""
    index: Dict[str, int] = {}
    for tier in tiers:
        for node_id in tier.node_ids:
            index[node_id] = tier.index
    return index


def assign_edges_to_gaps(
    edges: Iterable[Edge], node_tier_index: Dict[str, int]
) -> Dict[int, List[Edge]]:
    """
    Bucket every inter-tier edge into the gap it crosses.

    An edge belongs to the gap starting at min(source tier, target tier), so
    back edges share capacity with forward edges between the same tiers.
    Edges with an unknown endpoint, and edges within a single tier, are left
    out entirely.

    Args:
        edges: Edges to assign.
        node_tier_index: Node id to tier index, from build_tier_index().

    Returns:
        Mapping of gap index to its edges, in input order.
    """
    gaps: Dict[int, List[Edge]] = {}

    for edge in edges:
        src_tier = node_tier_index.get(edge.source)
        tgt_tier = node_tier_index.get(edge.target)
        if src_tier is None or tgt_tier is None:
            logger.debug("Edge %s has a missing endpoint, not routed", edge.id)
            continue
        if src_tier == tgt_tier:
            logger.debug("Edge %s stays within tier %d, not routed", edge.id, src_tier)
            continue

        gaps.setdefault(min(src_tier, tgt_tier), []).append(edge)

    return gaps


def calculate_gap_boundaries(
    tiers: Sequence[Tier], direction: Direction
) -> List[GapBoundary]:
    """
    Calculate the routing gap between each pair of adjacent tiers.

    The gap starts where the lower tier's node footprint ends and stops where
    the next tier begins.
    """
    footprint = direction.primary_footprint
    return [
        GapBoundary(
            gap_idx=idx,
            gap_start=tiers[idx].position + footprint,
            gap_end=tiers[idx + 1].position,
        )
        for idx in range(len(tiers) - 1)
    ]
