"""
Per-pass edge render data.

Edges are immutable inputs, so everything the renderer needs to know about an
edge for one layout pass (fan-out position, routing lane, style, latency
flags) is collected in a side-table keyed by edge id and rebuilt on every
pass.
"""

import math
from dataclasses import dataclass
from typing import Dict, Optional, Sequence

from .models import Direction, Edge, EdgeStyle

# Default latency alert threshold, as a percentage above the 24h average
DEFAULT_LATENCY_THRESHOLD = 50


@dataclass
class FanOut:
    """Position of an edge among the edges sharing its source and target."""

    source_index: int = 0
    source_count: int = 1
    target_index: int = 0
    target_count: int = 1


@dataclass
class EdgeRenderData:
    """
    Derived attributes of one edge for one layout pass.

    Attributes:
        fan_out: Index/count among edges with the same source and target.
        layout_direction: Direction of the pass that produced this entry.
        edge_style: Path style to draw the edge with.
        routing_lane: Lane coordinate, or None when the edge was not routed.
        is_high_latency: Whether current latency exceeds the alert threshold.
        label: Formatted latency label ("" when unknown).
    """

    fan_out: FanOut
    layout_direction: Direction
    edge_style: EdgeStyle
    routing_lane: Optional[float] = None
    is_high_latency: bool = False
    label: str = ""


def compute_edge_fan_out(edges: Sequence[Edge]) -> Dict[str, FanOut]:
    """
    Compute fan-out indices for edges sharing the same source or target.

    Indices follow input order within each group.
    """
    by_source: Dict[str, list] = {}
    by_target: Dict[str, list] = {}
    for edge in edges:
        by_source.setdefault(edge.source, []).append(edge.id)
        by_target.setdefault(edge.target, []).append(edge.id)

    fan_out = {edge.id: FanOut() for edge in edges}
    for group in by_source.values():
        for i, edge_id in enumerate(group):
            fan_out[edge_id].source_index = i
            fan_out[edge_id].source_count = len(group)
    for group in by_target.values():
        for i, edge_id in enumerate(group):
            fan_out[edge_id].target_index = i
            fan_out[edge_id].target_count = len(group)

    return fan_out


def format_latency(latency_ms: Optional[float]) -> str:
    """Format a latency for an edge label: "850ms", "1.5s" or ""."""
    if latency_ms is None:
        return ""
    if latency_ms >= 1000:
        return f"{latency_ms / 1000:.1f}s"
    return f"{math.floor(latency_ms + 0.5)}ms"


def is_high_latency(
    latency_ms: Optional[float],
    avg_latency_ms_24h: Optional[float],
    threshold: float = DEFAULT_LATENCY_THRESHOLD,
) -> bool:
    """Whether latency exceeds the 24h average by more than threshold percent."""
    if not latency_ms or not avg_latency_ms_24h:
        return False
    return latency_ms > avg_latency_ms_24h * (1 + threshold / 100)


def build_edge_render_data(
    edges: Sequence[Edge],
    direction: Direction,
    edge_style: EdgeStyle,
    routes: Dict[str, float],
    latency_threshold: float = DEFAULT_LATENCY_THRESHOLD,
) -> Dict[str, EdgeRenderData]:
    """Build the render side-table for one layout pass."""
    fan_out = compute_edge_fan_out(edges)

    table: Dict[str, EdgeRenderData] = {}
    for edge in edges:
        latency = edge.data.get("latency_ms")
        table[edge.id] = EdgeRenderData(
            fan_out=fan_out[edge.id],
            layout_direction=direction,
            edge_style=edge_style,
            routing_lane=routes.get(edge.id),
            is_high_latency=is_high_latency(
                latency, edge.data.get("avg_latency_ms_24h"), latency_threshold
            ),
            label=format_latency(latency),
        )

    return table
