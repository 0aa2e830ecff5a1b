"""
tierroute - Tiered layout and orthogonal edge routing for dependency graphs

A Python library that lays out service dependency graphs in tiers and routes
every edge through its own lane in the gap between two tiers.

Example:
    >>> from tierroute import GraphLayoutGenerator, LayoutConfig
    >>> generator = GraphLayoutGenerator(LayoutConfig(direction="TB"))
    >>> result = generator.transform_graph_data({
    ...     "nodes": [{"id": "api"}, {"id": "db"}],
    ...     "edges": [{"id": "e1", "source": "api", "target": "db"}],
    ... })
    >>> result.routes
    {'e1': 150.0}

Debug Mode Example:
    >>> result = generator.transform_graph_data(payload, debug=True)
    >>> trace = generator.get_trace()
    >>> print(trace.summary())
"""

from .config import LayoutConfig
from .edge_data import (
    EdgeRenderData,
    FanOut,
    build_edge_render_data,
    compute_edge_fan_out,
    format_latency,
    is_high_latency,
)
from .edge_drawing import (
    EdgePath,
    build_bezier_path,
    build_edge_path,
    build_orthogonal_path,
    build_orthogonal_path_lr,
    build_orthogonal_path_tb,
    build_smooth_step_path,
    edge_endpoints,
    path_points,
)
from .edge_routing import compute_edge_routes
from .generator import GraphLayoutGenerator, LayoutResult
from .graph import GraphData, GraphDataError, parse_graph_data
from .layout import CoarseLayout, LayoutOptions, NetworkXLayout
from .models import (
    NODE_HEIGHT,
    NODE_WIDTH,
    Direction,
    Edge,
    EdgeStyle,
    GapBoundary,
    Node,
    Position,
    Tier,
)
from .png_renderer import PNGRenderer, render_to_png
from .renderer import SVGRenderer
from .spacing import adjust_layer_spacing
from .storage import LayoutStorage
from .tiers import (
    assign_edges_to_gaps,
    build_tier_index,
    calculate_gap_boundaries,
    detect_tiers,
)
from .tracer import LayoutTrace, PipelineStage

__version__ = "0.1.0"

__all__ = [
    # Main API
    "GraphLayoutGenerator",
    "LayoutResult",
    "LayoutConfig",
    # Models
    "Direction",
    "EdgeStyle",
    "Position",
    "Node",
    "Edge",
    "Tier",
    "GapBoundary",
    "NODE_WIDTH",
    "NODE_HEIGHT",
    # Payload parsing
    "GraphData",
    "GraphDataError",
    "parse_graph_data",
    # Coarse layout
    "CoarseLayout",
    "LayoutOptions",
    "NetworkXLayout",
    # Tiers, spacing and routing
    "detect_tiers",
    "build_tier_index",
    "assign_edges_to_gaps",
    "calculate_gap_boundaries",
    "adjust_layer_spacing",
    "compute_edge_routes",
    # Edge drawing
    "EdgePath",
    "build_edge_path",
    "build_orthogonal_path",
    "build_orthogonal_path_tb",
    "build_orthogonal_path_lr",
    "build_smooth_step_path",
    "build_bezier_path",
    "edge_endpoints",
    "path_points",
    # Edge render data
    "EdgeRenderData",
    "FanOut",
    "build_edge_render_data",
    "compute_edge_fan_out",
    "format_latency",
    "is_high_latency",
    # Persistence
    "LayoutStorage",
    # Rendering
    "SVGRenderer",
    "PNGRenderer",
    "render_to_png",
    # Debug/Tracing
    "LayoutTrace",
    "PipelineStage",
]
