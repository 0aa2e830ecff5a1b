"""
SVG rendering for laid out dependency graphs.

Draws the result of a layout pass as a standalone SVG document: one rounded
box per service, one path per edge (routed, smooth step or bezier depending
on the pass), arrowheads, and latency labels.
"""

from pathlib import Path
from typing import List, Tuple
from xml.sax.saxutils import escape

from .edge_drawing import build_edge_path, edge_endpoints
from .generator import LayoutResult
from .models import NODE_HEIGHT, NODE_WIDTH

EDGE_COLORS = {
    "healthy": "#2f9e44",
    "unhealthy": "#e03131",
    "high_latency": "#f08c00",
    "unknown": "#868e96",
}


def _attr(value: str) -> str:
    return escape(value, {'"': "&quot;"})


def edge_status(result: LayoutResult, edge) -> str:
    """Status used to color an edge: high latency wins over health."""
    render_data = result.edge_data.get(edge.id)
    if render_data is not None and render_data.is_high_latency:
        return "high_latency"
    healthy = edge.data.get("healthy")
    if healthy is True:
        return "healthy"
    if healthy is False:
        return "unhealthy"
    return "unknown"


def layout_bounds(result: LayoutResult, margin: float) -> Tuple[float, float, float, float]:
    """Bounding box (x, y, width, height) of all node boxes plus margin."""
    if not result.nodes:
        return (0, 0, 2 * margin, 2 * margin)
    min_x = min(n.position.x for n in result.nodes) - margin
    min_y = min(n.position.y for n in result.nodes) - margin
    max_x = max(n.position.x for n in result.nodes) + NODE_WIDTH + margin
    max_y = max(n.position.y for n in result.nodes) + NODE_HEIGHT + margin
    return (min_x, min_y, max_x - min_x, max_y - min_y)


class SVGRenderer:
    """
    Renders a LayoutResult as an SVG document.

    Attributes:
        margin: Space around the outermost node boxes.
        corner_radius: Rounding of node box corners.
        font_size: Font size for node names and edge labels.
    """

    def __init__(self, margin: int = 40, corner_radius: int = 10, font_size: int = 14):
        self.margin = margin
        self.corner_radius = corner_radius
        self.font_size = font_size

    def render(self, result: LayoutResult) -> str:
        """Render the layout to an SVG string."""
        x, y, width, height = layout_bounds(result, self.margin)

        lines: List[str] = [
            '<svg xmlns="http://www.w3.org/2000/svg" '
            f'viewBox="{x:g} {y:g} {width:g} {height:g}" '
            f'width="{width:g}" height="{height:g}">',
            "  <defs>",
        ]
        for status, color in EDGE_COLORS.items():
            lines.append(
                f'    <marker id="arrow-{status}" viewBox="0 0 10 10" refX="10" '
                'refY="5" markerWidth="8" markerHeight="8" orient="auto-start-reverse">'
                f'<path d="M 0 0 L 10 5 L 0 10 z" fill="{color}"/></marker>'
            )
        lines.append("  </defs>")

        lines.extend(self._render_edges(result))
        lines.extend(self._render_nodes(result))
        lines.append("</svg>")
        return "\n".join(lines)

    def save(self, result: LayoutResult, filename: str) -> None:
        """Render the layout and write it to an .svg file."""
        Path(filename).write_text(self.render(result), encoding="utf-8")

    def _render_edges(self, result: LayoutResult) -> List[str]:
        nodes = {node.id: node for node in result.nodes}
        lines = ['  <g class="edges" fill="none" stroke-width="2">']
        labels = []

        for edge in result.edges:
            source, target = nodes.get(edge.source), nodes.get(edge.target)
            if source is None or target is None:
                continue
            source_point, target_point = edge_endpoints(source, target, result.direction)
            edge_path = build_edge_path(
                source_point,
                target_point,
                result.direction,
                lane=result.routes.get(edge.id),
                edge_style=result.edge_style,
            )
            status = edge_status(result, edge)
            lines.append(
                f'    <path id="edge-{_attr(edge.id)}" d="{edge_path.path}" '
                f'stroke="{EDGE_COLORS[status]}" marker-end="url(#arrow-{status})"/>'
            )

            render_data = result.edge_data.get(edge.id)
            if render_data is not None and render_data.label:
                labels.append(
                    f'    <text x="{edge_path.label_x:g}" y="{edge_path.label_y:g}" '
                    f'font-size="{self.font_size - 2}" text-anchor="middle" '
                    f'dominant-baseline="middle">{escape(render_data.label)}</text>'
                )

        lines.append("  </g>")
        if labels:
            lines.append('  <g class="edge-labels">')
            lines.extend(labels)
            lines.append("  </g>")
        return lines

    def _render_nodes(self, result: LayoutResult) -> List[str]:
        lines = ['  <g class="nodes">']
        for node in result.nodes:
            px, py = node.position.x, node.position.y
            name = str(node.data.get("name", node.id))
            lines.append(
                f'    <rect id="node-{_attr(node.id)}" x="{px:g}" y="{py:g}" '
                f'width="{NODE_WIDTH}" height="{NODE_HEIGHT}" rx="{self.corner_radius}" '
                'fill="#ffffff" stroke="#343a40" stroke-width="2"/>'
            )
            lines.append(
                f'    <text x="{px + NODE_WIDTH / 2:g}" y="{py + NODE_HEIGHT / 2:g}" '
                f'font-size="{self.font_size}" text-anchor="middle" '
                f'dominant-baseline="middle">{escape(name)}</text>'
            )
        lines.append("  </g>")
        return lines
