"""
PNG Renderer module for dependency graphs.

Renders a laid out graph as a high-resolution PNG image. Edge paths are the
same SVG path descriptions the SVG renderer uses, flattened into polylines.
"""

import math
import os
from typing import List, Optional, Tuple

from PIL import Image, ImageDraw, ImageFont

from .edge_drawing import build_edge_path, edge_endpoints, path_points
from .generator import LayoutResult
from .models import NODE_HEIGHT, NODE_WIDTH
from .renderer import EDGE_COLORS, edge_status, layout_bounds

Point = Tuple[float, float]


def _hex_to_rgb(color: str) -> Tuple[int, int, int]:
    color = color.lstrip("#")
    return tuple(int(color[i : i + 2], 16) for i in (0, 2, 4))


class PNGRenderer:
    """Renders laid out dependency graphs as PNG images."""

    def __init__(
        self,
        font_size: int = 13,
        font_path: Optional[str] = None,
        scale: int = 2,  # For high-resolution output
        margin: int = 40,
        shadow_offset: int = 4,
    ):
        self.font_size = font_size
        self.font_path = font_path
        self.scale = scale
        self.margin = margin
        self.shadow_offset = shadow_offset

        # Colors
        self.bg_color = (255, 255, 255)
        self.box_fill = (255, 255, 255)
        self.box_outline = (52, 58, 64)
        self.shadow_color = (160, 160, 160)
        self.text_color = (0, 0, 0)

        self.font = None

    def _get_font(self) -> ImageFont.FreeTypeFont:
        """Get a font for rendering text."""
        if self.font is not None:
            return self.font

        font_size = self.font_size * self.scale

        candidates = []
        if self.font_path:
            candidates.append(self.font_path)
        candidates.extend(
            [
                "/usr/share/fonts/truetype/dejavu/DejaVuSans.ttf",
                "/usr/share/fonts/truetype/liberation/LiberationSans-Regular.ttf",
                "/usr/share/fonts/truetype/freefont/FreeSans.ttf",
            ]
        )

        for path in candidates:
            if os.path.exists(path):
                try:
                    self.font = ImageFont.truetype(path, font_size)
                    return self.font
                except OSError:
                    continue

        # Fallback to default font
        try:
            self.font = ImageFont.load_default(size=font_size)
        except TypeError:
            # Older Pillow versions don't support size parameter
            self.font = ImageFont.load_default()
        return self.font

    def render(self, result: LayoutResult, output_path: str = "graph.png") -> str:
        """
        Render the layout as a PNG image.

        Args:
            result: Result of a layout pass.
            output_path: Path to save the PNG file

        Returns:
            Path to the saved PNG file
        """
        origin_x, origin_y, width, height = layout_bounds(result, self.margin)

        def to_canvas(point: Point) -> Point:
            return (
                (point[0] - origin_x) * self.scale,
                (point[1] - origin_y) * self.scale,
            )

        img = Image.new(
            "RGB",
            (max(1, math.ceil(width * self.scale)), max(1, math.ceil(height * self.scale))),
            self.bg_color,
        )
        draw = ImageDraw.Draw(img)
        box_w, box_h = NODE_WIDTH * self.scale, NODE_HEIGHT * self.scale

        # Draw shadows first
        for node in result.nodes:
            x, y = to_canvas((node.position.x, node.position.y))
            self._draw_hatched_shadow(draw, int(x), int(y), box_w, box_h)

        self._draw_edges(draw, result, to_canvas)

        for node in result.nodes:
            x, y = to_canvas((node.position.x, node.position.y))
            self._draw_box(draw, x, y, box_w, box_h, str(node.data.get("name", node.id)))

        img.save(output_path, "PNG", dpi=(300, 300))
        return output_path

    def _draw_edges(self, draw: ImageDraw.Draw, result: LayoutResult, to_canvas) -> None:
        """Draw every edge path with an arrowhead, then the latency labels."""
        nodes = {node.id: node for node in result.nodes}
        line_width = max(1, self.scale)
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
            points = [to_canvas(p) for p in path_points(edge_path.path)]
            color = _hex_to_rgb(EDGE_COLORS[edge_status(result, edge)])
            self._draw_polyline(draw, points, color, line_width)

            render_data = result.edge_data.get(edge.id)
            if render_data is not None and render_data.label:
                labels.append(
                    (to_canvas((edge_path.label_x, edge_path.label_y)), render_data.label)
                )

        font = self._get_font()
        for (x, y), text in labels:
            bbox = draw.textbbox((0, 0), text, font=font)
            w, h = bbox[2] - bbox[0], bbox[3] - bbox[1]
            pad = 2 * self.scale
            draw.rectangle(
                [x - w / 2 - pad, y - h / 2 - pad, x + w / 2 + pad, y + h / 2 + pad],
                fill=self.bg_color,
            )
            draw.text((x - w / 2, y - h / 2), text, fill=self.text_color, font=font)

    def _draw_polyline(
        self, draw: ImageDraw.Draw, points: List[Point], color, line_width: int
    ) -> None:
        # Zero-length segments come from degenerate corners
        deduped = [p for i, p in enumerate(points) if i == 0 or p != points[i - 1]]
        if len(deduped) < 2:
            return
        draw.line(deduped, fill=color, width=line_width, joint="curve")
        self._draw_arrowhead(draw, deduped[-2], deduped[-1], color)

    def _draw_hatched_shadow(self, draw: ImageDraw.Draw, x: int, y: int, w: int, h: int):
        """Draw a shadow effect using a checkerboard pattern."""
        s = self.shadow_offset * self.scale
        pixel_size = max(2, self.scale)

        def draw_checkerboard(region_x, region_y, region_w, region_h):
            row = 0
            for py in range(region_y, region_y + region_h, pixel_size):
                col = 0
                for px in range(region_x, region_x + region_w, pixel_size):
                    if (row + col) % 2 == 0:
                        draw.rectangle(
                            [px, py, px + pixel_size - 1, py + pixel_size - 1],
                            fill=self.shadow_color,
                        )
                    col += 1
                row += 1

        # Right shadow strip (includes corner at bottom)
        draw_checkerboard(x + w, y + s, s, h)
        # Bottom shadow strip
        draw_checkerboard(x + s, y + h, w - s, s)

    def _draw_box(self, draw: ImageDraw.Draw, x: float, y: float, w: int, h: int, label: str):
        """Draw a service box with its name centered."""
        draw.rounded_rectangle(
            [x, y, x + w, y + h],
            radius=6 * self.scale,
            fill=self.box_fill,
            outline=self.box_outline,
            width=max(1, self.scale),
        )

        font = self._get_font()
        bbox = draw.textbbox((0, 0), label, font=font)
        text_w, text_h = bbox[2] - bbox[0], bbox[3] - bbox[1]
        draw.text(
            (x + (w - text_w) / 2, y + (h - text_h) / 2),
            label,
            fill=self.text_color,
            font=font,
        )

    def _draw_arrowhead(self, draw: ImageDraw.Draw, from_point: Point, to_point: Point, color):
        """Draw an arrowhead at the end of a line."""
        x1, y1 = from_point
        x2, y2 = to_point

        arrow_size = 8 * self.scale
        angle = math.atan2(y2 - y1, x2 - x1)

        angle1 = angle + math.pi * 0.8
        angle2 = angle - math.pi * 0.8

        ax1 = x2 + arrow_size * math.cos(angle1)
        ay1 = y2 + arrow_size * math.sin(angle1)
        ax2 = x2 + arrow_size * math.cos(angle2)
        ay2 = y2 + arrow_size * math.sin(angle2)

        draw.polygon([(x2, y2), (ax1, ay1), (ax2, ay2)], fill=color)


def render_to_png(result: LayoutResult, output_path: str = "graph.png", **kwargs) -> str:
    """
    Convenience function to render a layout result to PNG.

    Args:
        result: Result of a layout pass.
        output_path: Path to save the PNG file
        **kwargs: Additional parameters for PNGRenderer

    Returns:
        Path to the saved PNG file
    """
    return PNGRenderer(**kwargs).render(result, output_path)
