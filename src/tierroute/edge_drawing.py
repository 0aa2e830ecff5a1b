"""
Edge drawing module for dependency graph rendering.

Turns a routed edge into SVG path geometry plus a label anchor. Three styles
are supported:

- Orthogonal: right angles through the edge's routing lane, with rounded
  corners (the routed path)
- Smooth step: orthogonal through the midpoint between the endpoints, used
  for edges that did not get a lane
- Bezier: a single cubic curve, used when routing is switched off

Paths only use the M, L, Q and C commands, so they can be drawn by any SVG
consumer and flattened into polylines by path_points().
"""

import math
import re
from dataclasses import dataclass
from typing import List, Optional, Tuple

from .models import NODE_HEIGHT, NODE_WIDTH, Direction, EdgeStyle, Node

# Upper bound for the corner radius of orthogonal bends
BORDER_RADIUS = 8

# Bezier control point curvature (only used when the target lies behind)
BEZIER_CURVATURE = 0.25

Point = Tuple[float, float]


@dataclass
class EdgePath:
    """
    SVG path description and label anchor for one edge.

    Coordinates in `path` are written as integers when integral and are
    otherwise rounded to two decimals. label_x and label_y are not rounded.
    """

    path: str
    label_x: float
    label_y: float


def _fmt(value: float) -> str:
    """Format a coordinate: integral values without a decimal point."""
    value = float(value)
    if value.is_integer():
        return str(int(value))
    return f"{value:.2f}".rstrip("0").rstrip(".")


def _pt(x: float, y: float) -> str:
    return f"{_fmt(x)},{_fmt(y)}"


def corner_radius(*spans: float) -> float:
    """
    Radius for the two bends of an orthogonal path.

    Each span is the length of a segment the corners share; half of it is
    available to each corner. The result never exceeds BORDER_RADIUS and
    shrinks to 0 as segments shorten.
    """
    return max(0.0, min([BORDER_RADIUS] + [abs(span) / 2 for span in spans]))


def build_orthogonal_path_tb(
    source_x: float,
    source_y: float,
    target_x: float,
    target_y: float,
    lane_y: float,
) -> EdgePath:
    """
    Build an orthogonal path for a top-to-bottom layout.

    source -> vertical -> bend -> horizontal at lane_y -> bend -> vertical -> target
    """
    if source_x == target_x:
        return EdgePath(
            path=f"M {_pt(source_x, source_y)} L {_pt(target_x, target_y)}",
            label_x=source_x,
            label_y=lane_y,
        )

    r = corner_radius(lane_y - source_y, target_y - lane_y, target_x - source_x)
    dir_x = 1 if target_x > source_x else -1

    path = " ".join(
        [
            f"M {_pt(source_x, source_y)}",
            f"L {_pt(source_x, lane_y - r)}",
            f"Q {_pt(source_x, lane_y)} {_pt(source_x + dir_x * r, lane_y)}",
            f"L {_pt(target_x - dir_x * r, lane_y)}",
            f"Q {_pt(target_x, lane_y)} {_pt(target_x, lane_y + r)}",
            f"L {_pt(target_x, target_y)}",
        ]
    )

    return EdgePath(path=path, label_x=(source_x + target_x) / 2, label_y=lane_y)


def build_orthogonal_path_lr(
    source_x: float,
    source_y: float,
    target_x: float,
    target_y: float,
    lane_x: float,
) -> EdgePath:
    """
    Build an orthogonal path for a left-to-right layout.

    source -> horizontal -> bend -> vertical at lane_x -> bend -> horizontal -> target
    """
    if source_y == target_y:
        return EdgePath(
            path=f"M {_pt(source_x, source_y)} L {_pt(target_x, target_y)}",
            label_x=lane_x,
            label_y=source_y,
        )

    r = corner_radius(lane_x - source_x, target_x - lane_x, target_y - source_y)
    dir_y = 1 if target_y > source_y else -1

    path = " ".join(
        [
            f"M {_pt(source_x, source_y)}",
            f"L {_pt(lane_x - r, source_y)}",
            f"Q {_pt(lane_x, source_y)} {_pt(lane_x, source_y + dir_y * r)}",
            f"L {_pt(lane_x, target_y - dir_y * r)}",
            f"Q {_pt(lane_x, target_y)} {_pt(lane_x + r, target_y)}",
            f"L {_pt(target_x, target_y)}",
        ]
    )

    return EdgePath(path=path, label_x=lane_x, label_y=(source_y + target_y) / 2)


def build_orthogonal_path(
    source_x: float,
    source_y: float,
    target_x: float,
    target_y: float,
    lane: float,
    direction: Direction,
) -> EdgePath:
    """Build the orthogonal path for either direction."""
    if direction is Direction.TB:
        return build_orthogonal_path_tb(source_x, source_y, target_x, target_y, lane)
    return build_orthogonal_path_lr(source_x, source_y, target_x, target_y, lane)


def build_smooth_step_path(
    source_x: float,
    source_y: float,
    target_x: float,
    target_y: float,
    direction: Direction,
) -> EdgePath:
    """Orthogonal path through the midpoint, for edges without a lane."""
    if direction is Direction.TB:
        lane = (source_y + target_y) / 2
    else:
        lane = (source_x + target_x) / 2
    return build_orthogonal_path(
        source_x, source_y, target_x, target_y, lane, direction
    )


def _control_offset(distance: float, curvature: float) -> float:
    if distance >= 0:
        return 0.5 * distance
    return curvature * 25 * math.sqrt(-distance)


def build_bezier_path(
    source_x: float,
    source_y: float,
    target_x: float,
    target_y: float,
    direction: Direction,
    curvature: float = BEZIER_CURVATURE,
) -> EdgePath:
    """
    Build a cubic bezier curve between the two endpoints.

    Control points leave the source and enter the target along the primary
    axis. The label sits on the curve at t = 0.5.
    """
    if direction is Direction.TB:
        offset = _control_offset(target_y - source_y, curvature)
        c1 = (source_x, source_y + offset)
        c2 = (target_x, target_y - offset)
    else:
        offset = _control_offset(target_x - source_x, curvature)
        c1 = (source_x + offset, source_y)
        c2 = (target_x - offset, target_y)

    path = (
        f"M {_pt(source_x, source_y)} "
        f"C {_pt(*c1)} {_pt(*c2)} {_pt(target_x, target_y)}"
    )
    label_x = source_x * 0.125 + c1[0] * 0.375 + c2[0] * 0.375 + target_x * 0.125
    label_y = source_y * 0.125 + c1[1] * 0.375 + c2[1] * 0.375 + target_y * 0.125

    return EdgePath(path=path, label_x=label_x, label_y=label_y)


def edge_endpoints(source: Node, target: Node, direction: Direction) -> Tuple[Point, Point]:
    """
    Connection points for an edge between two nodes.

    TB edges leave the bottom center of the source and enter the top center
    of the target. LR edges leave the right middle and enter the left middle.
    """
    sp, tp = source.position, target.position
    if direction is Direction.TB:
        return (
            (sp.x + NODE_WIDTH / 2, sp.y + NODE_HEIGHT),
            (tp.x + NODE_WIDTH / 2, tp.y),
        )
    return (
        (sp.x + NODE_WIDTH, sp.y + NODE_HEIGHT / 2),
        (tp.x, tp.y + NODE_HEIGHT / 2),
    )


def build_edge_path(
    source_point: Point,
    target_point: Point,
    direction: Direction,
    lane: Optional[float] = None,
    edge_style: EdgeStyle = EdgeStyle.ORTHOGONAL,
) -> EdgePath:
    """
    Pick the path style for an edge and build it.

    Bezier style always draws a curve. Orthogonal style uses the routing
    lane when one was assigned and falls back to a smooth step otherwise.
    """
    sx, sy = source_point
    tx, ty = target_point

    if edge_style is EdgeStyle.BEZIER:
        return build_bezier_path(sx, sy, tx, ty, direction)
    if lane is not None:
        return build_orthogonal_path(sx, sy, tx, ty, lane, direction)
    return build_smooth_step_path(sx, sy, tx, ty, direction)


_COMMAND_PATTERN = re.compile(r"([MLQC])\s*([^MLQC]*)")


def path_points(path: str, curve_steps: int = 8) -> List[Point]:
    """
    Flatten a path from this module into a polyline.

    Quadratic and cubic segments are sampled at curve_steps points each.
    Used by raster renderers that cannot draw SVG paths directly.
    """
    points: List[Point] = []

    for command, args in _COMMAND_PATTERN.findall(path):
        coords = [
            (float(x), float(y))
            for x, y in (pair.split(",") for pair in args.split())
        ]
        if command in ("M", "L"):
            points.extend(coords)
        elif command == "Q" and points:
            p0 = points[-1]
            (c, p1) = coords
            for step in range(1, curve_steps + 1):
                t = step / curve_steps
                u = 1 - t
                points.append(
                    (
                        u * u * p0[0] + 2 * u * t * c[0] + t * t * p1[0],
                        u * u * p0[1] + 2 * u * t * c[1] + t * t * p1[1],
                    )
                )
        elif command == "C" and points:
            p0 = points[-1]
            (c1, c2, p1) = coords
            for step in range(1, curve_steps + 1):
                t = step / curve_steps
                u = 1 - t
                points.append(
                    (
                        u**3 * p0[0]
                        + 3 * u * u * t * c1[0]
                        + 3 * u * t * t * c2[0]
                        + t**3 * p1[0],
                        u**3 * p0[1]
                        + 3 * u * u * t * c1[1]
                        + 3 * u * t * t * c2[1]
                        + t**3 * p1[1],
                    )
                )

    return points
