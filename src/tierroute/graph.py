"""
Graph payload parsing for the dependency graph.

Converts the graph API response ({"nodes": [...], "edges": [...]}) into
Node and Edge objects, and derives the per-node data the layout pass adds:
reported health counts and a topology fingerprint.
"""

import hashlib
import re
from dataclasses import dataclass, field
from typing import Any, Dict, List, Mapping, Sequence

from .models import Edge, Node, Position


class GraphDataError(Exception):
    """Raised when a graph payload is malformed."""

    pass


@dataclass
class GraphData:
    """Nodes and edges parsed from a graph payload."""

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)


_CAMEL_BOUNDARY = re.compile(r"([a-z0-9])([A-Z])")
_DIGIT_BOUNDARY = re.compile(r"([a-zA-Z])(\d)")


def snake_case(key: str) -> str:
    """Convert a camelCase payload key to snake_case ("avgLatencyMs24h" -> "avg_latency_ms_24h")."""
    key = _CAMEL_BOUNDARY.sub(r"\1_\2", key)
    key = _DIGIT_BOUNDARY.sub(r"\1_\2", key)
    return key.lower()


def _normalize_data(data: Any, where: str) -> Dict[str, Any]:
    if data is None:
        return {}
    if not isinstance(data, Mapping):
        raise GraphDataError(f"{where}: 'data' must be an object")
    return {snake_case(str(key)): value for key, value in data.items()}


def _require_id(item: Mapping, key: str, where: str) -> str:
    value = item.get(key)
    if not isinstance(value, str) or not value:
        raise GraphDataError(f"{where}: '{key}' must be a non-empty string")
    return value


def _parse_position(item: Mapping, where: str) -> Position:
    raw = item.get("position")
    if raw is None:
        return Position()
    try:
        return Position(float(raw["x"]), float(raw["y"]))
    except (KeyError, TypeError, ValueError):
        raise GraphDataError(f"{where}: 'position' must have numeric x and y") from None


def parse_graph_data(payload: Any) -> GraphData:
    """
    Parse a graph API payload.

    Edges referring to unknown nodes are kept: the layout pass tolerates them
    and simply does not route them.

    Args:
        payload: Mapping with "nodes" and "edges" lists.

    Returns:
        GraphData with nodes and edges in payload order.

    Raises:
        GraphDataError: If the payload shape is invalid or ids are duplicated.
    """
    if not isinstance(payload, Mapping):
        raise GraphDataError("Graph payload must be an object")

    raw_nodes = payload.get("nodes")
    raw_edges = payload.get("edges")
    if not isinstance(raw_nodes, list):
        raise GraphDataError("Graph payload must contain a 'nodes' list")
    if not isinstance(raw_edges, list):
        raise GraphDataError("Graph payload must contain an 'edges' list")

    result = GraphData()
    node_ids = set()
    for idx, item in enumerate(raw_nodes):
        where = f"Node {idx}"
        if not isinstance(item, Mapping):
            raise GraphDataError(f"{where}: expected an object")
        node_id = _require_id(item, "id", where)
        if node_id in node_ids:
            raise GraphDataError(f"{where}: duplicate node id '{node_id}'")
        node_ids.add(node_id)
        result.nodes.append(
            Node(
                id=node_id,
                position=_parse_position(item, where),
                data=_normalize_data(item.get("data"), where),
            )
        )

    edge_ids = set()
    for idx, item in enumerate(raw_edges):
        where = f"Edge {idx}"
        if not isinstance(item, Mapping):
            raise GraphDataError(f"{where}: expected an object")
        edge_id = _require_id(item, "id", where)
        if edge_id in edge_ids:
            raise GraphDataError(f"{where}: duplicate edge id '{edge_id}'")
        edge_ids.add(edge_id)
        result.edges.append(
            Edge(
                id=edge_id,
                source=_require_id(item, "source", where),
                target=_require_id(item, "target", where),
                data=_normalize_data(item.get("data"), where),
            )
        )

    return result


def compute_reported_health(edges: Sequence[Edge]) -> Dict[str, Dict[str, int]]:
    """
    Count what dependents report about each service.

    The reported status is attached to the edge's source. Edges whose
    "healthy" value is neither True nor False are not counted.

    Returns:
        Node id to {"healthy": n, "unhealthy": m}.
    """
    reported: Dict[str, Dict[str, int]] = {}
    for edge in edges:
        counts = reported.setdefault(edge.source, {"healthy": 0, "unhealthy": 0})
        healthy = edge.data.get("healthy")
        if healthy is True:
            counts["healthy"] += 1
        elif healthy is False:
            counts["unhealthy"] += 1
    return reported


def compute_topology_fingerprint(
    nodes: Sequence[Node], edges: Sequence[Edge]
) -> str:
    """
    Fingerprint of the graph's structure.

    Only node ids and edge endpoints contribute, so data-only changes such as
    latency or health updates keep the same fingerprint.
    """
    node_part = ",".join(sorted(node.id for node in nodes))
    edge_part = ",".join(
        sorted(f"{edge.id}:{edge.source}->{edge.target}" for edge in edges)
    )
    digest = hashlib.sha1(f"{node_part}|{edge_part}".encode("utf-8"))
    return digest.hexdigest()
