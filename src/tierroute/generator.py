"""
Main layout generator module.

Combines the coarse layout, layer spacing adjustment and edge routing into a
single layout pass, and keeps the little state that survives between passes
(manually placed nodes, layout preferences).
"""

import logging
from dataclasses import dataclass, field, replace
from typing import Any, Dict, List, Optional, Sequence

from .config import LayoutConfig
from .edge_data import EdgeRenderData, build_edge_render_data
from .edge_drawing import EdgePath, build_edge_path, edge_endpoints
from .edge_routing import compute_edge_routes
from .graph import (
    GraphData,
    compute_reported_health,
    compute_topology_fingerprint,
    parse_graph_data,
)
from .layout import CoarseLayout, LayoutOptions, NetworkXLayout
from .models import Direction, Edge, EdgeStyle, Node, Position
from .spacing import adjust_layer_spacing
from .storage import LayoutStorage
from .tiers import assign_edges_to_gaps, build_tier_index, detect_tiers
from .tracer import LayoutTrace

logger = logging.getLogger(__name__)


@dataclass
class LayoutResult:
    """
    Result of one layout pass.

    Attributes:
        nodes: Nodes with final positions.
        edges: The input edges, unchanged.
        routes: Edge id to lane coordinate, for routed edges only.
        edge_data: Render side-table, one entry per edge.
        direction: Direction the pass was run with.
        edge_style: Edge style the pass was run with.
        fingerprint: Topology fingerprint of the nodes and edges.
    """

    nodes: List[Node] = field(default_factory=list)
    edges: List[Edge] = field(default_factory=list)
    routes: Dict[str, float] = field(default_factory=dict)
    edge_data: Dict[str, EdgeRenderData] = field(default_factory=dict)
    direction: Direction = Direction.TB
    edge_style: EdgeStyle = EdgeStyle.ORTHOGONAL
    fingerprint: str = ""

    def node(self, node_id: str) -> Optional[Node]:
        for node in self.nodes:
            if node.id == node_id:
                return node
        return None


def _snapshot(nodes: Sequence[Node]) -> Dict[str, tuple]:
    return {node.id: (node.position.x, node.position.y) for node in nodes}


class GraphLayoutGenerator:
    """
    Lay out service dependency graphs with orthogonally routed edges.

    Example:
        >>> generator = GraphLayoutGenerator(LayoutConfig(direction="LR"))
        >>> result = generator.transform_graph_data(payload)
        >>> paths = generator.edge_paths(result)
    """

    def __init__(
        self,
        config: Optional[LayoutConfig] = None,
        coarse_layout: Optional[CoarseLayout] = None,
        storage: Optional[LayoutStorage] = None,
        viewer_id: Optional[str] = None,
    ):
        """
        Initialize the layout generator.

        Args:
            config: Layout settings. Defaults to the stored preferences when
                a storage is given, else to LayoutConfig().
            coarse_layout: Strategy for the initial tiered positions.
            storage: Optional store for manual positions and preferences.
            viewer_id: Identity that manual positions are stored under.
        """
        if config is None:
            config = storage.load_preferences() if storage else LayoutConfig()
        self.config = config
        self.coarse_layout = coarse_layout or NetworkXLayout()
        self.storage = storage
        self.viewer_id = viewer_id
        self.saved_positions: Dict[str, Position] = {}
        if self._persists_positions:
            self.saved_positions = storage.load_node_positions(viewer_id)
        self._trace: Optional[LayoutTrace] = None

    @property
    def _persists_positions(self) -> bool:
        return self.storage is not None and self.viewer_id is not None

    def layout(
        self, nodes: Sequence[Node], edges: Sequence[Edge], debug: bool = False
    ) -> LayoutResult:
        """
        Run one layout pass.

        Steps: coarse layout, layer spacing adjustment (orthogonal edge style
        only), manual position overrides, then lane routing over the merged
        positions (orthogonal edge style only).

        Args:
            nodes: Nodes to lay out.
            edges: Edges between them; dangling edges are kept but not routed.
            debug: Record a LayoutTrace, available from get_trace().

        Returns:
            LayoutResult with final node positions and routing data.
        """
        config = self.config
        direction = config.direction
        trace = None
        if debug:
            trace = LayoutTrace(
                direction=direction.value, node_count=len(nodes), edge_count=len(edges)
            )

        options = LayoutOptions(direction, config.tier_spacing, config.node_spacing)
        coarse = self.coarse_layout.compute_coarse_layout(nodes, edges, options)
        positioned = [
            node.with_position(coarse.get(node.id, Position())) for node in nodes
        ]
        if trace:
            trace.add_stage("coarse_layout", {"positions": _snapshot(positioned)})

        orthogonal = config.edge_style is EdgeStyle.ORTHOGONAL
        if orthogonal:
            if trace:
                tiers = detect_tiers(positioned, direction)
                gaps = assign_edges_to_gaps(edges, build_tier_index(tiers))
                trace.add_stage(
                    "tiers",
                    {
                        "tiers": [(t.position, list(t.node_ids)) for t in tiers],
                        "gap_edge_counts": {i: len(e) for i, e in sorted(gaps.items())},
                    },
                )

            positioned = adjust_layer_spacing(
                positioned, edges, direction, config.lane_spacing, config.padding
            )
            if trace:
                trace.add_stage("spacing_adjusted", {"positions": _snapshot(positioned)})

        # Drags are recorded in final coordinates, so they go over the spaced layout
        self._prune_saved_positions(nodes)
        overrides = {**self.saved_positions, **config.position_overrides}
        positioned = [
            node.with_position(overrides[node.id]) if node.id in overrides else node
            for node in positioned
        ]
        if trace:
            trace.add_stage(
                "overrides_applied",
                {
                    "overridden": sorted(n.id for n in positioned if n.id in overrides),
                    "positions": _snapshot(positioned),
                },
            )

        routes: Dict[str, float] = {}
        if orthogonal:
            routes = compute_edge_routes(
                positioned, edges, direction, config.lane_spacing
            )
            if trace:
                trace.add_stage(
                    "routes",
                    {
                        "lanes": dict(routes),
                        "unrouted": [e.id for e in edges if e.id not in routes],
                    },
                )

        logger.debug(
            "Layout pass: %d nodes, %d edges, %d routed (%s, %s)",
            len(nodes),
            len(edges),
            len(routes),
            direction.value,
            config.edge_style.value,
        )

        self._trace = trace
        return LayoutResult(
            nodes=positioned,
            edges=list(edges),
            routes=routes,
            edge_data=build_edge_render_data(
                edges, direction, config.edge_style, routes, config.latency_threshold
            ),
            direction=direction,
            edge_style=config.edge_style,
            fingerprint=compute_topology_fingerprint(nodes, edges),
        )

    def transform_graph_data(self, payload: Any, debug: bool = False) -> LayoutResult:
        """
        Parse a graph API payload and lay it out.

        Raises:
            GraphDataError: If the payload is malformed.
        """
        data = parse_graph_data(payload)
        return self.layout(self._annotate_nodes(data), data.edges, debug=debug)

    def refresh(
        self,
        payload: Any,
        previous: Optional[LayoutResult] = None,
        debug: bool = False,
    ) -> LayoutResult:
        """
        Lay out a refreshed payload, skipping layout when topology is unchanged.

        A full layout pass runs when there is no previous result, or when
        nodes or edges were added, removed or rewired. Otherwise only node and
        edge data are updated.
        """
        data = parse_graph_data(payload)
        fingerprint = compute_topology_fingerprint(data.nodes, data.edges)
        if previous is not None and previous.nodes and previous.fingerprint == fingerprint:
            return self.update_data_only(previous, data)

        logger.debug("Topology changed, running full layout")
        return self.layout(self._annotate_nodes(data), data.edges, debug=debug)

    def update_data_only(self, previous: LayoutResult, data: GraphData) -> LayoutResult:
        """Refresh node and edge data, keeping positions and lanes of a previous pass."""
        positions = {node.id: node.position for node in previous.nodes}
        nodes = [
            node.with_position(positions.get(node.id, node.position))
            for node in self._annotate_nodes(data, previous.direction)
        ]
        return LayoutResult(
            nodes=nodes,
            edges=list(data.edges),
            routes=dict(previous.routes),
            edge_data=build_edge_render_data(
                data.edges,
                previous.direction,
                previous.edge_style,
                previous.routes,
                self.config.latency_threshold,
            ),
            direction=previous.direction,
            edge_style=previous.edge_style,
            fingerprint=previous.fingerprint,
        )

    def edge_paths(self, result: LayoutResult) -> Dict[str, EdgePath]:
        """
        Build render-time path geometry for every drawable edge.

        Edges with a missing endpoint cannot be drawn and are left out.
        """
        nodes = {node.id: node for node in result.nodes}
        paths: Dict[str, EdgePath] = {}
        for edge in result.edges:
            source, target = nodes.get(edge.source), nodes.get(edge.target)
            if source is None or target is None:
                continue
            source_point, target_point = edge_endpoints(source, target, result.direction)
            paths[edge.id] = build_edge_path(
                source_point,
                target_point,
                result.direction,
                lane=result.routes.get(edge.id),
                edge_style=result.edge_style,
            )
        return paths

    def record_node_position(self, node_id: str, position: Position) -> None:
        """Remember where a node was manually placed, for following passes."""
        self.saved_positions[node_id] = position
        if self._persists_positions:
            self.storage.save_node_positions(self.viewer_id, self.saved_positions)

    def reset_layout(self) -> None:
        """Forget all manual placements."""
        self.saved_positions = {}
        if self._persists_positions:
            self.storage.clear_node_positions(self.viewer_id)

    def set_preferences(self, **changes) -> LayoutConfig:
        """
        Update layout settings and persist them when a storage is configured.

        Example:
            >>> generator.set_preferences(direction="LR", edge_style="bezier")
        """
        self.config = replace(self.config, **changes)
        if self.storage is not None:
            self.storage.save_preferences(self.config)
        return self.config

    def get_trace(self) -> Optional[LayoutTrace]:
        """Trace of the last layout pass run with debug=True, else None."""
        return self._trace

    def _prune_saved_positions(self, nodes: Sequence[Node]) -> None:
        current = {node.id for node in nodes}
        stale = [node_id for node_id in self.saved_positions if node_id not in current]
        if not stale:
            return
        for node_id in stale:
            del self.saved_positions[node_id]
        logger.debug("Dropped saved positions of removed nodes: %s", stale)
        if self._persists_positions:
            self.storage.save_node_positions(self.viewer_id, self.saved_positions)

    def _annotate_nodes(
        self, data: GraphData, direction: Optional[Direction] = None
    ) -> List[Node]:
        direction = direction or self.config.direction
        reported = compute_reported_health(data.edges)
        nodes = []
        for node in data.nodes:
            counts = reported.get(node.id, {"healthy": 0, "unhealthy": 0})
            nodes.append(
                replace(
                    node,
                    data={
                        **node.data,
                        "reported_healthy_count": counts["healthy"],
                        "reported_unhealthy_count": counts["unhealthy"],
                        "layout_direction": direction.value,
                    },
                )
            )
        return nodes
