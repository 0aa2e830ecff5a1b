"""
Coarse layered layout using networkx.

Produces the initial tiered node positions that the spacing adjuster and
edge router refine. Any object implementing the CoarseLayout protocol can be
used instead, which lets tests substitute a deterministic stub.

Uses networkx for:
- Graph representation
- Cycle detection
- Topological sorting / layer assignment
- Node ordering within layers
"""

from dataclasses import dataclass
from typing import Dict, List, Protocol, Sequence, Set, Tuple

import networkx as nx

from .config import DEFAULT_NODE_SPACING, DEFAULT_TIER_SPACING
from .models import Direction, Edge, Node, Position


@dataclass
class LayoutOptions:
    """Options passed to a coarse layout strategy."""

    direction: Direction = Direction.TB
    tier_spacing: int = DEFAULT_TIER_SPACING
    node_spacing: int = DEFAULT_NODE_SPACING


class CoarseLayout(Protocol):
    """Strategy that assigns every node an initial position."""

    def compute_coarse_layout(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        options: LayoutOptions,
    ) -> Dict[str, Position]:
        ...


class NetworkXLayout:
    """
    Layered graph layout using networkx.

    For DAGs: uses longest-path layering over a topological order
    For cyclic graphs: identifies back edges, breaks cycles, then layouts
    """

    def __init__(self, sweeps: int = 4):
        self.sweeps = sweeps
        self.graph: nx.DiGraph = None
        self.back_edges: Set[Tuple[str, str]] = set()

    def compute_coarse_layout(
        self,
        nodes: Sequence[Node],
        edges: Sequence[Edge],
        options: LayoutOptions,
    ) -> Dict[str, Position]:
        """
        Compute positions for the given nodes.

        Args:
            nodes: Nodes to place (their current positions are ignored).
            edges: Edges; dangling references and self loops are ignored.
            options: Direction and spacing.

        Returns:
            Mapping of node id to the top-left position of its box.
        """
        layers = self.layers(nodes, edges)
        return self._assign_coordinates(layers, options)

    def layers(self, nodes: Sequence[Node], edges: Sequence[Edge]) -> List[List[str]]:
        """Assign nodes to ordered layers."""
        node_ids = [node.id for node in nodes]
        known = set(node_ids)

        self.graph = nx.DiGraph()
        self.graph.add_nodes_from(node_ids)
        self.graph.add_edges_from(
            (edge.source, edge.target)
            for edge in edges
            if edge.source in known
            and edge.target in known
            and edge.source != edge.target
        )

        self.back_edges = set()
        if not nx.is_directed_acyclic_graph(self.graph):
            self._break_cycles()

        layers = self._assign_layers()
        return self._order_layers(layers)

    def _break_cycles(self) -> None:
        """
        Identify back edges and create a DAG by conceptually removing them.
        Uses DFS to find back edges.
        """
        visited = set()
        rec_stack = set()

        def dfs(node):
            visited.add(node)
            rec_stack.add(node)

            for successor in list(self.graph.successors(node)):
                if successor not in visited:
                    dfs(successor)
                elif successor in rec_stack:
                    self.back_edges.add((node, successor))

            rec_stack.remove(node)

        # Start DFS from nodes with no predecessors, or any node if all have them
        roots = [n for n in self.graph.nodes() if self.graph.in_degree(n) == 0]
        if not roots:
            roots = [next(iter(self.graph.nodes()))]

        for root in roots:
            if root not in visited:
                dfs(root)

        for node in self.graph.nodes():
            if node not in visited:
                dfs(node)

    def _working_graph(self) -> nx.DiGraph:
        working_graph = self.graph.copy()
        working_graph.remove_edges_from(self.back_edges)
        return working_graph

    def _assign_layers(self) -> List[List[str]]:
        """
        Assign nodes to layers using longest path method.
        """
        working_graph = self._working_graph()
        node_layer: Dict[str, int] = {}

        for node in nx.topological_sort(working_graph):
            predecessors = list(working_graph.predecessors(node))
            if not predecessors:
                node_layer[node] = 0
            else:
                node_layer[node] = max(node_layer[p] for p in predecessors) + 1

        if not node_layer:
            return []

        max_layer = max(node_layer.values())
        layers: List[List[str]] = [[] for _ in range(max_layer + 1)]

        # Keep input order within a layer as the starting order
        for node in self.graph.nodes():
            layers[node_layer[node]].append(node)

        return layers

    def _order_layers(self, layers: List[List[str]]) -> List[List[str]]:
        """
        Order nodes within each layer to minimize edge crossings.
        Uses barycenter heuristic.
        """
        if len(layers) <= 1:
            return layers

        working_graph = self._working_graph()

        for _ in range(self.sweeps):
            # Forward pass
            for i in range(1, len(layers)):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i - 1], working_graph, use_predecessors=True
                )

            # Backward pass
            for i in range(len(layers) - 2, -1, -1):
                layers[i] = self._order_layer_by_barycenter(
                    layers[i], layers[i + 1], working_graph, use_predecessors=False
                )

        return layers

    def _order_layer_by_barycenter(
        self,
        layer: List[str],
        ref_layer: List[str],
        graph: nx.DiGraph,
        use_predecessors: bool,
    ) -> List[str]:
        """
        Order nodes by barycenter (average position of connected nodes).
        """
        ref_positions = {node: i for i, node in enumerate(ref_layer)}
        current = {node: i for i, node in enumerate(layer)}

        def barycenter(node: str) -> float:
            if use_predecessors:
                neighbors = graph.predecessors(node)
            else:
                neighbors = graph.successors(node)

            positions = [ref_positions[n] for n in neighbors if n in ref_positions]

            if not positions:
                # Keep original order for nodes with no connections to ref layer
                return current[node]

            return sum(positions) / len(positions)

        return sorted(layer, key=barycenter)

    def _assign_coordinates(
        self, layers: List[List[str]], options: LayoutOptions
    ) -> Dict[str, Position]:
        """
        Place layers along the primary axis and center each layer on the
        cross axis against the widest one.
        """
        direction = options.direction
        primary_step = direction.primary_footprint + options.tier_spacing
        cross_step = direction.cross_footprint + options.node_spacing

        def extent(layer: List[str]) -> float:
            if not layer:
                return 0
            return len(layer) * cross_step - options.node_spacing

        max_extent = max((extent(layer) for layer in layers), default=0)

        positions: Dict[str, Position] = {}
        for layer_idx, layer in enumerate(layers):
            primary = layer_idx * primary_step
            start = (max_extent - extent(layer)) / 2
            for pos_idx, node_id in enumerate(layer):
                cross = start + pos_idx * cross_step
                if direction is Direction.TB:
                    positions[node_id] = Position(cross, primary)
                else:
                    positions[node_id] = Position(primary, cross)

        return positions
