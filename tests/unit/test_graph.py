"""Tests for graph payload parsing and derived node data."""

import pytest

from tierroute.graph import (
    GraphDataError,
    compute_reported_health,
    compute_topology_fingerprint,
    parse_graph_data,
    snake_case,
)
from tierroute.models import Edge, Node, Position


def make_node(node_id, x=0, y=0, **data):
    return Node(id=node_id, position=Position(x, y), data=data)


def make_edge(edge_id, source, target, **data):
    return Edge(id=edge_id, source=source, target=target, data=data)


class TestSnakeCase:
    """Tests for snake_case()."""

    @pytest.mark.parametrize(
        "key,expected",
        [
            ("latencyMs", "latency_ms"),
            ("avgLatencyMs24h", "avg_latency_ms_24h"),
            ("healthy", "healthy"),
            ("already_snake", "already_snake"),
        ],
    )
    def test_conversion(self, key, expected):
        assert snake_case(key) == expected


class TestParseGraphData:
    """Tests for parse_graph_data()."""

    def test_basic(self, chain_payload):
        data = parse_graph_data(chain_payload)
        assert [n.id for n in data.nodes] == ["frontend", "api", "db"]
        assert [(e.source, e.target) for e in data.edges] == [
            ("frontend", "api"),
            ("api", "db"),
        ]
        assert data.nodes[0].data == {"name": "Frontend"}

    def test_edge_data_normalized(self, service_payload):
        data = parse_graph_data(service_payload)
        assert data.edges[1].data == {
            "latency_ms": 250,
            "avg_latency_ms_24h": 100,
            "healthy": True,
        }

    def test_positions(self):
        data = parse_graph_data(
            {"nodes": [{"id": "a", "position": {"x": 5, "y": "7.5"}}], "edges": []}
        )
        assert data.nodes[0].position == Position(5, 7.5)

    def test_dangling_edges_kept(self):
        data = parse_graph_data(
            {"nodes": [{"id": "a"}], "edges": [{"id": "e", "source": "a", "target": "x"}]}
        )
        assert len(data.edges) == 1

    def test_empty_graph(self):
        data = parse_graph_data({"nodes": [], "edges": []})
        assert data.nodes == [] and data.edges == []

    @pytest.mark.parametrize(
        "payload,message",
        [
            ([], "must be an object"),
            ({"edges": []}, "'nodes' list"),
            ({"nodes": []}, "'edges' list"),
            ({"nodes": ["a"], "edges": []}, "Node 0: expected an object"),
            ({"nodes": [{"id": ""}], "edges": []}, "Node 0: 'id'"),
            ({"nodes": [{"id": "a"}, {"id": "a"}], "edges": []}, "duplicate node id"),
            ({"nodes": [{"id": "a", "data": 3}], "edges": []}, "'data' must be an object"),
            (
                {"nodes": [{"id": "a", "position": {"x": 1}}], "edges": []},
                "numeric x and y",
            ),
            ({"nodes": [], "edges": [{"id": "e", "source": "a"}]}, "Edge 0: 'target'"),
            (
                {
                    "nodes": [],
                    "edges": [
                        {"id": "e", "source": "a", "target": "b"},
                        {"id": "e", "source": "b", "target": "a"},
                    ],
                },
                "Edge 1: duplicate edge id",
            ),
        ],
    )
    def test_invalid_payloads(self, payload, message):
        with pytest.raises(GraphDataError, match=message):
            parse_graph_data(payload)


class TestReportedHealth:
    """Tests for compute_reported_health()."""

    def test_counts_on_source(self):
        edges = [
            make_edge("e1", "a", "b", healthy=True),
            make_edge("e2", "a", "c", healthy=False),
            make_edge("e3", "a", "d", healthy=True),
            make_edge("e4", "b", "c"),
        ]
        reported = compute_reported_health(edges)
        assert reported["a"] == {"healthy": 2, "unhealthy": 1}
        assert reported["b"] == {"healthy": 0, "unhealthy": 0}
        assert "c" not in reported


class TestTopologyFingerprint:
    """Tests for compute_topology_fingerprint()."""

    def test_order_independent(self):
        nodes = [make_node("a"), make_node("b")]
        edges = [make_edge("e1", "a", "b"), make_edge("e2", "b", "a")]
        assert compute_topology_fingerprint(nodes, edges) == compute_topology_fingerprint(
            list(reversed(nodes)), list(reversed(edges))
        )

    def test_ignores_data_and_positions(self):
        before = compute_topology_fingerprint(
            [make_node("a", 0, 0)], [make_edge("e", "a", "a", latency_ms=1)]
        )
        after = compute_topology_fingerprint(
            [make_node("a", 50, 50, name="A")], [make_edge("e", "a", "a", latency_ms=900)]
        )
        assert before == after

    def test_rewiring_changes_fingerprint(self):
        nodes = [make_node("a"), make_node("b"), make_node("c")]
        first = compute_topology_fingerprint(nodes, [make_edge("e", "a", "b")])
        second = compute_topology_fingerprint(nodes, [make_edge("e", "a", "c")])
        assert first != second
