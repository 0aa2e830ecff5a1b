"""Tests for the per-pass edge render side-table."""

from tierroute.edge_data import (
    build_edge_render_data,
    compute_edge_fan_out,
    format_latency,
    is_high_latency,
)
from tierroute.models import Direction, Edge, EdgeStyle


def make_edge(edge_id, source, target, **data):
    return Edge(id=edge_id, source=source, target=target, data=data)


class TestFanOut:
    """Tests for compute_edge_fan_out()."""

    def test_single_edge(self):
        fan_out = compute_edge_fan_out([make_edge("e", "a", "b")])
        assert fan_out["e"].source_index == 0
        assert fan_out["e"].source_count == 1
        assert fan_out["e"].target_count == 1

    def test_shared_source(self):
        edges = [make_edge("e1", "a", "b"), make_edge("e2", "a", "c"), make_edge("e3", "a", "d")]
        fan_out = compute_edge_fan_out(edges)
        assert [fan_out[e].source_index for e in ("e1", "e2", "e3")] == [0, 1, 2]
        assert all(fan_out[e].source_count == 3 for e in ("e1", "e2", "e3"))
        assert all(fan_out[e].target_count == 1 for e in ("e1", "e2", "e3"))

    def test_shared_target(self):
        edges = [make_edge("e1", "a", "z"), make_edge("e2", "b", "z")]
        fan_out = compute_edge_fan_out(edges)
        assert fan_out["e2"].target_index == 1
        assert fan_out["e2"].target_count == 2


class TestFormatLatency:
    """Tests for format_latency()."""

    def test_missing(self):
        assert format_latency(None) == ""

    def test_milliseconds_rounded(self):
        assert format_latency(12.4) == "12ms"
        assert format_latency(12.5) == "13ms"
        assert format_latency(0) == "0ms"

    def test_seconds(self):
        assert format_latency(1000) == "1.0s"
        assert format_latency(1500) == "1.5s"


class TestIsHighLatency:
    """Tests for is_high_latency()."""

    def test_above_threshold(self):
        assert is_high_latency(151, 100, 50) is True

    def test_at_threshold_is_not_high(self):
        assert is_high_latency(150, 100, 50) is False

    def test_missing_values(self):
        assert is_high_latency(None, 100) is False
        assert is_high_latency(500, None) is False
        assert is_high_latency(500, 0) is False


class TestBuildEdgeRenderData:
    """Tests for build_edge_render_data()."""

    def test_entry_per_edge(self):
        edges = [
            make_edge("routed", "a", "b", latency_ms=250, avg_latency_ms_24h=100),
            make_edge("unrouted", "a", "a"),
        ]
        table = build_edge_render_data(
            edges, Direction.LR, EdgeStyle.ORTHOGONAL, {"routed": 290}
        )

        assert set(table) == {"routed", "unrouted"}
        routed = table["routed"]
        assert routed.routing_lane == 290
        assert routed.layout_direction is Direction.LR
        assert routed.edge_style is EdgeStyle.ORTHOGONAL
        assert routed.is_high_latency is True
        assert routed.label == "250ms"
        assert routed.fan_out.source_count == 2

        assert table["unrouted"].routing_lane is None
        assert table["unrouted"].label == ""

    def test_threshold_applies(self):
        edges = [make_edge("e", "a", "b", latency_ms=180, avg_latency_ms_24h=100)]
        strict = build_edge_render_data(edges, Direction.TB, EdgeStyle.BEZIER, {}, 50)
        lenient = build_edge_render_data(edges, Direction.TB, EdgeStyle.BEZIER, {}, 100)
        assert strict["e"].is_high_latency is True
        assert lenient["e"].is_high_latency is False
