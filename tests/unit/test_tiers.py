"""
Tests for tier detection and gap assignment.

These cover how raw coarse-layout coordinates are grouped into tiers and
how edges are bucketed into the gaps between them.
"""

from tierroute.models import Direction, Edge, Node, Position
from tierroute.tiers import (
    LAYER_TOLERANCE,
    assign_edges_to_gaps,
    build_tier_index,
    calculate_gap_boundaries,
    detect_tiers,
)


def make_node(node_id, x=0, y=0, **data):
    return Node(id=node_id, position=Position(x, y), data=data)


def make_edge(edge_id, source, target, **data):
    return Edge(id=edge_id, source=source, target=target, data=data)


class TestDetectTiers:
    """Tests for detect_tiers()."""

    def test_empty(self):
        assert detect_tiers([], Direction.TB) == []

    def test_groups_by_y_in_tb(self):
        nodes = [
            make_node("a", 0, 0),
            make_node("b", 300, 0),
            make_node("c", 0, 280),
        ]
        tiers = detect_tiers(nodes, Direction.TB)

        assert [t.position for t in tiers] == [0, 280]
        assert tiers[0].node_ids == ["a", "b"]
        assert tiers[1].node_ids == ["c"]
        assert [t.index for t in tiers] == [0, 1]

    def test_groups_by_x_in_lr(self):
        nodes = [
            make_node("a", 0, 0),
            make_node("b", 0, 300),
            make_node("c", 400, 0),
        ]
        tiers = detect_tiers(nodes, Direction.LR)

        assert [t.position for t in tiers] == [0, 400]
        assert sorted(tiers[0].node_ids) == ["a", "b"]

    def test_tolerance_is_inclusive(self):
        """A node exactly LAYER_TOLERANCE away joins the tier."""
        nodes = [make_node("a", 0, 0), make_node("b", 200, LAYER_TOLERANCE)]
        tiers = detect_tiers(nodes, Direction.TB)
        assert len(tiers) == 1

    def test_just_outside_tolerance_opens_new_tier(self):
        nodes = [make_node("a", 0, 0), make_node("b", 200, LAYER_TOLERANCE + 1)]
        tiers = detect_tiers(nodes, Direction.TB)
        assert len(tiers) == 2

    def test_compares_against_tier_coordinate_not_last_node(self):
        """Nodes at 0, 4 and 8 do not chain into one tier."""
        nodes = [
            make_node("a", 0, 0),
            make_node("b", 200, 4),
            make_node("c", 400, 8),
        ]
        tiers = detect_tiers(nodes, Direction.TB)

        assert [t.position for t in tiers] == [0, 8]
        assert tiers[0].node_ids == ["a", "b"]
        assert tiers[1].node_ids == ["c"]

    def test_unsorted_input(self):
        nodes = [
            make_node("c", 0, 560),
            make_node("a", 0, 0),
            make_node("b", 0, 280),
        ]
        tiers = detect_tiers(nodes, Direction.TB)
        assert [t.node_ids for t in tiers] == [["a"], ["b"], ["c"]]

    def test_negative_coordinates(self):
        nodes = [make_node("a", 0, -300), make_node("b", 0, 0)]
        tiers = detect_tiers(nodes, Direction.TB)
        assert [t.position for t in tiers] == [-300, 0]


class TestBuildTierIndex:
    """Tests for build_tier_index()."""

    def test_maps_every_node(self):
        nodes = [make_node("a", 0, 0), make_node("b", 0, 280), make_node("c", 200, 280)]
        index = build_tier_index(detect_tiers(nodes, Direction.TB))
        assert index == {"a": 0, "b": 1, "c": 1}


class TestAssignEdgesToGaps:
    """Tests for assign_edges_to_gaps()."""

    def test_forward_edge_uses_lower_tier(self):
        edges = [make_edge("e1", "a", "b")]
        gaps = assign_edges_to_gaps(edges, {"a": 0, "b": 1})
        assert [e.id for e in gaps[0]] == ["e1"]

    def test_back_edge_shares_gap(self):
        edges = [make_edge("fwd", "a", "b"), make_edge("back", "b", "a")]
        gaps = assign_edges_to_gaps(edges, {"a": 0, "b": 1})
        assert [e.id for e in gaps[0]] == ["fwd", "back"]

    def test_multi_tier_edge_uses_first_gap(self):
        edges = [make_edge("long", "c", "a")]
        gaps = assign_edges_to_gaps(edges, {"a": 0, "b": 1, "c": 2})
        assert list(gaps) == [0]

    def test_same_tier_edge_dropped(self):
        edges = [make_edge("e1", "a", "b")]
        assert assign_edges_to_gaps(edges, {"a": 0, "b": 0}) == {}

    def test_dangling_edge_dropped(self):
        edges = [make_edge("e1", "a", "ghost"), make_edge("e2", "ghost", "a")]
        assert assign_edges_to_gaps(edges, {"a": 0}) == {}


class TestCalculateGapBoundaries:
    """Tests for calculate_gap_boundaries()."""

    def test_tb_uses_node_height(self):
        nodes = [make_node("a", 0, 0), make_node("b", 0, 280)]
        gaps = calculate_gap_boundaries(detect_tiers(nodes, Direction.TB), Direction.TB)

        assert len(gaps) == 1
        assert gaps[0].gap_start == 100
        assert gaps[0].gap_end == 280
        assert gaps[0].center == 190
        assert gaps[0].size == 180

    def test_lr_uses_node_width(self):
        nodes = [make_node("a", 0, 0), make_node("b", 400, 0)]
        gaps = calculate_gap_boundaries(detect_tiers(nodes, Direction.LR), Direction.LR)
        assert gaps[0].gap_start == 180
        assert gaps[0].center == 290

    def test_single_tier_has_no_gaps(self):
        tiers = detect_tiers([make_node("a")], Direction.TB)
        assert calculate_gap_boundaries(tiers, Direction.TB) == []
