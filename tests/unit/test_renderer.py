"""Tests for the SVG renderer."""

import xml.etree.ElementTree as ET


from tierroute.config import LayoutConfig
from tierroute.generator import GraphLayoutGenerator
from tierroute.models import Edge, Node, Position
from tierroute.renderer import EDGE_COLORS, SVGRenderer, edge_status, layout_bounds


def make_node(node_id, x=0, y=0, **data):
    return Node(id=node_id, position=Position(x, y), data=data)


def make_edge(edge_id, source, target, **data):
    return Edge(id=edge_id, source=source, target=target, data=data)


SVG_NS = "{http://www.w3.org/2000/svg}"


def parse(svg):
    return ET.fromstring(svg)


class TestLayoutBounds:
    """Tests for layout_bounds()."""

    def test_empty(self, generator):
        assert layout_bounds(generator.layout([], []), 10) == (0, 0, 20, 20)

    def test_includes_node_footprint(self, fixed_layout):
        result = GraphLayoutGenerator(coarse_layout=fixed_layout).layout(
            [make_node("a", 0, 0), make_node("b", 300, 0)], []
        )
        assert layout_bounds(result, 40) == (-40, -40, 560, 180)


class TestEdgeStatus:
    """Tests for edge_status()."""

    def test_statuses(self, generator, service_payload):
        result = generator.transform_graph_data(service_payload)
        edges = {e.id: e for e in result.edges}
        assert edge_status(result, edges["gw-auth"]) == "healthy"
        assert edge_status(result, edges["gw-orders"]) == "high_latency"
        assert edge_status(result, edges["orders-payments"]) == "unhealthy"
        assert edge_status(result, edges["orders-pg"]) == "unknown"


class TestSVGRenderer:
    """Tests for SVGRenderer."""

    def test_well_formed(self, generator, service_payload):
        svg = SVGRenderer().render(generator.transform_graph_data(service_payload))
        root = parse(svg)
        assert root.tag == f"{SVG_NS}svg"

    def test_one_rect_per_node_and_path_per_edge(self, generator, service_payload):
        result = generator.transform_graph_data(service_payload)
        root = parse(SVGRenderer().render(result))

        rects = root.findall(f".//{SVG_NS}rect")
        edge_paths = [
            p for p in root.findall(f".//{SVG_NS}path") if p.get("id", "").startswith("edge-")
        ]
        assert len(rects) == len(result.nodes)
        assert len(edge_paths) == len(result.edges)

    def test_paths_match_generator(self, generator, chain_payload):
        result = generator.transform_graph_data(chain_payload)
        root = parse(SVGRenderer().render(result))
        expected = generator.edge_paths(result)
        for path in root.findall(f".//{SVG_NS}path"):
            if path.get("id", "").startswith("edge-"):
                assert path.get("d") == expected[path.get("id")[len("edge-"):]].path

    def test_latency_labels(self, generator, service_payload):
        svg = SVGRenderer().render(generator.transform_graph_data(service_payload))
        assert ">250ms</text>" in svg
        assert ">1.5s</text>" in svg

    def test_edge_colors(self, generator, service_payload):
        svg = SVGRenderer().render(generator.transform_graph_data(service_payload))
        assert f'stroke="{EDGE_COLORS["high_latency"]}"' in svg
        assert 'marker-end="url(#arrow-unhealthy)"' in svg

    def test_names_escaped(self, fixed_layout):
        generator = GraphLayoutGenerator(coarse_layout=fixed_layout)
        result = generator.layout([make_node('a"<b>', name="R&D <api>")], [])
        svg = SVGRenderer().render(result)
        parse(svg)
        assert "R&amp;D &lt;api&gt;" in svg

    def test_dangling_edge_not_drawn(self, fixed_layout):
        generator = GraphLayoutGenerator(coarse_layout=fixed_layout)
        result = generator.layout([make_node("a")], [make_edge("e", "a", "ghost")])
        assert 'id="edge-e"' not in SVGRenderer().render(result)

    def test_bezier_render(self, chain_payload):
        generator = GraphLayoutGenerator(LayoutConfig(edge_style="bezier"))
        svg = SVGRenderer().render(generator.transform_graph_data(chain_payload))
        assert " C " in svg

    def test_save(self, tmp_path, generator, chain_payload):
        path = tmp_path / "graph.svg"
        SVGRenderer().save(generator.transform_graph_data(chain_payload), str(path))
        assert parse(path.read_text(encoding="utf-8")).tag == f"{SVG_NS}svg"
