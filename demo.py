#!/usr/bin/env python3
"""
Demo script for tierroute.

Lays out a small service dependency graph in both directions and with both
edge styles, prints the routing lanes and writes SVG and PNG renderings.
"""

import logging

from tierroute import GraphLayoutGenerator, LayoutConfig, PNGRenderer, SVGRenderer

SERVICE_GRAPH = {
    "nodes": [
        {"id": "web", "data": {"name": "Web"}},
        {"id": "gateway", "data": {"name": "Gateway"}},
        {"id": "auth", "data": {"name": "Auth"}},
        {"id": "orders", "data": {"name": "Orders"}},
        {"id": "inventory", "data": {"name": "Inventory"}},
        {"id": "postgres", "data": {"name": "Postgres"}},
        {"id": "redis", "data": {"name": "Redis"}},
    ],
    "edges": [
        {"id": "web-gw", "source": "web", "target": "gateway",
         "data": {"latencyMs": 18, "avgLatencyMs24h": 15, "healthy": True}},
        {"id": "gw-auth", "source": "gateway", "target": "auth",
         "data": {"latencyMs": 7, "avgLatencyMs24h": 6, "healthy": True}},
        {"id": "gw-orders", "source": "gateway", "target": "orders",
         "data": {"latencyMs": 240, "avgLatencyMs24h": 90, "healthy": True}},
        {"id": "gw-inv", "source": "gateway", "target": "inventory",
         "data": {"latencyMs": 1300, "healthy": False}},
        {"id": "auth-redis", "source": "auth", "target": "redis"},
        {"id": "orders-pg", "source": "orders", "target": "postgres"},
        {"id": "orders-inv", "source": "orders", "target": "inventory"},
        {"id": "inv-pg", "source": "inventory", "target": "postgres"},
        {"id": "inv-orders", "source": "inventory", "target": "orders"},
    ],
}


def print_header(title):
    """Print a formatted header."""
    print("\n" + "=" * 70)
    print(f"  {title}")
    print("=" * 70 + "\n")


def run(title, config, basename):
    print_header(title)

    generator = GraphLayoutGenerator(config)
    result = generator.transform_graph_data(SERVICE_GRAPH, debug=True)

    for node in result.nodes:
        print(f"  {node.id:<10} x={node.position.x:>7g}  y={node.position.y:>7g}")
    print()
    for edge in result.edges:
        lane = result.routes.get(edge.id)
        label = result.edge_data[edge.id].label or "-"
        print(f"  {edge.id:<11} lane={lane if lane is not None else '-':<7} {label}")

    SVGRenderer().save(result, f"{basename}.svg")
    PNGRenderer().render(result, f"{basename}.png")
    print(f"\nWrote {basename}.svg and {basename}.png")
    print()
    print(generator.get_trace().summary())


def main():
    logging.basicConfig(level=logging.INFO)
    run("Demo 1: Top to bottom, routed", LayoutConfig(direction="TB"), "demo_tb")
    run("Demo 2: Left to right, routed", LayoutConfig(direction="LR"), "demo_lr")
    run(
        "Demo 3: Top to bottom, bezier",
        LayoutConfig(direction="TB", edge_style="bezier"),
        "demo_bezier",
    )


if __name__ == "__main__":
    main()
