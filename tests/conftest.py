"""Pytest configuration and shared fixtures for tierroute tests."""

import pytest

from tierroute import GraphLayoutGenerator, LayoutConfig


class FixedLayout:
    """Coarse layout that keeps the positions nodes arrive with."""

    def __init__(self):
        self.calls = 0

    def compute_coarse_layout(self, nodes, edges, options):
        self.calls += 1
        return {node.id: node.position for node in nodes}


@pytest.fixture
def fixed_layout():
    """Coarse layout stub returning input positions unchanged."""
    return FixedLayout()


@pytest.fixture
def chain_payload():
    """Linear dependency chain: frontend -> api -> db."""
    return {
        "nodes": [
            {"id": "frontend", "data": {"name": "Frontend"}},
            {"id": "api", "data": {"name": "API"}},
            {"id": "db", "data": {"name": "Database"}},
        ],
        "edges": [
            {"id": "e1", "source": "frontend", "target": "api"},
            {"id": "e2", "source": "api", "target": "db"},
        ],
    }


@pytest.fixture
def service_payload():
    """Service graph with fan-out, latency data, health data and a cycle."""
    return {
        "nodes": [
            {"id": "gateway", "data": {"name": "Gateway"}},
            {"id": "auth", "data": {"name": "Auth"}},
            {"id": "orders", "data": {"name": "Orders"}},
            {"id": "payments", "data": {"name": "Payments"}},
            {"id": "postgres", "data": {"name": "Postgres"}},
            {"id": "redis", "data": {"name": "Redis"}},
        ],
        "edges": [
            {
                "id": "gw-auth",
                "source": "gateway",
                "target": "auth",
                "data": {"latencyMs": 12, "avgLatencyMs24h": 10, "healthy": True},
            },
            {
                "id": "gw-orders",
                "source": "gateway",
                "target": "orders",
                "data": {"latencyMs": 250, "avgLatencyMs24h": 100, "healthy": True},
            },
            {
                "id": "orders-payments",
                "source": "orders",
                "target": "payments",
                "data": {"latencyMs": 1500, "healthy": False},
            },
            {"id": "orders-pg", "source": "orders", "target": "postgres"},
            {"id": "auth-redis", "source": "auth", "target": "redis"},
            {"id": "payments-pg", "source": "payments", "target": "postgres"},
            {"id": "pg-orders", "source": "postgres", "target": "orders"},
        ],
    }


@pytest.fixture
def generator():
    """Default GraphLayoutGenerator instance."""
    return GraphLayoutGenerator()


@pytest.fixture
def lr_generator():
    """GraphLayoutGenerator laying out left to right."""
    return GraphLayoutGenerator(LayoutConfig(direction="LR"))
