"""
Pytest configuration and shared fixtures for the engine test suite.
"""

from typing import Callable

import pytest
from fastapi.testclient import TestClient

from config import Settings
from main import create_app
from models import Location, Resource, ResourceKind
from services.route_graph import RouteGraph
from services.state import AppState


@pytest.fixture
def make_location() -> Callable[..., Location]:
    """Build a location with sensible defaults."""

    def _make(name: str, urgency: int = 1, **kwargs) -> Location:
        kwargs.setdefault("category", "city")
        return Location(name=name, urgency=urgency, **kwargs)

    return _make


@pytest.fixture
def triangle_graph(make_location):
    """A->B (25), B->C (12), A->C (30), all available."""
    a, b, c = make_location("A"), make_location("B"), make_location("C")
    graph = RouteGraph()
    graph.add_route(a, b, 25)
    graph.add_route(b, c, 12)
    graph.add_route(a, c, 30)
    return graph, a, b, c


@pytest.fixture
def state() -> AppState:
    return AppState()


@pytest.fixture
def test_settings() -> Settings:
    return Settings(seed_on_startup=False, log_level="WARNING")


@pytest.fixture
def seeded_state(make_location) -> AppState:
    """Two bases with rescue equipment and two critical zones."""
    engine = AppState()
    base_north = engine.register_location(make_location("Base North", urgency=2))
    base_south = engine.register_location(make_location("Base South", urgency=2))
    zone = engine.register_location(make_location("Zone", urgency=9))
    engine.register_location(make_location("Village", urgency=4))

    engine.graph.add_bidirectional_route(base_north, zone, 10)
    engine.graph.add_bidirectional_route(base_south, zone, 4)

    equipment = Resource(name="Rescue Kit", kind=ResourceKind.RESCUE_EQUIPMENT, available=10)
    engine.inventory.register_global_resource(equipment)
    engine.inventory.allocate_resource(base_north, equipment, 3)
    engine.inventory.allocate_resource(base_south, equipment, 2)
    return engine


@pytest.fixture
def client(seeded_state, test_settings) -> TestClient:
    app = create_app(state=seeded_state, settings=test_settings)
    return TestClient(app)
