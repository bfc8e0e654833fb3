import json
import logging
from pathlib import Path
from typing import Any, Dict, Union

from errors import InvalidArgumentError
from models import Location, RescueTeam, Resource, ResourceKind
from services.state import AppState
from utils.distance_matrix import distance_between

logger = logging.getLogger(__name__)


def load_scenario(path: Union[str, Path]) -> AppState:
    with open(path) as f:
        data = json.load(f)
    state = build_state(data)
    logger.info(
        "Loaded scenario %s: %d locations, %d routes",
        path,
        len(state.graph.locations()),
        len(state.graph.routes()),
    )
    return state


def build_state(data: Dict[str, Any]) -> AppState:
    """
    Build an engine state from a scenario snapshot with the sections
    ``locations``, ``routes``, ``resources``, ``allocations``,
    ``evacuation`` and ``teams``; all but ``locations`` are optional.
    """
    state = AppState()

    for item in data.get("locations", []):
        state.register_location(Location(**item))

    for item in data.get("routes", []):
        origin = state.require_location(item["origin"])
        destination = state.require_location(item["destination"])
        distance = item.get("distance")
        if distance is None:
            distance = round(distance_between(origin, destination), 2)
        if item.get("bidirectional", False):
            routes = state.graph.add_bidirectional_route(origin, destination, distance)
        else:
            routes = (state.graph.add_route(origin, destination, distance),)
        if not item.get("available", True):
            for route in routes:
                state.graph.set_route_available(route.origin, route.destination, False)

    for item in data.get("resources", []):
        state.inventory.register_global_resource(Resource(**item))

    for item in data.get("allocations", []):
        destination = state.require_location(item["destination"])
        kind = ResourceKind(item["kind"])
        resource = state.inventory.get_resource(item["resource"], kind)
        if resource is None:
            raise InvalidArgumentError(f"Unknown resource {item['resource']} ({kind.value})")
        result = state.inventory.allocate_resource(destination, resource, item["quantity"])
        if not result.success:
            raise InvalidArgumentError(f"Seed allocation to {destination.name} failed: {result.message}")

    for name in data.get("evacuation", []):
        state.evacuation.add_zone(state.require_location(name))

    for item in data.get("teams", []):
        team = RescueTeam(name=item["name"], members=item.get("members", []))
        state.teams.register(team)
        zone = item.get("assigned_zone")
        if zone is not None:
            state.teams.assign(team.name, state.require_location(zone))

    return state
