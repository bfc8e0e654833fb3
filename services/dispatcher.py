from typing import List, Optional, Sequence, Tuple
import logging

from errors import InvalidArgumentError
from models import DispatchOutcome, Location
from services.inventory import InventoryManager
from services.route_graph import RouteGraph

logger = logging.getLogger(__name__)


def find_nearest_source(
    inventory: InventoryManager,
    target: Location,
    candidates: Sequence[Location],
    graph: RouteGraph,
) -> Optional[Tuple[Location, float, List[Location]]]:
    """
    Nearest candidate holding rescue equipment, measured by shortest-path
    distance to ``target``. Candidates with no path or a non-positive
    distance (``target`` itself included) are skipped; on equal distances
    the earlier candidate wins.
    """
    best: Optional[Tuple[Location, float, List[Location]]] = None
    for source in candidates:
        if inventory.rescue_equipment_at(source) is None:
            continue
        path = graph.shortest_path(source, target)
        if not path:
            continue
        distance = graph.path_distance(path)
        if distance <= 0:
            continue
        if best is None or distance < best[1]:
            best = (source, distance, path)
    return best


def dispatch_rescue_teams(
    inventory: InventoryManager,
    locations: Sequence[Location],
    graph: RouteGraph,
) -> List[DispatchOutcome]:
    """
    Send one unit of rescue equipment to every critical location in
    ``locations`` from the nearest location that holds some.

    Returns one outcome per critical location, in input order. A location
    with no reachable source gets a failed outcome and the rest are still
    processed.
    """
    if locations is None or graph is None:
        raise InvalidArgumentError("Dispatch needs a list of locations and a route graph")

    outcomes: List[DispatchOutcome] = []
    with inventory.lock:
        for zone in locations:
            if not zone.is_critical:
                continue

            found = find_nearest_source(inventory, zone, locations, graph)
            if found is None:
                logger.warning("No base with rescue equipment can reach %s", zone.name)
                outcomes.append(
                    DispatchOutcome(
                        location=zone.name,
                        success=False,
                        message=f"No reachable base with rescue equipment for {zone.name}",
                    )
                )
                continue

            source, distance, path = found
            equipment = inventory.rescue_equipment_at(source)
            result = inventory.allocate_resource(zone, equipment, 1)
            if result.success:
                logger.info(
                    "Rescue team sent from %s to %s (%.2f km)", source.name, zone.name, distance
                )
                message = f"Rescue team sent from {source.name} to {zone.name}"
            else:
                message = result.message
            outcomes.append(
                DispatchOutcome(
                    location=zone.name,
                    success=result.success,
                    message=message,
                    source=source.name,
                    distance=distance,
                    path=[stop.name for stop in path],
                )
            )
    return outcomes
