import heapq
import itertools
import logging
import math
import threading
from typing import Dict, List, Optional, Tuple, Union

from errors import InvalidArgumentError, UnknownRouteError
from models import Location, Route

logger = logging.getLogger(__name__)


LocationRef = Union[Location, str]


def _name_of(ref: Optional[LocationRef]) -> Optional[str]:
    if ref is None:
        return None
    return ref if isinstance(ref, str) else ref.name


class RouteGraph:
    """
    Directed, weighted adjacency structure over locations.

    Locations are keyed by name. Routes with ``available=False`` stay in the
    graph but are skipped by path search. Every method holds the graph lock,
    so topology changes never interleave with a running path query.
    """

    def __init__(self) -> None:
        self._locations: Dict[str, Location] = {}
        self._adjacency: Dict[str, List[Route]] = {}
        self._lock = threading.RLock()

    def add_location(self, location: Location) -> bool:
        if location is None:
            raise InvalidArgumentError("Location must not be None")
        with self._lock:
            if location.name in self._locations:
                logger.info("Location %s already registered", location.name)
                return False
            self._locations[location.name] = location
            self._adjacency[location.name] = []
            return True

    def add_route(self, origin: Location, destination: Location, distance: float) -> Route:
        """
        Register a directed route. An existing (origin, destination) route is
        returned unchanged; add the reverse direction explicitly or use
        ``add_bidirectional_route``.
        """
        if origin is None or destination is None:
            logger.warning("Rejected route with missing endpoint: %s -> %s", origin, destination)
            raise InvalidArgumentError("Route origin and destination must not be None")
        if distance is None or distance < 0 or math.isnan(distance):
            raise InvalidArgumentError(f"Route distance must be non-negative, got {distance}")

        with self._lock:
            self.add_location(origin)
            self.add_location(destination)
            existing = self._find_route(origin.name, destination.name)
            if existing is not None:
                logger.info("Route %s -> %s already exists", origin.name, destination.name)
                return existing
            route = Route(origin=origin.name, destination=destination.name, distance=distance)
            self._adjacency[origin.name].append(route)
            return route

    def add_bidirectional_route(
        self, first: Location, second: Location, distance: float
    ) -> Tuple[Route, Route]:
        with self._lock:
            return (
                self.add_route(first, second, distance),
                self.add_route(second, first, distance),
            )

    def get_route(self, origin: LocationRef, destination: LocationRef) -> Optional[Route]:
        with self._lock:
            return self._find_route(_name_of(origin), _name_of(destination))

    def set_route_available(
        self, origin: LocationRef, destination: LocationRef, available: bool
    ) -> Route:
        with self._lock:
            route = self._find_route(_name_of(origin), _name_of(destination))
            if route is None:
                raise UnknownRouteError(_name_of(origin), _name_of(destination))
            route.available = available
            logger.info(
                "Route %s -> %s marked %s",
                route.origin,
                route.destination,
                "available" if available else "unavailable",
            )
            return route

    def get_location(self, name: str) -> Optional[Location]:
        with self._lock:
            return self._locations.get(name)

    def __contains__(self, ref: LocationRef) -> bool:
        with self._lock:
            return _name_of(ref) in self._locations

    def locations(self) -> List[Location]:
        with self._lock:
            return list(self._locations.values())

    def routes(self) -> List[Route]:
        with self._lock:
            return [route for routes in self._adjacency.values() for route in routes]

    def routes_from(self, origin: LocationRef) -> List[Route]:
        with self._lock:
            return list(self._adjacency.get(_name_of(origin), []))

    def shortest_path(self, origin: LocationRef, destination: LocationRef) -> List[Location]:
        """
        Dijkstra over available routes. Returns the locations from origin to
        destination inclusive, or an empty list when either endpoint is
        unknown or no path exists.

        Heap entries are ordered by (distance, push sequence) and relaxation
        is strict, so among equal-cost paths the first predecessor found wins.
        """
        start, goal = _name_of(origin), _name_of(destination)
        with self._lock:
            if start not in self._locations or goal not in self._locations:
                logger.info("Shortest path requested for unknown location(s): %s, %s", start, goal)
                return []

            distances: Dict[str, float] = {name: math.inf for name in self._locations}
            previous: Dict[str, str] = {}
            distances[start] = 0.0
            counter = itertools.count()
            heap: List[Tuple[float, int, str]] = [(0.0, next(counter), start)]

            while heap:
                current_distance, _, current = heapq.heappop(heap)
                if current_distance > distances[current]:
                    continue  # stale entry
                if current == goal:
                    break
                for route in self._adjacency[current]:
                    if not route.available:
                        continue
                    candidate = current_distance + route.distance
                    if candidate < distances[route.destination]:
                        distances[route.destination] = candidate
                        previous[route.destination] = current
                        heapq.heappush(heap, (candidate, next(counter), route.destination))

            path = [goal]
            while path[-1] in previous:
                path.append(previous[path[-1]])
            path.reverse()

            if path[0] != start:
                logger.info("No available path from %s to %s", start, goal)
                return []
            return [self._locations[name] for name in path]

    def path_distance(self, path: List[LocationRef]) -> float:
        """Sum of route distances along ``path``; a missing hop counts as 0."""
        total = 0.0
        with self._lock:
            for current, following in zip(path, path[1:]):
                route = self._find_route(_name_of(current), _name_of(following))
                if route is not None:
                    total += route.distance
        return total

    def _find_route(self, origin: Optional[str], destination: Optional[str]) -> Optional[Route]:
        for route in self._adjacency.get(origin, []):
            if route.destination == destination:
                return route
        return None

    def __repr__(self) -> str:
        return f"RouteGraph(locations={len(self._locations)}, routes={len(self.routes())})"
