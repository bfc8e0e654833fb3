import math
from typing import Dict, List

from errors import InvalidArgumentError
from models import Location


def haversine(lat1: float, lon1: float, lat2: float, lon2: float) -> float:
    R = 6371  # Earth radius in km
    phi1, phi2 = math.radians(lat1), math.radians(lat2)
    d_phi = math.radians(lat2 - lat1)
    d_lambda = math.radians(lon2 - lon1)
    a = math.sin(d_phi / 2) ** 2 + math.cos(phi1) * math.cos(phi2) * math.sin(d_lambda / 2) ** 2
    return R * 2 * math.atan2(math.sqrt(a), math.sqrt(1 - a))


def distance_between(origin: Location, destination: Location) -> float:
    """Great-circle distance in km between two geocoded locations."""
    if not (origin.has_coordinates and destination.has_coordinates):
        raise InvalidArgumentError(
            f"Cannot measure {origin.name} -> {destination.name}: coordinates missing"
        )
    return haversine(origin.latitude, origin.longitude, destination.latitude, destination.longitude)


def compute_distance_matrix(locations: List[Location]) -> Dict[str, Dict[str, float]]:
    """
    Returns a nested dict keyed by name: matrix[origin][destination] = distance_km.
    Locations without coordinates are left out.
    """
    geocoded = [loc for loc in locations if loc.has_coordinates]
    matrix: Dict[str, Dict[str, float]] = {}
    for origin in geocoded:
        matrix[origin.name] = {}
        for destination in geocoded:
            matrix[origin.name][destination.name] = distance_between(origin, destination)
    return matrix
