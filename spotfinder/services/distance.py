"""Great-circle distance helpers."""
import math

from spotfinder.models.places import Coordinate

EARTH_RADIUS_M = 6371000  # mean Earth radius


def haversine_distance(a: Coordinate, b: Coordinate) -> float:
    """Calculate distance between two points in meters."""
    phi1 = math.radians(a.latitude)
    phi2 = math.radians(b.latitude)
    delta_phi = math.radians(b.latitude - a.latitude)
    delta_lambda = math.radians(b.longitude - a.longitude)

    h = (
        math.sin(delta_phi / 2) ** 2
        + math.cos(phi1) * math.cos(phi2) * math.sin(delta_lambda / 2) ** 2
    )
    c = 2 * math.atan2(math.sqrt(h), math.sqrt(1 - h))

    return EARTH_RADIUS_M * c
