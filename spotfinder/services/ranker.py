"""Normalize search candidates and pick the closest one."""
from typing import Iterable, Optional

from spotfinder.models.places import Candidate, Coordinate, RankedPlace
from spotfinder.services.distance import haversine_distance

UNNAMED_PLACEHOLDER = "Unnamed spot"
ADDRESS_PLACEHOLDER = "Nearby"

# Joined in this order, absent parts skipped
ADDRESS_TAGS = ("addr:housenumber", "addr:street", "addr:city")


def format_address(tags: dict[str, str]) -> str:
    parts = [tags.get(key) for key in ADDRESS_TAGS]
    return " ".join(p for p in parts if p) or ADDRESS_PLACEHOLDER


def to_ranked_place(candidate: Candidate, origin: Coordinate) -> RankedPlace:
    return RankedPlace(
        name=candidate.name or UNNAMED_PLACEHOLDER,
        coordinate=candidate.coordinate,
        address=format_address(candidate.tags),
        distance_m=haversine_distance(origin, candidate.coordinate),
    )


def rank(candidates: Iterable[Candidate], origin: Coordinate) -> Optional[RankedPlace]:
    """Return the candidate closest to origin, or None when there are none.

    Ties keep the first candidate encountered.
    """
    places = [to_ranked_place(c, origin) for c in candidates]
    if not places:
        return None
    # min() returns the first of equal keys
    return min(places, key=lambda p: p.distance_m)
