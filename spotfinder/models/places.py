"""Domain records flowing through the nearest-spot pipeline."""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional, Union


@dataclass(frozen=True)
class Coordinate:
    """A WGS84 point. Range checks happen at the input boundary."""
    latitude: float
    longitude: float

    def to_dict(self) -> dict[str, float]:
        return {"latitude": self.latitude, "longitude": self.longitude}


@dataclass(frozen=True)
class TextOrigin:
    """Free-form address, building or landmark that still needs geocoding."""
    query: str


@dataclass(frozen=True)
class PointOrigin:
    """Already-resolved origin, e.g. from device geolocation."""
    coordinate: Coordinate


Origin = Union[TextOrigin, PointOrigin]


@dataclass(frozen=True)
class TagFilter:
    """Category predicate evaluated by the proximity search service.

    A place matches when its amenity is one of ``amenity_types`` and either
    its name matches one of ``name_keywords`` or its cuisine matches one of
    ``cuisine_keywords``. Keywords are regex alternatives, matched
    case-insensitively.
    """
    label: str
    amenity_types: tuple[str, ...]
    name_keywords: tuple[str, ...]
    cuisine_keywords: tuple[str, ...]

    def __post_init__(self):
        if not self.amenity_types:
            raise ValueError("tag filter needs at least one amenity type")
        if not (self.name_keywords or self.cuisine_keywords):
            raise ValueError("tag filter needs name or cuisine keywords")

    @classmethod
    def from_settings(cls, category) -> "TagFilter":
        return cls(
            label=category.label,
            amenity_types=tuple(category.amenity_types),
            name_keywords=tuple(category.name_keywords),
            cuisine_keywords=tuple(category.cuisine_keywords),
        )


@dataclass(frozen=True)
class Candidate:
    """Raw point of interest returned by the proximity search."""
    name: Optional[str]
    coordinate: Coordinate
    tags: dict[str, str] = field(default_factory=dict)
    osm_id: Optional[str] = None


@dataclass(frozen=True)
class RankedPlace:
    """Normalized, distance-annotated winning candidate."""
    name: str
    coordinate: Coordinate
    address: str
    distance_m: float

    def to_dict(self) -> dict[str, Any]:
        return {
            "name": self.name,
            "latitude": self.coordinate.latitude,
            "longitude": self.coordinate.longitude,
            "address": self.address,
            "distance_m": self.distance_m,
            "distance_km": round(self.distance_m / 1000, 2),
        }
