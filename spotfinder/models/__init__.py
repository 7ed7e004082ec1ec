"""
Domain records for the nearest spot pipeline.
"""

from .places import (
    Coordinate,
    TextOrigin,
    PointOrigin,
    Origin,
    TagFilter,
    Candidate,
    RankedPlace,
)

__all__ = [
    "Coordinate",
    "TextOrigin",
    "PointOrigin",
    "Origin",
    "TagFilter",
    "Candidate",
    "RankedPlace",
]
