"""Google Maps deep link for walking the user to the winning place."""
from urllib.parse import quote

from spotfinder.models.places import Origin, PointOrigin, RankedPlace

GOOGLE_MAPS_DIRECTIONS_URL = "https://www.google.com/maps/dir/?api=1"

# Characters encodeURIComponent leaves alone beyond quote()'s defaults
_URI_COMPONENT_SAFE = "!~*'()"


def _encode_component(value: str) -> str:
    return quote(value, safe=_URI_COMPONENT_SAFE)


def build_directions_url(origin: Origin, place: RankedPlace) -> str:
    """Build a directions link from origin to place.

    Point origins are sent as ``lat,lon``; text origins as the trimmed,
    URL-encoded query. The destination is ``"{name} {address}"``.
    """
    if isinstance(origin, PointOrigin):
        orig = f"{origin.coordinate.latitude},{origin.coordinate.longitude}"
    else:
        orig = _encode_component(origin.query.strip())
    dest = _encode_component(f"{place.name} {place.address}")
    return f"{GOOGLE_MAPS_DIRECTIONS_URL}&origin={orig}&destination={dest}"
