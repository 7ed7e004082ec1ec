"""
Proximity search against the OpenStreetMap Overpass API.

The category predicate is a TagFilter supplied by the caller, so the same
client serves any amenity/name/cuisine combination.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Iterable, Optional

import httpx
from pydantic import ValidationError

from spotfinder.config.settings import SearchSettings
from spotfinder.core.exceptions import SearchError, SearchReason
from spotfinder.models.places import Candidate, Coordinate, TagFilter
from spotfinder.schemas.overpass import OverpassElement, OverpassResponse

logger = logging.getLogger(__name__)


def _ql_number(value: float) -> str:
    """Fixed-point decimal; QL number literals have no exponent form."""
    text = f"{value:.7f}".rstrip("0").rstrip(".")
    return "0" if text in ("-0", "") else text


def _ql_regex(values: Iterable[str]) -> str:
    """Join values into a regex alternation safe inside a QL string literal."""
    escaped = (v.replace("\\", "\\\\").replace('"', '\\"') for v in values)
    return "|".join(escaped)


def build_overpass_query(
    center: Coordinate,
    radius_m: float,
    tag_filter: TagFilter,
    timeout_seconds: int = 25,
) -> str:
    """Build Overpass QL for category matches around a point.

    One node statement per keyword family; Overpass unions them, so a
    place matching both is returned once.
    """
    around = (
        f"around:{_ql_number(radius_m)},"
        f"{_ql_number(center.latitude)},{_ql_number(center.longitude)}"
    )
    amenity = f'["amenity"~"{_ql_regex(tag_filter.amenity_types)}",i]'

    statements = []
    for key, keywords in (
        ("name", tag_filter.name_keywords),
        ("cuisine", tag_filter.cuisine_keywords),
    ):
        if keywords:
            statements.append(f'node({around}){amenity}["{key}"~"{_ql_regex(keywords)}",i];')

    union = "\n  ".join(statements)

    return f"""[out:json][timeout:{timeout_seconds}];
(
  {union}
);
out body;
"""


def _to_candidate(element: OverpassElement) -> Candidate:
    osm_id = f"{element.type}/{element.id}" if element.id is not None else None
    return Candidate(
        name=element.tags.get("name"),
        coordinate=Coordinate(latitude=element.lat, longitude=element.lon),
        tags=dict(element.tags),
        osm_id=osm_id,
    )


class ProximitySearchClient:
    """Query Overpass for candidates within a radius of a point."""

    def __init__(
        self,
        settings: Optional[SearchSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or SearchSettings()
        self.timeout = float(self.settings.timeout_seconds)
        self._http_client = http_client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def search(
        self,
        center: Coordinate,
        radius_m: float,
        tag_filter: TagFilter,
    ) -> list[Candidate]:
        """
        Search for category matches around a point.

        Args:
            center: Search center
            radius_m: Search radius in meters
            tag_filter: Category predicate

        Returns:
            Candidates in service order; empty when nothing matched

        Raises:
            SearchError: service_unavailable on transport or status problems,
                malformed_response when the payload has the wrong shape
        """
        query = build_overpass_query(center, radius_m, tag_filter, self.settings.timeout_seconds)

        try:
            async with self._session() as client:
                response = await client.post(
                    self.settings.overpass_url,
                    data={"data": query},
                    headers={"User-Agent": self.settings.user_agent},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Overpass API error: {e.response.status_code}")
            raise SearchError(
                SearchReason.SERVICE_UNAVAILABLE,
                details={"status_code": e.response.status_code},
            ) from e
        except httpx.TimeoutException as e:
            logger.error("Overpass API timeout")
            raise SearchError(
                SearchReason.SERVICE_UNAVAILABLE,
                details={"error": "timeout"},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Overpass request failed: {e!r}")
            raise SearchError(
                SearchReason.SERVICE_UNAVAILABLE,
                details={"error": type(e).__name__},
            ) from e
        except ValueError as e:
            logger.error("Overpass returned invalid JSON")
            raise SearchError(
                SearchReason.MALFORMED_RESPONSE,
                details={"error": "invalid_json"},
            ) from e

        try:
            parsed = OverpassResponse.model_validate(payload)
        except ValidationError as e:
            logger.error(f"Malformed Overpass payload: {e.error_count()} errors")
            raise SearchError(
                SearchReason.MALFORMED_RESPONSE,
                details={"validation_errors": e.error_count()},
            ) from e

        candidates = [_to_candidate(el) for el in parsed.elements]
        logger.debug(f"Overpass returned {len(candidates)} candidates within {radius_m:g}m")
        return candidates
