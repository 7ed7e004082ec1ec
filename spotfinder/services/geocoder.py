"""
Origin resolution.

Turns a user-supplied origin into a single coordinate. Point origins pass
straight through; text origins are geocoded with one Nominatim /search call
limited to the best match.
"""

import logging
from contextlib import asynccontextmanager
from typing import AsyncIterator, Optional

import httpx
from pydantic import ValidationError

from spotfinder.config.settings import GeocoderSettings
from spotfinder.core.exceptions import ResolutionError, ResolutionReason
from spotfinder.models.places import Coordinate, Origin, PointOrigin, TextOrigin
from spotfinder.schemas.geocoding import NominatimPlace

logger = logging.getLogger(__name__)


class OriginResolver:
    """Resolve an Origin into a Coordinate."""

    def __init__(
        self,
        settings: Optional[GeocoderSettings] = None,
        http_client: Optional[httpx.AsyncClient] = None,
    ):
        self.settings = settings or GeocoderSettings()
        self.search_url = f"{self.settings.base_url.rstrip('/')}/search"
        self.timeout = self.settings.timeout_seconds
        self._http_client = http_client

    @asynccontextmanager
    async def _session(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._http_client is not None:
            yield self._http_client
            return
        async with httpx.AsyncClient(timeout=self.timeout) as client:
            yield client

    async def resolve(self, origin: Origin) -> Coordinate:
        """
        Resolve the origin to a coordinate.

        Args:
            origin: TextOrigin to geocode or PointOrigin to pass through

        Returns:
            The resolved Coordinate

        Raises:
            ResolutionError: lookup_failed on transport, status or payload
                problems; not_found when the geocoder has no match
        """
        if isinstance(origin, PointOrigin):
            return origin.coordinate
        if isinstance(origin, TextOrigin):
            return await self.geocode(origin.query)
        raise TypeError(f"Unsupported origin type: {type(origin).__name__}")

    async def geocode(self, query: str) -> Coordinate:
        query = query.strip()
        if not query:
            raise ResolutionError(ResolutionReason.NOT_FOUND, details={"query": query})

        params = {
            "q": query,
            "format": "json",
            "limit": self.settings.result_limit,
        }

        try:
            async with self._session() as client:
                response = await client.get(
                    self.search_url,
                    params=params,
                    headers={"User-Agent": self.settings.user_agent},
                    timeout=self.timeout,
                )
                response.raise_for_status()
                payload = response.json()
        except httpx.HTTPStatusError as e:
            logger.error(f"Nominatim returned {e.response.status_code} for {query!r}")
            raise ResolutionError(
                ResolutionReason.LOOKUP_FAILED,
                details={"query": query, "status_code": e.response.status_code},
            ) from e
        except httpx.HTTPError as e:
            logger.error(f"Nominatim request failed: {e!r}")
            raise ResolutionError(
                ResolutionReason.LOOKUP_FAILED,
                details={"query": query, "error": type(e).__name__},
            ) from e
        except ValueError as e:
            logger.error(f"Nominatim returned invalid JSON for {query!r}")
            raise ResolutionError(
                ResolutionReason.LOOKUP_FAILED,
                details={"query": query, "error": "invalid_json"},
            ) from e

        if not isinstance(payload, list):
            logger.error(f"Unexpected Nominatim payload type {type(payload).__name__}")
            raise ResolutionError(
                ResolutionReason.LOOKUP_FAILED,
                details={"query": query, "error": "malformed_response"},
            )
        if not payload:
            logger.info(f"No geocoding match for {query!r}")
            raise ResolutionError(ResolutionReason.NOT_FOUND, details={"query": query})

        try:
            best = NominatimPlace.model_validate(payload[0])
        except ValidationError as e:
            logger.error(f"Malformed Nominatim result for {query!r}: {e.error_count()} errors")
            raise ResolutionError(
                ResolutionReason.LOOKUP_FAILED,
                details={"query": query, "error": "malformed_response"},
            ) from e

        logger.debug(f"Geocoded {query!r} to ({best.lat}, {best.lon})")
        return Coordinate(latitude=best.lat, longitude=best.lon)
