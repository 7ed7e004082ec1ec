"""Nearest spot endpoints."""
from typing import Optional

from fastapi import APIRouter, Depends, Query
from pydantic import ValidationError
from fastapi.exceptions import RequestValidationError

from spotfinder.core.dependencies import get_pipeline
from spotfinder.schemas.base import Envelope
from spotfinder.schemas.nearest import (
    CoordinateRead,
    NearestRequest,
    NearestSpotRead,
    RankedPlaceRead,
)
from spotfinder.services.directions import build_directions_url
from spotfinder.services.pipeline import NearestSpotPipeline

router = APIRouter(prefix="/api/v1", tags=["nearest"])


async def _find(pipeline: NearestSpotPipeline, request: NearestRequest) -> Envelope[NearestSpotRead]:
    origin = request.to_origin()
    run = await pipeline.execute(origin, request.radius_m)
    if run.error is not None:
        raise run.error
    payload = NearestSpotRead(
        place=RankedPlaceRead(**run.result.to_dict()),
        origin=CoordinateRead(**run.coordinate.to_dict()),
        directions_url=build_directions_url(origin, run.result),
        radius_m=run.radius_m,
        category=pipeline.tag_filter.label,
    )
    return Envelope[NearestSpotRead](status="ok", data=payload, error=None)


@router.post("/nearest", response_model=Envelope[NearestSpotRead])
async def find_nearest_spot(
    request: NearestRequest,
    pipeline: NearestSpotPipeline = Depends(get_pipeline),
):
    """
    Find the closest matching spot to a text location or a coordinate pair.

    Body carries either ``query`` (address, building or landmark) or
    ``latitude``/``longitude`` from device geolocation, plus an optional
    ``radius_m`` override.
    """
    return await _find(pipeline, request)


@router.get("/nearest", response_model=Envelope[NearestSpotRead])
async def find_nearest_spot_get(
    q: Optional[str] = Query(None, description="Free-text origin"),
    lat: Optional[float] = Query(None),
    lon: Optional[float] = Query(None),
    radius_m: Optional[float] = Query(None),
    pipeline: NearestSpotPipeline = Depends(get_pipeline),
):
    """Query-string variant of POST /nearest."""
    try:
        request = NearestRequest(query=q, latitude=lat, longitude=lon, radius_m=radius_m)
    except ValidationError as e:
        raise RequestValidationError(e.errors())
    return await _find(pipeline, request)
