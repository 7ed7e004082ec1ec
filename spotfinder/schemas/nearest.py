from typing import Optional

from pydantic import BaseModel, Field, model_validator

from spotfinder.models.places import Coordinate, Origin, PointOrigin, TextOrigin


class NearestRequest(BaseModel):
    """Either a free-text location or a device coordinate pair."""
    query: Optional[str] = Field(default=None, max_length=512)
    latitude: Optional[float] = Field(default=None, ge=-90, le=90)
    longitude: Optional[float] = Field(default=None, ge=-180, le=180)
    radius_m: Optional[float] = Field(default=None, gt=0, le=50000)

    @model_validator(mode="after")
    def check_exactly_one_origin(self):
        has_query = bool(self.query and self.query.strip())
        has_point = self.latitude is not None or self.longitude is not None
        if has_point and (self.latitude is None or self.longitude is None):
            raise ValueError("latitude and longitude must be given together")
        if has_query == has_point:
            raise ValueError("provide exactly one of query or latitude/longitude")
        return self

    def to_origin(self) -> Origin:
        if self.query is not None and self.query.strip():
            return TextOrigin(query=self.query.strip())
        return PointOrigin(coordinate=Coordinate(self.latitude, self.longitude))


class CoordinateRead(BaseModel):
    latitude: float
    longitude: float


class RankedPlaceRead(BaseModel):
    name: str
    address: str
    latitude: float
    longitude: float
    distance_m: float
    distance_km: float


class NearestSpotRead(BaseModel):
    place: RankedPlaceRead
    origin: CoordinateRead
    directions_url: str
    radius_m: float
    category: str
