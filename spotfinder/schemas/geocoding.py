"""Nominatim /search response shape."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class NominatimPlace(BaseModel):
    model_config = ConfigDict(extra="ignore")

    # Nominatim sends coordinates as numeric strings
    lat: float = Field(ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(ge=-180, le=180, allow_inf_nan=False)
    display_name: Optional[str] = None
    place_id: Optional[int] = None
