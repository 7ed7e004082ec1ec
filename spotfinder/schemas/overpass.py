"""Overpass JSON response shape (``[out:json]`` with ``out body``)."""
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class OverpassElement(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: str = "node"
    id: Optional[int] = None
    lat: float = Field(ge=-90, le=90, allow_inf_nan=False)
    lon: float = Field(ge=-180, le=180, allow_inf_nan=False)
    tags: dict[str, str] = Field(default_factory=dict)


class OverpassResponse(BaseModel):
    model_config = ConfigDict(extra="ignore")

    elements: list[OverpassElement]
