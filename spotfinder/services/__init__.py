# Business logic services

from .distance import haversine_distance
from .geocoder import OriginResolver
from .overpass_client import ProximitySearchClient, build_overpass_query
from .ranker import rank
from .pipeline import NearestSpotPipeline, PipelineRun, PipelineState
from .directions import build_directions_url

__all__ = [
    "haversine_distance",
    "OriginResolver",
    "ProximitySearchClient",
    "build_overpass_query",
    "rank",
    "NearestSpotPipeline",
    "PipelineRun",
    "PipelineState",
    "build_directions_url",
]
