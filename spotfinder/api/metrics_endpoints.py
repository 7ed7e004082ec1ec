"""
Metrics endpoint for observability and monitoring.
"""

from fastapi import APIRouter

from spotfinder.core.metrics import snapshot_metrics
from spotfinder.schemas.base import Envelope

router = APIRouter(tags=["metrics"])


@router.get("/metrics", response_model=Envelope[dict])
async def get_metrics():
    """
    Lookup and route metrics.

    Reports end-to-end and per-stage pipeline latency percentiles, outcome
    counts by reason, failures by stage, and per-route request counts,
    error counts and latencies.
    """
    return Envelope[dict](status="ok", data=snapshot_metrics(), error=None)
