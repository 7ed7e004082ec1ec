"""Service metrics.

In-process counters for nearest-spot lookups and the HTTP routes that drive
them. Latency samples are kept in bounded windows of the most recent
``WINDOW`` observations.
"""
import time
from collections import Counter, defaultdict, deque
from contextlib import contextmanager
from typing import Optional

WINDOW = 1000

# Route key for requests that matched no registered route
UNMATCHED_ROUTE = "unmatched"

_started_at = time.time()
_pipeline_timings_ms: deque = deque(maxlen=WINDOW)
_stage_timings_ms: dict = defaultdict(lambda: deque(maxlen=WINDOW))
_outcomes: Counter = Counter()
_failures_by_stage: Counter = Counter()
_route_timings_ms: dict = defaultdict(lambda: deque(maxlen=WINDOW))
_route_counts: Counter = Counter()
_route_errors: Counter = Counter()


@contextmanager
def record_pipeline_latency():
    start = time.perf_counter()
    try:
        yield
    finally:
        _pipeline_timings_ms.append((time.perf_counter() - start) * 1000.0)


@contextmanager
def record_stage_latency(stage: str):
    """Time one pipeline stage, whether it succeeds or fails."""
    start = time.perf_counter()
    try:
        yield
    finally:
        _stage_timings_ms[stage].append((time.perf_counter() - start) * 1000.0)


def record_outcome(outcome: str, stage: Optional[str] = None) -> None:
    """Count a terminal outcome: "done" or the failure reason.

    Failures also count against the stage they happened in.
    """
    _outcomes[outcome] += 1
    if stage is not None:
        _failures_by_stage[stage] += 1


def record_request(route: str, latency_ms: float, status_code: int) -> None:
    _route_counts[route] += 1
    if status_code >= 400:
        _route_errors[route] += 1
    _route_timings_ms[route].append(latency_ms)


def _percentiles(values) -> dict:
    if not values:
        return {"count": 0, "p50_ms": None, "p95_ms": None, "p99_ms": None}
    vals = sorted(values)
    count = len(vals)

    def _p(p: float) -> float:
        idx = int(round(p * (count - 1)))
        return round(vals[idx], 2)
    return {"count": count, "p50_ms": _p(0.50), "p95_ms": _p(0.95), "p99_ms": _p(0.99)}


def _route_stats(route: str) -> dict:
    stats = _percentiles(_route_timings_ms[route])
    stats["count"] = _route_counts[route]
    stats["errors"] = _route_errors[route]
    return stats


def snapshot_metrics() -> dict:
    return {
        "uptime_seconds": int(time.time() - _started_at),
        "pipeline": _percentiles(_pipeline_timings_ms),
        "stages": {stage: _percentiles(t) for stage, t in _stage_timings_ms.items()},
        "outcomes": dict(_outcomes),
        "failures_by_stage": dict(_failures_by_stage),
        "routes": {route: _route_stats(route) for route in _route_counts},
    }


def reset_metrics() -> None:
    global _started_at
    _started_at = time.time()
    for store in (
        _pipeline_timings_ms, _stage_timings_ms, _outcomes, _failures_by_stage,
        _route_timings_ms, _route_counts, _route_errors,
    ):
        store.clear()
