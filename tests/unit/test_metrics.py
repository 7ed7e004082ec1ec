import pytest

from spotfinder.core import metrics


@pytest.fixture(autouse=True)
def clean_metrics():
    metrics.reset_metrics()
    yield
    metrics.reset_metrics()


def test_outcomes_count_reason_and_stage():
    metrics.record_outcome("done")
    metrics.record_outcome("not_found", "resolve")
    metrics.record_outcome("service_unavailable", "search")
    metrics.record_outcome("malformed_response", "search")

    snap = metrics.snapshot_metrics()

    assert snap["outcomes"] == {
        "done": 1, "not_found": 1, "service_unavailable": 1, "malformed_response": 1,
    }
    assert snap["failures_by_stage"] == {"resolve": 1, "search": 2}


def test_stage_latency_is_recorded_when_the_stage_raises():
    with pytest.raises(RuntimeError):
        with metrics.record_stage_latency("search"):
            raise RuntimeError("boom")

    assert metrics.snapshot_metrics()["stages"]["search"]["count"] == 1


def test_route_stats_track_errors_and_keep_a_bounded_window():
    for i in range(metrics.WINDOW + 50):
        metrics.record_request("POST /api/v1/nearest", float(i), 200 if i % 2 else 502)

    stats = metrics.snapshot_metrics()["routes"]["POST /api/v1/nearest"]

    assert stats["count"] == metrics.WINDOW + 50
    assert stats["errors"] == (metrics.WINDOW + 50 + 1) // 2
    assert len(metrics._route_timings_ms["POST /api/v1/nearest"]) == metrics.WINDOW
    assert stats["p50_ms"] >= 50


def test_empty_snapshot():
    snap = metrics.snapshot_metrics()

    assert snap["pipeline"] == {"count": 0, "p50_ms": None, "p95_ms": None, "p99_ms": None}
    assert snap["routes"] == {}
    assert snap["outcomes"] == {}
