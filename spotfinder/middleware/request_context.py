from starlette.middleware.base import BaseHTTPMiddleware
import uuid, time, logging

from spotfinder.core.metrics import UNMATCHED_ROUTE, record_request

logger = logging.getLogger(__name__)


def route_key(request) -> str:
    """Metrics key: method plus the matched route template, never the raw path."""
    route = request.scope.get("route")
    path = getattr(route, "path", None)
    if path is None:
        return UNMATCHED_ROUTE
    return f"{request.method} {path}"


class RequestContextMiddleware(BaseHTTPMiddleware):
    """Tag each request with an id, log it and record route metrics."""

    async def dispatch(self, request, call_next):
        request_id = request.headers.get("X-Request-ID") or str(uuid.uuid4())
        request.state.request_id = request_id
        start = time.perf_counter()
        response = await call_next(request)
        latency_ms = (time.perf_counter() - start) * 1000
        logger.info(
            f"{request.method} {request.url.path} {response.status_code} {latency_ms:.2f}ms",
            extra={"request_id": request_id, "duration_ms": latency_ms},
        )
        key = route_key(request)
        if key != "GET /metrics":
            record_request(key, latency_ms, response.status_code)
        response.headers["X-Request-ID"] = request_id
        return response
