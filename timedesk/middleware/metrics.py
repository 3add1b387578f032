"""Prometheus metrics middleware."""
import time

from fastapi import FastAPI, Request
from prometheus_client import Counter, Histogram, generate_latest, CONTENT_TYPE_LATEST
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.responses import Response

# Metrics
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["method", "endpoint", "status_code"],
)

http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration in seconds",
    ["method", "endpoint"],
)

http_errors_total = Counter(
    "http_errors_total",
    "Total HTTP errors",
    ["method", "endpoint", "error_type"],
)

session_transitions_total = Counter(
    "session_transitions_total",
    "Time record state transitions",
    ["action"],
)


def _endpoint(request: Request) -> str:
    # Route template keeps label cardinality bounded (no record ids).
    route = request.scope.get("route")
    return getattr(route, "path", request.url.path)


class MetricsMiddleware(BaseHTTPMiddleware):
    """Record request counts, latencies and errors."""

    async def dispatch(self, request: Request, call_next):
        if request.url.path == "/metrics":
            return await call_next(request)

        started = time.perf_counter()
        try:
            response = await call_next(request)
        except Exception as exc:
            endpoint = _endpoint(request)
            http_errors_total.labels(request.method, endpoint, type(exc).__name__).inc()
            http_requests_total.labels(request.method, endpoint, "500").inc()
            raise

        endpoint = _endpoint(request)
        http_request_duration_seconds.labels(request.method, endpoint).observe(
            time.perf_counter() - started
        )
        http_requests_total.labels(request.method, endpoint, str(response.status_code)).inc()
        if response.status_code >= 400:
            http_errors_total.labels(request.method, endpoint, f"http_{response.status_code}").inc()
        return response


def setup_metrics(app: FastAPI) -> None:
    """Setup Prometheus metrics endpoint."""

    @app.get("/metrics", include_in_schema=False)
    async def metrics():
        """Prometheus metrics endpoint."""
        return Response(content=generate_latest(), media_type=CONTENT_TYPE_LATEST)
