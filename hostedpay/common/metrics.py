"""Prometheus metric definitions for the checkout service."""

from prometheus_client import Counter, Histogram, generate_latest
from starlette.responses import Response


checkout_sessions_requested_total = Counter(
    "checkout_sessions_requested_total",
    "Total checkout session creation requests",
    ["service"],
)
checkout_sessions_created_total = Counter(
    "checkout_sessions_created_total",
    "Total checkout sessions created at the provider",
    ["service"],
)
checkout_session_failures_total = Counter(
    "checkout_session_failures_total",
    "Total checkout session requests that ended in a failure",
    ["service", "kind"],
)
provider_latency_seconds = Histogram(
    "provider_latency_seconds",
    "Provider session-creation call latency seconds",
    ["service"],
)
http_requests_total = Counter(
    "http_requests_total",
    "Total HTTP requests",
    ["service", "route", "method", "status_code"],
)
http_request_duration_seconds = Histogram(
    "http_request_duration_seconds",
    "HTTP request duration seconds",
    ["service", "route", "method"],
)


def metrics_response() -> Response:
    """Expose all registered Prometheus metrics in text format."""

    return Response(content=generate_latest(), media_type="text/plain")
