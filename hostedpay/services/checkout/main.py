"""HTTP surface for checkout session creation.

`create_app` wires an explicit `Settings` value and provider into the FastAPI
app so tests can inject fakes. `run` is the process entrypoint: it refuses to
start without a provider credential.
"""

import json
import sys
from time import perf_counter
from uuid import uuid4

import uvicorn
from fastapi import FastAPI, Header, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from hostedpay.common.config import Settings, load_settings
from hostedpay.common.errors import ConfigurationError, ErrorKind, status_code_for
from hostedpay.common.logging import configure_logging, logger, trace_id_ctx
from hostedpay.common.metrics import http_request_duration_seconds, http_requests_total, metrics_response
from hostedpay.common.startup import log_startup_config
from hostedpay.common.tracing import instrument_app, setup_tracing
from hostedpay.services.checkout.provider import SessionProvider, StripeSessionProvider
from hostedpay.services.checkout.schemas import SessionFailure
from hostedpay.services.checkout.service import CheckoutSessionService

STARTUP_KEYS = [
    "service_name",
    "frontend_url",
    "port",
    "currency",
    "stripe_api_version",
    "stripe_secret_key",
    "stripe_publishable_key",
    "provider_timeout_seconds",
    "provider_max_network_retries",
    "strict_quantity",
    "expose_error_kinds",
    "tracing_enabled",
]


def error_response(failure: SessionFailure, expose_kind: bool = False) -> JSONResponse:
    content = {"error": failure.message}
    if expose_kind:
        content["kind"] = failure.kind.value
    return JSONResponse(status_code=failure.status_code, content=content)


def create_app(settings: Settings, provider: SessionProvider | None = None) -> FastAPI:
    """Build the checkout API around one settings value and provider."""

    if provider is None:
        provider = StripeSessionProvider.from_settings(settings)
    service = CheckoutSessionService(provider, settings)

    app = FastAPI(title="Hostedpay Checkout")
    app.add_middleware(
        CORSMiddleware,
        allow_origins=[settings.frontend_base_url],
        allow_methods=["*"],
        allow_headers=["*"],
    )
    if settings.tracing_enabled:
        instrument_app(app)

    @app.middleware("http")
    async def metrics_middleware(request: Request, call_next):
        """Record request count and latency for every HTTP call."""

        start = perf_counter()
        route = request.url.path
        method = request.method
        status_code = 500
        try:
            response = await call_next(request)
            status_code = response.status_code
            route_obj = request.scope.get("route")
            if route_obj is not None and getattr(route_obj, "path", None):
                route = route_obj.path
            return response
        finally:
            elapsed = max(0.0, perf_counter() - start)
            http_request_duration_seconds.labels(
                service=settings.service_name,
                route=route,
                method=method,
            ).observe(elapsed)
            http_requests_total.labels(
                service=settings.service_name,
                route=route,
                method=method,
                status_code=str(status_code),
            ).inc()

    @app.get("/")
    def root():
        """Liveness probe."""

        return {"ok": True}

    @app.get("/health")
    def health():
        """Container health probe endpoint."""

        return {"ok": True}

    @app.get("/metrics")
    def metrics():
        """Prometheus scrape endpoint."""

        return metrics_response()

    @app.post("/create-checkout-session")
    async def create_checkout_session(
        request: Request,
        x_correlation_id: str | None = Header(default=None),
    ):
        """Create a provider checkout session and return its redirect URL.

        The body is optional; missing fields fall back to their defaults.
        """

        trace_id_ctx.set(x_correlation_id or str(uuid4()))
        raw = await request.body()
        payload = {}
        if raw.strip():
            try:
                payload = json.loads(raw)
            except ValueError:
                failure = SessionFailure(
                    status_code=status_code_for(ErrorKind.VALIDATION),
                    message="request body must be valid JSON",
                    kind=ErrorKind.VALIDATION,
                )
                return error_response(failure, settings.expose_error_kinds)

        result = await service.create_session(payload)
        if isinstance(result, SessionFailure):
            return error_response(result, settings.expose_error_kinds)
        return {"url": result.url}

    return app


def run() -> None:
    """Load settings, configure logging/tracing and serve the API."""

    try:
        settings = load_settings()
    except ConfigurationError as exc:
        configure_logging("hostedpay-checkout")
        logger.error(
            "configuration_error: %s. Copy .env.example to .env and set STRIPE_SECRET_KEY.",
            exc,
        )
        sys.exit(1)

    configure_logging(settings.service_name, settings.log_level)
    if settings.tracing_enabled:
        setup_tracing(settings.service_name, settings.otel_exporter_otlp_endpoint)
    log_startup_config(settings, STARTUP_KEYS)
    app = create_app(settings)
    uvicorn.run(app, host=settings.host, port=settings.port, log_config=None)


if __name__ == "__main__":
    run()
