"""HTTP contract tests for the checkout API."""

from uuid import UUID

from fastapi.testclient import TestClient

from conftest import FakeProvider, make_settings
from hostedpay.common.logging import trace_id_ctx
from hostedpay.services.checkout.main import create_app
from hostedpay.services.checkout.service import PRICE_ERROR


def client_for(provider: FakeProvider, **overrides) -> TestClient:
    return TestClient(create_app(make_settings(**overrides), provider=provider))


def test_root_liveness(provider):
    """The root path answers the liveness check."""

    resp = client_for(provider).get("/")

    assert resp.status_code == 200
    assert resp.json() == {"ok": True}


def test_health_and_metrics(provider):
    """Health and Prometheus scrape endpoints are served."""

    client = client_for(provider)

    assert client.get("/health").json() == {"ok": True}
    metrics = client.get("/metrics")
    assert metrics.status_code == 200
    assert "checkout_sessions_requested_total" in metrics.text


def test_create_session_returns_url(provider):
    """A valid request returns the provider URL as JSON."""

    resp = client_for(provider).post(
        "/create-checkout-session",
        json={"price": 2000, "quantity": 2, "name": "Widget"},
    )

    assert resp.status_code == 200
    assert resp.json() == {"url": "https://payments.example/session/abc"}
    assert provider.calls[0]["line_items"][0]["quantity"] == 2


def test_empty_body_uses_defaults(provider):
    """A POST with no body uses every default."""

    resp = client_for(provider).post("/create-checkout-session")

    assert resp.status_code == 200
    assert provider.calls[0]["line_items"][0]["price_data"]["unit_amount"] == 1500


def test_invalid_price_is_400(provider):
    """Bad prices are a 400 with the fixed message."""

    resp = client_for(provider).post("/create-checkout-session", json={"price": 0})

    assert resp.status_code == 400
    assert resp.json() == {"error": PRICE_ERROR}
    assert provider.calls == []


def test_malformed_json_is_400(provider):
    """Unparseable bodies are refused before the service runs."""

    resp = client_for(provider).post(
        "/create-checkout-session",
        content=b"{not json",
        headers={"content-type": "application/json"},
    )

    assert resp.status_code == 400
    assert resp.json() == {"error": "request body must be valid JSON"}
    assert provider.calls == []


def test_provider_failure_is_500_with_message():
    """Provider failures come back as 500 with the raw message."""

    provider = FakeProvider(error=RuntimeError("auth failed"))

    resp = client_for(provider).post("/create-checkout-session", json={})

    assert resp.status_code == 500
    assert resp.json() == {"error": "auth failed"}


def test_error_kind_exposed_when_enabled():
    """Opt-in error kinds add the kind and a per-kind status."""

    provider = FakeProvider(error=RuntimeError("boom"))

    resp = client_for(provider, expose_error_kinds=True).post("/create-checkout-session", json={})

    assert resp.status_code == 502
    assert resp.json() == {"error": "boom", "kind": "upstream_rejected"}


def test_cors_allows_only_frontend_origin(provider):
    """Only the configured frontend origin passes CORS preflight."""

    client = client_for(provider, frontend_url="http://localhost:3000")
    preflight = {
        "Access-Control-Request-Method": "POST",
        "Access-Control-Request-Headers": "content-type",
    }

    allowed = client.options(
        "/create-checkout-session",
        headers={"Origin": "http://localhost:3000", **preflight},
    )
    denied = client.options(
        "/create-checkout-session",
        headers={"Origin": "http://evil.example", **preflight},
    )

    assert allowed.status_code == 200
    assert allowed.headers["access-control-allow-origin"] == "http://localhost:3000"
    assert denied.status_code == 400
    assert "access-control-allow-origin" not in denied.headers


def test_tracing_instruments_app(provider, monkeypatch):
    """Tracing opt-in attaches FastAPI instrumentation."""

    instrumented = []
    monkeypatch.setattr("hostedpay.services.checkout.main.instrument_app", instrumented.append)

    app = create_app(make_settings(tracing_enabled=True), provider=provider)

    assert instrumented == [app]


class TraceRecordingProvider(FakeProvider):
    """Remembers the trace id active while the provider is called."""

    def __init__(self) -> None:
        super().__init__()
        self.trace_ids: list[str] = []

    async def create_session(self, descriptor: dict) -> str:
        self.trace_ids.append(trace_id_ctx.get())
        return await super().create_session(descriptor)


def test_correlation_header_becomes_trace_id():
    """An incoming x-correlation-id is the trace id for the whole request."""

    provider = TraceRecordingProvider()

    resp = client_for(provider).post(
        "/create-checkout-session",
        json={},
        headers={"x-correlation-id": "abc-123"},
    )

    assert resp.status_code == 200
    assert provider.trace_ids == ["abc-123"]


def test_trace_id_generated_without_correlation_header():
    """Requests without a correlation header get a fresh uuid trace id."""

    provider = TraceRecordingProvider()
    client = client_for(provider)

    client.post("/create-checkout-session", json={})
    client.post("/create-checkout-session", json={})

    first, second = provider.trace_ids
    assert str(UUID(first)) == first
    assert first != second
