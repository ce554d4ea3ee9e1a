"""Checkout session creation: validate, forward to the provider, map the outcome.

Only `price` is validated. Everything raised by the provider call is caught here
and returned as a `SessionFailure`; nothing propagates to the HTTP layer.
"""

from typing import Any

from hostedpay.common.config import Settings
from hostedpay.common.errors import ErrorKind, UpstreamError, ValidationError, status_code_for
from hostedpay.common.logging import logger
from hostedpay.common.metrics import (
    checkout_session_failures_total,
    checkout_sessions_created_total,
    checkout_sessions_requested_total,
    provider_latency_seconds,
)
from hostedpay.services.checkout.provider import SessionProvider
from hostedpay.services.checkout.schemas import (
    DEFAULT_PRICE_CENTS,
    DEFAULT_PRODUCT_NAME,
    DEFAULT_QUANTITY,
    SessionFailure,
    SessionRequest,
    SessionResult,
    SessionSuccess,
)

PRICE_ERROR = "price must be a positive integer (in cents)"
QUANTITY_ERROR = "quantity must be an integer"
QUANTITY_POSITIVE_ERROR = "quantity must be a positive integer"

CHECKOUT_SESSION_ID_PLACEHOLDER = "{CHECKOUT_SESSION_ID}"


def _is_whole_number(value: Any) -> bool:
    # bool is an int subclass but never a price.
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return False
    return isinstance(value, int) or value.is_integer()


def validate_price(value: Any) -> int:
    """Return `value` as an int when it is a positive whole number."""

    if not _is_whole_number(value) or value <= 0:
        raise ValidationError(PRICE_ERROR)
    return int(value)


def coerce_quantity(value: Any, strict: bool = False) -> Any:
    """Coerce `value` to an int where possible.

    Values that are not integers are forwarded as-is and left for the provider
    to reject. With `strict`, they and non-positive quantities fail locally.
    """

    quantity = value
    if _is_whole_number(value):
        quantity = int(value)
    elif isinstance(value, str):
        try:
            quantity = int(value.strip())
        except ValueError:
            pass
    if not strict:
        return quantity
    if not isinstance(quantity, int) or isinstance(quantity, bool):
        raise ValidationError(QUANTITY_ERROR)
    if quantity <= 0:
        raise ValidationError(QUANTITY_POSITIVE_ERROR)
    return quantity


def to_display_string(value: Any) -> str:
    """Render a JSON scalar the way a browser's `String()` would."""

    if value is None:
        return "null"
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class CheckoutSessionService:
    """Originates provider checkout sessions from client requests."""

    def __init__(self, provider: SessionProvider, settings: Settings) -> None:
        self.provider = provider
        self.settings = settings
        self.service_name = settings.service_name

    def parse_request(self, payload: Any) -> SessionRequest:
        """Apply defaults and validate one request body."""

        if not isinstance(payload, dict):
            payload = {}
        price = validate_price(payload.get("price", DEFAULT_PRICE_CENTS))
        quantity = coerce_quantity(
            payload.get("quantity", DEFAULT_QUANTITY),
            strict=self.settings.strict_quantity,
        )
        name = to_display_string(payload.get("name", DEFAULT_PRODUCT_NAME))
        return SessionRequest(price=price, quantity=quantity, name=name)

    def build_descriptor(self, req: SessionRequest) -> dict[str, Any]:
        """Provider parameters for a one-time payment with a single line item."""

        base_url = self.settings.frontend_base_url
        return {
            "mode": "payment",
            "payment_method_types": ["card"],
            "line_items": [
                {
                    "price_data": {
                        "currency": self.settings.currency.lower(),
                        "product_data": {"name": req.name},
                        "unit_amount": req.price,
                    },
                    "quantity": req.quantity,
                }
            ],
            "success_url": f"{base_url}/success?session_id={CHECKOUT_SESSION_ID_PLACEHOLDER}",
            "cancel_url": f"{base_url}/cancelled",
        }

    def _failure(self, kind: ErrorKind, message: str) -> SessionFailure:
        checkout_session_failures_total.labels(service=self.service_name, kind=kind.value).inc()
        return SessionFailure(
            status_code=status_code_for(kind, detailed=self.settings.expose_error_kinds),
            message=message,
            kind=kind,
        )

    async def create_session(self, payload: Any) -> SessionResult:
        """Validate `payload` and create a provider session for it."""

        checkout_sessions_requested_total.labels(service=self.service_name).inc()
        try:
            req = self.parse_request(payload)
        except ValidationError as exc:
            logger.info("checkout_session_rejected reason=%s", exc.message)
            return self._failure(exc.kind, exc.message)

        descriptor = self.build_descriptor(req)
        try:
            with provider_latency_seconds.labels(service=self.service_name).time():
                url = await self.provider.create_session(descriptor)
        except UpstreamError as exc:
            logger.exception("checkout_session_failed kind=%s error=%s", exc.kind.value, exc.message)
            return self._failure(exc.kind, exc.message)
        except Exception as exc:
            logger.exception("checkout_session_failed kind=%s error=%s", ErrorKind.UPSTREAM_REJECTED.value, exc)
            return self._failure(ErrorKind.UPSTREAM_REJECTED, str(exc))

        checkout_sessions_created_total.labels(service=self.service_name).inc()
        logger.info(
            "checkout_session_created price=%s quantity=%s name=%s",
            req.price,
            req.quantity,
            req.name,
        )
        return SessionSuccess(url=url)
