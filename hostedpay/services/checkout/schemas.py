"""Request/result schemas for checkout session creation."""

from typing import Any

from pydantic import BaseModel, Field

from hostedpay.common.errors import ErrorKind


DEFAULT_PRICE_CENTS = 1500
DEFAULT_QUANTITY = 1
DEFAULT_PRODUCT_NAME = "Test Product"


class SessionRequest(BaseModel):
    """Checkout request after defaults and validation were applied."""

    price: int = Field(gt=0)
    # Forwarded as-is when it is not an integer; the provider decides.
    quantity: Any
    name: str


class SessionSuccess(BaseModel):
    """Provider created the session; `url` is the hosted checkout page."""

    url: str


class SessionFailure(BaseModel):
    """Session was not created; rendered as an error response."""

    status_code: int
    message: str
    kind: ErrorKind


SessionResult = SessionSuccess | SessionFailure
