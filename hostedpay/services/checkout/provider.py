"""Payment provider capability used by the checkout service.

The service only needs one operation: turn a session descriptor into a hosted
checkout URL. `StripeSessionProvider` implements it on top of the Stripe SDK and
translates SDK exceptions into the upstream error kinds.
"""

import asyncio
from typing import Any

import stripe

from hostedpay.common.errors import (
    UpstreamAuthError,
    UpstreamError,
    UpstreamNetworkError,
    UpstreamRejectedError,
)


class SessionProvider:
    """Creates a hosted checkout session and returns its redirect URL."""

    async def create_session(self, descriptor: dict[str, Any]) -> str:
        raise NotImplementedError


def translate_stripe_error(exc: stripe.StripeError) -> UpstreamError:
    """Map one Stripe SDK exception to an upstream error kind, keeping its message."""

    message = exc.user_message or str(exc)
    if isinstance(exc, (stripe.AuthenticationError, stripe.PermissionError)):
        return UpstreamAuthError(message)
    if isinstance(exc, stripe.APIConnectionError):
        return UpstreamNetworkError(message)
    return UpstreamRejectedError(message)


class StripeSessionProvider(SessionProvider):
    """Stripe Checkout Sessions backed provider."""

    def __init__(
        self,
        api_key: str,
        api_version: str | None = None,
        timeout_seconds: float | None = None,
        max_network_retries: int = 0,
        client: stripe.StripeClient | None = None,
    ) -> None:
        if client is None:
            http_client = stripe.RequestsClient(timeout=timeout_seconds) if timeout_seconds else None
            client = stripe.StripeClient(
                api_key,
                stripe_version=api_version,
                max_network_retries=max_network_retries,
                http_client=http_client,
            )
        self._client = client

    @classmethod
    def from_settings(cls, settings) -> "StripeSessionProvider":
        return cls(
            api_key=settings.stripe_secret_key,
            api_version=settings.stripe_api_version,
            timeout_seconds=settings.provider_timeout_seconds,
            max_network_retries=settings.provider_max_network_retries,
        )

    def _create(self, descriptor: dict[str, Any]) -> str:
        try:
            session = self._client.checkout.sessions.create(params=descriptor)
        except stripe.StripeError as exc:
            raise translate_stripe_error(exc) from exc
        if not session.url:
            raise UpstreamRejectedError("provider returned a session without a url")
        return session.url

    async def create_session(self, descriptor: dict[str, Any]) -> str:
        # The SDK call blocks; keep it off the event loop.
        return await asyncio.to_thread(self._create, descriptor)
