"""Command-line checkout client.

Posts a product name, price and quantity to the checkout API and opens the
returned hosted checkout page in the browser.
"""

import argparse
import asyncio
import sys
import webbrowser

import httpx
from pydantic import BaseModel

DEFAULT_BACKEND_URL = "http://localhost:4242"
UNKNOWN_ERROR = "Unknown error"
REQUEST_FAILED = "Request failed"


class ClientOutcome(BaseModel):
    """Either a redirect `url` or an `error` message to show the user."""

    url: str | None = None
    error: str | None = None


class CheckoutClient:
    """Thin async client for `POST /create-checkout-session`."""

    def __init__(
        self,
        base_url: str = DEFAULT_BACKEND_URL,
        timeout: float = 10.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self.transport = transport

    async def create_session(self, name: str, price, quantity) -> ClientOutcome:
        payload = {"price": price, "quantity": quantity, "name": name}
        try:
            async with httpx.AsyncClient(timeout=self.timeout, transport=self.transport) as client:
                resp = await client.post(f"{self.base_url}/create-checkout-session", json=payload)
            data = resp.json()
        except (httpx.HTTPError, ValueError):
            return ClientOutcome(error=REQUEST_FAILED)

        if not isinstance(data, dict):
            return ClientOutcome(error=UNKNOWN_ERROR)
        url = data.get("url")
        if isinstance(url, str) and url:
            return ClientOutcome(url=url)
        error = data.get("error")
        if isinstance(error, str) and error:
            return ClientOutcome(error=error)
        return ClientOutcome(error=UNKNOWN_ERROR)


def _number(value: str):
    """Parse a form number; whole values are sent as ints."""

    number = float(value)
    return int(number) if number.is_integer() else number


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Start a hosted checkout session")
    parser.add_argument("--backend", default=DEFAULT_BACKEND_URL)
    parser.add_argument("--name", default="Test Product")
    parser.add_argument("--price", type=_number, default=1500, help="price in cents, e.g. 1500 = 15.00")
    parser.add_argument("--quantity", type=_number, default=1)
    parser.add_argument("--no-browser", action="store_true", help="print the URL instead of opening it")
    return parser


def main(argv: list[str] | None = None, opener=webbrowser.open) -> int:
    args = build_parser().parse_args(argv)
    client = CheckoutClient(args.backend)
    outcome = asyncio.run(client.create_session(args.name, args.price, args.quantity))

    if outcome.url:
        print(f"Redirecting to {outcome.url}")
        if not args.no_browser:
            opener(outcome.url)
        return 0
    print(outcome.error, file=sys.stderr)
    return 1


if __name__ == "__main__":
    sys.exit(main())
