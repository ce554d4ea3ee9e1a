"""Shared fixtures: explicit settings and an in-memory provider."""

import pytest

from hostedpay.common.config import Settings
from hostedpay.services.checkout.provider import SessionProvider


class FakeProvider(SessionProvider):
    """Records every descriptor and returns a canned URL or raises."""

    def __init__(self, url: str = "https://payments.example/session/abc", error: Exception | None = None) -> None:
        self.url = url
        self.error = error
        self.calls: list[dict] = []

    async def create_session(self, descriptor: dict) -> str:
        self.calls.append(descriptor)
        if self.error is not None:
            raise self.error
        return self.url


def make_settings(**overrides) -> Settings:
    values = {
        "stripe_secret_key": "sk_test_dummy",
        "frontend_url": "http://localhost:3000",
        "_env_file": None,
    }
    values.update(overrides)
    return Settings(**values)


@pytest.fixture
def settings() -> Settings:
    return make_settings()


@pytest.fixture
def provider() -> FakeProvider:
    return FakeProvider()
