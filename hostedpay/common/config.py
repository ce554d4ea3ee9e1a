"""Environment-driven settings for the checkout service.

The process loads this once at startup and passes the resulting value into the
app factory and the checkout service. Behavior is controlled by environment
variables (see `.env.example`).
"""

from pydantic import Field, ValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from hostedpay.common.errors import ConfigurationError


class Settings(BaseSettings):
    """Typed view of runtime configuration from environment variables."""

    service_name: str = "hostedpay-checkout"
    log_level: str = "INFO"
    stripe_secret_key: str = Field(min_length=1)
    stripe_publishable_key: str = ""
    stripe_api_version: str = "2023-08-16"
    frontend_url: str = "http://localhost:3000"
    host: str = "0.0.0.0"
    port: int = 4242
    currency: str = Field(default="eur", min_length=3, max_length=3)
    # Unset means the provider SDK's own default timeout applies.
    provider_timeout_seconds: float | None = Field(default=None, gt=0)
    provider_max_network_retries: int = Field(default=0, ge=0)
    strict_quantity: bool = False
    expose_error_kinds: bool = False
    tracing_enabled: bool = False
    otel_exporter_otlp_endpoint: str = "http://otel-collector:4318/v1/traces"
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    @property
    def frontend_base_url(self) -> str:
        return self.frontend_url.rstrip("/")


def load_settings(**overrides) -> Settings:
    """Build settings from the environment, failing with `ConfigurationError`."""

    try:
        return Settings(**overrides)
    except ValidationError as exc:
        fields = ", ".join(".".join(str(part) for part in err["loc"]) for err in exc.errors())
        raise ConfigurationError(f"invalid or missing settings: {fields}") from exc
