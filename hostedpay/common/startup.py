"""Startup-time helpers for safe config logging."""

from hostedpay.common.config import Settings
from hostedpay.common.logging import logger


def _safe_value(name: str, value) -> str:
    """Return a printable value with simple redaction for secret-like names."""

    if value is None or value == "":
        return "<unset>"
    if any(secret in name.upper() for secret in ["KEY", "SECRET", "PASSWORD", "TOKEN"]):
        return "<redacted>"
    return str(value)


def log_startup_config(settings: Settings, keys: list[str]) -> None:
    """Log selected startup config keys for quick troubleshooting."""

    values = settings.model_dump()
    config = {"service": settings.service_name}
    for key in keys:
        config[key.upper()] = _safe_value(key, values.get(key))
    logger.info("startup_config=%s", config)
