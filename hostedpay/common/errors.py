"""Error kinds raised and mapped by the checkout service.

The set of kinds is closed. By default every upstream kind is surfaced as a
500 with the provider's message; `Settings.expose_error_kinds` switches on the
per-kind status codes below.
"""

from enum import Enum


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    UPSTREAM_AUTH = "upstream_auth"
    UPSTREAM_NETWORK = "upstream_network"
    UPSTREAM_REJECTED = "upstream_rejected"


FLAT_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UPSTREAM_AUTH: 500,
    ErrorKind.UPSTREAM_NETWORK: 500,
    ErrorKind.UPSTREAM_REJECTED: 500,
}

DETAILED_STATUS_CODES: dict[ErrorKind, int] = {
    ErrorKind.VALIDATION: 400,
    ErrorKind.UPSTREAM_AUTH: 502,
    ErrorKind.UPSTREAM_NETWORK: 504,
    ErrorKind.UPSTREAM_REJECTED: 502,
}


def status_code_for(kind: ErrorKind, detailed: bool = False) -> int:
    """Return the HTTP status used to surface one error kind."""

    table = DETAILED_STATUS_CODES if detailed else FLAT_STATUS_CODES
    return table[kind]


class ConfigurationError(Exception):
    """Startup configuration is missing or invalid; the process must not start."""


class CheckoutError(Exception):
    """Base class for per-request checkout failures."""

    kind: ErrorKind = ErrorKind.UPSTREAM_REJECTED

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ValidationError(CheckoutError):
    kind = ErrorKind.VALIDATION


class UpstreamError(CheckoutError):
    """Any failure of the provider session-creation call."""


class UpstreamAuthError(UpstreamError):
    kind = ErrorKind.UPSTREAM_AUTH


class UpstreamNetworkError(UpstreamError):
    kind = ErrorKind.UPSTREAM_NETWORK


class UpstreamRejectedError(UpstreamError):
    kind = ErrorKind.UPSTREAM_REJECTED
