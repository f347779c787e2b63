# src/llm/errors.py — v1
"""Provider error taxonomy shared by every backend adapter.

All ProviderError subclasses are terminal for the call that raised them;
adapters never retry. RequestCancelledError is not a ProviderError; a
cancelled call is never reported as a failure.
"""

from __future__ import annotations


class ProviderError(Exception):
    """Base class for classified backend failures."""

    kind = "provider_error"

    def __init__(self, message: str, provider: str = "unknown") -> None:
        self.message = message
        self.provider = provider
        super().__init__(message)


class MissingCredentialError(ProviderError):
    """No API key configured; raised before any network I/O."""

    kind = "missing_credential"


class InvalidEndpointError(ProviderError):
    """The configured endpoint cannot form a valid request URL."""

    kind = "invalid_endpoint"


class TransportError(ProviderError):
    """Network-level failure: DNS, connect, TLS, timeout."""

    kind = "transport_failure"


class HTTPStatusError(ProviderError):
    """The backend answered with a non-success HTTP status."""

    kind = "http_error"

    def __init__(self, status: int, message: str, provider: str = "unknown") -> None:
        self.status = status
        super().__init__(message, provider)


class MalformedResponseError(ProviderError):
    """Response body is not the JSON structure the backend documents."""

    kind = "malformed_response"


class EmptyResultError(ProviderError):
    """Well-formed response that carries no usable text."""

    kind = "empty_result"


class RequestCancelledError(Exception):
    """The call was cancelled before its result could be delivered."""

    def __init__(self, provider: str = "unknown") -> None:
        self.provider = provider
        super().__init__(f"Request to {provider} was cancelled")
