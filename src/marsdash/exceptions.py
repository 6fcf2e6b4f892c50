"""Custom exception hierarchy for marsdash."""

from __future__ import annotations


class MarsDashError(Exception):
    """Base exception for all marsdash errors."""


class MarsDashConfigError(MarsDashError):
    """Invalid or missing configuration."""


class UnknownRoverError(MarsDashError, ValueError):
    """A rover name that is not part of the configured rover list."""

    def __init__(self, rover: str, rovers: tuple[str, ...] = ()) -> None:
        self.rover = rover
        self.rovers = rovers
        choices = ", ".join(rovers) if rovers else "none configured"
        super().__init__(f"Unknown rover {rover!r} (expected one of: {choices})")


class TransportError(MarsDashError):
    """HTTP-level failure (network, non-2xx, invalid JSON)."""

    def __init__(
        self,
        message: str,
        *,
        status_code: int | None = None,
        endpoint: str = "",
        reason: str = "",
    ) -> None:
        self.status_code = status_code
        self.endpoint = endpoint
        #: Short description without any response body, safe to show to clients.
        self.reason = reason or message
        super().__init__(message)


class UpstreamError(TransportError):
    """A NASA API request failed.

    Raised by the proxy's endpoint mappers; the server turns it into a
    generic ``500`` response and never forwards the upstream body.
    """


class ProxyRequestError(TransportError):
    """A dashboard request to the proxy failed."""
