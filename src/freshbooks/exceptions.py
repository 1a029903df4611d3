"""Errors raised by a FreshBooks connection.

Everything that goes wrong between sending the request and receiving a body
is a :class:`TransportError`. A body that is not a FreshBooks ``<response>``
document is a :class:`ResponseParseError`. A response whose status is not
``ok`` is returned as a ``Result``, never raised.
"""
from __future__ import annotations


class TransportError(RuntimeError):
    """The POST to the FreshBooks API endpoint did not complete."""


class RequestTimeoutError(TransportError):
    """The API endpoint did not answer within the connection timeout."""


class HttpError(TransportError):
    """The API endpoint answered with a status outside 2xx."""

    def __init__(self, status_code: int, response_text: str) -> None:
        self.status_code = status_code
        self.response_text = response_text
        super().__init__(f"FreshBooks API returned HTTP {status_code}: {response_text}")


class BadRequestError(HttpError):
    """HTTP 400 from the API endpoint."""


class UnauthorizedError(HttpError):
    """HTTP 401, usually a wrong or revoked API token."""


class ForbiddenError(HttpError):
    """HTTP 403, the token may not use the API."""


class NotFoundError(HttpError):
    """HTTP 404, usually a wrong account domain."""


class ServerError(HttpError):
    """HTTP 5xx from the API endpoint."""


class AsyncClientUnavailableError(RuntimeError):
    """Awaitable calls need httpx, which is not installed."""


class ResponseParseError(ValueError):
    """The response body is not a well-formed ``<response>`` document."""


__all__ = [
    "TransportError",
    "RequestTimeoutError",
    "HttpError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "AsyncClientUnavailableError",
    "ResponseParseError",
]
