from __future__ import annotations

import logging
from dataclasses import dataclass, field
from http import HTTPStatus
from typing import Any, Awaitable, Tuple

from .exceptions import (
    AsyncClientUnavailableError,
    BadRequestError,
    ForbiddenError,
    HttpError,
    NotFoundError,
    RequestTimeoutError,
    ResponseParseError,
    ServerError,
    TransportError,
    UnauthorizedError,
)
from .structures import Result
from .utils import parse_response, xml_body

try:
    import httpx
except ImportError:  # pragma: no cover - depends on installed extra
    httpx = None  # type: ignore[assignment]

try:
    import requests
except ImportError:  # pragma: no cover - depends on installed extra
    requests = None  # type: ignore[assignment]

API_VERSION = "2.1"
# The API authenticates by token alone but basic auth needs a password.
AUTH_PASSWORD = "X"
REQUEST_HEADERS = {"Content-Type": "application/xml; charset=utf-8"}

logger = logging.getLogger(__name__)


@dataclass
class Connection:
    """FreshBooks account connection with sync and async methods.

    Connections are account specific, so two of them can be used side by side,
    e.g. to copy data between accounts. API methods are not known in advance:
    ``connection.invoice.create({...})`` posts ``invoice.create``.
    """

    domain: str
    token: str = field(repr=False)
    timeout: float = 10.0
    scheme: str = "https"

    @property
    def api_url(self) -> str:
        return f"{self.scheme}://{self.domain}/api/{API_VERSION}/xml-in"

    @property
    def _auth(self) -> Tuple[str, str]:
        return (self.token, AUTH_PASSWORD)

    @staticmethod
    def _raise_for_status(response: Any) -> None:
        status_code = int(response.status_code)
        response_text = response.text

        if status_code == HTTPStatus.BAD_REQUEST:
            raise BadRequestError(status_code, response_text)
        if status_code == HTTPStatus.UNAUTHORIZED:
            raise UnauthorizedError(status_code, response_text)
        if status_code == HTTPStatus.FORBIDDEN:
            raise ForbiddenError(status_code, response_text)
        if status_code == HTTPStatus.NOT_FOUND:
            raise NotFoundError(status_code, response_text)
        if HTTPStatus.INTERNAL_SERVER_ERROR <= status_code <= 599:
            raise ServerError(status_code, response_text)
        if not HTTPStatus.OK <= status_code < HTTPStatus.MULTIPLE_CHOICES:
            raise HttpError(status_code, response_text)

    @staticmethod
    def _ensure_sync_backend() -> None:
        if httpx is None and requests is None:
            raise RuntimeError(
                "No HTTP client is installed. Install freshbooks-xml[httpx] or freshbooks-xml[requests]."
            )

    def _request_text(self, body: str) -> str:
        self._ensure_sync_backend()
        content = body.encode("utf-8")

        if httpx is not None:
            try:
                with httpx.Client(timeout=self.timeout) as client:
                    response = client.request(
                        "POST", self.api_url, content=content, headers=REQUEST_HEADERS, auth=self._auth
                    )
            except httpx.TimeoutException as exc:
                raise RequestTimeoutError("HTTP request timeout exceeded.") from exc
            except httpx.HTTPError as exc:
                raise TransportError("HTTP transport error in httpx client.") from exc
        else:
            try:
                with requests.Session() as session:  # type: ignore[union-attr]
                    response = session.request(
                        "POST",
                        self.api_url,
                        data=content,
                        headers=REQUEST_HEADERS,
                        auth=self._auth,
                        timeout=self.timeout,
                    )
            except requests.Timeout as exc:  # type: ignore[union-attr]
                raise RequestTimeoutError("HTTP request timeout exceeded.") from exc
            except requests.RequestException as exc:  # type: ignore[union-attr]
                raise TransportError("HTTP transport error in requests client.") from exc

        self._raise_for_status(response)
        return response.text

    async def _request_text_async(self, body: str) -> str:
        if httpx is None:
            raise AsyncClientUnavailableError("Async methods require httpx. Install freshbooks-xml[httpx].")

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.request(
                    "POST", self.api_url, content=body.encode("utf-8"), headers=REQUEST_HEADERS, auth=self._auth
                )
        except httpx.TimeoutException as exc:
            raise RequestTimeoutError("HTTP request timeout exceeded.") from exc
        except httpx.HTTPError as exc:
            raise TransportError("HTTP transport error in httpx client.") from exc

        self._raise_for_status(response)
        return response.text

    @staticmethod
    def _as_result(method: str, response_text: str) -> Result:
        result = parse_response(response_text)
        if not result.succeeded:
            logger.debug("API method %s returned status %r", method, result.status)
        return result

    def post(self, method: str, params: Any = None) -> Result:
        """Call API ``method`` with ``params`` serialized as the request body."""

        body = xml_body(method, params)
        logger.debug("POST %s method=%s", self.api_url, method)
        return self._as_result(method, self._request_text(body))

    async def post_async(self, method: str, params: Any = None) -> Result:
        body = xml_body(method, params)
        logger.debug("POST %s method=%s", self.api_url, method)
        return self._as_result(method, await self._request_text_async(body))

    def call(self, namespace: str, action: str, params: Any = None) -> Result:
        return self.post(f"{namespace}.{action}", params)

    async def call_async(self, namespace: str, action: str, params: Any = None) -> Result:
        return await self.post_async(f"{namespace}.{action}", params)

    def __getattr__(self, name: str) -> NamespaceHandle:
        if name.startswith("_"):
            raise AttributeError(name)
        return NamespaceHandle(self, name)


class NamespaceHandle:
    """First segment of an API method name bound to a connection."""

    __slots__ = ("connection", "namespace")

    def __init__(self, connection: Connection, namespace: str) -> None:
        self.connection = connection
        self.namespace = namespace

    def __getattr__(self, action: str) -> ApiMethod:
        if action.startswith("_"):
            raise AttributeError(action)
        return ApiMethod(self.connection, f"{self.namespace}.{action}")

    def __repr__(self) -> str:
        return f"NamespaceHandle({self.namespace!r})"


class ApiMethod:
    """Fully resolved ``namespace.action`` API method."""

    __slots__ = ("connection", "name")

    def __init__(self, connection: Connection, name: str) -> None:
        self.connection = connection
        self.name = name

    def __call__(self, params: Any = None) -> Result:
        return self.connection.post(self.name, params)

    def call_async(self, params: Any = None) -> Awaitable[Result]:
        return self.connection.post_async(self.name, params)

    def __getattr__(self, item: str) -> Any:
        raise AttributeError(
            f"API method {self.name!r} is complete; method names have exactly two segments, got extra {item!r}"
        )

    def __repr__(self) -> str:
        return f"ApiMethod({self.name!r})"


__all__ = [
    "API_VERSION",
    "AUTH_PASSWORD",
    "Connection",
    "NamespaceHandle",
    "ApiMethod",
    "httpx",
    "requests",
    "HttpError",
    "BadRequestError",
    "UnauthorizedError",
    "ForbiddenError",
    "NotFoundError",
    "ServerError",
    "AsyncClientUnavailableError",
    "TransportError",
    "RequestTimeoutError",
    "ResponseParseError",
]
