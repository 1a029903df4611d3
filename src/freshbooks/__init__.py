from __future__ import annotations

from .client import API_VERSION, ApiMethod, Connection, NamespaceHandle, httpx, requests
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
from .structures import STATUS_OK, Result, as_list, as_mapping, as_text
from .utils import build_xml, parse_response, render_scalar, xml_body, xml_to_dict

__all__ = [
    "API_VERSION",
    "Connection",
    "NamespaceHandle",
    "ApiMethod",
    "Result",
    "STATUS_OK",
    "as_list",
    "as_text",
    "as_mapping",
    "xml_body",
    "build_xml",
    "render_scalar",
    "xml_to_dict",
    "parse_response",
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
