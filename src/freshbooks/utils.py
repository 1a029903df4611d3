from __future__ import annotations

import datetime
import re
import xml.etree.ElementTree as ET
from collections.abc import Mapping
from decimal import Decimal
from typing import Any, Dict
from xml.parsers.expat import ExpatError

import xmltodict

from .exceptions import ResponseParseError
from .structures import TEXT_KEY, Result

DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"
ATTRIBUTE_PREFIX = "@"
CDATA_KEY = "#text"

# Complement of the XML 1.0 Char production.
INVALID_XML_CHARS = re.compile("[^\t\n\r\u0020-\ud7ff\ue000-\ufffd\U00010000-\U0010ffff]")


def render_scalar(value: Any) -> str:
    """Render a scalar Param Tree leaf as XML text."""

    if value is None:
        return ""
    # bool first: it is an int subclass
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    if isinstance(value, (int, float, Decimal)):
        return str(value)
    if isinstance(value, datetime.datetime):
        return value.strftime(DATETIME_FORMAT)
    if isinstance(value, datetime.date):
        return value.isoformat()
    raise TypeError(f"cannot render {type(value).__name__} as XML text")


def check_xml_text(text: str) -> str:
    """Return ``text`` unchanged, or raise ValueError if XML cannot carry it."""

    match = INVALID_XML_CHARS.search(text)
    if match:
        raise ValueError(f"character {match.group()!r} at position {match.start()} is not allowed in XML")
    return text


def append_text(parent: ET.Element, text: str) -> None:
    """Append character data after the last child of ``parent``."""

    if not text:
        return
    if len(parent):
        last = parent[-1]
        last.tail = (last.tail or "") + text
    else:
        parent.text = (parent.text or "") + text


def build_xml(obj: Any, parent: ET.Element) -> None:
    """Render nested mappings, sequences and scalars into ``parent``.

    Mapping keys become child tags. Sequence items are rendered straight into
    ``parent`` with no wrapping tag of their own.
    """

    if isinstance(obj, Mapping):
        for key, value in obj.items():
            if not isinstance(key, str):
                raise TypeError(f"mapping keys must be str, got {type(key).__name__}")
            build_xml(value, ET.SubElement(parent, key))
    elif isinstance(obj, (list, tuple)):
        for item in obj:
            build_xml(item, parent)
    else:
        append_text(parent, check_xml_text(render_scalar(obj)))


def xml_body(method: str, params: Any = None) -> str:
    """Serialize ``params`` into a ``<request method="...">`` document."""

    if not isinstance(method, str):
        raise TypeError("method must be str")
    root = ET.Element("request", method=check_xml_text(method))
    build_xml(params, root)
    # ElementTree writes raw carriage returns, which parsers read back as newlines.
    return ET.tostring(root, encoding="unicode").replace("\r", "&#13;")


def _is_namespace_declaration(key: str) -> bool:
    return key == "@xmlns" or key.startswith("@xmlns:")


def strip_namespace_declarations(value: Any) -> Any:
    """Recursively drop ``@xmlns`` and ``@xmlns:*`` keys from parsed XML."""

    if isinstance(value, dict):
        for key in [k for k in value if _is_namespace_declaration(k)]:
            del value[key]
        for item in value.values():
            strip_namespace_declarations(item)
    elif isinstance(value, list):
        for item in value:
            strip_namespace_declarations(item)
    return value


def unprefix_keys(value: Any) -> Any:
    """Rename ``@attr`` keys to ``attr`` and ``#text`` to ``text``.

    A key keeps its marker when a child element already uses the bare name.
    """

    if isinstance(value, list):
        return [unprefix_keys(item) for item in value]
    if not isinstance(value, dict):
        return value

    result: Dict[str, Any] = {}
    for key, item in value.items():
        if key.startswith(ATTRIBUTE_PREFIX):
            bare = key[len(ATTRIBUTE_PREFIX):]
        elif key == CDATA_KEY:
            bare = TEXT_KEY
        else:
            bare = key
        if bare != key and (bare in value or bare in result):
            bare = key
        result[bare] = unprefix_keys(item)
    return result


def xml_to_dict(xml: str) -> Dict[str, Any]:
    """Parse XML string into nested dicts keyed by tag name.

    Attributes keep the ``@`` prefix and mixed text sits under ``#text``, so
    they never collide with child elements.
    """

    if not xml or not xml.strip():
        raise ResponseParseError("API XML response is empty.")
    try:
        document = xmltodict.parse(xml, attr_prefix=ATTRIBUTE_PREFIX, cdata_key=CDATA_KEY)
    except (ExpatError, ValueError) as exc:
        raise ResponseParseError("Failed to parse API XML response.") from exc
    return strip_namespace_declarations(document)


def find_response(document: Dict[str, Any]) -> Dict[str, Any]:
    """Return the ``response`` element, either the root or a child of it."""

    if "response" in document:
        response = document["response"]
    else:
        root = next(iter(document.values()), None)
        if not isinstance(root, dict) or "response" not in root:
            raise ResponseParseError("API XML response has no <response> element.")
        response = root["response"]

    if isinstance(response, list):
        raise ResponseParseError("API XML response has more than one <response> element.")
    if response is None:
        return {}
    if isinstance(response, str):
        return {CDATA_KEY: response}
    return response


def parse_response(xml: str) -> Result:
    """Normalize raw API XML into a :class:`Result`."""

    response = find_response(xml_to_dict(xml))
    status = response.pop(ATTRIBUTE_PREFIX + "status", None)
    return Result(unprefix_keys(response), status=status)


__all__ = [
    "DATETIME_FORMAT",
    "ATTRIBUTE_PREFIX",
    "CDATA_KEY",
    "render_scalar",
    "check_xml_text",
    "append_text",
    "build_xml",
    "xml_body",
    "strip_namespace_declarations",
    "unprefix_keys",
    "xml_to_dict",
    "find_response",
    "parse_response",
]
