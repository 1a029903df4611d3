from __future__ import annotations

from typing import Any, Dict, List, Optional

STATUS_OK = "ok"
TEXT_KEY = "text"
ERROR_SEPARATOR = "; "


def as_list(value: Any) -> List[Any]:
    """Return ``value`` as a list; a single XML tag parses as a bare value."""

    if value is None:
        return []
    if isinstance(value, list):
        return value
    return [value]


def as_text(value: Any) -> Optional[str]:
    """Return text content of a parsed XML value."""

    if value is None or isinstance(value, str):
        return value
    if isinstance(value, dict):
        # "#text" survives only when a child element is named "text"
        if "#text" in value:
            return value["#text"]
        if TEXT_KEY in value:
            return value[TEXT_KEY]
    raise TypeError(f"expected text, got {type(value).__name__}")


def as_mapping(value: Any) -> Dict[str, Any]:
    """Return a parsed XML value as a dict; an empty element parses as None."""

    if value is None:
        return {}
    if isinstance(value, dict):
        return value
    raise TypeError(f"expected mapping, got {type(value).__name__}")


class Result(dict):
    """API response content with the envelope stripped.

    The mapping mirrors the children and attributes of the ``<response>``
    element. The ``status`` attribute is kept apart from the data, so a child
    element named ``status`` stays in the mapping.
    """

    def __init__(self, data: Optional[Dict[str, Any]] = None, status: Optional[str] = None) -> None:
        if data is not None and not isinstance(data, dict):
            raise TypeError("data must be dict or None")
        if status is not None and not isinstance(status, str):
            raise TypeError("status must be str or None")
        super().__init__(data or {})
        self.status = status

    @property
    def succeeded(self) -> bool:
        return self.status == STATUS_OK

    @property
    def error(self) -> Optional[str]:
        """Error message of a failed response.

        Several ``<error>`` elements are joined with ``"; "``. Error elements
        that carry no text are skipped.
        """

        if self.succeeded:
            return None
        messages = []
        for item in as_list(self.get("error")):
            try:
                text = as_text(item)
            except TypeError:
                continue
            if text:
                messages.append(text)
        return ERROR_SEPARATOR.join(messages) or None

    def lookup(self, *path: str) -> Any:
        value: Any = self
        for key in path:
            if value is None:
                return None
            if not isinstance(value, dict):
                raise TypeError(f"cannot look up {key!r} in {type(value).__name__}")
            value = value.get(key)
        return value

    def get_list(self, *path: str) -> List[Any]:
        return as_list(self.lookup(*path))

    def get_text(self, *path: str) -> Optional[str]:
        return as_text(self.lookup(*path))

    def get_mapping(self, *path: str) -> Dict[str, Any]:
        return as_mapping(self.lookup(*path))

    def __repr__(self) -> str:
        return f"Result(status={self.status!r}, {dict.__repr__(self)})"


__all__ = ["STATUS_OK", "TEXT_KEY", "Result", "as_list", "as_text", "as_mapping"]
