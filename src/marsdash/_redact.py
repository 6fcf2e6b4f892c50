"""Helpers for safe debug logging.

Every upstream NASA URL carries the API key as a query parameter. This
module redacts it (and similar secrets) before URLs or payloads reach the
logs.
"""

from __future__ import annotations

from collections.abc import Mapping, Sequence
from typing import Any
from urllib.parse import parse_qsl, urlencode, urlsplit, urlunsplit

_SENSITIVE_VALUE_KEYS: frozenset[str] = frozenset(
    {
        "api_key",
        "apikey",
        "key",
        "token",
        "authorization",
        "cookie",
    }
)

_REDACTED = "<redacted>"


def _is_sensitive(key: Any) -> bool:
    return str(key).lower() in _SENSITIVE_VALUE_KEYS


def redact_for_log(value: Any, *, max_string: int = 512, _depth: int = 0) -> Any:
    """Return a copy of *value* with secrets masked and long strings cut.

    Handles the shapes that reach our debug logs: query-parameter mappings
    and decoded JSON. Anything else is logged by ``repr``.
    """
    if _depth > 20:
        return "<max-depth>"

    if isinstance(value, str):
        return value if len(value) <= max_string else f"{value[:max_string]}...<truncated>"

    if value is None or isinstance(value, (bool, int, float)):
        return value

    child = {"max_string": max_string, "_depth": _depth + 1}
    if isinstance(value, Mapping):
        return {str(k): _REDACTED if _is_sensitive(k) else redact_for_log(v, **child) for k, v in value.items()}

    if isinstance(value, Sequence) and not isinstance(value, (bytes, bytearray)):
        return [redact_for_log(v, **child) for v in value]

    return repr(value)


def redact_url(url: str) -> str:
    """Return *url* with sensitive query parameters replaced."""
    parts = urlsplit(url)
    if not parts.query:
        return url
    query = [
        (key, _REDACTED if _is_sensitive(key) else value)
        for key, value in parse_qsl(parts.query, keep_blank_values=True)
    ]
    return urlunsplit(parts._replace(query=urlencode(query, safe="<>")))
