"""Pure formatting helpers used by the view renderers."""

from __future__ import annotations

from collections.abc import Sequence
from datetime import date
from typing import Any

from marsdash._constants import DESCRIPTION_LIMIT

NOT_AVAILABLE = "N/A"
ELLIPSIS = "..."


def format_date(value: Any) -> str:
    """Format an ISO date (or datetime) string as ``"August 6, 2012"``.

    Missing values render as ``N/A``; values that are not ISO dates are
    returned unchanged.
    """
    if value is None or value == "":
        return NOT_AVAILABLE
    text = str(value).strip()
    try:
        parsed = date.fromisoformat(text[:10])
    except ValueError:
        return text
    return f"{parsed:%B} {parsed.day}, {parsed.year}"


def format_count(value: Any, default: str = "0") -> str:
    """Render a count with thousands separators (``12345`` -> ``12,345``)."""
    if value is None or isinstance(value, bool):
        return default
    try:
        number = int(value)
    except (TypeError, ValueError):
        return str(value) or default
    return f"{number:,}"


def truncate(text: str, limit: int = DESCRIPTION_LIMIT) -> str:
    """Keep the first *limit* characters, appending ``...`` when cut."""
    if len(text) <= limit:
        return text
    return f"{text[:limit]}{ELLIPSIS}"


def image_url(links: Any) -> str:
    """Return the ``href`` of the first ``render == "image"`` link, or ``""``."""
    if not isinstance(links, Sequence) or isinstance(links, str):
        return ""
    for link in links:
        if isinstance(link, dict) and link.get("render") == "image":
            return str(link.get("href") or "")
    return ""


def as_dict(value: Any) -> dict[str, Any]:
    return value if isinstance(value, dict) else {}


def as_list(value: Any) -> list[Any]:
    return value if isinstance(value, list) else []
