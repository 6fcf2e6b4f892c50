"""Shared helpers for the upstream endpoint modules."""

from __future__ import annotations

from urllib.parse import quote

import aiohttp

from marsdash._transport import JsonTransport
from marsdash.exceptions import UpstreamError


def rover_segment(name: str) -> str:
    """Path segment for a rover: lower-cased and percent-encoded."""
    return quote(name.strip().lower(), safe="")


def id_segment(value: str) -> str:
    """Path segment for an asset id; case is preserved."""
    return quote(value.strip(), safe="")


def build_upstream_transport(base_url: str, api_key: str, http_session: aiohttp.ClientSession) -> JsonTransport:
    """Transport that attaches ``api_key`` to every upstream request."""
    return JsonTransport(
        base_url,
        http_session,
        error_cls=UpstreamError,
        default_params={"api_key": api_key},
    )
