"""NASA Image and Video Library endpoints.

Endpoints (relative to ``https://images-api.nasa.gov``):
  - /search?q={rover} rover&media_type=image
  - /asset/{nasa_id}
  - /metadata/{nasa_id}
"""

from __future__ import annotations

import logging
from typing import Any

from marsdash._api._common import id_segment
from marsdash._transport import Transport

_logger = logging.getLogger(__name__)


def build_search_params(rover: str) -> dict[str, str]:
    """Query parameters for a rover image search.

    The transport URL-encodes the values, so ``"curiosity rover"`` goes out
    as ``q=curiosity+rover``.
    """
    return {"q": f"{rover.strip().lower()} rover", "media_type": "image"}


async def search_rover_images(transport: Transport, rover: str) -> Any:
    """Search the media library for images of *rover*."""
    data = await transport.get_json("/search", build_search_params(rover))
    if isinstance(data, dict):
        metadata = (data.get("collection") or {}).get("metadata") or {}
        hits = metadata.get("total_hits") if isinstance(metadata, dict) else None
        _logger.debug("Image search for %s: total_hits=%s", rover, hits)
    return data


async def fetch_asset(transport: Transport, nasa_id: str) -> Any:
    """Fetch the asset manifest (file links) for *nasa_id*."""
    return await transport.get_json(f"/asset/{id_segment(nasa_id)}")


async def fetch_metadata(transport: Transport, nasa_id: str) -> Any:
    """Fetch the metadata location for *nasa_id*."""
    return await transport.get_json(f"/metadata/{id_segment(nasa_id)}")
