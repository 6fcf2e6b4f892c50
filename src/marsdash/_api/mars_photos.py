"""Mars Rover Photos and APOD endpoints.

Endpoints (relative to ``https://api.nasa.gov``):
  - /mars-photos/api/v1/manifests/{rover}
  - /mars-photos/api/v1/rovers/{rover}/latest_photos
  - /mars-photos/api/v1/rovers/{rover}/photos?sol={sol}
  - /planetary/apod
"""

from __future__ import annotations

import logging
from typing import Any

from marsdash._api._common import rover_segment
from marsdash._transport import Transport

_logger = logging.getLogger(__name__)

_PHOTOS_PREFIX = "/mars-photos/api/v1"
_APOD_ENDPOINT = "/planetary/apod"


async def fetch_manifest(transport: Transport, rover: str) -> Any:
    """Fetch the mission manifest (``{"photo_manifest": {...}}``) for *rover*."""
    return await transport.get_json(f"{_PHOTOS_PREFIX}/manifests/{rover_segment(rover)}")


async def fetch_latest_photos(transport: Transport, rover: str) -> Any:
    """Fetch the most recent photo set (``{"latest_photos": [...]}``) for *rover*."""
    return await transport.get_json(f"{_PHOTOS_PREFIX}/rovers/{rover_segment(rover)}/latest_photos")


async def fetch_photos_by_sol(transport: Transport, rover: str, sol: int | str) -> Any:
    """Fetch the photos *rover* took on Martian day *sol*."""
    data = await transport.get_json(
        f"{_PHOTOS_PREFIX}/rovers/{rover_segment(rover)}/photos",
        {"sol": str(sol)},
    )
    if isinstance(data, dict):
        _logger.debug("Photos for %s sol %s: %d item(s)", rover, sol, len(data.get("photos") or []))
    return data


async def fetch_apod(transport: Transport) -> Any:
    """Fetch today's Astronomy Picture of the Day."""
    return await transport.get_json(_APOD_ENDPOINT)
