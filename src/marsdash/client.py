"""Async client for the dashboard's proxy endpoints."""

from __future__ import annotations

from typing import Any, Protocol

import aiohttp

from marsdash._api._common import id_segment, rover_segment
from marsdash._transport import JsonTransport
from marsdash.config import DashboardConfig
from marsdash.exceptions import MarsDashError, ProxyRequestError


class RoverDataSource(Protocol):
    """What the fetch coordinator needs from a proxy client."""

    async def manifest(self, rover: str) -> Any: ...

    async def latest_photos(self, rover: str) -> Any: ...

    async def search_images(self, rover: str) -> Any: ...


class ProxyClient:
    """Async client for the proxy server.

    One method per proxy endpoint; rover names are lower-cased in the path.
    Any failure is raised as :class:`ProxyRequestError`. Requests have no
    timeout and are never retried.

    Usage::

        async with ProxyClient(config) as client:
            manifest = await client.manifest("Curiosity")
    """

    def __init__(
        self,
        config: DashboardConfig,
        *,
        session: aiohttp.ClientSession | None = None,
    ) -> None:
        self._config = config
        self._external_session = session is not None
        self._http_session = session
        self._transport: JsonTransport | None = None

    # ------------------------------------------------------------------
    # Context manager lifecycle
    # ------------------------------------------------------------------

    async def __aenter__(self) -> ProxyClient:
        if self._http_session is None:
            self._http_session = aiohttp.ClientSession(timeout=aiohttp.ClientTimeout(total=None))
        self._transport = JsonTransport(
            self._config.proxy_url,
            self._http_session,
            error_cls=ProxyRequestError,
        )
        return self

    async def __aexit__(self, *exc: Any) -> None:
        if not self._external_session and self._http_session is not None:
            await self._http_session.close()
            self._http_session = None
        self._transport = None

    def _require_transport(self) -> JsonTransport:
        if self._transport is None:
            raise MarsDashError("ProxyClient is not open; use it as 'async with ProxyClient(...)'")
        return self._transport

    async def _get(self, path: str) -> Any:
        return await self._require_transport().get_json(path)

    # ------------------------------------------------------------------
    # Manifest / photos surface
    # ------------------------------------------------------------------

    async def manifest(self, rover: str) -> Any:
        return await self._get(f"/rover/{rover_segment(rover)}/manifest")

    async def latest_photos(self, rover: str) -> Any:
        return await self._get(f"/rover/{rover_segment(rover)}/latest-photos")

    async def photos_by_sol(self, rover: str, sol: int) -> Any:
        if sol < 0:
            raise ValueError(f"sol must be non-negative, got {sol}")
        return await self._get(f"/rover/{rover_segment(rover)}/photos/{int(sol)}")

    async def apod(self) -> Any:
        return await self._get("/apod")

    # ------------------------------------------------------------------
    # Image search surface
    # ------------------------------------------------------------------

    async def search_images(self, rover: str) -> Any:
        return await self._get(f"/rover/{rover_segment(rover)}/images")

    async def asset(self, nasa_id: str) -> Any:
        return await self._get(f"/asset/{id_segment(nasa_id)}")

    async def metadata(self, nasa_id: str) -> Any:
        return await self._get(f"/metadata/{id_segment(nasa_id)}")
