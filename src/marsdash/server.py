"""Stateless proxy from the dashboard to NASA's public APIs.

Each route maps 1:1 to an upstream endpoint: it performs exactly one
upstream GET and either relays the decoded JSON or answers ``500`` with a
fixed error message. Upstream error bodies are never forwarded.
"""

from __future__ import annotations

import asyncio
import logging
from collections.abc import AsyncIterator, Awaitable
from typing import Any

import aiohttp
from aiohttp import web

from marsdash._api import image_search as _search_api
from marsdash._api import mars_photos as _photos_api
from marsdash._api._common import build_upstream_transport
from marsdash._transport import Transport
from marsdash.config import ApiVariant, DashboardConfig
from marsdash.exceptions import UpstreamError

_logger = logging.getLogger(__name__)

CONFIG_KEY = web.AppKey("config", DashboardConfig)
TRANSPORT_KEY = web.AppKey("transport", Transport)

MANIFEST_ERROR = "Failed to fetch rover manifest"
PHOTOS_ERROR = "Failed to fetch rover photos"
APOD_ERROR = "Failed to fetch APOD"
IMAGES_ERROR = "Failed to fetch rover images"
ASSET_ERROR = "Failed to fetch asset"
METADATA_ERROR = "Failed to fetch metadata"


async def _relay(
    upstream: Awaitable[Any],
    *,
    error: str,
    include_details: bool = False,
    wrap_key: str | None = None,
) -> web.Response:
    """Await one upstream call and map the outcome to a proxy response."""
    try:
        data = await upstream
    except UpstreamError as exc:
        _logger.warning("%s (endpoint=%s status=%s): %s", error, exc.endpoint, exc.status_code, exc)
        body: dict[str, Any] = {"error": error}
        if include_details:
            body["details"] = exc.reason
        return web.json_response(body, status=500)

    if wrap_key is not None:
        data = {wrap_key: data}
    return web.json_response(data)


# ------------------------------------------------------------------
# Variant A: manifest / photos
# ------------------------------------------------------------------


async def handle_manifest(request: web.Request) -> web.Response:
    rover = request.match_info["name"]
    return await _relay(_photos_api.fetch_manifest(request.app[TRANSPORT_KEY], rover), error=MANIFEST_ERROR)


async def handle_latest_photos(request: web.Request) -> web.Response:
    rover = request.match_info["name"]
    return await _relay(_photos_api.fetch_latest_photos(request.app[TRANSPORT_KEY], rover), error=PHOTOS_ERROR)


async def handle_photos_by_sol(request: web.Request) -> web.Response:
    rover = request.match_info["name"]
    sol = request.match_info["sol"]
    return await _relay(_photos_api.fetch_photos_by_sol(request.app[TRANSPORT_KEY], rover, sol), error=PHOTOS_ERROR)


async def handle_apod(request: web.Request) -> web.Response:
    return await _relay(_photos_api.fetch_apod(request.app[TRANSPORT_KEY]), error=APOD_ERROR, wrap_key="image")


# ------------------------------------------------------------------
# Variant B: image search
# ------------------------------------------------------------------


async def handle_rover_images(request: web.Request) -> web.Response:
    rover = request.match_info["name"]
    return await _relay(
        _search_api.search_rover_images(request.app[TRANSPORT_KEY], rover),
        error=IMAGES_ERROR,
        include_details=True,
    )


async def handle_asset(request: web.Request) -> web.Response:
    nasa_id = request.match_info["nasa_id"]
    return await _relay(
        _search_api.fetch_asset(request.app[TRANSPORT_KEY], nasa_id),
        error=ASSET_ERROR,
        include_details=True,
    )


async def handle_metadata(request: web.Request) -> web.Response:
    nasa_id = request.match_info["nasa_id"]
    return await _relay(
        _search_api.fetch_metadata(request.app[TRANSPORT_KEY], nasa_id),
        error=METADATA_ERROR,
        include_details=True,
    )


# ------------------------------------------------------------------
# Static files
# ------------------------------------------------------------------


async def handle_index(request: web.Request) -> web.FileResponse:
    index = request.app[CONFIG_KEY].static_dir / "index.html"
    if not index.is_file():
        raise web.HTTPNotFound(text="Dashboard page has not been rendered yet")
    return web.FileResponse(index)


def _routes_for(variant: ApiVariant) -> list[web.RouteDef]:
    if variant is ApiVariant.PHOTOS:
        return [
            web.get("/rover/{name}/manifest", handle_manifest),
            web.get("/rover/{name}/latest-photos", handle_latest_photos),
            web.get(r"/rover/{name}/photos/{sol:\d+}", handle_photos_by_sol),
            web.get("/apod", handle_apod),
        ]
    return [
        web.get("/rover/{name}/images", handle_rover_images),
        web.get("/asset/{nasa_id}", handle_asset),
        web.get("/metadata/{nasa_id}", handle_metadata),
    ]


def _upstream_base_url(config: DashboardConfig) -> str:
    return config.nasa_api_url if config.variant is ApiVariant.PHOTOS else config.images_api_url


async def _upstream_session_ctx(app: web.Application) -> AsyncIterator[None]:
    config = app[CONFIG_KEY]
    async with aiohttp.ClientSession() as session:
        app[TRANSPORT_KEY] = build_upstream_transport(_upstream_base_url(config), config.api_key, session)
        yield


def create_app(config: DashboardConfig) -> web.Application:
    """Build the proxy application for ``config.variant``."""
    app = web.Application()
    app[CONFIG_KEY] = config
    app.cleanup_ctx.append(_upstream_session_ctx)

    # Registration order matters: the static resource at "/" matches every path.
    app.add_routes(_routes_for(config.variant))
    app.router.add_get("/", handle_index)
    if config.static_dir.is_dir():
        app.router.add_static("/", config.static_dir)
    else:
        _logger.warning("Static directory %s does not exist; serving API routes only", config.static_dir)

    _logger.debug("Proxy app created (variant=%s, upstream=%s)", config.variant, _upstream_base_url(config))
    return app


async def serve(config: DashboardConfig, *, stop: asyncio.Event | None = None) -> None:
    """Serve the proxy until *stop* is set (forever when omitted)."""
    config.static_dir.mkdir(parents=True, exist_ok=True)
    runner = web.AppRunner(create_app(config))
    await runner.setup()
    try:
        site = web.TCPSite(runner, config.host, config.port)
        await site.start()
        _logger.info("Mars Rover Dashboard listening on port %d!", config.port)
        await (stop or asyncio.Event()).wait()
    finally:
        await runner.cleanup()


def run(config: DashboardConfig) -> None:
    """Blocking entry point used by the CLI."""
    asyncio.run(serve(config))
