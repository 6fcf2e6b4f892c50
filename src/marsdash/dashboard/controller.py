"""Top-level dashboard controller: rover selection and fetch coordination."""

from __future__ import annotations

import asyncio
import logging
import os
from collections.abc import Callable
from pathlib import Path
from typing import Any

from marsdash.client import RoverDataSource
from marsdash.config import ApiVariant, DashboardConfig
from marsdash.dashboard.formatting import as_dict
from marsdash.dashboard.views import render_page
from marsdash.exceptions import ProxyRequestError, UnknownRoverError
from marsdash.state import DashboardState, Store

_logger = logging.getLogger(__name__)

PageSink = Callable[[str], None]

FETCH_ERROR_MESSAGES: dict[ApiVariant, str] = {
    ApiVariant.PHOTOS: "Failed to load rover data. Please try again.",
    ApiVariant.SEARCH: "Failed to load rover images. Please try again.",
}


def file_sink(path: str | Path) -> PageSink:
    """Sink that rewrites *path* with every rendered page.

    The page is written next to the target and moved into place, so a
    concurrent reader (e.g. the proxy's static handler) never sees a
    half-written file.
    """
    target = Path(path)

    def _write(page: str) -> None:
        target.parent.mkdir(parents=True, exist_ok=True)
        tmp = target.with_name(f".{target.name}.tmp")
        tmp.write_text(page, encoding="utf-8")
        os.replace(tmp, target)

    return _write


class Dashboard:
    """Owns the store and turns user actions into state updates.

    Usage::

        async with ProxyClient(config) as client:
            dashboard = Dashboard(config, client, sink=file_sink("public/index.html"))
            await dashboard.start()
            await dashboard.select("Spirit")
    """

    def __init__(
        self,
        config: DashboardConfig,
        source: RoverDataSource,
        *,
        sink: PageSink | None = None,
    ) -> None:
        self._config = config
        self._variant = config.variant
        self._source = source
        self._sink = sink
        self._tasks: set[asyncio.Task[None]] = set()
        self.last_page: str | None = None
        self._store = Store(
            DashboardState.initial(config.variant, rovers=config.rover_names, user_name=config.user_name),
            self._on_render,
        )

    @property
    def store(self) -> Store:
        return self._store

    @property
    def state(self) -> DashboardState:
        return self._store.state

    @property
    def variant(self) -> ApiVariant:
        return self._variant

    def _on_render(self, state: DashboardState) -> None:
        page = render_page(state, self._variant)
        self.last_page = page
        if self._sink is not None:
            self._sink(page)

    # ------------------------------------------------------------------
    # User actions
    # ------------------------------------------------------------------

    def start(self) -> asyncio.Task[None]:
        """Page load: render, then fetch the initially selected rover."""
        self._store.render()
        self._store.update({"loading": True})
        return self._schedule_fetch(self.state.selected_rover)

    def select(self, rover: str) -> asyncio.Task[None]:
        """Select *rover* and start fetching its data.

        The loading state is rendered before this returns, i.e. before any
        network activity. Earlier fetches keep running: there is no
        debouncing and no cancellation.
        """
        if rover not in self.state.rovers:
            raise UnknownRoverError(rover, self.state.rovers)
        self._store.update({"selected_rover": rover, "loading": True})
        return self._schedule_fetch(rover)

    async def wait_idle(self) -> None:
        """Wait until every fetch scheduled so far has finished."""
        while self._tasks:
            await asyncio.gather(*list(self._tasks))

    def _schedule_fetch(self, rover: str) -> asyncio.Task[None]:
        task = asyncio.get_running_loop().create_task(self.fetch_rover(rover), name=f"marsdash-fetch-{rover}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    # ------------------------------------------------------------------
    # Fetch coordinator
    # ------------------------------------------------------------------

    async def _fetch_payload(self, rover: str) -> Any:
        if self._variant is ApiVariant.SEARCH:
            return await self._source.search_images(rover)

        results = await asyncio.gather(
            self._source.manifest(rover),
            self._source.latest_photos(rover),
            return_exceptions=True,
        )
        for result in results:
            if isinstance(result, BaseException):
                raise result
        manifest, photos = results
        return {
            "photo_manifest": as_dict(manifest).get("photo_manifest"),
            "latest_photos": as_dict(photos).get("latest_photos"),
        }

    async def fetch_rover(self, rover: str) -> None:
        """Fetch *rover*'s data and merge the outcome into the store.

        Responses are merged in completion order. A response for a rover
        that is no longer selected is still cached in ``rover_data`` but
        leaves ``loading`` and ``error`` to the selected rover's own fetch.
        """
        try:
            payload = await self._fetch_payload(rover)
        except ProxyRequestError as exc:
            _logger.warning(
                "Error fetching %s data (endpoint=%s status=%s): %s",
                rover,
                exc.endpoint,
                exc.status_code,
                exc,
            )
            if rover != self.state.selected_rover:
                _logger.debug("Ignoring failure for deselected rover %s", rover)
                return
            self._store.update({"loading": False, "error": FETCH_ERROR_MESSAGES[self._variant]})
            return

        state = self._store.state
        rover_data = state.with_rover_data(rover, payload)
        if rover == state.selected_rover:
            self._store.update({"rover_data": rover_data, "loading": False, "error": None})
        else:
            _logger.debug("Caching data for deselected rover %s", rover)
            self._store.update({"rover_data": rover_data})
