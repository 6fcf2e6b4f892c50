"""Single-writer store with a synchronous full re-render on every update."""

from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from typing import Any

from marsdash.state.snapshot import DashboardState

_logger = logging.getLogger(__name__)

RenderCallback = Callable[[DashboardState], None]


class Store:
    """Owns the current :class:`DashboardState`.

    ``update`` swaps in the merged snapshot and then calls the render
    callback with it on the same call stack, so renders never interleave
    and never observe a half-applied update. There is no queue and no
    diffing: two updates in one synchronous turn render twice, in order.
    """

    def __init__(self, initial: DashboardState, render: RenderCallback) -> None:
        self._state = initial
        self._render = render
        self._renders = 0

    @property
    def state(self) -> DashboardState:
        return self._state

    @property
    def render_count(self) -> int:
        return self._renders

    def update(self, partial: Mapping[str, Any]) -> DashboardState:
        """Merge *partial* into the current snapshot and re-render."""
        self._state = self._state.merge(partial)
        _logger.debug("State updated keys=%s", sorted(partial))
        self.render()
        return self._state

    def render(self) -> None:
        """Render the current snapshot."""
        self._renders += 1
        self._render(self._state)
