"""State/store layer.

This package is the single source of truth for the dashboard: one
immutable :class:`DashboardState` snapshot, replaced wholesale by the
:class:`Store` on every update and handed to the renderer in full.
"""

from marsdash.state.snapshot import DashboardState, UserProfile
from marsdash.state.store import RenderCallback, Store

__all__ = ["DashboardState", "RenderCallback", "Store", "UserProfile"]
