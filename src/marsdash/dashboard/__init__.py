"""Dashboard UI: selection handling, fetch coordination and rendering."""

from marsdash.dashboard.controller import Dashboard, file_sink
from marsdash.dashboard.views import render_page

__all__ = ["Dashboard", "file_sink", "render_page"]
