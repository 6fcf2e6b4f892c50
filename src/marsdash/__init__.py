"""marsdash - Mars rover dashboard with an async proxy to NASA's public APIs."""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("marsdash")
except PackageNotFoundError:
    __version__ = "0+local"

from marsdash.client import ProxyClient
from marsdash.config import ApiVariant, DashboardConfig
from marsdash.dashboard import Dashboard, file_sink, render_page
from marsdash.exceptions import (
    MarsDashConfigError,
    MarsDashError,
    ProxyRequestError,
    TransportError,
    UnknownRoverError,
    UpstreamError,
)
from marsdash.server import create_app
from marsdash.state import DashboardState, Store, UserProfile

__all__ = [
    "__version__",
    "ApiVariant",
    "Dashboard",
    "DashboardConfig",
    "DashboardState",
    "MarsDashConfigError",
    "MarsDashError",
    "ProxyClient",
    "ProxyRequestError",
    "Store",
    "TransportError",
    "UnknownRoverError",
    "UpstreamError",
    "UserProfile",
    "create_app",
    "file_sink",
    "render_page",
]
