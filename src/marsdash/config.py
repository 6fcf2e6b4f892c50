"""Configuration for the proxy server and the dashboard."""

from __future__ import annotations

import dataclasses
import os
from enum import StrEnum
from pathlib import Path
from typing import Any

from marsdash._constants import (
    DEFAULT_API_KEY,
    DEFAULT_PORT,
    DEFAULT_PROXY_URL,
    DEFAULT_USER_NAME,
    IMAGES_API_URL,
    NASA_API_URL,
    PHOTO_GALLERY_LIMIT,
    PHOTO_ROVERS,
    SEARCH_GALLERY_LIMIT,
    SEARCH_ROVERS,
)
from marsdash.exceptions import MarsDashConfigError


class ApiVariant(StrEnum):
    """Which NASA API surface the deployment exposes.

    The two variants are mutually exclusive: a proxy serves one endpoint set
    and the dashboard talks to that set only.
    """

    PHOTOS = "photos"
    SEARCH = "search"

    @property
    def default_rovers(self) -> tuple[str, ...]:
        return PHOTO_ROVERS if self is ApiVariant.PHOTOS else SEARCH_ROVERS

    @property
    def gallery_limit(self) -> int:
        return PHOTO_GALLERY_LIMIT if self is ApiVariant.PHOTOS else SEARCH_GALLERY_LIMIT


def parse_variant(value: str | ApiVariant) -> ApiVariant:
    """Parse a variant name, raising :class:`MarsDashConfigError` when unknown."""
    if isinstance(value, ApiVariant):
        return value
    try:
        return ApiVariant(value.strip().lower())
    except ValueError as exc:
        choices = ", ".join(v.value for v in ApiVariant)
        raise MarsDashConfigError(f"Unknown API variant {value!r} (expected one of: {choices})") from exc


def _env_int(name: str, value: str) -> int:
    try:
        return int(value)
    except ValueError as exc:
        raise MarsDashConfigError(f"{name} must be an integer, got {value!r}") from exc


@dataclasses.dataclass(frozen=True)
class DashboardConfig:
    """Process configuration.

    Parameters
    ----------
    api_key : str
        NASA API key attached to every upstream request.
    variant : ApiVariant
        Endpoint set served by the proxy and consumed by the dashboard.
    host : str
        Interface the proxy binds to.
    port : int
        Port the proxy listens on.
    static_dir : Path
        Directory served at ``/`` by the proxy; the dashboard writes its
        rendered page here by default.
    proxy_url : str
        Base URL the dashboard uses to reach the proxy.
    nasa_api_url : str
        Base URL of the Mars Rover Photos / APOD API.
    images_api_url : str
        Base URL of the NASA Image and Video Library.
    user_name : str
        Display name stored in the dashboard state.
    rovers : tuple of str or None
        Selectable rovers. ``None`` uses the variant's default list.
    """

    api_key: str = DEFAULT_API_KEY
    variant: ApiVariant = ApiVariant.PHOTOS
    host: str = "0.0.0.0"
    port: int = DEFAULT_PORT
    static_dir: Path = Path("public")
    proxy_url: str = DEFAULT_PROXY_URL
    nasa_api_url: str = NASA_API_URL
    images_api_url: str = IMAGES_API_URL
    user_name: str = DEFAULT_USER_NAME
    rovers: tuple[str, ...] | None = None

    def __post_init__(self) -> None:
        object.__setattr__(self, "variant", parse_variant(self.variant))
        object.__setattr__(self, "static_dir", Path(self.static_dir))
        if not 0 < int(self.port) < 65536:
            raise MarsDashConfigError(f"port must be between 1 and 65535, got {self.port}")
        if self.rovers is not None:
            rovers = tuple(self.rovers)
            if not rovers:
                raise MarsDashConfigError("rovers must not be empty")
            object.__setattr__(self, "rovers", rovers)

    @property
    def rover_names(self) -> tuple[str, ...]:
        """Rovers offered by the dashboard, in display order."""
        return self.rovers if self.rovers is not None else self.variant.default_rovers

    @classmethod
    def from_env(cls, **overrides: Any) -> DashboardConfig:
        """Create configuration from environment variables.

        Reads ``NASA_API_KEY`` (falling back to ``API_KEY``) and the optional
        ``MARSDASH_*`` variables. Explicit keyword arguments override
        environment values.
        """
        env = os.environ
        # None means "not given", so CLI flags left unset fall through to the environment.
        overrides = {key: value for key, value in overrides.items() if value is not None}

        _ENV_CONFIG_MAP = {
            "MARSDASH_HOST": "host",
            "MARSDASH_STATIC_DIR": "static_dir",
            "MARSDASH_PROXY_URL": "proxy_url",
            "MARSDASH_NASA_API_URL": "nasa_api_url",
            "MARSDASH_IMAGES_API_URL": "images_api_url",
            "MARSDASH_USER_NAME": "user_name",
        }
        config_kwargs: dict[str, Any] = {}
        for env_key, field_name in _ENV_CONFIG_MAP.items():
            val = env.get(env_key)
            if val is not None:
                config_kwargs[field_name] = val

        api_key = env.get("NASA_API_KEY") or env.get("API_KEY")
        if api_key:
            config_kwargs["api_key"] = api_key.strip()

        variant_env = env.get("MARSDASH_VARIANT")
        if variant_env is not None and "variant" not in overrides:
            config_kwargs["variant"] = parse_variant(variant_env)

        port_env = env.get("MARSDASH_PORT")
        if port_env is not None and "port" not in overrides:
            config_kwargs["port"] = _env_int("MARSDASH_PORT", port_env)

        rovers_env = env.get("MARSDASH_ROVERS")
        if rovers_env is not None and "rovers" not in overrides:
            config_kwargs["rovers"] = tuple(name.strip() for name in rovers_env.split(",") if name.strip())

        config_kwargs.update(overrides)

        return cls(**config_kwargs)
