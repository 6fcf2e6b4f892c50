"""JSON-over-HTTP transport shared by the proxy and the dashboard."""

from __future__ import annotations

import json
import logging
from collections.abc import Mapping
from typing import Any, Protocol

import aiohttp

from marsdash._constants import USER_AGENT
from marsdash._redact import redact_for_log, redact_url
from marsdash.exceptions import TransportError

_logger = logging.getLogger(__name__)


class Transport(Protocol):
    """Structural transport interface used by endpoint modules.

    Having a protocol here makes it easy to pass test doubles while keeping
    the production implementation (`JsonTransport`) concrete.
    """

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        ...


class JsonTransport:
    """Issue one GET per call and decode the JSON body.

    Any failure (transport error, non-2xx status, body that is not JSON) is
    raised as *error_cls*, a :class:`TransportError` subclass chosen by the
    caller so the proxy and the dashboard can tell their failures apart.
    """

    def __init__(
        self,
        base_url: str,
        http_session: aiohttp.ClientSession,
        *,
        error_cls: type[TransportError] = TransportError,
        default_params: Mapping[str, str] | None = None,
    ) -> None:
        self._base_url = base_url.rstrip("/")
        self._http = http_session
        self._error_cls = error_cls
        self._default_params = dict(default_params or {})

    @property
    def base_url(self) -> str:
        return self._base_url

    async def get_json(self, endpoint: str, params: Mapping[str, str] | None = None) -> Any:
        query = {**(params or {}), **self._default_params}
        url = f"{self._base_url}{endpoint}"
        headers = {
            "accept": "application/json",
            "user-agent": USER_AGENT,
        }

        _logger.debug("GET %s params=%s", url, redact_for_log(query))

        try:
            async with self._http.get(url, params=query or None, headers=headers) as resp:
                raw = await resp.read()
                if not 200 <= resp.status < 300:
                    raise self._error_cls(
                        f"HTTP {resp.status} from {endpoint}: {raw[:200].decode('utf-8', 'replace')}",
                        status_code=resp.status,
                        endpoint=endpoint,
                        reason=f"API request failed with status {resp.status}",
                    )
                status = resp.status
                _logger.debug("HTTP %s from %s (%d bytes)", status, redact_url(str(resp.url)), len(raw))
        except TransportError:
            raise
        except (aiohttp.ClientError, TimeoutError) as exc:
            raise self._error_cls(
                f"Request to {endpoint} failed: {str(exc) or type(exc).__name__}",
                endpoint=endpoint,
                reason=f"API request failed: {type(exc).__name__}",
            ) from exc

        try:
            result = json.loads(raw.decode("utf-8"))
        except (UnicodeDecodeError, json.JSONDecodeError) as exc:
            raise self._error_cls(
                f"Invalid JSON from {endpoint}: {raw[:200].decode('utf-8', 'replace')}",
                status_code=status,
                endpoint=endpoint,
                reason="API response was not valid JSON",
            ) from exc

        return result
