"""Plain HTTP transport to a Netgear switch's web interface."""

from __future__ import annotations

import http.cookiejar
import importlib.metadata
import logging
from typing import Any

import requests

from netgear_poe.client.errors import NetgearResponseError, UnreachableHostError

logger = logging.getLogger(__name__)

try:
    _VERSION: str = importlib.metadata.version("netgear-poe")
except importlib.metadata.PackageNotFoundError:
    _VERSION = "0.0.0"

_USER_AGENT: str = f"netgear-poe/{_VERSION}"


def _normalise_base_url(host: str) -> str:
    """Turn a bare host or URL into ``scheme://host`` without a trailing slash."""
    host = host.rstrip("/")
    if "://" not in host:
        host = f"http://{host}"
    return host


class NetgearHTTP:
    """Thin :class:`requests.Session` wrapper bound to one switch.

    Every request carries our ``User-Agent`` and a finite timeout.  Transport
    failures surface as :exc:`UnreachableHostError`, non-2xx answers as
    :exc:`NetgearResponseError`.  The cookie jar accepts nothing, so the
    only cookies sent are the ones passed to :meth:`get`/:meth:`post_form`.

    Args:
        host: Switch address, e.g. ``192.168.1.10`` or ``http://switch-a``.
        timeout_s: Per-request timeout in seconds.
    """

    def __init__(self, host: str, timeout_s: float = 30.0) -> None:
        self.base_url: str = _normalise_base_url(host)
        self.timeout_s: float = timeout_s
        self._session: requests.Session = requests.Session()
        self._session.headers["User-Agent"] = _USER_AGENT
        # A stored SID would be sent alongside the explicit one.
        self._session.cookies.set_policy(http.cookiejar.DefaultCookiePolicy(allowed_domains=[]))

    def get(
        self,
        path: str,
        params: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ) -> requests.Response:
        """GET *path* with optional query *params* and one-off *cookies*."""
        return self._send("GET", path, params=params, cookies=cookies)

    def post_form(
        self,
        path: str,
        data: dict[str, str] | None = None,
        cookies: dict[str, str] | None = None,
    ) -> requests.Response:
        """POST *data* form-encoded to *path*, with one-off *cookies*."""
        return self._send("POST", path, data=data, cookies=cookies)

    def close(self) -> None:
        self._session.close()

    def __enter__(self) -> NetgearHTTP:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    def _send(self, method: str, path: str, **kwargs: Any) -> requests.Response:
        url = self.base_url + path
        logger.debug("%s %s", method, url)
        try:
            resp = self._session.request(method, url, timeout=self.timeout_s, **kwargs)
        except requests.exceptions.RequestException as exc:
            raise UnreachableHostError(url, exc) from exc
        if not resp.ok:
            raise NetgearResponseError(resp.status_code, resp.url)
        return resp
