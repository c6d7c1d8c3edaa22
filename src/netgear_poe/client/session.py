"""Authenticated session for Netgear POE switches."""

from __future__ import annotations

import logging
import threading
import time
from collections.abc import Callable
from typing import TypeVar

from netgear_poe.client.auth import authenticate
from netgear_poe.client.detect import detect_dialect
from netgear_poe.client.errors import (
    AuthenticationFailedError,
    AuthenticationRejectedError,
    CacheReadError,
    ChallengeUnavailableError,
    SessionExpiredError,
    UnreachableHostError,
)
from netgear_poe.client.http import NetgearHTTP
from netgear_poe.client.token_cache import FileTokenCache, TokenCache
from netgear_poe.config import SwitchConfig
from netgear_poe.model.session import ModelDialect, SessionToken
from netgear_poe.parser.login import is_login_page
from netgear_poe.vendor.netgear.dialects import profile_for

logger = logging.getLogger(__name__)

T = TypeVar("T")

# Login failures worth another attempt after a short pause.
_TRANSIENT_LOGIN_ERRORS: tuple[type[Exception], ...] = (
    UnreachableHostError,
    ChallengeUnavailableError,
)

_host_locks: dict[str, threading.RLock] = {}
_host_locks_guard = threading.Lock()


def host_lock(host: str) -> threading.RLock:
    """Return the process-wide lock serialising logins/operations for *host*."""
    with _host_locks_guard:
        lock = _host_locks.get(host)
        if lock is None:
            lock = _host_locks[host] = threading.RLock()
        return lock


class NetgearSession:
    """Runs switch requests under a cached, self-healing session.

    Adds to :class:`.NetgearHTTP`:
    - Dialect detection (once per session, or taken from the cached token).
    - Token reuse across processes via a :class:`TokenCache`.
    - A single transparent re-login when the switch answers with its login
      page; a second rejection raises :exc:`AuthenticationFailedError`.
    - Bounded backoff for transient failures of the password login.

    Args:
        config: Host, password and timeouts.
        cache: Token cache (default: :class:`FileTokenCache` in ``config.token_dir``).
        http: Transport to use (default: a new :class:`NetgearHTTP`).
    """

    def __init__(
        self,
        config: SwitchConfig,
        cache: TokenCache | None = None,
        http: NetgearHTTP | None = None,
    ) -> None:
        self._config: SwitchConfig = config
        self._cache: TokenCache = cache if cache is not None else FileTokenCache(config.token_dir)
        self._http: NetgearHTTP = (
            http if http is not None else NetgearHTTP(config.host, timeout_s=config.timeout_s)
        )
        self._dialect: ModelDialect | None = None
        self._lock: threading.RLock = host_lock(config.host)

    # ------------------------------------------------------------------
    # Properties
    # ------------------------------------------------------------------

    @property
    def host(self) -> str:
        return self._config.host

    @property
    def dialect(self) -> ModelDialect:
        """Login dialect of the switch, from the cached token or detected on first use."""
        if self._dialect is None:
            self._cached_token()
        if self._dialect is None:
            self._dialect = detect_dialect(self._http)
            logger.debug("%s speaks the %s dialect", self.host, self._dialect.value)
        return self._dialect

    # ------------------------------------------------------------------
    # Authentication
    # ------------------------------------------------------------------

    def login(self, force: bool = False) -> SessionToken:
        """Return a usable session token, logging in if necessary.

        Args:
            force: Discard any cached token and log in again.

        Raises:
            AuthenticationRejectedError: If the switch rejects the password.
            UnreachableHostError: If the switch stays unreachable.
            CacheWriteError: If the new token cannot be cached.
        """
        with self._lock:
            token = self._cached_token()
            if token is None:
                return self._login()
            if not force:
                return token
            self._cache.remove(self.host)
            return self._login(token.model)

    def logout(self) -> None:
        """Forget the cached token for this host (no request is sent)."""
        with self._lock:
            self._cache.remove(self.host)

    # ------------------------------------------------------------------
    # Operation wrapper
    # ------------------------------------------------------------------

    def run(self, operation: Callable[[SessionToken], T]) -> T:
        """Run *operation* with a valid session token.

        A cached token is used optimistically.  If *operation* raises
        :exc:`SessionExpiredError` the token is dropped, a new one obtained
        and *operation* run exactly once more.

        Args:
            operation: Performs one switch request with the token it is given.

        Returns:
            Whatever *operation* returns.

        Raises:
            SessionExpiredError: If a session obtained by this call is refused
                straight away (no retry).
            AuthenticationFailedError: If the session is still refused after
                re-authenticating.
        """
        with self._lock:
            token = self._cached_token()
            if token is None:
                token = self._login()
                try:
                    return operation(token)
                except SessionExpiredError:
                    self._cache.remove(self.host)
                    raise

            try:
                return operation(token)
            except SessionExpiredError as exc:
                logger.info("Session for %s expired (%s); logging in again", self.host, exc.path)
                self._cache.remove(self.host)

            try:
                # Single attempt; backoff applies to the initial login only.
                token = self._login(token.model, backoff=())
                return operation(token)
            except (SessionExpiredError, AuthenticationRejectedError) as exc:
                self._cache.remove(self.host)
                raise AuthenticationFailedError(
                    f"Re-authentication with {self.host} failed: {exc}"
                ) from exc

    # ------------------------------------------------------------------
    # Public request methods
    # ------------------------------------------------------------------

    def get(self, path: str, params: dict[str, str] | None = None) -> str:
        """Perform an authenticated GET and return the response text."""

        def _request(token: SessionToken) -> str:
            query, cookies = profile_for(token.model).attach(token, params)
            resp = self._http.get(path, params=query, cookies=cookies)
            return self._check_page(path, resp.text)

        return self.run(_request)

    def post(self, path: str, data: dict[str, str] | None = None) -> str:
        """Perform an authenticated form POST and return the response text."""

        def _request(token: SessionToken) -> str:
            form, cookies = profile_for(token.model).attach(token, data)
            resp = self._http.post_form(path, data=form, cookies=cookies)
            return self._check_page(path, resp.text)

        return self.run(_request)

    def close(self) -> None:
        """Close the underlying HTTP session; the cached token is kept."""
        self._http.close()

    def __enter__(self) -> NetgearSession:
        return self

    def __exit__(self, *args: object) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _check_page(self, path: str, html: str) -> str:
        if is_login_page(html):
            raise SessionExpiredError(self.host, path)
        return html

    def _cached_token(self) -> SessionToken | None:
        try:
            token = self._cache.get(self.host)
        except CacheReadError as exc:
            logger.warning("Ignoring unreadable token cache entry: %s", exc)
            return None
        if token is not None:
            self._dialect = token.model
        return token

    def _login(
        self,
        dialect: ModelDialect | None = None,
        backoff: tuple[float, ...] | None = None,
    ) -> SessionToken:
        """Authenticate and cache the new token.

        Transient failures are retried after each delay in *backoff*
        (default: the configured login backoff; ``()`` means one attempt).
        """
        delays = self._config.login_backoff_s if backoff is None else backoff
        attempt = 0
        while True:
            try:
                token = authenticate(
                    self._http,
                    dialect or self.dialect,
                    self._config.password,
                )
                break
            except _TRANSIENT_LOGIN_ERRORS as exc:
                if attempt >= len(delays):
                    raise
                logger.debug(
                    "Login to %s failed (%s); retrying in %.1fs", self.host, exc, delays[attempt]
                )
                time.sleep(delays[attempt])
                attempt += 1

        self._cache.put(self.host, token)
        self._dialect = token.model
        logger.info("Logged in to %s", self.host)
        return token
