"""Switch connection settings and password resolution."""

from __future__ import annotations

import logging
import os
import pathlib
import re
from collections.abc import Mapping
from dataclasses import dataclass

from netgear_poe.client.errors import NetgearConfigError

logger = logging.getLogger(__name__)

# Per-host password, e.g. NETGEAR_PASSWORD_192_168_1_10 or NETGEAR_PASSWORD_SWITCH_A
PASSWORD_ENV_PREFIX: str = "NETGEAR_PASSWORD_"
# Multi-switch list: "host1=password1;host2=password2"
SWITCHES_ENV: str = "NETGEAR_SWITCHES"
TOKEN_DIR_ENV: str = "NETGEAR_TOKEN_DIR"

_NON_ALNUM_RE: re.Pattern[str] = re.compile(r"[^A-Z0-9]")


@dataclass(frozen=True)
class SwitchConfig:
    """Everything needed to hold a session with one switch.

    Attributes:
        host: Switch address; opaque, also used as the token cache key.
        password: Plaintext admin password.
        timeout_s: Timeout for every HTTP exchange, in seconds.
        token_dir: Token cache directory (``None`` for ``~/.netgear``).
        login_backoff_s: Delays between password-login attempts that failed
            with a transient (network / missing seed) error.
    """

    host: str
    password: str
    timeout_s: float = 30.0
    token_dir: pathlib.Path | None = None
    login_backoff_s: tuple[float, ...] = (0.2, 0.5, 1.0)

    def __post_init__(self) -> None:
        if not self.host:
            raise NetgearConfigError("host must not be empty")
        if self.timeout_s <= 0:
            raise NetgearConfigError(f"timeout_s must be positive, got {self.timeout_s!r}")

    def __repr__(self) -> str:
        return (
            f"SwitchConfig(host={self.host!r}, password='***', timeout_s={self.timeout_s!r}, "
            f"token_dir={self.token_dir!r}, login_backoff_s={self.login_backoff_s!r})"
        )

    @classmethod
    def from_env(
        cls,
        host: str,
        environ: Mapping[str, str] | None = None,
        timeout_s: float = 30.0,
    ) -> SwitchConfig:
        """Build a config for *host* with the password taken from the environment.

        Raises:
            NetgearConfigError: If no password is configured for *host*.
        """
        env = os.environ if environ is None else environ
        token_dir = env.get(TOKEN_DIR_ENV)
        return cls(
            host=host,
            password=resolve_password(host, env),
            timeout_s=timeout_s,
            token_dir=pathlib.Path(token_dir) if token_dir else None,
        )


def password_env_name(host: str) -> str:
    """Return the per-host password variable name for *host*."""
    return PASSWORD_ENV_PREFIX + _NON_ALNUM_RE.sub("_", host.upper())


def resolve_password(host: str, environ: Mapping[str, str] | None = None) -> str:
    """Look up the password for *host*.

    ``NETGEAR_PASSWORD_<HOST>`` wins over an entry in ``NETGEAR_SWITCHES``.

    Raises:
        NetgearConfigError: If neither variable provides a password.
    """
    env = os.environ if environ is None else environ

    name = password_env_name(host)
    password = env.get(name)
    if password:
        logger.debug("Using password from %s", name)
        return password

    for entry in env.get(SWITCHES_ENV, "").split(";"):
        entry_host, sep, entry_password = entry.strip().partition("=")
        if sep and entry_host.strip() == host and entry_password:
            logger.debug("Using password for %s from %s", host, SWITCHES_ENV)
            return entry_password

    raise NetgearConfigError(
        f"No password configured for {host!r}; set {name} "
        f'or {SWITCHES_ENV}="{host}=<password>;..."'
    )
