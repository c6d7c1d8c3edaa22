"""Custom exceptions for the netgear-poe client."""

from __future__ import annotations


class NetgearError(Exception):
    """Base exception for all netgear-poe errors."""


class NetgearConfigError(NetgearError):
    """Raised when the switch configuration (e.g. the password) cannot be resolved."""


class UnreachableHostError(NetgearError):
    """Raised when a network-level error occurs (connection refused, timeout, etc.)."""

    def __init__(self, url: str, cause: Exception) -> None:
        self.url = url
        self.cause = cause
        super().__init__(f"Request to {url!r} failed: {cause}")


class NetgearResponseError(UnreachableHostError):
    """Raised when the switch returns a non-2xx HTTP status code."""

    def __init__(self, status_code: int, url: str) -> None:
        self.status_code = status_code
        self.url = url
        self.cause = None
        NetgearError.__init__(self, f"HTTP {status_code} for {url!r}")


class UnrecognizedModelError(NetgearError):
    """Raised when the switch model (and so its login dialect) cannot be determined."""


class ChallengeUnavailableError(NetgearError):
    """Raised when the login page does not yield a ``rand`` seed value."""


class AuthenticationRejectedError(NetgearError):
    """Raised when the switch declines the submitted credential.

    The firmware does not distinguish a wrong password from other rejection
    causes, so this is terminal and never retried.
    """


class SessionExpiredError(NetgearError):
    """Raised when the switch answers an authenticated request with its login page."""

    def __init__(self, host: str, path: str) -> None:
        self.host = host
        self.path = path
        super().__init__(f"Session for {host!r} is no longer accepted (at {path!r})")


class AuthenticationFailedError(NetgearError):
    """Raised when re-authentication after a :exc:`SessionExpiredError` also fails."""


class TokenCacheError(NetgearError):
    """Base exception for token cache storage problems."""

    def __init__(self, host: str, path: str, cause: Exception) -> None:
        self.host = host
        self.path = path
        self.cause = cause
        super().__init__(f"Token cache entry {path!r} for {host!r}: {cause}")


class CacheReadError(TokenCacheError):
    """Raised when a cached token exists but cannot be read or decoded."""


class CacheWriteError(TokenCacheError):
    """Raised when a token cannot be written to (or removed from) the cache."""
