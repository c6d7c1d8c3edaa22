"""Per-host session token storage.

Entries carry no expiry; a token is assumed valid until an operation proves
otherwise, at which point the caller removes it.
"""

from __future__ import annotations

import json
import logging
import os
import pathlib
import tempfile
import threading
import zlib
from typing import Protocol

from netgear_poe.client.errors import CacheReadError, CacheWriteError
from netgear_poe.model.session import ModelDialect, SessionToken

logger = logging.getLogger(__name__)

DEFAULT_TOKEN_DIR: pathlib.Path = pathlib.Path.home() / ".netgear"


class TokenCache(Protocol):
    """Interface shared by all token caches."""

    def get(self, host: str) -> SessionToken | None: ...

    def put(self, host: str, token: SessionToken) -> None: ...

    def remove(self, host: str) -> None: ...


def host_key(host: str) -> str:
    """Return the fixed-width cache key for *host* (CRC-32, 8 hex digits)."""
    return f"{zlib.crc32(host.encode('utf-8')) & 0xFFFFFFFF:08x}"


class FileTokenCache:
    """Token cache backed by one small JSON file per host.

    Files live in *token_dir* (created ``0700``) and are named
    ``token-<crc32>.json``; each holds ``{"host": ..., "model": ..., "token": ...}``.
    Hosts whose keys collide share a file; an entry written for a different
    host reads as absent, and the next ``put`` takes the file over.
    Writes go to a temp file in the same directory which is then renamed
    over the entry, so readers never see a partial file.

    Args:
        token_dir: Directory holding the token files (default ``~/.netgear``).
    """

    def __init__(self, token_dir: pathlib.Path | str | None = None) -> None:
        self.token_dir: pathlib.Path = (
            pathlib.Path(token_dir) if token_dir is not None else DEFAULT_TOKEN_DIR
        )

    def path_for(self, host: str) -> pathlib.Path:
        """Return the path of the cache entry for *host*."""
        return self.token_dir / f"token-{host_key(host)}.json"

    def get(self, host: str) -> SessionToken | None:
        """Return the cached token for *host*, or ``None`` if there is none.

        Raises:
            CacheReadError: If the entry exists but cannot be read or decoded.
        """
        path = self.path_for(host)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            return None
        except OSError as exc:
            raise CacheReadError(host, str(path), exc) from exc

        try:
            data = json.loads(raw)
            if data["host"] != host:
                # Another host with the same key owns this file.
                logger.debug("Token cache entry %s belongs to another host", path)
                return None
            token = SessionToken(model=ModelDialect(data["model"]), token=str(data["token"]))
        except (ValueError, KeyError, TypeError) as exc:
            raise CacheReadError(host, str(path), exc) from exc
        if not token.token:
            raise CacheReadError(host, str(path), ValueError("empty token"))
        return token

    def put(self, host: str, token: SessionToken) -> None:
        """Store *token* for *host*, replacing any previous entry.

        Raises:
            CacheWriteError: If the directory or file cannot be written.
        """
        path = self.path_for(host)
        payload = json.dumps({"host": host, "model": token.model.value, "token": token.token})
        try:
            self.token_dir.mkdir(mode=0o700, parents=True, exist_ok=True)
            fd, tmp_name = tempfile.mkstemp(
                prefix=f".{path.name}.", suffix=".tmp", dir=self.token_dir
            )
            try:
                with os.fdopen(fd, "w", encoding="utf-8") as fh:
                    fh.write(payload)
                os.chmod(tmp_name, 0o600)
                os.replace(tmp_name, path)
            except BaseException:
                pathlib.Path(tmp_name).unlink(missing_ok=True)
                raise
        except OSError as exc:
            raise CacheWriteError(host, str(path), exc) from exc
        logger.debug("Cached %s session token for %s in %s", token.model.value, host, path)

    def remove(self, host: str) -> None:
        """Delete the entry for *host*; a missing entry is not an error.

        An entry stored for a colliding host is left in place.

        Raises:
            CacheWriteError: If an existing entry cannot be deleted.
        """
        path = self.path_for(host)
        if self._owner(path) not in (None, host):
            logger.debug("Not removing %s, it belongs to another host", path)
            return
        try:
            path.unlink()
        except FileNotFoundError:
            return
        except OSError as exc:
            raise CacheWriteError(host, str(path), exc) from exc
        logger.debug("Removed cached session token for %s", host)

    @staticmethod
    def _owner(path: pathlib.Path) -> str | None:
        """Host recorded in the entry at *path*; ``None`` if absent or unreadable."""
        try:
            data = json.loads(path.read_text(encoding="utf-8"))
            return str(data["host"])
        except (OSError, ValueError, KeyError, TypeError):
            return None


class MemoryTokenCache:
    """In-process token cache with the same contract as :class:`FileTokenCache`."""

    def __init__(self) -> None:
        self._tokens: dict[str, SessionToken] = {}
        self._lock = threading.Lock()

    def get(self, host: str) -> SessionToken | None:
        with self._lock:
            return self._tokens.get(host)

    def put(self, host: str, token: SessionToken) -> None:
        with self._lock:
            self._tokens[host] = token

    def remove(self, host: str) -> None:
        with self._lock:
            self._tokens.pop(host, None)
