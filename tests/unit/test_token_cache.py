"""Unit tests for netgear_poe.client.token_cache."""

from __future__ import annotations

import pathlib
import stat

import pytest

from netgear_poe.client.errors import CacheReadError, CacheWriteError
from netgear_poe.client.token_cache import FileTokenCache, MemoryTokenCache, host_key
from netgear_poe.model.session import ModelDialect, SessionToken

HOST = "switch-a"
TOK1 = SessionToken(model=ModelDialect.GAMBIT_FORM, token="tok1")
TOK2 = SessionToken(model=ModelDialect.GAMBIT_FORM, token="tok2")


@pytest.fixture
def cache(tmp_path: pathlib.Path) -> FileTokenCache:
    return FileTokenCache(tmp_path / "tokens")


# ---------------------------------------------------------------------------
# host_key
# ---------------------------------------------------------------------------

def test_host_key_is_fixed_width_hex() -> None:
    key = host_key("192.168.1.10")
    assert len(key) == 8
    int(key, 16)


def test_host_key_is_deterministic() -> None:
    assert host_key(HOST) == host_key(HOST)
    assert host_key("switch-a") != host_key("switch-b")


# ---------------------------------------------------------------------------
# FileTokenCache
# ---------------------------------------------------------------------------

def test_get_missing_returns_none(cache: FileTokenCache) -> None:
    assert cache.get(HOST) is None


def test_put_then_get_returns_same_pair(cache: FileTokenCache) -> None:
    token = SessionToken(model=ModelDialect.LEGACY_COOKIE, token="K^tecASx`wB\\aw")
    cache.put(HOST, token)
    assert cache.get(HOST) == token


def test_put_overwrites_previous_entry(cache: FileTokenCache) -> None:
    cache.put(HOST, TOK1)
    cache.put(HOST, TOK2)
    assert cache.get(HOST) == TOK2
    assert list(cache.token_dir.iterdir()) == [cache.path_for(HOST)]


def test_remove_then_get_returns_none(cache: FileTokenCache) -> None:
    cache.put(HOST, TOK1)
    cache.remove(HOST)
    assert cache.get(HOST) is None


def test_remove_missing_is_ignored(cache: FileTokenCache) -> None:
    cache.remove(HOST)  # must not raise


def test_entries_are_per_host(cache: FileTokenCache) -> None:
    cache.put("switch-a", TOK1)
    cache.put("switch-b", TOK2)
    cache.remove("switch-a")
    assert cache.get("switch-a") is None
    assert cache.get("switch-b") == TOK2


# "plumless" and "buckeroo" have the same CRC-32.
COLLIDING = ("plumless", "buckeroo")


def test_colliding_hosts_share_a_key() -> None:
    assert host_key(COLLIDING[0]) == host_key(COLLIDING[1])


def test_colliding_host_does_not_read_foreign_token(cache: FileTokenCache) -> None:
    first, second = COLLIDING
    cache.put(first, SessionToken(ModelDialect.LEGACY_COOKIE, "SECRET-A"))
    assert cache.get(second) is None
    assert cache.get(first) == SessionToken(ModelDialect.LEGACY_COOKIE, "SECRET-A")


def test_colliding_host_put_takes_entry_over(cache: FileTokenCache) -> None:
    first, second = COLLIDING
    cache.put(first, TOK1)
    cache.put(second, TOK2)
    assert cache.get(second) == TOK2
    assert cache.get(first) is None


def test_colliding_host_remove_keeps_foreign_entry(cache: FileTokenCache) -> None:
    first, second = COLLIDING
    cache.put(first, TOK1)
    cache.remove(second)
    assert cache.get(first) == TOK1


def test_entry_without_host_raises_read_error(cache: FileTokenCache) -> None:
    cache.token_dir.mkdir(parents=True)
    cache.path_for(HOST).write_text('{"model": "gambit", "token": "tok1"}')
    with pytest.raises(CacheReadError):
        cache.get(HOST)


def test_remove_deletes_corrupt_entry(cache: FileTokenCache) -> None:
    cache.token_dir.mkdir(parents=True)
    cache.path_for(HOST).write_text("{not json")
    cache.remove(HOST)
    assert not cache.path_for(HOST).exists()


def test_put_creates_owner_only_directory_and_file(cache: FileTokenCache) -> None:
    cache.put(HOST, TOK1)
    assert stat.S_IMODE(cache.token_dir.stat().st_mode) == 0o700
    assert stat.S_IMODE(cache.path_for(HOST).stat().st_mode) == 0o600


def test_entry_file_format(cache: FileTokenCache) -> None:
    cache.put(HOST, TOK1)
    path = cache.path_for(HOST)
    assert path.name == f"token-{host_key(HOST)}.json"
    assert path.read_text() == '{"host": "switch-a", "model": "gambit", "token": "tok1"}'


def test_corrupt_entry_raises_read_error(cache: FileTokenCache) -> None:
    cache.token_dir.mkdir(parents=True)
    cache.path_for(HOST).write_text("{not json")
    with pytest.raises(CacheReadError):
        cache.get(HOST)


def test_unknown_model_raises_read_error(cache: FileTokenCache) -> None:
    cache.token_dir.mkdir(parents=True)
    cache.path_for(HOST).write_text('{"host": "switch-a", "model": "GS999", "token": "x"}')
    with pytest.raises(CacheReadError):
        cache.get(HOST)


def test_empty_token_raises_read_error(cache: FileTokenCache) -> None:
    cache.token_dir.mkdir(parents=True)
    cache.path_for(HOST).write_text('{"host": "switch-a", "model": "legacy", "token": ""}')
    with pytest.raises(CacheReadError):
        cache.get(HOST)


def test_put_into_unusable_directory_raises_write_error(tmp_path: pathlib.Path) -> None:
    blocker = tmp_path / "not-a-dir"
    blocker.write_text("")
    cache = FileTokenCache(blocker)
    with pytest.raises(CacheWriteError) as exc_info:
        cache.put(HOST, TOK1)
    assert exc_info.value.host == HOST


def test_failed_put_leaves_previous_entry(cache: FileTokenCache, monkeypatch: pytest.MonkeyPatch) -> None:
    cache.put(HOST, TOK1)

    def _fail(*args: object) -> None:
        raise OSError("disk full")

    monkeypatch.setattr("netgear_poe.client.token_cache.os.replace", _fail)
    with pytest.raises(CacheWriteError):
        cache.put(HOST, TOK2)
    assert cache.get(HOST) == TOK1
    assert list(cache.token_dir.iterdir()) == [cache.path_for(HOST)]


# ---------------------------------------------------------------------------
# MemoryTokenCache
# ---------------------------------------------------------------------------

def test_memory_cache_contract() -> None:
    cache = MemoryTokenCache()
    assert cache.get(HOST) is None
    cache.put(HOST, TOK1)
    cache.put(HOST, TOK2)
    assert cache.get(HOST) == TOK2
    cache.remove(HOST)
    cache.remove(HOST)
    assert cache.get(HOST) is None


# ---------------------------------------------------------------------------
# SessionToken
# ---------------------------------------------------------------------------

def test_session_token_repr_masks_value() -> None:
    token = SessionToken(model=ModelDialect.LEGACY_COOKIE, token="supersecret1234")
    assert "supersecret" not in repr(token)
    assert "1234" in repr(token)
