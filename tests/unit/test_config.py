"""Unit tests for netgear_poe.config and netgear_poe.utils.render."""

from __future__ import annotations

import dataclasses
import pathlib

import pytest

from netgear_poe.client.errors import NetgearConfigError
from netgear_poe.config import SwitchConfig, password_env_name, resolve_password
from netgear_poe.model.session import ModelDialect, SessionToken
from netgear_poe.utils.render import render_session

# ---------------------------------------------------------------------------
# password_env_name / resolve_password
# ---------------------------------------------------------------------------

@pytest.mark.parametrize(
    ("host", "expected"),
    [
        ("192.168.1.10", "NETGEAR_PASSWORD_192_168_1_10"),
        ("switch-a", "NETGEAR_PASSWORD_SWITCH_A"),
        ("tswitch1.lan", "NETGEAR_PASSWORD_TSWITCH1_LAN"),
    ],
)
def test_password_env_name(host: str, expected: str) -> None:
    assert password_env_name(host) == expected


def test_resolve_password_host_specific() -> None:
    env = {"NETGEAR_PASSWORD_SWITCH_A": "admin123"}
    assert resolve_password("switch-a", env) == "admin123"


def test_resolve_password_from_switch_list() -> None:
    env = {"NETGEAR_SWITCHES": "switch-b=other; switch-a=admin123;"}
    assert resolve_password("switch-a", env) == "admin123"


def test_resolve_password_keeps_equals_in_password() -> None:
    env = {"NETGEAR_SWITCHES": "switch-a=p=w"}
    assert resolve_password("switch-a", env) == "p=w"


def test_resolve_password_host_specific_wins() -> None:
    env = {
        "NETGEAR_PASSWORD_SWITCH_A": "specific",
        "NETGEAR_SWITCHES": "switch-a=listed",
    }
    assert resolve_password("switch-a", env) == "specific"


def test_resolve_password_missing_raises() -> None:
    with pytest.raises(NetgearConfigError) as exc_info:
        resolve_password("switch-a", {"NETGEAR_SWITCHES": "switch-b=x"})
    assert "NETGEAR_PASSWORD_SWITCH_A" in str(exc_info.value)


# ---------------------------------------------------------------------------
# SwitchConfig
# ---------------------------------------------------------------------------

def test_config_defaults() -> None:
    config = SwitchConfig(host="switch-a", password="pw")
    assert config.timeout_s == 30.0
    assert config.token_dir is None
    assert config.login_backoff_s == (0.2, 0.5, 1.0)


def test_config_frozen() -> None:
    config = SwitchConfig(host="switch-a", password="pw")
    with pytest.raises(dataclasses.FrozenInstanceError):
        config.host = "other"  # type: ignore[misc]


def test_config_repr_hides_password() -> None:
    assert "hunter2" not in repr(SwitchConfig(host="switch-a", password="hunter2"))


def test_config_rejects_empty_host() -> None:
    with pytest.raises(NetgearConfigError):
        SwitchConfig(host="", password="pw")


def test_config_rejects_non_positive_timeout() -> None:
    with pytest.raises(NetgearConfigError):
        SwitchConfig(host="switch-a", password="pw", timeout_s=0)


def test_config_from_env(tmp_path: pathlib.Path) -> None:
    env = {
        "NETGEAR_SWITCHES": "switch-a=admin123",
        "NETGEAR_TOKEN_DIR": str(tmp_path),
    }
    config = SwitchConfig.from_env("switch-a", environ=env, timeout_s=5.0)
    assert config.password == "admin123"
    assert config.token_dir == tmp_path
    assert config.timeout_s == 5.0


def test_config_from_env_reads_os_environ(monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.delenv("NETGEAR_SWITCHES", raising=False)
    monkeypatch.delenv("NETGEAR_TOKEN_DIR", raising=False)
    monkeypatch.setenv("NETGEAR_PASSWORD_SWITCH_A", "fromenv")
    config = SwitchConfig.from_env("switch-a")
    assert config.password == "fromenv"
    assert config.token_dir is None


# ---------------------------------------------------------------------------
# render_session
# ---------------------------------------------------------------------------

def test_render_session_with_token() -> None:
    token = SessionToken(model=ModelDialect.GAMBIT_FORM, token="abcdef123456")
    assert render_session("switch-a", token) == {
        "host": "switch-a",
        "authenticated": True,
        "dialect": "gambit",
        "token": "********3456",
    }


def test_render_session_without_token() -> None:
    assert render_session("switch-a", None) == {
        "host": "switch-a",
        "authenticated": False,
        "dialect": None,
        "token": None,
    }
