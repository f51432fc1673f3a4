import os
import socket

import pytest

from filestreambot.config import (
    Config,
    clamp_hash_length,
    collect_multi_tokens,
    get_ip,
    load_config,
    load_env_file,
    parse_allowed_users,
    strip_int,
)


def _base_env(**extra):
    env = {
        "API_ID": "12345",
        "API_HASH": "placeholder",
        "BOT_TOKEN": "token",
        "LOG_CHANNEL": "-1009876543210",
        "HOST": "https://files.example.com",
    }
    env.update(extra)
    return env


class _BrokenSocket:
    def __init__(self, *args, **kwargs):
        raise OSError("network down")


def test_parse_allowed_users_empty():
    assert parse_allowed_users("") == []


def test_parse_allowed_users_values():
    assert parse_allowed_users("1,2,3") == [1, 2, 3]
    assert parse_allowed_users("-5") == [-5]


@pytest.mark.parametrize("raw", ["1,a", "1, 2", "1,,2", "99999999999999999999"])
def test_parse_allowed_users_invalid(raw):
    with pytest.raises(ValueError):
        parse_allowed_users(raw)


def test_strip_int_removes_channel_prefix():
    assert strip_int(-1009876543210) == 9876543210


def test_strip_int_without_prefix_keeps_value():
    assert strip_int(123) == 123
    assert strip_int(-123) == 123


def test_strip_int_only_first_occurrence():
    assert strip_int(100100) == 100


def test_strip_int_nothing_left():
    with pytest.raises(ValueError):
        strip_int(100)


@pytest.mark.parametrize(
    "given, expected",
    [(0, 6), (40, 32), (33, 32), (4, 6), (-3, 6), (5, 5), (32, 32), (10, 10)],
)
def test_clamp_hash_length(given, expected):
    assert clamp_hash_length(given) == expected


def test_collect_multi_tokens_in_order():
    environ = {"MULTI_TOKEN1": "token", "PATH": "/bin", "MULTI_TOKEN2": "secret"}
    assert collect_multi_tokens(environ) == ["token", "secret"]


def test_collect_multi_tokens_skips_non_numbered():
    environ = {"MULTI_TOKEN_TXT_FILE": "tokens.txt", "MULTI_TOKEN7": "token"}
    assert collect_multi_tokens(environ) == ["token"]


def test_collect_multi_tokens_none():
    assert collect_multi_tokens({"HOME": "/root"}) == []


def test_load_config_defaults():
    config = load_config(_base_env())
    assert config == Config(
        api_id=12345,
        api_hash="placeholder",
        bot_token="token",
        log_channel_id=9876543210,
        dev=False,
        port=8080,
        host="https://files.example.com",
        hash_length=6,
        use_session_file=True,
        user_session="",
        use_public_ip=False,
        allowed_users=[],
        multi_tokens=[],
    )


def test_load_config_overrides():
    env = _base_env(
        DEV="true",
        PORT="9000",
        HASH_LENGTH="50",
        USE_SESSION_FILE="0",
        ALLOWED_USERS="7,8",
        MULTI_TOKEN1="token",
    )
    config = load_config(env)
    assert config.dev is True
    assert config.port == 9000
    assert config.hash_length == 32
    assert config.use_session_file is False
    assert config.allowed_users == [7, 8]
    assert config.multi_tokens == ["token"]


def test_load_config_empty_values_are_zero():
    config = load_config(_base_env(USE_SESSION_FILE="", HASH_LENGTH=""))
    assert config.use_session_file is False
    assert config.hash_length == 6


@pytest.mark.parametrize("missing", ["API_ID", "API_HASH", "BOT_TOKEN", "LOG_CHANNEL"])
def test_load_config_required(missing):
    env = _base_env()
    del env[missing]
    with pytest.raises(ValueError, match=missing):
        load_config(env)


@pytest.mark.parametrize(
    "key, raw",
    [("PORT", "abc"), ("API_ID", "3000000000"), ("DEV", "yes"), ("PORT", " 80")],
)
def test_load_config_invalid_values(key, raw):
    with pytest.raises(ValueError):
        load_config(_base_env(**{key: raw}))


def test_get_ip_without_network(monkeypatch):
    monkeypatch.setattr(socket, "socket", _BrokenSocket)
    with pytest.raises(OSError):
        get_ip(False)


def test_load_config_host_falls_back_to_localhost(monkeypatch):
    monkeypatch.setattr(socket, "socket", _BrokenSocket)
    env = _base_env(PORT="9000")
    del env["HOST"]
    config = load_config(env)
    assert config.host == "http://localhost:9000"


def test_load_env_file_sets_variables(tmp_path, monkeypatch):
    monkeypatch.delenv("FSB_TEST_VALUE", raising=False)
    env_file = tmp_path / "fsb.env"
    env_file.write_text("FSB_TEST_VALUE=hello\n")
    assert load_env_file(env_file) is True
    assert os.environ["FSB_TEST_VALUE"] == "hello"


def test_load_env_file_does_not_override(tmp_path, monkeypatch):
    monkeypatch.setenv("FSB_TEST_VALUE", "kept")
    env_file = tmp_path / "fsb.env"
    env_file.write_text("FSB_TEST_VALUE=replaced\n")
    assert load_env_file(env_file) is True
    assert os.environ["FSB_TEST_VALUE"] == "kept"


def test_load_env_file_missing(tmp_path):
    assert load_env_file(tmp_path / "absent.env") is False