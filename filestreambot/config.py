"""Runtime configuration read from the environment and an optional env file."""

from __future__ import annotations

import logging
import os
import re
import socket
import urllib.request
from collections.abc import Mapping
from dataclasses import dataclass, field
from pathlib import Path

from dotenv import load_dotenv

log = logging.getLogger(__name__)

_DEFAULT_ENV_FILE = "fsb.env"
_DEFAULT_HASH_LENGTH = 6
_MIN_HASH_LENGTH = 5
_MAX_HASH_LENGTH = 32
_PUBLIC_IP_ENDPOINT = "https://api.ipify.org?format=text"
_PROBE_ADDRESS = ("8.8.8.8", 80)

_API_HASH_VAR = "API_HASH"
_BOT_TOKEN_VAR = "BOT_TOKEN"

_MULTI_TOKEN_RE = re.compile(r"MULTI_TOKEN\d+=(.*)")
_INT_RE = re.compile(r"[+-]?\d+")
_TRUE_WORDS = frozenset({"1", "t", "T", "TRUE", "true", "True"})
_FALSE_WORDS = frozenset({"0", "f", "F", "FALSE", "false", "False"})


@dataclass
class Config:
    """Settings the bot and the HTTP server run with."""

    api_id: int
    api_hash: str
    bot_token: str
    log_channel_id: int
    dev: bool = False
    port: int = 8080
    host: str = ""
    hash_length: int = _DEFAULT_HASH_LENGTH
    use_session_file: bool = True
    user_session: str = ""
    use_public_ip: bool = False
    allowed_users: list[int] = field(default_factory=list)
    multi_tokens: list[str] = field(default_factory=list)


def _parse_int(name: str, raw: str, bits: int) -> int:
    if not _INT_RE.fullmatch(raw):
        raise ValueError(f"{name}: invalid integer {raw!r}")
    value = int(raw)
    limit = 1 << (bits - 1)
    if not -limit <= value < limit:
        raise ValueError(f"{name}: value {raw!r} out of range")
    return value


def _parse_bool(name: str, raw: str) -> bool:
    if raw in _TRUE_WORDS:
        return True
    if raw in _FALSE_WORDS:
        return False
    raise ValueError(f"{name}: invalid boolean {raw!r}")


def parse_allowed_users(value: str) -> list[int]:
    """Parse a comma separated list of user ids; an empty string gives no ids."""
    if value == "":
        return []
    return [_parse_int("ALLOWED_USERS", part, 64) for part in value.split(",")]


def strip_int(value: int) -> int:
    """Drop the sign and the first "100" from a channel id, as in -100123 -> 123."""
    digits = str(abs(value)).replace("100", "", 1)
    if not digits:
        raise ValueError(f"cannot strip channel id {value}")
    return int(digits)


def clamp_hash_length(length: int) -> int:
    """Keep the link hash length within the range the server accepts."""
    if length == 0:
        log.info("HASH_LENGTH can't be 0, defaulting to %d", _DEFAULT_HASH_LENGTH)
        return _DEFAULT_HASH_LENGTH
    if length > _MAX_HASH_LENGTH:
        log.info("HASH_LENGTH can't be more than %d, changing to %d", _MAX_HASH_LENGTH, _MAX_HASH_LENGTH)
        return _MAX_HASH_LENGTH
    if length < _MIN_HASH_LENGTH:
        log.info("HASH_LENGTH can't be less than %d, defaulting to %d", _MIN_HASH_LENGTH, _DEFAULT_HASH_LENGTH)
        return _DEFAULT_HASH_LENGTH
    return length


def collect_multi_tokens(environ: Mapping[str, str]) -> list[str]:
    """Return the worker bot tokens given as MULTI_TOKEN<n> variables, in order."""
    tokens = []
    for key, value in environ.items():
        if not key.startswith("MULTI_TOKEN"):
            continue
        match = _MULTI_TOKEN_RE.search(f"{key}={value}")
        if match:
            tokens.append(match.group(1))
    return tokens


def load_env_file(path: str | os.PathLike[str] = _DEFAULT_ENV_FILE) -> bool:
    """Load variables from an env file without overriding existing ones.

    Returns False when the file does not exist.
    """
    env_path = Path(os.path.normpath(path))
    log.info("Trying to load ENV vars from %s", env_path)
    if not env_path.is_file():
        log.error("ENV file not found: %s", env_path)
        log.info("Please create %s file", env_path.name)
        log.info("Please ignore this message if you are hosting it in a service that sets the environment.")
        return False
    load_dotenv(dotenv_path=env_path, override=False)
    return True


def _internal_ip() -> str:
    try:
        with socket.socket(socket.AF_INET, socket.SOCK_DGRAM) as sock:
            sock.connect(_PROBE_ADDRESS)
            return sock.getsockname()[0]
    except OSError as exc:
        raise OSError("no internet connection") from exc


def _is_reachable(ip: str) -> bool:
    try:
        with socket.create_connection((ip, 80), timeout=5):
            return True
    except OSError:
        return False


def _public_ip() -> str:
    with urllib.request.urlopen(_PUBLIC_IP_ENDPOINT, timeout=10) as response:
        ip = response.read().decode()
    if not _is_reachable(ip):
        raise OSError("PORT is blocked by firewall")
    return ip


def get_ip(public: bool) -> str:
    """Return the public or the local address of this machine.

    Raises OSError when it cannot be found; callers fall back to "localhost".
    """
    ip = _public_ip() if public else _internal_ip()
    return ip or "localhost"


def load_config(environ: Mapping[str, str] | None = None) -> Config:
    """Build a Config from environment variables."""
    env = os.environ if environ is None else environ

    def value_of(name: str, default: str = "", required: bool = False) -> str:
        if name in env:
            return env[name]
        if required:
            raise ValueError(f"required key {name} missing value")
        return default

    def int_of(name: str, bits: int, default: str = "", required: bool = False) -> int:
        raw = value_of(name, default, required)
        return 0 if raw == "" else _parse_int(name, raw, bits)

    def bool_of(name: str, default: str) -> bool:
        raw = value_of(name, default)
        return False if raw == "" else _parse_bool(name, raw)

    config = Config(
        api_id=int_of("API_ID", 32, required=True),
        api_hash=value_of(_API_HASH_VAR, required=True),
        bot_token=value_of(_BOT_TOKEN_VAR, required=True),
        log_channel_id=int_of("LOG_CHANNEL", 64, required=True),
        dev=bool_of("DEV", "false"),
        port=int_of("PORT", 64, "8080"),
        host=value_of("HOST"),
        hash_length=int_of("HASH_LENGTH", 64, "6"),
        use_session_file=bool_of("USE_SESSION_FILE", "true"),
        user_session=value_of("USER_SESSION"),
        use_public_ip=bool_of("USE_PUBLIC_IP", "false"),
        allowed_users=parse_allowed_users(value_of("ALLOWED_USERS")),
    )

    if not config.host:
        try:
            ip = get_ip(config.use_public_ip)
            blocked = False
        except OSError as exc:
            log.error("Error while getting IP: %s", exc)
            ip = "localhost"
            blocked = True
        config.host = f"http://{ip}:{config.port}"
        if config.use_public_ip:
            if blocked:
                log.warning("Can't get public IP, using local IP")
            else:
                log.warning(
                    "You are using a public IP, please be aware of the security "
                    "risks while exposing your IP to the internet."
                )
                log.warning("Use 'HOST' variable to set a domain name")
        log.info("HOST not set, automatically set to %s", config.host)

    config.multi_tokens = collect_multi_tokens(env)
    config.log_channel_id = strip_int(config.log_channel_id)
    config.hash_length = clamp_hash_length(config.hash_length)
    log.info("Loaded config")
    return config