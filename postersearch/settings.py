#!/usr/bin/env python3.13
from __future__ import annotations
import json
import os
from dataclasses import dataclass
from typing import Any

BASE_DIR = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
DEFAULT_SETTINGS_PATH = os.path.join(BASE_DIR, "data", "settings.json")
DEFAULT_SERVER = "news.i2pn2.org"
DEFAULT_PORT = 119


def load_env(path: str = ".env") -> None:
    if not os.path.exists(path):
        return
    with open(path, "r", encoding="utf-8") as handle:
        for raw in handle:
            line = raw.strip()
            if not line or line.startswith("#") or "=" not in line:
                continue
            key, value = line.split("=", 1)
            os.environ.setdefault(key.strip(), value.strip())


def settings_path() -> str:
    return os.environ.get("POSTERSEARCH_SETTINGS_PATH", DEFAULT_SETTINGS_PATH)


def load_settings() -> dict:
    path = settings_path()
    if not os.path.exists(path):
        return {}
    try:
        with open(path, "r", encoding="utf-8") as handle:
            data = json.load(handle)
    except (OSError, json.JSONDecodeError):
        return {}
    if isinstance(data, dict):
        return data
    return {}


def _coerce_bool(value: Any, default: bool = False) -> bool:
    if value is None:
        return default
    if isinstance(value, bool):
        return value
    return str(value).strip().lower() in {"1", "true", "yes", "y"}


def _coerce_int(value: Any, default: int) -> int:
    if value is None:
        return default
    try:
        return int(value)
    except (TypeError, ValueError):
        return default


def get_setting(key: str, default: Any = None) -> Any:
    settings = load_settings()
    if key in settings and settings[key] not in {None, ""}:
        return settings[key]
    return os.environ.get(key, default)


def get_bool_setting(key: str, default: bool = False) -> bool:
    settings = load_settings()
    if key in settings:
        return _coerce_bool(settings[key], default)
    return _coerce_bool(os.environ.get(key), default)


def get_int_setting(key: str, default: int) -> int:
    settings = load_settings()
    if key in settings:
        return _coerce_int(settings[key], default)
    return _coerce_int(os.environ.get(key), default)


def get_float_setting(key: str, default: float | None = None) -> float | None:
    value = get_setting(key)
    if value in {None, ""}:
        return default
    try:
        return float(value)
    except (TypeError, ValueError):
        return default


@dataclass(frozen=True)
class SearchConfig:
    """Everything one search run needs, built once at the command line boundary."""

    poster: str
    server: str = DEFAULT_SERVER
    port: int = DEFAULT_PORT
    group: str = ""
    days: int = 0
    exact: bool = False
    username: str = ""
    password: str = ""
    use_ssl: bool = False
    timeout: float | None = None

    @property
    def has_credentials(self) -> bool:
        return bool(self.username) and bool(self.password)


def default_connection_settings() -> dict[str, Any]:
    """Connection defaults from the settings file, falling back to the environment."""
    return {
        "server": get_setting("NNTP_HOST") or DEFAULT_SERVER,
        "port": get_int_setting("NNTP_PORT", DEFAULT_PORT),
        "username": get_setting("NNTP_USER") or "",
        "password": get_setting("NNTP_PASS") or "",
        "use_ssl": get_bool_setting("NNTP_SSL"),
        "timeout": get_float_setting("NNTP_TIMEOUT"),
    }
