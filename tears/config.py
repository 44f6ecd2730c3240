"""Configuration management for tears."""

from __future__ import annotations

import os
from dataclasses import dataclass

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 8000
DEFAULT_MAX_SESSIONS = 1000

_ENV_PREFIX = "TEARS_"
_TRUE_VALUES = {"1", "true", "yes", "on"}


@dataclass
class Settings:
    host: str = DEFAULT_HOST
    port: int = DEFAULT_PORT
    reload: bool = False
    log_level: str = "info"
    base_url: str = f"http://localhost:{DEFAULT_PORT}"
    max_sessions: int = DEFAULT_MAX_SESSIONS

    @classmethod
    def load(cls, overrides: dict | None = None) -> Settings:
        """Load settings from the environment, then apply CLI overrides."""
        settings = cls()

        env = {
            key[len(_ENV_PREFIX):].lower(): value
            for key, value in os.environ.items()
            if key.startswith(_ENV_PREFIX)
        }
        if "url" in env:
            env["base_url"] = env.pop("url")
        settings = cls._apply_dict(settings, env)

        if overrides:
            settings = cls._apply_dict(
                settings, {k: v for k, v in overrides.items() if v is not None}
            )

        return settings

    @classmethod
    def _apply_dict(cls, settings: Settings, data: dict) -> Settings:
        if "host" in data:
            settings.host = str(data["host"])
        if "port" in data:
            settings.port = _to_int("port", data["port"])
        if "reload" in data:
            value = data["reload"]
            if isinstance(value, str):
                value = value.strip().lower() in _TRUE_VALUES
            settings.reload = bool(value)
        if "log_level" in data:
            settings.log_level = str(data["log_level"]).lower()
        if "base_url" in data:
            settings.base_url = str(data["base_url"]).rstrip("/")
        if "max_sessions" in data:
            settings.max_sessions = _to_int("max_sessions", data["max_sessions"])
        return settings


def _to_int(name: str, value: object) -> int:
    try:
        return int(value)
    except (TypeError, ValueError):
        raise ValueError(f"Invalid {name}: {value!r}") from None
