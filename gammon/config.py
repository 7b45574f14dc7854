# gammon/config.py

import os
from typing import Optional


def _env_bool(name: str, default: bool) -> bool:
    value = os.environ.get(name)
    if value is None:
        return default
    return value.strip().lower() in ("1", "true", "yes", "on")


def _env_float(name: str, default: float) -> float:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        return float(value)
    except ValueError:
        raise ValueError(f"{name} must be a number, got {value!r}")


def _env_int(name: str, default: int, minimum: Optional[int] = None) -> int:
    value = os.environ.get(name)
    if value is None or not value.strip():
        return default
    try:
        number = int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}")
    if minimum is not None and number < minimum:
        raise ValueError(f"{name} must be at least {minimum}, got {value!r}")
    return number


class Config:
    """Default settings. Every value can be overridden through a GAMMON_* environment variable."""

    # --- Move-choosing agent ---
    AGENT_URL = "http://localhost:3000/api/ai-move"
    AGENT_TIMEOUT = 30.0
    AGENT_LOG_FILE = ""

    # --- Engine ---
    DEBUG = False
    UNDO_DEPTH = 8

    # --- Logging ---
    LOG_LEVEL = "WARNING"

    @classmethod
    def from_env(cls) -> "Config":
        """Return a Config whose values are read from the environment, falling back to the defaults."""
        config = cls()
        config.AGENT_URL = os.environ.get("GAMMON_AGENT_URL", cls.AGENT_URL)
        config.AGENT_TIMEOUT = _env_float("GAMMON_AGENT_TIMEOUT", cls.AGENT_TIMEOUT)
        config.AGENT_LOG_FILE = os.environ.get("GAMMON_AGENT_LOG", cls.AGENT_LOG_FILE)
        config.DEBUG = _env_bool("GAMMON_DEBUG", cls.DEBUG)
        config.UNDO_DEPTH = _env_int("GAMMON_UNDO_DEPTH", cls.UNDO_DEPTH, minimum=1)
        config.LOG_LEVEL = os.environ.get("GAMMON_LOG_LEVEL", cls.LOG_LEVEL).upper()
        return config
