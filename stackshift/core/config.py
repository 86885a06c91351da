# stackshift/core/config.py
from __future__ import annotations

import os
from dataclasses import dataclass

from dotenv import load_dotenv

_settings: Settings | None = None

load_dotenv(override=False)

DEFAULT_MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB
DEFAULT_MAX_TOTAL_SIZE = 100 * 1024 * 1024  # 100MB


@dataclass(frozen=True)
class Settings:
    max_file_size: int = DEFAULT_MAX_FILE_SIZE
    max_total_size: int = DEFAULT_MAX_TOTAL_SIZE
    log_level: str = "WARNING"
    default_target: str = "typescript"


def _int_env(name: str, default: int) -> int:
    raw = os.getenv(name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{name} must be > 0, got {value}")
    return value


def load_settings() -> Settings:
    """Reads STACKSHIFT_* variables (a .env file is honored) into Settings."""
    return Settings(
        max_file_size=_int_env("STACKSHIFT_MAX_FILE_SIZE", DEFAULT_MAX_FILE_SIZE),
        max_total_size=_int_env("STACKSHIFT_MAX_TOTAL_SIZE", DEFAULT_MAX_TOTAL_SIZE),
        log_level=(os.getenv("STACKSHIFT_LOG_LEVEL") or "WARNING").upper(),
        default_target=os.getenv("STACKSHIFT_DEFAULT_TARGET") or "typescript",
    )


def get_settings() -> Settings:
    """
    Returns the process-wide Settings singleton, loading it on first use.
    """
    global _settings
    if _settings is None:
        _settings = load_settings()
    return _settings
