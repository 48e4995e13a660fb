"""Environment helpers for runtime configuration."""

import os
from functools import lru_cache
from pathlib import Path
from typing import Optional

from config.generation_config import DEFAULT_API_URL, DEFAULT_HTTP_TIMEOUT

APP_DIR_NAME = ".stable-diffusion-desktop"


@lru_cache
def is_dev_mode() -> bool:
    """Return True when the app runs in development mode."""
    value = os.environ.get("SDD_ENV") or os.environ.get("SDD_DEV_MODE")
    if not value:
        return False
    normalized = value.strip().lower()
    return normalized in {"dev", "development", "1", "true", "yes"}


def get_data_dir() -> Path:
    """Directory holding the settings file and logs (SDD_DATA_DIR overrides)."""
    override = os.environ.get("SDD_DATA_DIR", "").strip()
    if override:
        return Path(override).expanduser()
    return Path.home() / APP_DIR_NAME


def get_api_url() -> str:
    value = os.environ.get("SDD_STABILITY_API_URL", "").strip()
    return value or DEFAULT_API_URL


def get_http_timeout() -> float:
    """Timeout in seconds for the generation request; invalid values fall back to the default."""
    value: Optional[str] = os.environ.get("SDD_HTTP_TIMEOUT")
    if not value:
        return DEFAULT_HTTP_TIMEOUT
    try:
        timeout = float(value.strip())
    except ValueError:
        return DEFAULT_HTTP_TIMEOUT
    return timeout if timeout > 0 else DEFAULT_HTTP_TIMEOUT


__all__ = ["is_dev_mode", "get_data_dir", "get_api_url", "get_http_timeout"]
