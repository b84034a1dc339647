"""Configuration management for classgallery.

Values come from environment variables first and Streamlit secrets second,
so the same code runs locally with a ``.env``-style shell and on a hosted
Streamlit deployment with ``secrets.toml``.
"""

import os
from typing import Any

import streamlit as st

from .logging_config import get_logger

logger = get_logger(__name__)

# Older deployments were configured with the hosted backend's own variable names.
KEY_ALIASES = {
    "BACKEND_URL": ("SUPABASE_URL",),
    "BACKEND_API_KEY": ("SUPABASE_ANON_KEY",),
}

DEFAULT_LOCAL_STORE_PATH = "data/classgallery.duckdb"
DEFAULT_UPLOAD_BASE_URL = "https://api.cloudinary.com/v1_1"


class Config:
    """Centralized configuration management using environment variables."""

    def __init__(self):
        self._cache = {}

    def _lookup(self, key: str) -> Any:
        value = os.getenv(key)

        if value is None:
            try:
                value = st.secrets.get(key)
            except Exception:  # nosec B110
                # No secrets file, or not running inside Streamlit
                pass

        return value

    def get(self, key: str, default: Any = None, cast_type: type = str) -> Any:
        """Get configuration value from environment variables or Streamlit secrets.

        Args:
            key: Configuration key
            default: Default value if not found
            cast_type: Type to cast the value to (str, int, bool, float)

        Returns:
            Configuration value cast to the specified type
        """
        cache_key = f"{key}:{cast_type.__name__}"
        if cache_key in self._cache:
            return self._cache[cache_key]

        value = self._lookup(key)
        for alias in KEY_ALIASES.get(key, ()):
            if value is not None:
                break
            value = self._lookup(alias)

        if value is None:
            value = default

        if value is not None:
            try:
                if cast_type is bool:
                    if isinstance(value, str):
                        value = value.lower() in ("true", "1", "yes", "on")  # type: ignore[assignment]
                    else:
                        value = bool(value)  # type: ignore[assignment]
                elif cast_type is not str:
                    value = cast_type(value)
                else:
                    value = str(value)
            except (ValueError, TypeError) as e:
                logger.warning("config_cast_failed", key=key, cast_type=cast_type.__name__, error=str(e))
                value = default

        self._cache[cache_key] = value
        return value

    def clear_cache(self):
        """Clear configuration cache."""
        self._cache.clear()


_config: Config | None = None


def get_config() -> Config:
    """Get the global configuration instance."""
    global _config
    if _config is None:
        _config = Config()
    return _config


def get_env(key: str, default: Any = None, cast_type: type = str) -> Any:
    """Get a configuration value with type casting."""
    return get_config().get(key, default, cast_type)


def get_backend_url() -> str:
    """Get the remote table backend URL (empty when unset)."""
    return str(get_env("BACKEND_URL", "")).rstrip("/")


def get_backend_api_key() -> str:
    """Get the remote table backend API key (empty when unset)."""
    return str(get_env("BACKEND_API_KEY", ""))


def get_backend_timeout() -> float:
    """Get the timeout in seconds for backend requests."""
    return float(get_env("BACKEND_TIMEOUT", 10.0, float))


def get_admin_credentials() -> tuple[str, str]:
    """Get the admin username and password."""
    return str(get_env("ADMIN_USERNAME", "admin")), str(get_env("ADMIN_PASSWORD", "admin123"))


def get_default_storage_credentials() -> tuple[str, str]:
    """Get the deployment-wide default media host credentials (may be empty)."""
    return str(get_env("CLOUDINARY_CLOUD_NAME", "")), str(get_env("CLOUDINARY_UPLOAD_PRESET", ""))


def get_upload_base_url() -> str:
    """Get the media host upload API base URL."""
    return str(get_env("UPLOAD_BASE_URL", DEFAULT_UPLOAD_BASE_URL)).rstrip("/")


def get_upload_timeout() -> float:
    """Get the timeout in seconds for media host uploads."""
    return float(get_env("UPLOAD_TIMEOUT", 300.0, float))


def get_local_store_path() -> str:
    """Get the path of the local fallback store."""
    return str(get_env("LOCAL_STORE_PATH", DEFAULT_LOCAL_STORE_PATH))


def get_live_refresh_seconds() -> int:
    """Get the polling interval for live dashboard refresh (0 disables it)."""
    return int(get_env("LIVE_REFRESH_SECONDS", 15, int))


def get_debug_mode() -> bool:
    """Get debug mode setting. Only an explicit DEBUG turns it on."""
    return get_env("DEBUG", False, bool)
