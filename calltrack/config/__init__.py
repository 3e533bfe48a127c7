"""Configuration loading for calltrack.

Configuration is read from an optional TOML file with environment variable
overrides.

Usage:
    from calltrack.config import get_settings

    settings = get_settings()
    if settings.copy_payloads:
        ...
"""

from functools import lru_cache

from calltrack.config.loader import load_config
from calltrack.config.settings import Settings, set_toml_config


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    """Get the singleton settings instance.

    The result is cached for the lifetime of the process.
    Call `get_settings.cache_clear()` or `reload_settings()` to reload.
    """
    config_dict = load_config()
    set_toml_config(config_dict)

    return Settings()


def reload_settings() -> Settings:
    """Clear the settings cache and reload configuration."""
    get_settings.cache_clear()
    return get_settings()


__all__ = ["get_settings", "reload_settings", "Settings"]
