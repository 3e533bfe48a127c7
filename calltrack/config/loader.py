"""TOML configuration loader with deep merge support."""

import os
import tomllib
from pathlib import Path
from typing import Any

CONFIG_FILE_NAME = "calltrack.toml"


def get_config_path() -> Path | None:
    """Get the path of the base configuration file.

    The path can be set with the CALLTRACK_CONFIG env var, in which case the
    file must exist. Otherwise ``calltrack.toml`` in the current directory is
    used when present.

    Returns:
        Path to the TOML file, or None when there is none
    """
    config_path_env = os.environ.get("CALLTRACK_CONFIG")
    if config_path_env:
        path = Path(config_path_env)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path_env}")
        return path

    default = Path.cwd() / CONFIG_FILE_NAME
    if default.exists():
        return default
    return None


def get_environment() -> str | None:
    """Get the current environment from CALLTRACK_ENV, if set."""
    return os.environ.get("CALLTRACK_ENV") or None


def load_toml(file_path: Path) -> dict[str, Any]:
    """Load a TOML file and return its contents as a dictionary.

    Args:
        file_path: Path to the TOML file

    Returns:
        Dictionary containing the TOML data

    Raises:
        FileNotFoundError: If the file doesn't exist
        tomllib.TOMLDecodeError: If the TOML syntax is invalid
    """
    if not file_path.exists():
        raise FileNotFoundError(f"Configuration file not found: {file_path}")

    with file_path.open("rb") as f:
        return tomllib.load(f)


def deep_merge(base: dict[str, Any], override: dict[str, Any]) -> dict[str, Any]:
    """Deep merge two dictionaries, with override taking precedence.

    For nested dictionaries, values are merged recursively.
    For other values, override replaces base.
    """
    result = base.copy()

    for key, value in override.items():
        if (
            key in result
            and isinstance(result[key], dict)
            and isinstance(value, dict)
        ):
            result[key] = deep_merge(result[key], value)
        else:
            result[key] = value

    return result


def load_config() -> dict[str, Any]:
    """Load configuration from TOML files.

    Loading order:
    1. the base file (CALLTRACK_CONFIG or ./calltrack.toml, optional)
    2. calltrack.{CALLTRACK_ENV}.toml next to it (optional)

    Returns:
        Merged configuration dictionary, empty when no file is found
    """
    config_path = get_config_path()
    if config_path is None:
        return {}

    config = load_toml(config_path)

    env = get_environment()
    if env:
        env_path = config_path.with_name(f"{config_path.stem}.{env}.toml")
        if env_path.exists():
            config = deep_merge(config, load_toml(env_path))

    return config
