"""Root settings model for calltrack configuration."""

from typing import Any, Literal

from pydantic import Field
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
)

LogLevel = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
LogFormat = Literal["json", "console"]

# TOML config picked up by the settings source below
_toml_config: dict[str, Any] = {}


def set_toml_config(config: dict[str, Any]) -> None:
    """Set the TOML configuration to be used by Settings."""
    global _toml_config
    _toml_config = config


class TomlConfigSettingsSource(PydanticBaseSettingsSource):
    """Settings source that reads from the loaded TOML configuration."""

    def get_field_value(
        self, field: Any, field_name: str  # noqa: ARG002
    ) -> tuple[Any, str, bool]:
        value = _toml_config.get(field_name)
        return value, field_name, value is not None

    def __call__(self) -> dict[str, Any]:
        return _toml_config.copy()


class Settings(BaseSettings):
    """calltrack configuration.

    Configuration is loaded in this order:
    1. Pydantic model defaults (in code)
    2. calltrack.toml (or the file named by CALLTRACK_CONFIG)
    3. calltrack.{CALLTRACK_ENV}.toml (environment overrides)
    4. CALLTRACK_* environment variables (runtime overrides)
    """

    model_config = SettingsConfigDict(
        env_prefix="CALLTRACK_",
        env_nested_delimiter="__",
        case_sensitive=False,
        extra="ignore",
    )

    log_level: LogLevel = Field(default="INFO", description="Logging level")
    log_format: LogFormat = Field(
        default="console", description="Log renderer: json or console"
    )
    configure_logging: bool = Field(
        default=False,
        description="Let the pytest plugin configure structlog on startup",
    )
    copy_payloads: bool = Field(
        default=True,
        description="Deep-copy arguments and return values captured by track_with",
    )
    max_repr_length: int = Field(
        default=200,
        gt=0,
        description="Longest payload repr written to logs and debug dumps",
    )
    metrics_enabled: bool = Field(default=True, description="Record Prometheus metrics")

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type[BaseSettings],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,  # noqa: ARG003
        file_secret_settings: PydanticBaseSettingsSource,  # noqa: ARG003
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        """Customize settings sources to include TOML config.

        Priority order (highest to lowest):
        1. init_settings (constructor arguments)
        2. env_settings (CALLTRACK_* environment variables)
        3. toml_settings (calltrack*.toml files)
        4. (defaults from model)
        """
        return (
            init_settings,
            env_settings,
            TomlConfigSettingsSource(settings_cls),
        )
