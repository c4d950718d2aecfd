import logging
import os
from typing import Annotated, Any

from pydantic import AliasChoices, BeforeValidator, Field, field_validator, model_validator
from pydantic_settings import (
    BaseSettings,
    PydanticBaseSettingsSource,
    SettingsConfigDict,
    TomlConfigSettingsSource,
)

from arealink.config.area_config import AreaConfig
from arealink.config.defaults import get_default_areas
from arealink.const import DEFAULT_REFRESH_INTERVAL_SECONDS, LOG_LEVELS
from arealink.exceptions import HostRequiredError, IPV6NotSupportedError
from arealink.logging_ import enable_logging

# set up logging as early as possible
LOG_LEVEL = (os.getenv("AREALINK__LOG_LEVEL") or os.getenv("LOG_LEVEL") or "INFO").upper()

try:
    enable_logging(LOG_LEVEL)  # pyright: ignore[reportArgumentType]
except ValueError:
    enable_logging("INFO")

LOGGER = logging.getLogger(__name__)


class ArealinkConfig(BaseSettings):
    """Configuration for arealink."""

    model_config = SettingsConfigDict(
        env_prefix="arealink__",
        env_file=[".env", "./config/.env"],
        toml_file=["arealink.toml", "./config/arealink.toml"],
        env_ignore_empty=True,
        extra="ignore",
        env_nested_delimiter="__",
        validate_by_name=True,
        use_attribute_docstrings=True,
    )

    @classmethod
    def settings_customise_sources(
        cls,
        settings_cls: type["BaseSettings"],
        init_settings: PydanticBaseSettingsSource,
        env_settings: PydanticBaseSettingsSource,
        dotenv_settings: PydanticBaseSettingsSource,
        file_secret_settings: PydanticBaseSettingsSource,
    ) -> tuple[PydanticBaseSettingsSource, ...]:
        return (
            init_settings,
            env_settings,
            dotenv_settings,
            file_secret_settings,
            TomlConfigSettingsSource(settings_cls),
        )

    log_level: Annotated[LOG_LEVELS, BeforeValidator(str.upper)] = Field(default="INFO")
    """Logging level for arealink."""

    # Home Assistant connection

    host: str = Field(
        default=...,
        validation_alias=AliasChoices("host", "arealink__host", "home_assistant_host"),
    )
    """Host (and optional port) of the Home Assistant instance, e.g. 'homeassistant.local:8123'."""

    token: str = Field(
        default=...,
        validation_alias=AliasChoices("token", "arealink__token", "home_assistant_token"),
    )
    """Long-lived access token for the Home Assistant instance."""

    secure: bool = Field(
        default=False,
        validation_alias=AliasChoices("secure", "arealink__secure", "home_assistant_secure"),
    )
    """Whether to connect with TLS (wss://)."""

    refresh_interval_seconds: int | float = Field(default=DEFAULT_REFRESH_INTERVAL_SECONDS, gt=0)
    """Interval between full registry refreshes."""

    websocket_connection_timeout_seconds: int | float = Field(default=5)
    """Length of time to wait for the WebSocket connection to open. Passed to aiohttp."""

    websocket_heartbeat_interval_seconds: int | float = Field(default=30)
    """Interval to send ping messages to keep the WebSocket connection alive. Passed to aiohttp."""

    task_cancellation_timeout_seconds: int | float = Field(default=5)
    """Length of time to wait for background tasks to cancel on close."""

    # Dashboard configuration

    areas: list[AreaConfig] = Field(default_factory=lambda: [AreaConfig(**a) for a in get_default_areas()])
    """Areas exposed to adapters, along with their sensor entity ids."""

    # Service log levels

    websocket_log_level: Annotated[LOG_LEVELS, BeforeValidator(str.upper)] = Field(
        default_factory=lambda data: data.get("log_level", "INFO")
    )
    """Logging level for the WebSocket client. Defaults to INFO or the value of log_level."""

    data_manager_log_level: Annotated[LOG_LEVELS, BeforeValidator(str.upper)] = Field(
        default_factory=lambda data: data.get("log_level", "INFO")
    )
    """Logging level for the data manager. Defaults to INFO or the value of log_level."""

    @property
    def available_area_ids(self) -> list[str]:
        """Return the configured area ids, in configuration order."""
        return [area.area_id for area in self.areas]

    @property
    def truncated_token(self) -> str:
        """Return a truncated version of the token for display purposes."""
        return f"{self.token[:6]}...{self.token[-6:]}"

    def get_area_config(self, area_id: str) -> AreaConfig | None:
        """Return the configuration for an area, or None if it is not configured."""
        return next((area for area in self.areas if area.area_id == area_id), None)

    @field_validator("host", mode="before")
    @classmethod
    def validate_host(cls, value: Any) -> Any:
        if not isinstance(value, str):
            return value
        return normalize_host(value)

    @field_validator("areas", mode="after")
    @classmethod
    def validate_areas(cls, values: list[AreaConfig]) -> list[AreaConfig]:
        seen: set[str] = set()
        for area in values:
            if area.area_id in seen:
                raise ValueError(f"Area '{area.area_id}' is configured more than once")
            seen.add(area.area_id)
        return values

    @model_validator(mode="after")
    def log_config(self) -> "ArealinkConfig":
        LOGGER.debug("Connecting to %s (secure=%s) with token %s", self.host, self.secure, self.truncated_token)
        LOGGER.debug("Configured areas: %s", self.available_area_ids)
        return self

    def model_post_init(self, context: Any):
        enable_logging(self.log_level)


def normalize_host(host: str) -> str:
    """Strip an optional scheme and trailing slash from a host string.

    Args:
        host (str): The configured host, e.g. 'homeassistant.local:8123' or 'http://10.0.0.2:8123/'.

    Returns:
        str: The bare host with optional port.

    Raises:
        HostRequiredError: If the host is empty.
        IPV6NotSupportedError: If the host is an IPv6 address.
    """
    host = host.strip()
    for scheme in ("https://", "http://", "wss://", "ws://"):
        if host.lower().startswith(scheme):
            host = host[len(scheme) :]
            break
    host = host.rstrip("/")

    if not host:
        raise HostRequiredError("host must be set in the configuration.")

    if "::" in host or host.startswith("["):
        raise IPV6NotSupportedError("IPv6 addresses are not supported for the host.")

    return host
