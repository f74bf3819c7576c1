"""Configuration management for hedgehog.

Loads settings from a YAML configuration file with environment variable
overrides (``HEDGEHOG_CONNECTION__HOST=...``). Supports .env files.
"""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import BaseModel, Field
from pydantic_settings import BaseSettings, DotEnvSettingsSource, EnvSettingsSource

from hedgehog.domain.models import DEFAULT_PORT, DeviceAddress
from hedgehog.session.tcp import SEND_TIMEOUT

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path("config/hedgehog.yaml")


class ConnectionConfig(BaseModel):
    host: str = Field(default="127.0.0.1", min_length=1)
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    send_timeout: float = Field(default=SEND_TIMEOUT, gt=0)
    connect_timeout: float | None = Field(
        default=None, gt=0, description="Seconds to wait for connect; None waits indefinitely"
    )

    def address(self, host: str | None = None, port: int | None = None) -> DeviceAddress:
        """Device address from this config, with optional overrides."""
        return DeviceAddress(host=host or self.host, port=port or self.port)


class LoggingConfig(BaseModel):
    level: str = Field(default="INFO")
    format: str = Field(default="(%(asctime)s) > %(message)s")
    datefmt: str = Field(default="%H:%M:%S")
    file: str | None = Field(default=None)


class Settings(BaseSettings):
    """Root configuration for the hedgehog client.

    Loads from YAML file and supports environment variable overrides.
    Reads .env files automatically.
    """

    model_config = {
        "env_prefix": "HEDGEHOG_",
        "env_nested_delimiter": "__",
        "env_file": ".env",
        "env_file_encoding": "utf-8",
        "extra": "ignore",
    }

    connection: ConnectionConfig = Field(default_factory=ConnectionConfig)
    logging: LoggingConfig = Field(default_factory=LoggingConfig)


def load_settings(config_path: Path | str | None = None) -> Settings:
    """Load settings from YAML + .env + environment variables.

    Priority: env vars > .env file > YAML file > defaults
    """
    path = Path(config_path) if config_path else DEFAULT_CONFIG_PATH

    yaml_data = {}
    if path.exists():
        with open(path) as f:
            yaml_data = yaml.safe_load(f) or {}
        logger.info("Loaded configuration from %s", path)
    else:
        logger.warning("Config file %s not found, using defaults + env vars", path)

    # Init kwargs outrank every other source, so layer .env and env on top
    # of the YAML values before handing them over
    _merge_into(yaml_data, DotEnvSettingsSource(Settings)())
    _merge_into(yaml_data, EnvSettingsSource(Settings)())

    return Settings(**yaml_data)


def _merge_into(base: dict, overrides: dict) -> None:
    """Recursively copy ``overrides`` into ``base``, section by section."""
    for key, value in overrides.items():
        if isinstance(value, dict) and isinstance(base.get(key), dict):
            _merge_into(base[key], value)
        else:
            base[key] = value
