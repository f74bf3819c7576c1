"""Configuration management for hedgehog.

Loads and validates YAML-based configuration with Pydantic models.
Supports environment variable overrides for the device connection.
"""

from hedgehog.config.settings import Settings, load_settings

__all__ = ["Settings", "load_settings"]
