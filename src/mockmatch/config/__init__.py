"""Configuration management."""

from mockmatch.config.loader import ConfigError, load_config
from mockmatch.config.settings import Settings

__all__ = ["ConfigError", "Settings", "load_config"]
