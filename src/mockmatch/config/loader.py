"""Configuration file loading."""

from pathlib import Path

import yaml
from pydantic import ValidationError

from mockmatch.config.settings import Settings
from mockmatch.models import LoadErrorPolicy, OutputFormat

CONFIG_FILENAMES = [".mockmatch.yaml", ".mockmatch.yml", "mockmatch.yaml", "mockmatch.yml"]


class ConfigError(ValueError):
  """Config file could not be parsed or holds invalid values."""


def _find_config_file(config_path: Path | None = None) -> Path | None:
  """Find config file path, or None if no config exists."""
  if config_path:
    return config_path

  for filename in CONFIG_FILENAMES:
    path = Path.cwd() / filename
    if path.exists():
      return path

  return None


def load_config(config_path: Path | None = None) -> Settings:
  """Load configuration from file or defaults.

  Raises:
    FileNotFoundError: If an explicit config path does not exist.
  """
  path = _find_config_file(config_path)
  if path:
    return _load_from_file(path)
  return Settings()


def _load_from_file(path: Path) -> Settings:
  """Load settings from a YAML file."""
  if not path.exists():
    raise FileNotFoundError(f"Config file not found: {path}")

  with open(path) as f:
    try:
      data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
      raise ConfigError(f"Invalid config file {path}: {e}") from e

  return _parse_config(data)


def _parse_config(data: dict) -> Settings:
  """Parse config dict into Settings.

  Raises:
    ConfigError: If a value is not valid for its setting.
  """
  try:
    if "on_error" in data:
      data["on_error"] = LoadErrorPolicy(data["on_error"])

    if "format" in data:
      data["format"] = OutputFormat(data["format"])

    if "rules_dir" in data:
      data["rules_dir"] = Path(data["rules_dir"])

    return Settings(**data)
  except (ValueError, TypeError, ValidationError) as e:
    raise ConfigError(f"Invalid config: {e}") from e
