"""Application settings."""

from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field

from mockmatch.loader.preload import DEFAULT_PATTERNS
from mockmatch.models import LoadErrorPolicy, OutputFormat


class Settings(BaseModel):
  """Application configuration."""

  model_config = ConfigDict(use_enum_values=False)

  rules_dir: Path = Path("default_routes")
  patterns: list[str] = Field(default_factory=lambda: list(DEFAULT_PATTERNS))
  on_error: LoadErrorPolicy = LoadErrorPolicy.ABORT
  format: OutputFormat = OutputFormat.TERMINAL
  explain: bool = False
