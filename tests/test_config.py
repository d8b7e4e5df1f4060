"""Tests for configuration loading."""

import tempfile
from pathlib import Path

import pytest
from mockmatch.config.loader import ConfigError, _parse_config, load_config
from mockmatch.config.settings import Settings
from mockmatch.models import LoadErrorPolicy, OutputFormat


class TestSettings:
  def test_default_settings(self) -> None:
    settings = Settings()
    assert settings.rules_dir == Path("default_routes")
    assert settings.patterns == ["*.json", "*.yaml", "*.yml"]
    assert settings.on_error == LoadErrorPolicy.ABORT
    assert settings.format == OutputFormat.TERMINAL
    assert settings.explain is False

  def test_custom_settings(self) -> None:
    settings = Settings(
      rules_dir=Path("fixtures"),
      on_error=LoadErrorPolicy.SKIP,
      format=OutputFormat.JSON,
    )
    assert settings.rules_dir == Path("fixtures")
    assert settings.on_error == LoadErrorPolicy.SKIP
    assert settings.format == OutputFormat.JSON


class TestConfigLoader:
  def test_load_default_config(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    settings = load_config()
    assert settings == Settings()

  def test_load_from_file(self) -> None:
    config_content = """
rules_dir: fixtures/routes
patterns:
  - "*.yaml"
on_error: skip
format: markdown
explain: true
"""
    with tempfile.NamedTemporaryFile(
      mode="w", suffix=".yaml", delete=False
    ) as f:
      f.write(config_content)
      f.flush()

      settings = load_config(Path(f.name))
      assert settings.rules_dir == Path("fixtures/routes")
      assert settings.patterns == ["*.yaml"]
      assert settings.on_error == LoadErrorPolicy.SKIP
      assert settings.format == OutputFormat.MARKDOWN
      assert settings.explain is True

  def test_discovers_config_in_cwd(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    (tmp_path / ".mockmatch.yaml").write_text("format: json\n")
    monkeypatch.chdir(tmp_path)

    assert load_config().format == OutputFormat.JSON

  def test_missing_explicit_config(self, tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
      load_config(tmp_path / "missing.yaml")

  def test_empty_config_file(self, tmp_path: Path) -> None:
    path = tmp_path / "mockmatch.yaml"
    path.write_text("")

    assert load_config(path) == Settings()

  def test_parse_config_with_enums(self) -> None:
    settings = _parse_config({"on_error": "abort", "format": "terminal"})
    assert settings.on_error == LoadErrorPolicy.ABORT
    assert settings.format == OutputFormat.TERMINAL

  def test_parse_config_rejects_unknown_policy(self) -> None:
    with pytest.raises(ConfigError, match="retry"):
      _parse_config({"on_error": "retry"})

  def test_parse_config_rejects_invalid_setting(self) -> None:
    with pytest.raises(ConfigError):
      _parse_config({"explain": "sometimes"})

  def test_invalid_yaml(self, tmp_path: Path) -> None:
    path = tmp_path / "mockmatch.yaml"
    path.write_text("format: [unclosed\n")

    with pytest.raises(ConfigError, match="Invalid config file"):
      load_config(path)
