"""CLI interface using Typer."""

import asyncio
import json
import os
import traceback
from contextlib import contextmanager
from pathlib import Path
from typing import Iterator, Optional

import typer
from rich.console import Console
from rich.markup import escape

from mockmatch import __version__
from mockmatch.config import ConfigError, Settings, load_config
from mockmatch.loader import (
  RuleFileError,
  RulesDirectoryError,
  discover_rule_files,
  load_rule_file,
  preload,
)
from mockmatch.models import LoadErrorPolicy, MatchOutcome, OutputFormat
from mockmatch.output import get_formatter
from mockmatch.store import RuleStore

app = typer.Typer(
  name="mockmatch",
  help="Match requests against declarative mock-response rules",
  no_args_is_help=True,
)

console = Console()

_RULES_DIR_HELP = "Directory of rule files (default: from config, then ./default_routes)"
_FORMAT_HELP = "Output format: terminal, json, markdown"


def _is_debug() -> bool:
  return os.environ.get("MOCKMATCH_DEBUG", "").lower() in ("1", "true", "yes")


def version_callback(value: bool) -> None:
  if value:
    console.print(f"mockmatch {__version__}")
    raise typer.Exit()


@app.callback()
def main(
  version: bool = typer.Option(None, "--version", "-v", callback=version_callback, is_eager=True),
) -> None:
  """Load mock-response rules and match requests against them."""


@contextmanager
def _report_errors(debug: bool) -> Iterator[None]:
  """Print known failures and exit 1."""
  try:
    yield
  except (typer.Exit, typer.BadParameter):
    raise
  except (RulesDirectoryError, RuleFileError, ConfigError, FileNotFoundError) as e:
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    raise typer.Exit(1) from None
  except Exception as e:
    console.print(f"[red]Error:[/red] {escape(str(e))}")
    if debug or _is_debug():
      console.print("\n[dim]Traceback:[/dim]")
      console.print(escape(traceback.format_exc()))
    raise typer.Exit(1) from None


def _resolve_settings(
  config: Path | None,
  rules_dir: Path | None = None,
  format_type: str | None = None,
  skip_invalid: bool = False,
) -> Settings:
  """Load config and apply command line overrides."""
  settings = load_config(config).model_copy(deep=True)
  if rules_dir:
    settings.rules_dir = rules_dir
  if format_type:
    try:
      settings.format = OutputFormat(format_type)
    except ValueError:
      raise typer.BadParameter(
        f"Unknown format {format_type!r}", param_hint="--format"
      ) from None
  if skip_invalid:
    settings.on_error = LoadErrorPolicy.SKIP
  return settings


def _load_store(settings: Settings) -> RuleStore:
  store = RuleStore()
  asyncio.run(preload(store, settings.rules_dir, settings.patterns, settings.on_error))
  return store


def _parse_headers(values: list[str] | None) -> dict[str, str] | None:
  """Parse repeated "Name: value" options."""
  if not values:
    return None
  headers = {}
  for value in values:
    name, sep, content = value.partition(":")
    if not sep or not name.strip():
      raise typer.BadParameter(f"Expected 'Name: value', got {value!r}", param_hint="--header")
    headers[name.strip()] = content.strip()
  return headers


def _parse_payload(value: str | None) -> object:
  if value is None:
    return None
  try:
    return json.loads(value)
  except json.JSONDecodeError as e:
    raise typer.BadParameter(f"Payload is not valid JSON: {e}", param_hint="--payload") from None


@app.command("list")
def list_rules(
  rules_dir: Path = typer.Option(None, "--rules-dir", "-r", help=_RULES_DIR_HELP),
  format_type: str = typer.Option(None, "--format", help=_FORMAT_HELP),
  skip_invalid: bool = typer.Option(False, "--skip-invalid", help="Skip rule files that fail to parse"),
  config: Path = typer.Option(None, "--config", "-c", help="Config file path"),
  debug: bool = typer.Option(False, "--debug", "-d", help="Show full traceback on errors"),
) -> None:
  """List rules in the order they are loaded."""
  with _report_errors(debug):
    settings = _resolve_settings(config, rules_dir, format_type, skip_invalid)
    store = _load_store(settings)
    output = get_formatter(settings.format).format_rules(store.get_all())
    if output:
      console.print(output, markup=False, highlight=False, emoji=False, soft_wrap=True)


@app.command()
def match(
  paths: list[str] = typer.Argument(..., help="Request paths, matched in order against one store"),
  payload: str = typer.Option(None, "--payload", "-p", help="Request payload as JSON"),
  header: Optional[list[str]] = typer.Option(None, "--header", "-H", help="Request header 'Name: value'"),
  explain: bool = typer.Option(False, "--explain", "-e", help="Show every qualifying rule and its score"),
  rules_dir: Path = typer.Option(None, "--rules-dir", "-r", help=_RULES_DIR_HELP),
  format_type: str = typer.Option(None, "--format", help=_FORMAT_HELP),
  skip_invalid: bool = typer.Option(False, "--skip-invalid", help="Skip rule files that fail to parse"),
  config: Path = typer.Option(None, "--config", "-c", help="Config file path"),
  debug: bool = typer.Option(False, "--debug", "-d", help="Show full traceback on errors"),
) -> None:
  """Match request paths against the loaded rules.

  Every path is matched on the same store, so rules with 'at' fire on
  the Nth repetition of their route.
  """
  body = _parse_payload(payload)
  headers = _parse_headers(header)

  with _report_errors(debug):
    settings = _resolve_settings(config, rules_dir, format_type, skip_invalid)
    show_ranking = explain or settings.explain
    store = _load_store(settings)

    outcomes = []
    for path in paths:
      ranking = store.rank(path, body, headers)
      rule = ranking[0].rule if ranking else None
      outcomes.append(MatchOutcome(
        path=path,
        rule=rule,
        occurrence=store.occurrences(rule.route) if rule else 0,
        ranking=tuple(ranking) if show_ranking else (),
      ))

    output = get_formatter(settings.format).format_outcomes(outcomes)
    if output:
      console.print(output, markup=False, highlight=False, emoji=False, soft_wrap=True)


@app.command()
def check(
  rules_dir: Path = typer.Option(None, "--rules-dir", "-r", help=_RULES_DIR_HELP),
  config: Path = typer.Option(None, "--config", "-c", help="Config file path"),
  debug: bool = typer.Option(False, "--debug", "-d", help="Show full traceback on errors"),
) -> None:
  """Validate every rule file without loading it."""
  failures = 0
  with _report_errors(debug):
    settings = _resolve_settings(config, rules_dir)
    paths = discover_rule_files(settings.rules_dir, settings.patterns)

    for path in paths:
      try:
        rules = load_rule_file(path)
      except RuleFileError as e:
        failures += 1
        console.print(f"[red]FAIL[/red] {escape(str(e))}")
        continue
      console.print(f"[green]OK[/green]   {escape(path.name)} ({len(rules)} rule(s))")

  if failures:
    console.print(f"\n[red]{failures} of {len(paths)} file(s) invalid[/red]")
    raise typer.Exit(1)
  console.print(f"\n[dim]{len(paths)} file(s) checked[/dim]")


if __name__ == "__main__":
  app()
