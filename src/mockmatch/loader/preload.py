"""Preloading a store from a directory of rule files."""

import asyncio
from pathlib import Path
from typing import Sequence

from rich.console import Console
from rich.markup import escape

from mockmatch.loader.files import RuleFileError, load_rule_file
from mockmatch.models import LoadErrorPolicy, Rule
from mockmatch.store import RuleStore

DEFAULT_PATTERNS = ("*.json", "*.yaml", "*.yml")

_console = Console(stderr=True)


class RulesDirectoryError(Exception):
  """Rules directory is missing or not a directory."""


def discover_rule_files(
  directory: Path,
  patterns: Sequence[str] = DEFAULT_PATTERNS,
) -> list[Path]:
  """List rule files in a directory, sorted by filename.

  Raises:
    RulesDirectoryError: If the directory does not exist.
  """
  if not directory.exists():
    raise RulesDirectoryError(f"Rules directory not found: {directory}")
  if not directory.is_dir():
    raise RulesDirectoryError(f"Not a directory: {directory}")

  found: set[Path] = set()
  for pattern in patterns:
    found.update(p for p in directory.glob(pattern) if p.is_file())

  return sorted(found, key=lambda p: p.name)


async def preload(
  store: RuleStore,
  directory: Path | str,
  patterns: Sequence[str] = DEFAULT_PATTERNS,
  on_error: LoadErrorPolicy = LoadErrorPolicy.ABORT,
) -> list[Rule]:
  """Load every rule file in ``directory`` into ``store``.

  Files are parsed in filename order before anything is added, so an
  aborted preload leaves the store untouched. With
  ``LoadErrorPolicy.SKIP`` a bad file is reported and the remaining files
  keep their relative order.

  Returns:
    The rules that were added, in the order they were added.

  Raises:
    RulesDirectoryError: If the directory is missing.
    RuleFileError: If a file fails to parse and the policy is ABORT.
  """
  paths = discover_rule_files(Path(directory), patterns)

  loaded: list[Rule] = []
  for path in paths:
    try:
      rules = await asyncio.to_thread(load_rule_file, path)
    except RuleFileError as e:
      if on_error == LoadErrorPolicy.ABORT:
        raise
      _console.print(f"[yellow]Warning:[/yellow] Skipping rule file {escape(str(e))}")
      continue
    loaded.extend(rules)

  for rule in loaded:
    store.add(rule)

  return loaded
