"""Output formatting for rule listings and match outcomes."""

import json
from abc import ABC, abstractmethod
from typing import Any, Sequence

from rich.console import Console
from rich.markup import escape
from rich.table import Table
from rich.text import Text

from mockmatch.matching import stringify
from mockmatch.models import MatchOutcome, OutputFormat, Rule


def _constraints_summary(rule: Rule) -> str:
  """One-line description of a rule's declared constraints."""
  parts = []
  for group, fields in rule.constraint_groups():
    pairs = ", ".join(f"{key}={stringify(value)}" for key, value in fields.items())
    parts.append(f"{group.value}({pairs})")
  if rule.at is not None:
    parts.append(f"at={rule.at}")
  return "; ".join(parts) or "-"


def _outcome_to_dict(outcome: MatchOutcome) -> dict[str, Any]:
  data: dict[str, Any] = {
    "path": outcome.path,
    "matched": outcome.matched,
    "occurrence": outcome.occurrence,
    "rule": outcome.rule.to_dict() if outcome.rule else None,
  }
  if outcome.ranking:
    data["ranking"] = [
      {
        "index": ranked.index,
        "route": ranked.rule.route,
        "primary": ranked.score.primary,
        "secondary": ranked.score.secondary,
        "at_eligible": ranked.score.at_eligible,
      }
      for ranked in outcome.ranking
    ]
  return data


class OutputFormatter(ABC):
  """Base output formatter."""

  @abstractmethod
  def format_rules(self, rules: Sequence[Rule]) -> str:
    """Format the rules held by a store."""
    ...

  @abstractmethod
  def format_outcomes(self, outcomes: Sequence[MatchOutcome]) -> str:
    """Format the outcome of a series of match calls."""
    ...


class TerminalFormatter(OutputFormatter):
  """Rich terminal output formatter."""

  def __init__(self, console: Console | None = None):
    self.console = console or Console()

  def format_rules(self, rules: Sequence[Rule]) -> str:
    if not rules:
      self.console.print("[yellow]No rules loaded.[/yellow]")
      return ""

    table = Table(show_header=True, header_style="bold")
    table.add_column("#", width=4, justify="right")
    table.add_column("Route", min_width=20)
    table.add_column("Constraints", min_width=30)
    table.add_column("Code", width=6, justify="right")
    table.add_column("Source", width=24)

    for index, rule in enumerate(rules):
      table.add_row(
        str(index),
        escape(rule.route) or "[dim](any)[/dim]",
        escape(_constraints_summary(rule)),
        str(rule.response_code) if rule.response_code is not None else "-",
        escape(rule.source.name) if rule.source else "-",
      )

    self.console.print(table)
    self.console.print(f"\n[dim]{len(rules)} rule(s) loaded[/dim]")
    return ""

  def format_outcomes(self, outcomes: Sequence[MatchOutcome]) -> str:
    for outcome in outcomes:
      if not outcome.matched:
        self.console.print(
          Text.assemble((outcome.path, "bold"), " -> ", ("no match", "red"))
        )
        continue

      rule = outcome.rule
      self.console.print(Text.assemble(
        (outcome.path, "bold"),
        " -> ",
        (str(rule.response_code), "green"),
        f" {rule.route} (request #{outcome.occurrence})",
      ))
      if rule.response_body is not None:
        self.console.print(Text(f"  {stringify(rule.response_body)}", style="dim"))

      for ranked in outcome.ranking:
        marker = "at" if ranked.score.at_eligible else "  "
        self.console.print(
          f"  [dim]{marker} #{ranked.index} score={ranked.score.primary}"
          f"/{ranked.score.secondary} {escape(_constraints_summary(ranked.rule))}[/dim]"
        )
    return ""


class JsonFormatter(OutputFormatter):
  """JSON output formatter."""

  def format_rules(self, rules: Sequence[Rule]) -> str:
    data = {
      "count": len(rules),
      "rules": [
        {**rule.to_dict(), "source": str(rule.source) if rule.source else None}
        for rule in rules
      ],
    }
    return json.dumps(data, indent=2, default=str)

  def format_outcomes(self, outcomes: Sequence[MatchOutcome]) -> str:
    return json.dumps([_outcome_to_dict(o) for o in outcomes], indent=2, default=str)


class MarkdownFormatter(OutputFormatter):
  """Markdown output formatter."""

  def format_rules(self, rules: Sequence[Rule]) -> str:
    lines = ["# Rules", ""]
    if not rules:
      lines.extend(["No rules loaded.", ""])
      return "\n".join(lines)

    lines.extend([
      "| # | Route | Constraints | Code |",
      "| --- | --- | --- | --- |",
    ])
    for index, rule in enumerate(rules):
      code = rule.response_code if rule.response_code is not None else "-"
      constraints = _constraints_summary(rule).replace("|", "\\|")
      route = rule.route.replace("|", "\\|")
      lines.append(f"| {index} | `{route}` | {constraints} | {code} |")
    lines.append("")
    return "\n".join(lines)

  def format_outcomes(self, outcomes: Sequence[MatchOutcome]) -> str:
    lines = ["# Matches", ""]
    for outcome in outcomes:
      lines.append(f"## `{outcome.path}`")
      lines.append("")
      if outcome.rule is None:
        lines.extend(["No match.", ""])
        continue
      lines.append(f"**Route:** `{outcome.rule.route}`")
      lines.append(f"**Response code:** {outcome.rule.response_code}")
      lines.append(f"**Request:** #{outcome.occurrence}")
      if outcome.rule.response_body is not None:
        lines.extend(["", "```", stringify(outcome.rule.response_body), "```"])
      lines.append("")
    return "\n".join(lines)


def get_formatter(format_type: str | OutputFormat) -> OutputFormatter:
  """Get formatter by type name."""
  formatters = {
    OutputFormat.TERMINAL: TerminalFormatter,
    OutputFormat.JSON: JsonFormatter,
    OutputFormat.MARKDOWN: MarkdownFormatter,
  }
  try:
    key = OutputFormat(format_type)
  except ValueError:
    raise ValueError(f"Unknown format: {format_type}") from None
  return formatters[key]()
