"""Output formatting."""

from mockmatch.output.formatter import (
    JsonFormatter,
    MarkdownFormatter,
    OutputFormatter,
    TerminalFormatter,
    get_formatter,
)

__all__ = [
  "OutputFormatter",
  "TerminalFormatter",
  "JsonFormatter",
  "MarkdownFormatter",
  "get_formatter",
]
