"""Loading rule definitions from a directory."""

from mockmatch.loader.files import RuleFile, RuleFileError, load_rule_file
from mockmatch.loader.preload import RulesDirectoryError, discover_rule_files, preload

__all__ = [
  "RuleFile",
  "RuleFileError",
  "RulesDirectoryError",
  "discover_rule_files",
  "load_rule_file",
  "preload",
]
