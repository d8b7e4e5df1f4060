"""Matching a declared matcher value against an actual request value."""

import json
import re
from functools import lru_cache
from typing import Any, Mapping

from mockmatch.matching.paths import MISSING


def stringify(value: Any) -> str:
  """Render a value the way it appears on the wire.

  Booleans and None use their JSON spelling, integral floats drop the
  trailing ``.0`` and containers are rendered as compact JSON.
  """
  if isinstance(value, str):
    return value
  if isinstance(value, bool):
    return "true" if value else "false"
  if value is None:
    return "null"
  if isinstance(value, float) and value.is_integer():
    return str(int(value))
  if isinstance(value, (Mapping, list, tuple)):
    return json.dumps(value, separators=(",", ":"), default=str)
  return str(value)


@lru_cache(maxsize=1024)
def compile_pattern(source: str) -> re.Pattern[str] | None:
  """Compile a pattern, returning None if it is not a valid regex."""
  try:
    return re.compile(source)
  except re.error:
    return None


def value_matches(matcher: Any, actual: Any) -> bool:
  """Check whether ``actual`` contains a match for ``matcher``.

  Both sides are stringified and the matcher is used as an unanchored
  regular expression, so literals match themselves and anchored patterns
  such as ``^(foo|bar)$`` restrict the match. An invalid pattern or an
  unresolved value never matches.
  """
  if actual is MISSING:
    return False

  pattern = compile_pattern(stringify(matcher))
  if pattern is None:
    return False

  return pattern.search(stringify(actual)) is not None
