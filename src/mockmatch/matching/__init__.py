"""Request matching: field paths, value patterns and rule scoring."""

from mockmatch.matching.matcher import (
  RankedRule,
  Score,
  candidate_routes,
  find_candidates,
  parse_request,
  rank_candidates,
  select_rule,
)
from mockmatch.matching.paths import (
  MISSING,
  FieldPathError,
  parse_field_path,
  resolve_field_path,
)
from mockmatch.matching.values import stringify, value_matches

__all__ = [
  "FieldPathError",
  "MISSING",
  "RankedRule",
  "Score",
  "candidate_routes",
  "find_candidates",
  "parse_field_path",
  "parse_request",
  "rank_candidates",
  "resolve_field_path",
  "select_rule",
  "stringify",
  "value_matches",
]
