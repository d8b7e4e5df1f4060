"""Candidate filtering, specificity scoring and rule selection."""

from dataclasses import dataclass
from typing import Any, Iterable, Mapping, Sequence
from urllib.parse import parse_qsl

from mockmatch.matching.paths import MISSING, FieldPathError, resolve_field_path
from mockmatch.matching.values import compile_pattern, value_matches
from mockmatch.models import ConstraintGroup, MatchRequest, Rule


@dataclass(frozen=True)
class Score:
  """Specificity of a qualifying rule for one request.

  ``primary`` counts satisfied query and payload fields, ``secondary``
  counts satisfied headers and only breaks ties on ``primary``.
  """

  primary: int
  secondary: int
  at_eligible: bool = False


@dataclass(frozen=True)
class RankedRule:
  """A qualifying rule with its insertion index and score."""

  rule: Rule
  index: int
  score: Score

  @property
  def sort_key(self) -> tuple[bool, int, int, int]:
    return (
      not self.score.at_eligible,
      -self.score.primary,
      -self.score.secondary,
      self.index,
    )


def parse_request(
  path: str,
  payload: Any = None,
  headers: Mapping[str, Any] | None = None,
) -> MatchRequest:
  """Split a request path into pathname and a flat query mapping.

  Query values are URL-decoded with ``+`` as a space. Repeated keys keep
  their last value. Header names are lower-cased. Everything before
  the first "?" is the pathname, including any "//host" or "scheme:"
  prefix.
  """
  pathname, _, query_string = path.partition("#")[0].partition("?")
  query = dict(parse_qsl(query_string, keep_blank_values=True))
  normalized = None
  if headers is not None:
    normalized = {str(name).lower(): value for name, value in headers.items()}

  return MatchRequest(
    pathname=pathname,
    query=query,
    payload=payload,
    headers=normalized,
  )


def route_matches(rule: Rule, pathname: str) -> bool:
  """Check whether a rule's route pattern is found in the pathname."""
  pattern = compile_pattern(rule.route)
  return pattern is not None and pattern.search(pathname) is not None


def find_candidates(rules: Sequence[Rule], pathname: str) -> list[tuple[int, Rule]]:
  """Return (insertion index, rule) for every rule whose route matches."""
  return [
    (index, rule) for index, rule in enumerate(rules)
    if route_matches(rule, pathname)
  ]


def candidate_routes(candidates: Iterable[tuple[int, Rule]]) -> list[str]:
  """Distinct route strings among candidates, in first-seen order."""
  return list(dict.fromkeys(rule.route for _, rule in candidates))


def _lookup(group: ConstraintGroup, key: str, request: MatchRequest) -> Any:
  if group is ConstraintGroup.QUERY:
    return request.query.get(key, MISSING)

  if group is ConstraintGroup.HEADERS:
    if request.headers is None:
      return MISSING
    return request.headers.get(str(key).lower(), MISSING)

  if request.payload is None:
    return MISSING
  try:
    return resolve_field_path(request.payload, key)
  except FieldPathError:
    return MISSING


def score_rule(rule: Rule, request: MatchRequest) -> Score | None:
  """Score a route-matching rule, or return None if it is disqualified.

  Every field of every declared constraint group must match.
  """
  primary = 0
  secondary = 0

  for group, fields in rule.constraint_groups():
    for key, matcher in fields.items():
      if not value_matches(matcher, _lookup(group, key, request)):
        return None

    if group is ConstraintGroup.HEADERS:
      secondary += len(fields)
    else:
      primary += len(fields)

  return Score(primary=primary, secondary=secondary)


def rank_candidates(
  candidates: Iterable[tuple[int, Rule]],
  occurrences: Mapping[str, int],
  request: MatchRequest,
) -> list[RankedRule]:
  """Score qualifying candidates and order them best first.

  A rule whose ``at`` equals the current occurrence count of its route
  outranks every other rule. Then higher primary score, then higher
  secondary score, then earlier insertion.
  """
  ranked: list[RankedRule] = []

  for index, rule in candidates:
    score = score_rule(rule, request)
    if score is None:
      continue

    if rule.at is not None and rule.at == occurrences.get(rule.route, 0):
      score = Score(score.primary, score.secondary, at_eligible=True)

    ranked.append(RankedRule(rule=rule, index=index, score=score))

  ranked.sort(key=lambda r: r.sort_key)
  return ranked


def select_rule(
  candidates: Iterable[tuple[int, Rule]],
  occurrences: Mapping[str, int],
  request: MatchRequest,
) -> Rule | None:
  """Return the winning rule, or None if nothing qualifies."""
  ranked = rank_candidates(candidates, occurrences, request)
  return ranked[0].rule if ranked else None
