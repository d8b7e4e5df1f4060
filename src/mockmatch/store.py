"""In-memory rule store with per-route occurrence counters."""

import threading
from collections import Counter
from typing import Any, Mapping

from mockmatch.matching import (
  RankedRule,
  candidate_routes,
  find_candidates,
  parse_request,
  rank_candidates,
  select_rule,
)
from mockmatch.models import MatchRequest, Rule


class RuleStore:
  """Ordered collection of rules plus occurrence counters.

  Counters are keyed by the literal ``route`` string, so every rule
  registered with the same route shares one counter. They advance once
  per ``match`` call whose pathname matches the route and are reset by
  ``flush``.

  All operations hold one lock, so a ``match`` never sees a rule set
  and counters that disagree.

  Example:
    store = RuleStore()
    store.add({"route": "/ping", "responseCode": 200})
    rule = store.match("/ping")
  """

  def __init__(self, rules: list[Rule | Mapping[str, Any]] | None = None):
    self._lock = threading.RLock()
    self._rules: list[Rule] = []
    self._occurrences: Counter[str] = Counter()
    for rule in rules or []:
      self.add(rule)

  def add(self, rule: Rule | Mapping[str, Any]) -> Rule:
    """Append a rule. Mappings are converted without validation.

    Returns:
      The stored Rule.
    """
    if not isinstance(rule, Rule):
      rule = Rule.from_mapping(rule)
    with self._lock:
      self._rules.append(rule)
    return rule

  def get_all(self) -> list[Rule]:
    """Return a copy of the stored rules in insertion order."""
    with self._lock:
      return list(self._rules)

  def flush(self) -> None:
    """Remove every rule and reset all occurrence counters."""
    with self._lock:
      self._rules.clear()
      self._occurrences.clear()

  def occurrences(self, route: str) -> int:
    """Number of requests seen so far for a route string."""
    with self._lock:
      return self._occurrences[route]

  def rank(
    self,
    path: str,
    payload: Any = None,
    headers: Mapping[str, Any] | None = None,
  ) -> list[RankedRule]:
    """Record a request and return every qualifying rule, best first.

    This advances occurrence counters exactly like ``match``.
    """
    request = parse_request(path, payload, headers)
    with self._lock:
      candidates = self._record(request)
      return rank_candidates(candidates, self._occurrences, request)

  def match(
    self,
    path: str,
    payload: Any = None,
    headers: Mapping[str, Any] | None = None,
  ) -> Rule | None:
    """Return the best rule for a request, or None if nothing qualifies.

    Args:
      path: Request path, optionally with a query string.
      payload: Decoded request body; payload constraints address it with
        field paths.
      headers: Request headers; names compare case-insensitively.
    """
    request = parse_request(path, payload, headers)
    with self._lock:
      candidates = self._record(request)
      return select_rule(candidates, self._occurrences, request)

  def _record(self, request: MatchRequest) -> list[tuple[int, Rule]]:
    """Find route candidates and count the request. Caller holds the lock."""
    candidates = find_candidates(self._rules, request.pathname)
    self._occurrences.update(candidate_routes(candidates))
    return candidates

  def __len__(self) -> int:
    with self._lock:
      return len(self._rules)
