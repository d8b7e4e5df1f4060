"""Core domain models for mock-response matching."""

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import TYPE_CHECKING, Any, Iterator, Mapping, Sequence

if TYPE_CHECKING:
  from mockmatch.matching.matcher import RankedRule


class ConstraintGroup(Enum):
  """Request sources a rule can constrain."""

  QUERY = "queryParams"
  PAYLOAD = "payload"
  HEADERS = "requiredHeaders"


class LoadErrorPolicy(Enum):
  """What the loader does with a rule file it cannot parse."""

  ABORT = "abort"
  SKIP = "skip"


class OutputFormat(Enum):
  """CLI output format."""

  TERMINAL = "terminal"
  JSON = "json"
  MARKDOWN = "markdown"


# Wire spelling -> attribute name. Snake case spellings are accepted too.
_FIELD_ALIASES = {
  "route": "route",
  "payload": "payload",
  "queryParams": "query_params",
  "query_params": "query_params",
  "requiredHeaders": "required_headers",
  "required_headers": "required_headers",
  "at": "at",
  "responseCode": "response_code",
  "response_code": "response_code",
  "responseBody": "response_body",
  "response_body": "response_body",
}


@dataclass(frozen=True, eq=False)
class Rule:
  """A route pattern, optional request constraints and a canned response.

  Every constraint group is optional. An absent group imposes no filtering;
  an empty route matches every path.
  """

  route: str = ""
  payload: Mapping[str, Any] | None = None
  query_params: Mapping[str, Any] | None = None
  required_headers: Mapping[str, Any] | None = None
  at: int | None = None
  response_code: int | None = None
  response_body: Any = None
  extra: Mapping[str, Any] = field(default_factory=dict)
  source: Path | None = None

  @classmethod
  def from_mapping(cls, data: Mapping[str, Any], source: Path | None = None) -> "Rule":
    """Build a rule from a loosely-typed mapping without validating it.

    Unknown keys are kept in ``extra`` so they survive a round trip.
    """
    values: dict[str, Any] = {}
    extra: dict[str, Any] = {}
    for key, value in data.items():
      name = _FIELD_ALIASES.get(key)
      if name is None:
        extra[key] = value
      else:
        values[name] = value

    route = values.get("route")
    values["route"] = "" if route is None else str(route)

    return cls(**values, extra=extra, source=source)

  def constraint_groups(self) -> Iterator[tuple[ConstraintGroup, Mapping[str, Any]]]:
    """Yield each declared constraint group with its field mapping."""
    if self.query_params is not None:
      yield ConstraintGroup.QUERY, self.query_params
    if self.payload is not None:
      yield ConstraintGroup.PAYLOAD, self.payload
    if self.required_headers is not None:
      yield ConstraintGroup.HEADERS, self.required_headers

  def to_dict(self) -> dict[str, Any]:
    """Render the rule with wire spelling, omitting absent fields."""
    data: dict[str, Any] = {"route": self.route}
    if self.query_params is not None:
      data["queryParams"] = dict(self.query_params)
    if self.payload is not None:
      data["payload"] = dict(self.payload)
    if self.required_headers is not None:
      data["requiredHeaders"] = dict(self.required_headers)
    if self.at is not None:
      data["at"] = self.at
    data["responseCode"] = self.response_code
    data["responseBody"] = self.response_body
    data.update(self.extra)
    return data


@dataclass(frozen=True)
class MatchRequest:
  """An incoming request, split into the sources rules are matched against."""

  pathname: str
  query: Mapping[str, str] = field(default_factory=dict)
  payload: Any = None
  headers: Mapping[str, Any] | None = None


@dataclass(frozen=True)
class MatchOutcome:
  """Result of matching one request, as reported by the CLI."""

  path: str
  rule: Rule | None
  occurrence: int = 0
  ranking: Sequence["RankedRule"] = field(default_factory=tuple)

  @property
  def matched(self) -> bool:
    return self.rule is not None
