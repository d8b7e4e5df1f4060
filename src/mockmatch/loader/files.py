"""Parsing of individual rule files."""

import json
from pathlib import Path
from typing import Any

import yaml
from pydantic import BaseModel, ConfigDict, Field, PositiveInt, ValidationError

from mockmatch.models import Rule


class RuleFileError(Exception):
  """A rule file could not be read or parsed."""

  def __init__(self, path: Path, reason: str):
    super().__init__(f"{path.name}: {reason}")
    self.path = path
    self.reason = reason


class RuleFile(BaseModel):
  """Schema of one rule entry in a rule file.

  Keys use the wire spelling (``queryParams``, ``responseCode``); snake
  case is accepted as well. Unknown keys are kept on the rule.
  """

  model_config = ConfigDict(populate_by_name=True, extra="allow")

  route: str = ""
  payload: dict[str, Any] | None = None
  query_params: dict[str, Any] | None = Field(default=None, alias="queryParams")
  required_headers: dict[str, Any] | None = Field(default=None, alias="requiredHeaders")
  at: PositiveInt | None = None
  response_code: int | None = Field(default=None, alias="responseCode")
  response_body: Any = Field(default=None, alias="responseBody")

  def to_rule(self, source: Path | None = None) -> Rule:
    return Rule(
      route=self.route,
      payload=self.payload,
      query_params=self.query_params,
      required_headers=self.required_headers,
      at=self.at,
      response_code=self.response_code,
      response_body=self.response_body,
      extra=dict(self.model_extra or {}),
      source=source,
    )


def _decode(text: str, path: Path) -> Any:
  if path.suffix.lower() == ".json":
    try:
      return json.loads(text)
    except json.JSONDecodeError as e:
      raise RuleFileError(path, f"invalid JSON: {e}") from e

  try:
    return yaml.safe_load(text)
  except yaml.YAMLError as e:
    raise RuleFileError(path, f"invalid YAML: {e}") from e


def parse_rule_text(text: str, path: Path) -> list[Rule]:
  """Parse the contents of a rule file.

  A file holds either a single rule object or a list of them; rules are
  returned in the order they appear.

  Raises:
    RuleFileError: If the content is not valid or an entry fails
      validation.
  """
  data = _decode(text, path)

  if data is None:
    raise RuleFileError(path, "file is empty")

  entries = data if isinstance(data, list) else [data]
  rules: list[Rule] = []

  for position, entry in enumerate(entries):
    if not isinstance(entry, dict):
      raise RuleFileError(
        path, f"entry {position} is a {type(entry).__name__}, expected a mapping"
      )
    try:
      rules.append(RuleFile.model_validate(entry).to_rule(source=path))
    except ValidationError as e:
      raise RuleFileError(path, f"entry {position} is invalid: {e}") from e

  return rules


def load_rule_file(path: Path) -> list[Rule]:
  """Read and parse one rule file."""
  try:
    text = path.read_text(encoding="utf-8")
  except OSError as e:
    raise RuleFileError(path, f"cannot read file: {e.strerror or e}") from e
  return parse_rule_text(text, path)
