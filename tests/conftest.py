"""Pytest fixtures."""

import json
from pathlib import Path

import pytest
from mockmatch.models import Rule
from mockmatch.store import RuleStore


@pytest.fixture
def store() -> RuleStore:
  return RuleStore()


@pytest.fixture
def sample_rule() -> Rule:
  return Rule(
    route="/foo/bar",
    response_code=200,
    response_body="foo",
  )


@pytest.fixture
def rules_dir(tmp_path: Path) -> Path:
  """A directory of rule files whose names sort differently from creation order."""
  directory = tmp_path / "default_routes"
  directory.mkdir()

  (directory / "b_second.yaml").write_text("""
- route: /mock/1
  responseCode: 200
  responseBody: one
- route: /mock/1
  at: 2
  responseCode: 204
""")
  (directory / "a_first.json").write_text(json.dumps({
    "route": "/mock/0",
    "queryParams": {"id": "[0-9]+"},
    "responseCode": 200,
    "responseBody": {"ok": True},
  }))
  (directory / "c_third.yml").write_text("""
route: /mock/2
payload:
  "outer[0].inner": 1
requiredHeaders:
  Cookie: "Y=[a-z]+"
responseCode: 201
""")
  (directory / "notes.txt").write_text("not a rule file")

  return directory
