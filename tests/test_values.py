"""Tests for value matching."""

import pytest
from mockmatch.matching.paths import MISSING
from mockmatch.matching.values import compile_pattern, stringify, value_matches


class TestStringify:
  @pytest.mark.parametrize(
    ("value", "expected"),
    [
      ("text", "text"),
      (1, "1"),
      (1.0, "1"),
      (1.5, "1.5"),
      (True, "true"),
      (False, "false"),
      (None, "null"),
      ({"a": [1, 2]}, '{"a":[1,2]}'),
      ([1, "x"], '[1,"x"]'),
    ],
  )
  def test_wire_spelling(self, value: object, expected: str) -> None:
    assert stringify(value) == expected


class TestCompilePattern:
  def test_valid_pattern(self) -> None:
    assert compile_pattern("^a+$").search("aaa")

  def test_invalid_pattern(self) -> None:
    assert compile_pattern("[unclosed") is None


class TestValueMatches:
  def test_literal_equality(self) -> None:
    assert value_matches(1, 1)
    assert value_matches("abc", "abc")

  def test_literal_is_unanchored(self) -> None:
    assert value_matches(1, 21)
    assert value_matches("abc", "xabcx")

  def test_anchored_pattern(self) -> None:
    assert value_matches("^(foo|bar|baz)$", "bar")
    assert not value_matches("^(foo|bar|baz)$", "barbaz")

  def test_character_class(self) -> None:
    assert value_matches("[\\d+]", 9273892)
    assert not value_matches("[\\d+]", "abc")

  def test_number_against_float(self) -> None:
    assert value_matches(2, 2.0)

  def test_invalid_pattern_never_matches(self) -> None:
    assert not value_matches("(", "(")

  def test_missing_never_matches(self) -> None:
    assert not value_matches("", MISSING)

  def test_empty_pattern_matches_present_value(self) -> None:
    assert value_matches("", "")
    assert value_matches("", None)
