"""Field paths addressing members of nested payloads.

A field path is dot/bracket notation such as ``outer[0].inner`` or
``items[2]["display name"]``. Parsing produces a tuple of accessors:
``str`` for mapping keys, ``int`` for sequence indices.
"""

from functools import lru_cache
from typing import Any, Mapping, Sequence

Accessor = str | int


class FieldPathError(Exception):
  """Field path could not be parsed."""


class _Missing:
  """Sentinel for a path that does not resolve."""

  def __repr__(self) -> str:
    return "MISSING"


MISSING = _Missing()


class _PathParser:
  """Recursive-descent parser for field paths.

  Grammar:
    path     := name segment*
    segment  := "." name | "[" index "]" | "[" quoted "]"
    name     := any run of characters other than ".", "[" and "]"
    index    := digit+
    quoted   := '"' chars '"' | "'" chars "'"
  """

  def __init__(self, text: str):
    self._text = text
    self._pos = 0

  def parse(self) -> tuple[Accessor, ...]:
    if not self._text:
      raise FieldPathError("Empty field path")

    accessors: list[Accessor] = []
    if self._peek() == "[":
      accessors.append(self._bracket())
    else:
      accessors.append(self._name())

    while self._pos < len(self._text):
      char = self._peek()
      if char == ".":
        self._pos += 1
        accessors.append(self._name())
      elif char == "[":
        accessors.append(self._bracket())
      else:
        raise self._error(f"unexpected {char!r}")

    return tuple(accessors)

  def _peek(self) -> str:
    return self._text[self._pos] if self._pos < len(self._text) else ""

  def _name(self) -> str:
    start = self._pos
    while self._pos < len(self._text) and self._text[self._pos] not in ".[]":
      self._pos += 1
    if self._pos == start:
      raise self._error("expected a key")
    return self._text[start:self._pos]

  def _bracket(self) -> Accessor:
    self._pos += 1  # "["
    char = self._peek()
    if char in ("'", '"'):
      accessor: Accessor = self._quoted(char)
    else:
      start = self._pos
      while self._peek().isdigit():
        self._pos += 1
      if self._pos == start:
        raise self._error("expected an index")
      accessor = int(self._text[start:self._pos])

    if self._peek() != "]":
      raise self._error("expected ']'")
    self._pos += 1
    return accessor

  def _quoted(self, quote: str) -> str:
    self._pos += 1
    end = self._text.find(quote, self._pos)
    if end == -1:
      raise self._error("unterminated quoted key")
    key = self._text[self._pos:end]
    self._pos = end + 1
    return key

  def _error(self, reason: str) -> FieldPathError:
    return FieldPathError(
      f"Invalid field path {self._text!r} at position {self._pos}: {reason}"
    )


@lru_cache(maxsize=512)
def parse_field_path(text: str) -> tuple[Accessor, ...]:
  """Parse a field path into accessors.

  Raises:
    FieldPathError: If the path is malformed.
  """
  return _PathParser(text).parse()


def _step(node: Any, accessor: Accessor) -> Any:
  if isinstance(node, Mapping):
    if accessor in node:
      return node[accessor]
    if isinstance(accessor, int) and str(accessor) in node:
      return node[str(accessor)]
    return MISSING

  if isinstance(node, Sequence) and not isinstance(node, (str, bytes)):
    if isinstance(accessor, str):
      if not accessor.isdigit():
        return MISSING
      accessor = int(accessor)
    if 0 <= accessor < len(node):
      return node[accessor]

  return MISSING


def resolve_field_path(source: Any, path: str) -> Any:
  """Look up ``path`` in a nested structure of mappings and sequences.

  A mapping key equal to the whole path wins over path traversal, so
  payload keys that contain dots stay addressable.

  Returns:
    The addressed value, or MISSING if any segment is absent.

  Raises:
    FieldPathError: If the path is malformed.
  """
  if isinstance(source, Mapping) and path in source:
    return source[path]

  node = source
  for accessor in parse_field_path(path):
    node = _step(node, accessor)
    if node is MISSING:
      return MISSING
  return node
