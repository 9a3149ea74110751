"""
Payload path expressions

A path addresses a value inside a webhook body:

    data.guestName                      object keys, dot separated
    listingCustomFields[0].value        array index after a key
    financeField.find(f => f.name === "baseRate").total
                                        first array element whose property
                                        equals a string literal

Expressions are parsed once into segments and resolved left to right. Any
absent intermediate value resolves the whole path to MISSING.
"""

import re
from dataclasses import dataclass
from typing import Any, Tuple, Union

from core.errors import PathSyntaxError
from core.values import MISSING, ValueKind, get_item, get_member, is_absent, kind_of


_FIND_PREDICATE = re.compile(
    r'''find\(\s*(\w+)\s*=>\s*(\w+)\.(\w+)\s*===?\s*(["'])(.*?)\4\s*\)'''
)


@dataclass(frozen=True)
class KeySegment:
    name: str

    def apply(self, value: Any) -> Any:
        return get_member(value, self.name)


@dataclass(frozen=True)
class IndexSegment:
    index: int

    def apply(self, value: Any) -> Any:
        return get_item(value, self.index)


@dataclass(frozen=True)
class FindSegment:
    """Array search: first element whose ``property`` equals ``value``."""
    property: str
    value: str

    def apply(self, value: Any) -> Any:
        if kind_of(value) is not ValueKind.ARRAY:
            return MISSING
        for element in value:
            candidate = get_member(element, self.property)
            if isinstance(candidate, str) and candidate == self.value:
                return element
        return MISSING


Segment = Union[KeySegment, IndexSegment, FindSegment]


@dataclass(frozen=True)
class PathExpression:
    text: str
    segments: Tuple[Segment, ...]

    def resolve(self, root: Any, start: int = 0) -> Any:
        """
        Evaluate the expression against ``root``.

        Args:
            root: Decoded JSON value
            start: Number of leading segments to skip

        Returns:
            The addressed value, None for an explicit null, or MISSING
        """
        value = root
        for segment in self.segments[start:]:
            if is_absent(value):
                return MISSING
            value = segment.apply(value)
        return value

    def __str__(self) -> str:
        return self.text


def parse_path(text: str) -> PathExpression:
    """
    Parse a path expression.

    Raises:
        PathSyntaxError: On empty segments, bad indices or a malformed
            find predicate
    """
    if not text or not text.strip():
        raise PathSyntaxError(text or '', 'Empty path')

    text = text.strip()
    length = len(text)
    segments = []
    pos = 0

    while True:
        if text.startswith('find(', pos):
            match = _FIND_PREDICATE.match(text, pos)
            if not match or match.group(1) != match.group(2):
                raise PathSyntaxError(text, f"Malformed find predicate at position {pos}")
            segments.append(FindSegment(match.group(3), match.group(5)))
            pos = match.end()
        else:
            end = pos
            while end < length and text[end] not in '.[':
                end += 1
            name = text[pos:end]
            if not name:
                raise PathSyntaxError(text, f"Empty segment at position {pos}")
            if ']' in name:
                raise PathSyntaxError(text, f"Unexpected ']' in segment {name!r}")
            segments.append(KeySegment(name))
            pos = end

        while pos < length and text[pos] == '[':
            close = text.find(']', pos)
            if close == -1:
                raise PathSyntaxError(text, "Unclosed '['")
            index_text = text[pos + 1:close].strip()
            if not (index_text.isascii() and index_text.isdigit()):
                raise PathSyntaxError(text, f"Invalid array index {index_text!r}")
            segments.append(IndexSegment(int(index_text)))
            pos = close + 1

        if pos == length:
            break
        if text[pos] != '.':
            raise PathSyntaxError(text, f"Unexpected {text[pos]!r} at position {pos}")
        pos += 1
        if pos == length:
            raise PathSyntaxError(text, "Trailing '.'")

    return PathExpression(text, tuple(segments))
