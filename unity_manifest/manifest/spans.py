"""Locate text regions that must survive a rewrite byte for byte."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

DEPENDENCIES_KEY = '"dependencies"'


@dataclass(frozen=True, slots=True)
class TextSpan:
    """Half-open ``[start, end)`` region of a text."""

    start: int
    end: int

    def extract(self, text: str) -> str:
        return text[self.start : self.end]

    def splice(self, text: str, replacement: str) -> str:
        return text[: self.start] + replacement + text[self.end :]


def find_dependencies_span(text: str) -> Optional[TextSpan]:
    """Return the interior of the first ``"dependencies"`` table.

    The table starts at the first ``{`` after the key and ends at the first
    ``}`` after that, so nested objects are not supported.
    """

    key_index = text.find(DEPENDENCIES_KEY)
    if key_index == -1:
        return None
    open_index = text.find("{", key_index + len(DEPENDENCIES_KEY))
    if open_index == -1:
        return None
    close_index = text.find("}", open_index + 1)
    if close_index == -1:
        return None
    return TextSpan(start=open_index + 1, end=close_index)


def line_indent(text: str, index: int) -> str:
    """Leading whitespace of the line containing ``index``."""

    line_start = text.rfind("\n", 0, index) + 1
    cursor = line_start
    while cursor < len(text) and text[cursor] in " \t":
        cursor += 1
    return text[line_start:cursor]


__all__ = ["DEPENDENCIES_KEY", "TextSpan", "find_dependencies_span", "line_indent"]
