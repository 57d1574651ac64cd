"""Text-level edits inside the opaque dependency table.

The table interior is never decoded into a mapping. It is split on commas
into fragments (each keeping its own whitespace and newlines), the fragment
for the requested key is edited in place, and the fragments are joined back.
Entries that are not touched come out byte for byte as they went in.
"""

from __future__ import annotations

import json
import logging
from enum import Enum
from typing import List, Tuple

from ..errors import ManifestShapeError
from ..schemas.manifest import quote_key
from .document import ManifestDocument

logger = logging.getLogger(__name__)

FRAGMENT_SEPARATOR = ","
DEFAULT_ENTRY_INDENT = "    "


class KeyMatch(str, Enum):
    """How a fragment key is compared with the requested key literal."""

    EXACT = "exact"
    CONTAINS = "contains"


def has_dependency(document: ManifestDocument, key: str, *, match: KeyMatch = KeyMatch.EXACT) -> bool:
    """Return True if a fragment declares ``key``, whatever its version."""

    if document.dependency_block is None:
        return False
    return any(
        _key_matches(key_part, key, match)
        for key_part, _ in map(_split_fragment, _fragments(document.dependency_block))
    )


def dependency_keys(document: ManifestDocument) -> List[str]:
    """Bare package ids declared in the table, in source order."""

    if document.dependency_block is None:
        return []
    keys: List[str] = []
    for key_part, value_part in map(_split_fragment, _fragments(document.dependency_block)):
        if value_part is None:
            continue
        literal = key_part.strip()
        try:
            keys.append(str(json.loads(literal)))
        except json.JSONDecodeError:
            keys.append(literal.strip('"'))
    return keys


def upsert_dependency(
    document: ManifestDocument,
    key: str,
    version: str,
    *,
    match: KeyMatch = KeyMatch.EXACT,
    indent: str = DEFAULT_ENTRY_INDENT,
) -> bool:
    """Set ``key`` to ``version`` inside the dependency table.

    ``key`` is the quoted key literal; ``version`` is written as a quoted
    string. Every matching fragment has its value replaced. When nothing
    matches, a new entry is prepended. Returns True if the table text changed.
    """

    block = document.dependency_block
    if block is None:
        raise ManifestShapeError(f"Cannot set {key}: manifest has no dependency table.")

    value = json.dumps(version, ensure_ascii=False)
    newline = "\r\n" if "\r\n" in block else "\n"
    fragments = _fragments(block)
    matched = 0
    for index, fragment in enumerate(fragments):
        key_part, value_part = _split_fragment(fragment)
        if value_part is None or not _key_matches(key_part, key, match):
            continue
        fragments[index] = key_part + ":" + _replace_value(value_part, value)
        matched += 1

    if matched:
        logger.debug("Updated %d fragment(s) for %s.", matched, key)
        updated = FRAGMENT_SEPARATOR.join(fragments)
    elif not block.strip():
        updated = f"{newline}{indent}{key}: {value}" + _closing_whitespace(block, newline + document.table_indent)
        logger.debug("Inserted %s into empty dependency table.", key)
    else:
        fragments.insert(0, f"{newline}{indent}{key}: {value}")
        updated = FRAGMENT_SEPARATOR.join(fragments)
        logger.debug("Prepended %s to dependency table.", key)

    document.dependency_block = updated
    return updated != block


def _fragments(block: str) -> List[str]:
    return block.split(FRAGMENT_SEPARATOR)


def _split_fragment(fragment: str) -> Tuple[str, str | None]:
    key_part, separator, value_part = fragment.partition(":")
    return key_part, (value_part if separator else None)


def _key_matches(key_part: str, key: str, match: KeyMatch) -> bool:
    if match is KeyMatch.CONTAINS:
        return key in key_part
    return key_part.strip() == key


def _replace_value(value_part: str, value: str) -> str:
    stripped = value_part.strip()
    if not stripped:
        return " " + value + value_part
    leading = value_part[: value_part.index(stripped)]
    trailing = value_part[len(leading) + len(stripped) :]
    return leading + value + trailing


def _closing_whitespace(block: str, fallback: str) -> str:
    # Keep an existing line break before "}"; otherwise open one.
    if "\n" in block:
        line_start = block.rfind("\n")
        if line_start > 0 and block[line_start - 1] == "\r":
            line_start -= 1
        return block[line_start:]
    return fallback


__all__ = [
    "DEFAULT_ENTRY_INDENT",
    "KeyMatch",
    "dependency_keys",
    "has_dependency",
    "quote_key",
    "upsert_dependency",
]
