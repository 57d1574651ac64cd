"""Read manifest text into a :class:`ManifestDocument`."""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any, Dict, List, Tuple

from pydantic import ValidationError

from ..errors import LoadError, ManifestShapeError
from ..schemas.manifest import ScopedRegistry
from .document import ManifestDocument
from .spans import find_dependencies_span, line_indent

logger = logging.getLogger(__name__)

BOM = "\ufeff"
REGISTRIES_KEY = "scopedRegistries"
DEPENDENCIES_FIELD = "dependencies"


def decode_manifest(raw_text: str) -> Dict[str, Any]:
    """Decode manifest text and require a top-level JSON object."""

    try:
        payload = json.loads(raw_text.lstrip(BOM))
    except json.JSONDecodeError as exc:
        raise LoadError(f"Manifest is not valid JSON: {exc}") from exc
    if not isinstance(payload, dict):
        raise LoadError(f"Manifest top level must be an object, got {type(payload).__name__}.")
    return payload


def load_manifest_text(raw_text: str) -> ManifestDocument:
    payload = decode_manifest(raw_text)
    registries = _parse_registries(payload.get(REGISTRIES_KEY))

    span = find_dependencies_span(raw_text)
    if span is None:
        logger.debug("No dependency table found in manifest text.")
        return ManifestDocument(registries=registries)

    block = span.extract(raw_text)
    if decode_dependency_block(block) != payload.get(DEPENDENCIES_FIELD):
        raise ManifestShapeError(
            "The first \"dependencies\" table in the manifest is not the top-level dependency object."
        )
    logger.debug("Dependency table spans [%d, %d) (%d chars).", span.start, span.end, len(block))
    return ManifestDocument(
        registries=registries,
        dependency_block=block,
        dependency_span=span,
        table_indent=line_indent(raw_text, span.start),
    )


def decode_dependency_block(block: str) -> Dict[str, Any]:
    """Decode a dependency table interior as a flat JSON object."""

    try:
        return json.loads("{" + block + "}")
    except json.JSONDecodeError as exc:
        raise ManifestShapeError(f"Dependency table is not a flat JSON object: {exc}") from exc


def read_manifest_text(path: Path) -> str:
    """Read manifest text without newline translation."""

    with Path(path).open("r", encoding="utf-8", newline="") as handle:
        return handle.read()


def load_manifest(path: Path) -> Tuple[ManifestDocument, str]:
    """Load a manifest from disk and return it with the raw text it came from."""

    raw_text = read_manifest_text(path)
    logger.debug("Read manifest %s (%d chars).", path, len(raw_text))
    try:
        return load_manifest_text(raw_text), raw_text
    except (LoadError, ManifestShapeError) as exc:
        raise type(exc)(f"{path}: {exc}") from exc


def _parse_registries(value: Any) -> List[ScopedRegistry]:
    if value is None:
        return []
    if not isinstance(value, list):
        raise LoadError(f"'{REGISTRIES_KEY}' must be an array, got {type(value).__name__}.")
    registries: List[ScopedRegistry] = []
    for index, entry in enumerate(value):
        try:
            registries.append(ScopedRegistry.model_validate(entry))
        except ValidationError as exc:
            raise LoadError(f"Invalid entry {index} in '{REGISTRIES_KEY}': {exc}") from exc
    return registries


__all__ = [
    "BOM",
    "DEPENDENCIES_FIELD",
    "REGISTRIES_KEY",
    "decode_dependency_block",
    "decode_manifest",
    "load_manifest",
    "load_manifest_text",
    "read_manifest_text",
]
