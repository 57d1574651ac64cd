"""Reassemble manifest text around the preserved dependency block."""

from __future__ import annotations

import json
import logging
import os
import shutil
import tempfile
from pathlib import Path
from typing import Any, Dict

from ..errors import ManifestShapeError, WriteError
from .document import ManifestDocument
from .loader import BOM, DEPENDENCIES_FIELD, REGISTRIES_KEY, decode_dependency_block, decode_manifest
from .spans import find_dependencies_span

logger = logging.getLogger(__name__)

DEFAULT_INDENT = 2


def render_manifest(original_text: str, document: ManifestDocument, *, indent: int = DEFAULT_INDENT) -> str:
    """Return the manifest text for ``document``.

    Everything except the dependency table interior is re-serialized from
    ``original_text`` (with registries taken from ``document``); the table
    interior is ``document.dependency_block`` verbatim.
    """

    skeleton_payload = _build_skeleton(decode_manifest(original_text), document)
    skeleton = json.dumps(skeleton_payload, indent=indent, ensure_ascii=False)
    if "\r\n" in original_text:
        skeleton = skeleton.replace("\n", "\r\n")

    span = find_dependencies_span(skeleton)
    if span is None:  # pragma: no cover - the skeleton always carries the placeholder
        raise ManifestShapeError("Serialized manifest lost its dependency placeholder.")

    block = document.dependency_block or ""
    expected = decode_dependency_block(block)
    text = span.splice(skeleton, block)
    if decode_manifest(text).get(DEPENDENCIES_FIELD) != expected:
        raise ManifestShapeError("Dependency table did not land in the top-level \"dependencies\" object.")
    if original_text.startswith(BOM):
        text = BOM + text
    if original_text.endswith("\n"):
        text += "\r\n" if original_text.endswith("\r\n") else "\n"
    return text


def write_manifest(path: Path, text: str) -> None:
    """Replace ``path`` with ``text`` atomically.

    The content goes to a temporary sibling first and is moved over the target
    with :func:`os.replace`, so readers see either the old or the new file.
    """

    path = Path(path)
    handle = tempfile.NamedTemporaryFile(
        "w",
        encoding="utf-8",
        newline="",
        dir=path.parent,
        prefix=f".{path.name}.",
        suffix=".tmp",
        delete=False,
    )
    temp_path = Path(handle.name)

    try:
        with handle:
            handle.write(text)
        if path.exists():
            shutil.copymode(path, temp_path)
        os.replace(temp_path, path)
    except UnicodeEncodeError as exc:
        temp_path.unlink(missing_ok=True)
        raise WriteError(f"{path}: manifest text is not encodable as UTF-8: {exc}") from exc
    except BaseException:
        temp_path.unlink(missing_ok=True)
        raise
    logger.info("Wrote manifest %s (%d chars).", path, len(text))


def _build_skeleton(payload: Dict[str, Any], document: ManifestDocument) -> Dict[str, Any]:
    registries = [registry.model_dump(mode="json") for registry in document.registries]

    skeleton: Dict[str, Any] = {}
    for key, value in payload.items():
        if key == REGISTRIES_KEY:
            skeleton[key] = registries
        elif key == DEPENDENCIES_FIELD:
            skeleton[key] = {}
        else:
            skeleton[key] = value

    skeleton.setdefault(DEPENDENCIES_FIELD, {})
    if REGISTRIES_KEY not in skeleton and registries:
        skeleton[REGISTRIES_KEY] = registries
    return skeleton


__all__ = ["DEFAULT_INDENT", "render_manifest", "write_manifest"]
