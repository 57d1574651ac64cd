"""Idempotent edits to the ``scopedRegistries`` list."""

from __future__ import annotations

import logging
from typing import Optional

from ..schemas.manifest import ScopedRegistry
from .document import ManifestDocument

logger = logging.getLogger(__name__)


def add_registry(document: ManifestDocument, candidate: ScopedRegistry) -> bool:
    """Append ``candidate`` unless an equal registry is already listed."""

    if any(existing == candidate for existing in document.registries):
        logger.debug("Registry '%s' already present.", candidate.name)
        return False
    document.registries.append(candidate)
    logger.debug("Registry '%s' appended (%d total).", candidate.name, len(document.registries))
    return True


def find_registry(document: ManifestDocument, name: str) -> Optional[ScopedRegistry]:
    return next((registry for registry in document.registries if registry.name == name), None)


__all__ = ["add_registry", "find_registry"]
