"""Package catalogs: which packages can be installed and from where."""

from __future__ import annotations

import logging
from pathlib import Path

import yaml
from pydantic import ValidationError

from .errors import CatalogError
from .schemas.manifest import PackageCatalog

logger = logging.getLogger(__name__)

OPENUPM = "openupm"

_DEFAULT_CATALOG = {
    "registries": {
        OPENUPM: {
            "name": "package.openupm.com",
            "url": "https://package.openupm.com",
            "scopes": ["com.atteneder.gltfast", "com.openupm"],
        },
    },
    "packages": {
        "gltfast": {
            "name": "com.atteneder.gltfast",
            "version": "2.0.0",
            "title": "glTFast",
            "registry": OPENUPM,
        },
        "draco": {
            "name": "com.atteneder.draco",
            "version": "https://gitlab.com/atteneder/DracoUnity.git",
            "title": "Draco",
            "registry": OPENUPM,
        },
    },
}


def default_catalog() -> PackageCatalog:
    """Catalog bundled with the tool (glTFast and Draco via OpenUPM)."""

    return PackageCatalog.model_validate(_DEFAULT_CATALOG)


def load_catalog(path: Path) -> PackageCatalog:
    """Load a catalog from a YAML file.

    Example::

        registries:
          openupm:
            name: package.openupm.com
            url: https://package.openupm.com
            scopes: [com.atteneder.gltfast, com.openupm]
        packages:
          gltfast:
            name: com.atteneder.gltfast
            version: "2.0.0"
            registry: openupm
    """

    try:
        payload = yaml.safe_load(Path(path).read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise CatalogError(f"Invalid catalog YAML at {path}: {exc}") from exc
    if not isinstance(payload, dict):
        raise CatalogError(f"Catalog at {path} must be a mapping.")
    try:
        catalog = PackageCatalog.model_validate(payload)
    except ValidationError as exc:
        raise CatalogError(f"Invalid catalog at {path}: {exc}") from exc
    logger.debug("Loaded catalog %s (%d packages).", path, len(catalog.packages))
    return catalog


__all__ = ["OPENUPM", "default_catalog", "load_catalog"]
