"""Error taxonomy for manifest editing."""

from __future__ import annotations


class ManifestError(RuntimeError):
    """Base class for failures raised while editing a package manifest."""


class LoadError(ManifestError):
    """Raised when manifest text cannot be decoded as a top-level JSON object."""


class ManifestShapeError(ManifestError):
    """Raised when an edit targets a region the manifest does not contain."""


class CatalogError(ManifestError):
    """Raised when a package catalog is unreadable or references unknown entries."""


class ConfigError(ManifestError):
    """Raised when tool settings cannot be parsed."""


class WriteError(ManifestError):
    """Raised when rendered manifest text cannot be written back."""


__all__ = [
    "CatalogError",
    "ConfigError",
    "LoadError",
    "ManifestError",
    "ManifestShapeError",
    "WriteError",
]
