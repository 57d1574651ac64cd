"""Schema definitions for manifest data."""

from .manifest import PackageCatalog, PackageSpec, ScopedRegistry

__all__ = [
    "PackageCatalog",
    "PackageSpec",
    "ScopedRegistry",
]
