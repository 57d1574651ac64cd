"""Format-preserving editor for Unity package manifests."""

__version__ = "0.1.0"
from .catalog import default_catalog, load_catalog
from .config import ManifestSettings, load_settings, resolve_manifest_path
from .errors import CatalogError, ConfigError, LoadError, ManifestError, ManifestShapeError, WriteError
from .installer import InstallResult, InstallStatus, ManifestInstaller
from .manifest import (
    KeyMatch,
    ManifestDocument,
    TextSpan,
    add_registry,
    find_dependencies_span,
    has_dependency,
    load_manifest,
    load_manifest_text,
    quote_key,
    render_manifest,
    upsert_dependency,
    write_manifest,
)
from .schemas import PackageCatalog, PackageSpec, ScopedRegistry

__all__ = [
    "__version__",
    "CatalogError",
    "ConfigError",
    "InstallResult",
    "InstallStatus",
    "KeyMatch",
    "LoadError",
    "ManifestDocument",
    "ManifestError",
    "ManifestInstaller",
    "ManifestSettings",
    "ManifestShapeError",
    "PackageCatalog",
    "PackageSpec",
    "ScopedRegistry",
    "TextSpan",
    "WriteError",
    "add_registry",
    "default_catalog",
    "find_dependencies_span",
    "has_dependency",
    "load_catalog",
    "load_manifest",
    "load_manifest_text",
    "load_settings",
    "quote_key",
    "render_manifest",
    "resolve_manifest_path",
    "upsert_dependency",
    "write_manifest",
]
