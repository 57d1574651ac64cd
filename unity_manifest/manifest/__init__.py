"""Format-preserving manifest editing."""

from .dependencies import KeyMatch, dependency_keys, has_dependency, quote_key, upsert_dependency
from .document import ManifestDocument
from .loader import load_manifest, load_manifest_text
from .registries import add_registry, find_registry
from .spans import TextSpan, find_dependencies_span
from .writer import render_manifest, write_manifest

__all__ = [
    "KeyMatch",
    "ManifestDocument",
    "TextSpan",
    "add_registry",
    "dependency_keys",
    "find_dependencies_span",
    "find_registry",
    "has_dependency",
    "load_manifest",
    "load_manifest_text",
    "quote_key",
    "render_manifest",
    "upsert_dependency",
    "write_manifest",
]
