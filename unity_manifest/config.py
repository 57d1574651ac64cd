"""Tool settings loaded from YAML with environment overrides."""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError

from .catalog import default_catalog, load_catalog
from .errors import ConfigError
from .manifest.dependencies import DEFAULT_ENTRY_INDENT, KeyMatch
from .manifest.writer import DEFAULT_INDENT
from .schemas.manifest import PackageCatalog

logger = logging.getLogger(__name__)

SETTINGS_FILENAME = "unity-manifest.yaml"
ENV_PREFIX = "UNITY_MANIFEST_"
_ENV_FIELDS = {
    "INDENT": "indent",
    "ENTRY_INDENT": "entry_indent",
    "KEY_MATCH": "key_match",
    "CATALOG": "catalog_path",
}


class ManifestSettings(BaseModel):
    indent: int = Field(default=DEFAULT_INDENT, ge=0, description="Indent width for re-serialized JSON.")
    entry_indent: str = Field(default=DEFAULT_ENTRY_INDENT, description="Prefix for inserted dependency lines.")
    key_match: KeyMatch = Field(default=KeyMatch.EXACT, description="Dependency key comparison mode.")
    catalog_path: Optional[Path] = Field(default=None, description="YAML catalog replacing the built-in one.")

    model_config = ConfigDict(extra="forbid")

    def load_catalog(self) -> PackageCatalog:
        if self.catalog_path is None:
            return default_catalog()
        return load_catalog(self.catalog_path)


def load_settings(path: Optional[Path] = None, *, env: Optional[Mapping[str, str]] = None) -> ManifestSettings:
    """Build settings from an optional YAML file, then ``UNITY_MANIFEST_*`` variables.

    A missing file is not an error; a malformed one is.
    """

    payload: Dict[str, Any] = {}
    if path is not None and Path(path).is_file():
        payload.update(_read_settings_file(Path(path)))

    environ = os.environ if env is None else env
    for suffix, field_name in _ENV_FIELDS.items():
        value = environ.get(ENV_PREFIX + suffix)
        if value:
            logger.debug("Settings override from %s%s.", ENV_PREFIX, suffix)
            payload[field_name] = value

    try:
        return ManifestSettings.model_validate(payload)
    except ValidationError as exc:
        raise ConfigError(f"Invalid settings: {exc}") from exc


def resolve_manifest_path(project_root: Path) -> Path:
    """Location of the package manifest inside a Unity project."""

    return Path(project_root) / "Packages" / "manifest.json"


def _read_settings_file(path: Path) -> Dict[str, Any]:
    try:
        loaded = yaml.safe_load(path.read_text(encoding="utf-8")) or {}
    except yaml.YAMLError as exc:
        raise ConfigError(f"Invalid settings YAML at {path}: {exc}") from exc
    if not isinstance(loaded, dict):
        raise ConfigError(f"Settings at {path} must be a mapping.")
    catalog = loaded.get("catalog_path")
    if isinstance(catalog, str) and not Path(catalog).is_absolute():
        loaded["catalog_path"] = str(path.parent / catalog)
    return loaded


__all__ = ["ENV_PREFIX", "ManifestSettings", "SETTINGS_FILENAME", "load_settings", "resolve_manifest_path"]
