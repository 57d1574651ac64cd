"""Install-once orchestration over a manifest file.

Each call is one read-modify-write transaction: load the file, merge the
registry, gate on the dependency, upsert, render and replace the file. A
dependency that is already declared is never rewritten, whatever version it
pins, so manual edits survive repeated runs.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path
from typing import Callable, List, Optional

from .config import ManifestSettings
from .errors import ManifestShapeError
from .manifest.dependencies import has_dependency, upsert_dependency
from .manifest.document import ManifestDocument
from .manifest.loader import load_manifest
from .manifest.registries import add_registry
from .manifest.writer import render_manifest, write_manifest
from .schemas.manifest import PackageCatalog, PackageSpec, ScopedRegistry

logger = logging.getLogger(__name__)

ConfirmCallback = Callable[[PackageSpec], bool]
WrittenCallback = Callable[[Path], None]


class InstallStatus(str, Enum):
    INSTALLED = "installed"
    ALREADY_INSTALLED = "already-installed"
    DECLINED = "declined"
    REGISTRY_ADDED = "registry-added"
    UNCHANGED = "unchanged"


@dataclass(slots=True)
class InstallResult:
    status: InstallStatus
    manifest_path: Path
    package: Optional[PackageSpec] = None
    registry_added: bool = False
    written: bool = False
    logs: List[str] = field(default_factory=list)


class ManifestInstaller:
    """Applies registry and package installs to one manifest file.

    ``confirm`` is asked before a new dependency is written (no callback means
    yes). ``on_written`` runs after every successful write, e.g. to trigger a
    project refresh.
    """

    def __init__(
        self,
        manifest_path: Path,
        *,
        settings: Optional[ManifestSettings] = None,
        confirm: Optional[ConfirmCallback] = None,
        on_written: Optional[WrittenCallback] = None,
    ) -> None:
        self.manifest_path = Path(manifest_path)
        self.settings = settings or ManifestSettings()
        self.confirm = confirm
        self.on_written = on_written

    def install(self, package: PackageSpec, registry: Optional[ScopedRegistry] = None) -> InstallResult:
        """Add ``package`` (and its registry) unless the package is already declared."""

        logs: List[str] = []
        document, original_text = load_manifest(self.manifest_path)

        registry_added = False
        if registry is not None:
            registry_added = add_registry(document, registry)
            if registry_added:
                logs.append(f"Registry {registry.name} merged.")

        if has_dependency(document, package.key, match=self.settings.key_match):
            logger.info("%s already declared in %s; leaving manifest untouched.", package.name, self.manifest_path)
            logs.append(f"{package.name} already declared; nothing written.")
            return InstallResult(
                status=InstallStatus.ALREADY_INSTALLED,
                manifest_path=self.manifest_path,
                package=package,
                registry_added=registry_added,
                logs=logs,
            )

        if not document.has_dependency_table:
            raise ManifestShapeError(f"{self.manifest_path}: cannot install {package.name}, no dependency table.")

        if self.confirm is not None and not self.confirm(package):
            logger.info("Install of %s declined.", package.name)
            logs.append(f"Install of {package.display_name} declined.")
            return InstallResult(
                status=InstallStatus.DECLINED,
                manifest_path=self.manifest_path,
                package=package,
                registry_added=registry_added,
                logs=logs,
            )

        upsert_dependency(
            document,
            package.key,
            package.version,
            match=self.settings.key_match,
            indent=self.settings.entry_indent,
        )
        self._commit(document, original_text)
        logger.info("Installed %s %s into %s.", package.name, package.version, self.manifest_path)
        logs.append(f"Added {package.name}: {package.version}.")
        return InstallResult(
            status=InstallStatus.INSTALLED,
            manifest_path=self.manifest_path,
            package=package,
            registry_added=registry_added,
            written=True,
            logs=logs,
        )

    def install_from_catalog(self, alias: str, catalog: Optional[PackageCatalog] = None) -> InstallResult:
        catalog = catalog or self.settings.load_catalog()
        package, registry = catalog.resolve(alias)
        return self.install(package, registry)

    def add_registry(self, registry: ScopedRegistry) -> InstallResult:
        """Merge a single registry and write the file if it was missing."""

        document, original_text = load_manifest(self.manifest_path)
        if not add_registry(document, registry):
            return InstallResult(
                status=InstallStatus.UNCHANGED,
                manifest_path=self.manifest_path,
                logs=[f"Registry {registry.name} already present."],
            )

        self._commit(document, original_text)
        return InstallResult(
            status=InstallStatus.REGISTRY_ADDED,
            manifest_path=self.manifest_path,
            registry_added=True,
            written=True,
            logs=[f"Registry {registry.name} added."],
        )

    def _commit(self, document: ManifestDocument, original_text: str) -> None:
        text = render_manifest(original_text, document, indent=self.settings.indent)
        write_manifest(self.manifest_path, text)
        if self.on_written is not None:
            self.on_written(self.manifest_path)


__all__ = ["InstallResult", "InstallStatus", "ManifestInstaller"]
