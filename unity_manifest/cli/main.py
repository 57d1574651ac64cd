"""Command-line entry point for manifest edits."""

from __future__ import annotations

import argparse
import json
import logging
import sys
from pathlib import Path
from typing import Mapping, Optional, Sequence

from unity_manifest.config import SETTINGS_FILENAME, ManifestSettings, load_settings, resolve_manifest_path
from unity_manifest.errors import ManifestError
from unity_manifest.installer import InstallResult, ManifestInstaller
from unity_manifest.manifest.dependencies import dependency_keys
from unity_manifest.manifest.loader import load_manifest
from unity_manifest.schemas.manifest import PackageSpec, ScopedRegistry


def main(argv: Optional[Sequence[str]] = None) -> int:
    parser = _build_parser()
    args = parser.parse_args(argv)
    _configure_logging(args.verbose)

    handlers = {
        "show": _handle_show,
        "add-registry": _handle_add_registry,
        "install": _handle_install,
        "catalog": _handle_catalog,
    }
    try:
        return handlers[args.command](args)
    except (ManifestError, OSError) as exc:
        _print_json({"error": str(exc), "error_type": type(exc).__name__})
        return 1


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="unity-manifest", description="Unity package manifest helpers.")
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging.")

    common = argparse.ArgumentParser(add_help=False)
    common.add_argument("--project", help="Unity project root (default: current directory).")
    common.add_argument("--manifest", help="Manifest path; overrides --project.")
    common.add_argument("--settings", help=f"Settings YAML (default: <project>/{SETTINGS_FILENAME}).")

    subparsers = parser.add_subparsers(dest="command", required=True)

    subparsers.add_parser("show", parents=[common], help="Show registries and dependencies.")

    add_registry = subparsers.add_parser("add-registry", parents=[common], help="Merge a scoped registry.")
    add_registry.add_argument("--name", required=True)
    add_registry.add_argument("--url", required=True)
    add_registry.add_argument("--scope", action="append", default=[], help="Registry scope (repeatable).")

    install = subparsers.add_parser("install", parents=[common], help="Install a catalog package once.")
    install.add_argument("package", help="Catalog alias, e.g. gltfast.")
    install.add_argument("--catalog", help="YAML catalog replacing the configured one.")
    install.add_argument("-y", "--yes", action="store_true", help="Do not ask for confirmation.")

    catalog = subparsers.add_parser("catalog", parents=[common], help="List installable packages.")
    catalog.add_argument("--catalog", help="YAML catalog replacing the configured one.")

    return parser


def _handle_show(args: argparse.Namespace) -> int:
    manifest_path = _resolve_manifest(args)
    document, _ = load_manifest(manifest_path)
    payload = {
        "manifest_path": str(manifest_path),
        "registries": [registry.model_dump(mode="json") for registry in document.registries],
        "has_dependency_table": document.has_dependency_table,
        "dependencies": dependency_keys(document),
    }
    _print_json(payload)
    return 0


def _handle_add_registry(args: argparse.Namespace) -> int:
    registry = ScopedRegistry(name=args.name, url=args.url, scopes=tuple(args.scope))
    installer = ManifestInstaller(_resolve_manifest(args), settings=_load_settings(args))
    _print_json(_result_payload(installer.add_registry(registry)))
    return 0


def _handle_install(args: argparse.Namespace) -> int:
    settings = _load_settings(args)
    confirm = None if args.yes else _prompt_confirm
    installer = ManifestInstaller(_resolve_manifest(args), settings=settings, confirm=confirm)
    result = installer.install_from_catalog(args.package)
    _print_json(_result_payload(result))
    return 0


def _handle_catalog(args: argparse.Namespace) -> int:
    catalog = _load_settings(args).load_catalog()
    _print_json(catalog.model_dump(mode="json"))
    return 0


def _configure_logging(verbose: bool) -> None:
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
        stream=sys.stderr,
    )


def _project_root(args: argparse.Namespace) -> Path:
    return Path(args.project).resolve() if args.project else Path.cwd()


def _resolve_manifest(args: argparse.Namespace) -> Path:
    if args.manifest:
        return Path(args.manifest).resolve()
    return resolve_manifest_path(_project_root(args))


def _load_settings(args: argparse.Namespace) -> ManifestSettings:
    settings_path = Path(args.settings) if args.settings else _project_root(args) / SETTINGS_FILENAME
    settings = load_settings(settings_path)
    catalog = getattr(args, "catalog", None)
    if catalog:
        settings = settings.model_copy(update={"catalog_path": Path(catalog).resolve()})
    return settings


def _prompt_confirm(package: PackageSpec) -> bool:
    sys.stderr.write(f"Would you like to add the {package.display_name} package to your project? [y/N] ")
    sys.stderr.flush()
    answer = sys.stdin.readline().strip().lower()
    return answer in {"y", "yes"}


def _result_payload(result: InstallResult) -> Mapping[str, object]:
    return {
        "status": result.status.value,
        "manifest_path": str(result.manifest_path),
        "package": result.package.model_dump(mode="json") if result.package else None,
        "registry_added": result.registry_added,
        "written": result.written,
        "logs": list(result.logs),
    }


def _print_json(payload: Mapping[str, object]) -> None:
    print(json.dumps(payload, indent=2, default=str))
