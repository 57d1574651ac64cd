from __future__ import annotations

import shutil
from pathlib import Path
from typing import Callable

import pytest

FIXTURES = Path(__file__).parent / "fixtures"


@pytest.fixture()
def fixtures_dir() -> Path:
    return FIXTURES


@pytest.fixture()
def unity_project(tmp_path: Path) -> Path:
    project = tmp_path / "project"
    (project / "Packages").mkdir(parents=True)
    return project


@pytest.fixture()
def make_manifest(unity_project: Path) -> Callable[[str], Path]:
    """Write manifest text into the project and return its path."""

    def _make(text: str) -> Path:
        path = unity_project / "Packages" / "manifest.json"
        with path.open("w", encoding="utf-8", newline="") as handle:
            handle.write(text)
        return path

    return _make


@pytest.fixture()
def fixture_manifest(unity_project: Path) -> Callable[[str], Path]:
    """Copy a fixture manifest into the project and return its path."""

    def _copy(name: str) -> Path:
        path = unity_project / "Packages" / "manifest.json"
        shutil.copyfile(FIXTURES / name, path)
        return path

    return _copy
