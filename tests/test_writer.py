from __future__ import annotations

import json
import os
import stat
from pathlib import Path

import pytest

from unity_manifest.errors import ManifestShapeError, WriteError
from unity_manifest.manifest.dependencies import has_dependency, upsert_dependency
from unity_manifest.manifest.document import ManifestDocument
from unity_manifest.manifest.loader import load_manifest_text
from unity_manifest.manifest.registries import add_registry
from unity_manifest.manifest.writer import render_manifest, write_manifest
from unity_manifest.schemas.manifest import ScopedRegistry

OPENUPM = ScopedRegistry(
    name="package.openupm.com",
    url="https://package.openupm.com",
    scopes=("com.atteneder.gltfast", "com.openupm"),
)
GLTFAST = '"com.atteneder.gltfast"'

SCENARIO_INPUT = '{\n  "dependencies": {\n    "com.foo.bar": "1.0.0"\n  }\n}\n'
SCENARIO_OUTPUT = """{
  "dependencies": {
    "com.atteneder.gltfast": "2.0.0",
    "com.foo.bar": "1.0.0"
  },
  "scopedRegistries": [
    {
      "name": "package.openupm.com",
      "url": "https://package.openupm.com",
      "scopes": [
        "com.atteneder.gltfast",
        "com.openupm"
      ]
    }
  ]
}
"""


def _install_flow(raw: str) -> str:
    document = load_manifest_text(raw)
    add_registry(document, OPENUPM)
    if not has_dependency(document, GLTFAST):
        upsert_dependency(document, GLTFAST, "2.0.0")
    return render_manifest(raw, document)


def test_render_scenario_adds_registry_and_prepends_dependency() -> None:
    assert _install_flow(SCENARIO_INPUT) == SCENARIO_OUTPUT


def test_render_scenario_is_idempotent() -> None:
    first = _install_flow(SCENARIO_INPUT)
    assert _install_flow(first) == first


def test_round_trip_of_canonical_manifest_is_byte_identical(fixtures_dir: Path) -> None:
    raw = (fixtures_dir / "manifest_registry.json").read_text(encoding="utf-8")

    assert render_manifest(raw, load_manifest_text(raw)) == raw


def test_round_trip_preserves_dependency_formatting_and_reformats_registries() -> None:
    raw = (
        '{"scopedRegistries":[{"name":"r","url":"https://r.example","scopes":["com.r"]}],'
        '"dependencies":{ "b" :"2",\n\n      "a":"1" }}'
    )
    document = load_manifest_text(raw)

    output = render_manifest(raw, document)

    assert '{ "b" :"2",\n\n      "a":"1" }' in output
    assert output.startswith('{\n  "scopedRegistries": [\n    {\n      "name": "r",')
    decoded = json.loads(output)
    assert decoded["scopedRegistries"] == [{"name": "r", "url": "https://r.example", "scopes": ["com.r"]}]
    assert decoded["dependencies"] == {"b": "2", "a": "1"}


def test_render_keeps_other_top_level_keys_in_order(fixtures_dir: Path) -> None:
    raw = (fixtures_dir / "manifest_registry.json").read_text(encoding="utf-8")
    document = load_manifest_text(raw)
    add_registry(document, ScopedRegistry(name="extra", url="https://extra.example", scopes=("com.extra",)))

    decoded = json.loads(render_manifest(raw, document))

    assert list(decoded) == ["dependencies", "scopedRegistries", "testables"]
    assert decoded["testables"] == ["com.unity.ugui"]
    assert [entry["name"] for entry in decoded["scopedRegistries"]] == ["package.openupm.com", "extra"]


def test_render_keeps_registry_extra_keys() -> None:
    raw = json.dumps(
        {
            "dependencies": {},
            "scopedRegistries": [{"name": "r", "url": "u", "scopes": [], "overrideBuiltIns": True}],
        }
    )

    decoded = json.loads(render_manifest(raw, load_manifest_text(raw)))

    assert decoded["scopedRegistries"][0]["overrideBuiltIns"] is True


def test_render_without_registries_does_not_add_key() -> None:
    raw = '{\n  "dependencies": {\n    "a": "1"\n  }\n}'

    assert render_manifest(raw, load_manifest_text(raw)) == raw


def test_render_adds_placeholder_table_when_missing() -> None:
    raw = '{"scopedRegistries": []}'

    output = render_manifest(raw, load_manifest_text(raw))

    assert json.loads(output) == {"scopedRegistries": [], "dependencies": {}}


def test_render_honours_indent() -> None:
    raw = '{"dependencies": {"a": "1"}, "scopedRegistries": [{"name": "r", "url": "u", "scopes": []}]}'

    output = render_manifest(raw, load_manifest_text(raw), indent=4)

    assert '\n    "scopedRegistries": [\n        {' in output


def test_render_preserves_bom_and_crlf() -> None:
    raw = '\ufeff{\r\n  "dependencies": {\r\n    "a": "1"\r\n  }\r\n}\r\n'

    assert render_manifest(raw, load_manifest_text(raw)) == raw


def test_write_manifest_replaces_file_without_leftovers(tmp_path: Path) -> None:
    path = tmp_path / "manifest.json"
    path.write_text("{}", encoding="utf-8")
    os.chmod(path, 0o644)

    write_manifest(path, '{\r\n  "dependencies": {}\r\n}\r\n')

    assert path.read_bytes() == b'{\r\n  "dependencies": {}\r\n}\r\n'
    assert sorted(p.name for p in tmp_path.iterdir()) == ["manifest.json"]
    assert stat.S_IMODE(path.stat().st_mode) == 0o644


def test_write_manifest_missing_directory_raises(tmp_path: Path) -> None:
    with pytest.raises(FileNotFoundError):
        write_manifest(tmp_path / "missing" / "manifest.json", "{}")


def test_render_refuses_to_splice_into_nested_dependencies() -> None:
    raw = '{"testables": {"dependencies": {}}, "dependencies": {"a": "1"}}'
    document = ManifestDocument(dependency_block='"a": "1"')

    with pytest.raises(ManifestShapeError):
        render_manifest(raw, document)


def test_write_manifest_unencodable_text_leaves_no_temp_file(tmp_path: Path) -> None:
    path = tmp_path / "manifest.json"
    path.write_text('{"dependencies": {}}', encoding="utf-8")

    with pytest.raises(WriteError):
        write_manifest(path, '{"note": "\ud800", "dependencies": {}}')

    assert sorted(p.name for p in tmp_path.iterdir()) == ["manifest.json"]
    assert path.read_text(encoding="utf-8") == '{"dependencies": {}}'
