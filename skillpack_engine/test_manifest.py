"""Tests for manifest assembly and serialization."""

import json

from skillpack_engine.bundle.manifest import assemble_manifest, load_manifest, write_manifest
from skillpack_engine.bundle.schema import PackageResult, PluginMeta, SkillGroup


def _result(name: str, version=None, spec=None) -> PackageResult:
    return PackageResult(
        name=name, version=version, spec_version=spec, path=f"dist/{name}.zip", size=42, integrity_token="ab" * 32
    )


def test_groups_omitted_when_empty(tmp_path):
    manifest_path = write_manifest(tmp_path, [_result("one")], [])

    data = json.loads(manifest_path.read_text(encoding="utf-8"))

    assert "groups" not in data
    assert data["bundles"] == [{"name": "one", "path": "dist/one.zip", "size": 42, "integrityToken": "ab" * 32}]
    assert data["generated"].endswith("Z")


def test_groups_present_when_computed(tmp_path):
    results = [_result("one", "1.0.0", 1), _result("two")]
    groups = [
        SkillGroup(plugin=PluginMeta(name="pack", version="2.0.0", path="/repo/pack"), skills=[results[0]]),
        SkillGroup(skills=[results[1]]),
    ]

    data = json.loads(write_manifest(tmp_path, results, groups).read_text(encoding="utf-8"))

    assert [b["name"] for b in data["bundles"]] == ["one", "two"]
    assert data["bundles"][0]["specVersion"] == 1
    assert data["groups"][0]["group"] == {"name": "pack", "version": "2.0.0", "path": "/repo/pack"}
    assert "group" not in data["groups"][1]
    assert data["groups"][1]["bundles"][0]["name"] == "two"


def test_duplicates_are_kept_in_order():
    manifest = assemble_manifest([_result("same"), _result("other"), _result("same")], generated="t")

    assert [s.name for s in manifest.skills] == ["same", "other", "same"]
    assert manifest.groups is None
    assert manifest.generated == "t"


def test_load_round_trip(tmp_path):
    results = [_result("one", "1.0.0")]
    groups = [SkillGroup(skills=results)]

    manifest = load_manifest(write_manifest(tmp_path, results, groups))

    assert manifest.skills == results
    assert manifest.groups[0].skills == results
