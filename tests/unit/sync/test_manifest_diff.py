"""Tests for create_nexu.sync.manifest - package.json diff and merge."""

from __future__ import annotations

import json
from pathlib import Path

import pytest

from create_nexu.errors import ManifestError
from create_nexu.sync.manifest import (
    ScriptPolicy,
    apply_manifest_merge,
    diff_documents,
    diff_manifests,
    load_manifest,
    merge_manifests,
    write_manifest,
)
from create_nexu.sync.models import VersionChange

TEMPLATE = {
    "name": "nexu",
    "scripts": {"build": "turbo run build", "lint": "turbo run lint --fix"},
    "dependencies": {"zod": "^3.23.8"},
    "devDependencies": {"turbo": "^2.2.3", "typescript": "^5.6.3"},
}


class TestLoadManifest:
    def test_malformed_json_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("{not json", encoding="utf-8")
        with pytest.raises(ManifestError, match="invalid JSON"):
            load_manifest(path)

    def test_non_object_document_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text("[1, 2]", encoding="utf-8")
        with pytest.raises(ManifestError, match="must be an object"):
            load_manifest(path)

    def test_non_object_group_raises(self, tmp_path: Path) -> None:
        path = tmp_path / "package.json"
        path.write_text('{"dependencies": ["react"]}', encoding="utf-8")
        with pytest.raises(ManifestError, match='"dependencies"'):
            load_manifest(path)

    def test_missing_file_raises(self, tmp_path: Path) -> None:
        with pytest.raises(ManifestError):
            load_manifest(tmp_path / "nope.json")


class TestDiffDocuments:
    def test_added_and_updated_entries(self) -> None:
        project = {
            "scripts": {"build": "turbo run build", "lint": "eslint ."},
            "devDependencies": {"turbo": "^1.13.0"},
        }
        diff = diff_documents(TEMPLATE, project)

        assert diff.added["dependencies"] == {"zod": "^3.23.8"}
        assert diff.added["devDependencies"] == {"typescript": "^5.6.3"}
        assert diff.updated["devDependencies"] == {
            "turbo": VersionChange(from_value="^1.13.0", to_value="^2.2.3")
        }
        assert diff.updated["scripts"] == {
            "lint": VersionChange(from_value="eslint .", to_value="turbo run lint --fix")
        }
        assert diff.has_changes
        assert diff.entry_count() == 4

    def test_script_updates_can_be_suppressed(self) -> None:
        project = {"scripts": {"build": "turbo run build", "lint": "eslint ."}}
        diff = diff_documents(TEMPLATE, project, include_script_updates=False)
        assert diff.updated["scripts"] == {}
        assert "lint" not in diff.added["scripts"]

    def test_name_appears_in_at_most_one_map(self) -> None:
        diff = diff_documents(TEMPLATE, {"devDependencies": {"turbo": "^1.0.0"}})
        for group in ("dependencies", "devDependencies", "scripts"):
            assert not set(diff.added[group]) & set(diff.updated[group])

    def test_equal_documents_have_no_changes(self) -> None:
        assert not diff_documents(TEMPLATE, dict(TEMPLATE)).has_changes


class TestDiffManifests:
    def test_missing_file_returns_none(self, tmp_path: Path) -> None:
        write_manifest(tmp_path / "t.json", TEMPLATE)
        assert diff_manifests(tmp_path / "t.json", tmp_path / "p.json") is None
        assert diff_manifests(tmp_path / "p.json", tmp_path / "t.json") is None

    def test_reads_both_files(self, tmp_path: Path) -> None:
        write_manifest(tmp_path / "t.json", TEMPLATE)
        write_manifest(tmp_path / "p.json", {"name": "mine"})
        diff = diff_manifests(tmp_path / "t.json", tmp_path / "p.json")
        assert diff is not None
        assert set(diff.added["devDependencies"]) == {"turbo", "typescript"}


class TestMergeManifests:
    def test_template_dependency_values_win(self) -> None:
        project = {"name": "app", "devDependencies": {"turbo": "^1.0.0", "vitest": "^2.0.0"}}
        merged = merge_manifests(TEMPLATE, project)

        assert merged["devDependencies"] == {
            "turbo": "^2.2.3",
            "typescript": "^5.6.3",
            "vitest": "^2.0.0",
        }
        assert list(merged["devDependencies"]) == sorted(merged["devDependencies"])
        assert merged["dependencies"] == {"zod": "^3.23.8"}

    def test_preserve_policy_keeps_project_scripts(self) -> None:
        project = {"scripts": {"lint": "eslint .", "start": "node ."}}
        merged = merge_manifests(TEMPLATE, project, ScriptPolicy.PRESERVE)
        assert merged["scripts"] == {
            "lint": "eslint .",
            "start": "node .",
            "build": "turbo run build",
        }

    def test_overwrite_policy_lets_template_win(self) -> None:
        project = {"scripts": {"lint": "eslint .", "start": "node ."}}
        merged = merge_manifests(TEMPLATE, project, ScriptPolicy.OVERWRITE)
        assert merged["scripts"]["lint"] == "turbo run lint --fix"
        assert merged["scripts"]["start"] == "node ."

    def test_other_keys_and_order_are_kept(self) -> None:
        project = {"name": "app", "version": "1.2.3", "private": True, "devDependencies": {}}
        merged = merge_manifests(TEMPLATE, project)
        assert merged["name"] == "app"
        assert list(merged)[:3] == ["name", "version", "private"]

    def test_project_document_is_not_mutated(self) -> None:
        project = {"devDependencies": {"turbo": "^1.0.0"}}
        merge_manifests(TEMPLATE, project)
        assert project == {"devDependencies": {"turbo": "^1.0.0"}}


def test_write_manifest_format(tmp_path: Path) -> None:
    path = tmp_path / "package.json"
    write_manifest(path, {"name": "café", "scripts": {"a": "b"}})
    text = path.read_text(encoding="utf-8")
    assert text.endswith("}\n")
    assert '  "name": "café"' in text


def test_apply_manifest_merge_writes_project(tmp_path: Path) -> None:
    write_manifest(tmp_path / "t.json", TEMPLATE)
    write_manifest(tmp_path / "p.json", {"name": "mine", "devDependencies": {"turbo": "^1.0.0"}})

    apply_manifest_merge(tmp_path / "t.json", tmp_path / "p.json")

    written = json.loads((tmp_path / "p.json").read_text(encoding="utf-8"))
    assert written["name"] == "mine"
    assert written["devDependencies"]["turbo"] == "^2.2.3"
    assert written["dependencies"] == {"zod": "^3.23.8"}
