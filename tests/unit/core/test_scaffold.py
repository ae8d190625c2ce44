"""Tests for create_nexu.core.scaffold - init/add filesystem steps."""

from __future__ import annotations

import json
import subprocess
from pathlib import Path

import pytest

from create_nexu.core import scaffold
from create_nexu.core.scaffold import (
    add_packages,
    add_services,
    configure_workspaces,
    copy_template,
    customize_manifest,
    init_git_repo,
    is_valid_project_name,
    missing_packages,
    remove_unselected,
)


@pytest.mark.parametrize("name", ["my-app", "app2", "a"])
def test_valid_project_names(name: str) -> None:
    assert is_valid_project_name(name)


@pytest.mark.parametrize("name", ["My-App", "my_app", "my app", "", "../x"])
def test_invalid_project_names(name: str) -> None:
    assert not is_valid_project_name(name)


def test_copy_template_skips_build_output(tmp_path: Path, template_root: Path, make_tree) -> None:
    make_tree(template_root, {"node_modules/x/index.js": "", "packages/utils/dist/index.js": ""})
    copy_template(template_root, tmp_path / "app")
    assert (tmp_path / "app" / "turbo.json").exists()
    assert not (tmp_path / "app" / "node_modules").exists()
    assert not (tmp_path / "app" / "packages" / "utils" / "dist").exists()


class TestCustomizeManifest:
    def _manifest(self, root: Path) -> Path:
        path = root / "package.json"
        path.write_text(
            json.dumps(
                {
                    "name": "nexu",
                    "scripts": {"dev": "turbo dev", "changeset": "changeset", "prepare": "husky"},
                    "devDependencies": {"@changesets/cli": "^2", "husky": "^9", "lint-staged": "^15"},
                    "lint-staged": {"*.ts": "eslint"},
                    "packageManager": "pnpm@9.12.3",
                }
            )
        )
        return path

    def test_all_features_kept(self, tmp_path: Path) -> None:
        path = self._manifest(tmp_path)
        customize_manifest(tmp_path, "my-app", ["changesets", "husky"])
        data = json.loads(path.read_text())
        assert data["name"] == "my-app"
        assert "packageManager" not in data
        assert data["scripts"]["prepare"] == "husky"
        assert "lint-staged" in data

    def test_unselected_features_are_stripped(self, tmp_path: Path) -> None:
        path = self._manifest(tmp_path)
        customize_manifest(tmp_path, "my-app", [])
        data = json.loads(path.read_text())
        assert data["scripts"] == {"dev": "turbo dev"}
        assert data["devDependencies"] == {}
        assert "lint-staged" not in data


def test_remove_unselected(project_root: Path, make_tree) -> None:
    make_tree(project_root, {".changeset/config.json": "{}", ".github/actions/setup/action.yml": ""})

    removed = remove_unselected(project_root, ["utils"], ["husky"])

    assert "packages/logger" in removed
    assert (project_root / "packages" / "utils").is_dir()
    assert not (project_root / "services").exists()
    assert not (project_root / ".github" / "workflows").exists()
    assert not (project_root / ".github" / "actions").exists()
    assert not (project_root / ".changeset").exists()
    assert not (project_root / ".vscode").exists()
    assert (project_root / ".husky" / "pre-commit").exists()


class TestConfigureWorkspaces:
    def test_pnpm_is_untouched(self, project_root: Path) -> None:
        (project_root / "pnpm-workspace.yaml").write_text("packages: []\n")
        assert not configure_workspaces(project_root, "pnpm")
        assert (project_root / "pnpm-workspace.yaml").exists()

    @pytest.mark.parametrize("manager", ["npm", "yarn"])
    def test_npm_and_yarn_use_manifest_field(self, project_root: Path, manager: str) -> None:
        (project_root / "pnpm-workspace.yaml").write_text("packages: []\n")
        (project_root / ".npmrc").write_text("auto-install-peers=true\n")

        assert configure_workspaces(project_root, manager)

        data = json.loads((project_root / "package.json").read_text())
        assert data["workspaces"] == ["apps/*", "packages/*"]
        assert not (project_root / "pnpm-workspace.yaml").exists()
        assert not (project_root / ".npmrc").exists()


class TestInitGitRepo:
    def test_runs_init_add_commit(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        commands = []

        def fake_run(cmd, **kwargs):
            commands.append(cmd[:2])
            return subprocess.CompletedProcess(cmd, 0)

        monkeypatch.setattr(scaffold.subprocess, "run", fake_run)
        assert init_git_repo(tmp_path)
        assert commands == [["git", "init"], ["git", "add"], ["git", "commit"]]

    def test_failure_returns_false(self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
        def failing(cmd, **kwargs):
            raise subprocess.CalledProcessError(128, cmd)

        monkeypatch.setattr(scaffold.subprocess, "run", failing)
        assert not init_git_repo(tmp_path)


class TestAdd:
    def test_missing_packages(self, project_root: Path) -> None:
        assert "utils" not in missing_packages(project_root)
        assert "cache" in missing_packages(project_root)

    def test_add_packages_never_overwrites(self, template_root: Path, project_root: Path, make_tree) -> None:
        make_tree(template_root, {"packages/cache/src/index.ts": "export const cache = 1;\n"})
        (project_root / "packages" / "utils" / "src" / "index.ts").write_text("mine\n")

        added = add_packages(template_root, project_root, ["cache", "utils", "types"])

        assert added == ["cache"]
        assert (project_root / "packages" / "cache" / "src" / "index.ts").exists()
        assert (project_root / "packages" / "utils" / "src" / "index.ts").read_text() == "mine\n"

    def test_add_services_keeps_existing_files(
        self, template_root: Path, project_root: Path, make_tree
    ) -> None:
        make_tree(template_root, {"services/redis/redis.conf": "maxmemory 256mb\n"})
        (project_root / "services" / "docker-compose.yml").write_text("custom\n")

        written = add_services(template_root, project_root)

        assert written == 1
        assert (project_root / "services" / "docker-compose.yml").read_text() == "custom\n"
        assert (project_root / "services" / "redis" / "redis.conf").exists()
