"""CLI tests for ``create-nexu add`` and the root app."""

from __future__ import annotations

import shutil
from pathlib import Path

import pytest
from typer.testing import CliRunner

from create_nexu import __version__, app
from create_nexu.core.constants import SHARED_PACKAGES, TEMPLATE_ROOT_ENV

runner = CliRunner()

pytestmark = pytest.mark.usefixtures("wide_console")


@pytest.fixture()
def in_project(project_root: Path, template_root: Path, monkeypatch: pytest.MonkeyPatch) -> Path:
    monkeypatch.setenv(TEMPLATE_ROOT_ENV, str(template_root))
    monkeypatch.chdir(project_root)
    return project_root


class TestAddPackage:
    def test_adds_named_package(self, in_project: Path, template_root: Path, make_tree) -> None:
        make_tree(template_root, {"packages/cache/src/index.ts": "export const cache = 1;\n"})

        result = runner.invoke(app, ["add", "package", "-n", "cache"])

        assert result.exit_code == 0, result.output
        assert "Added 1 package(s)" in result.output
        assert (in_project / "packages" / "cache" / "src" / "index.ts").exists()
        assert "pnpm install" in result.output

    def test_all_packages_installed(self, in_project: Path, make_tree) -> None:
        make_tree(in_project, {f"packages/{name}/package.json": "{}" for name in SHARED_PACKAGES})

        result = runner.invoke(app, ["add", "package"])

        assert result.exit_code == 0
        assert "All packages are already installed." in result.output


class TestAddService:
    def test_keeps_existing_service_files(self, in_project: Path, template_root: Path, make_tree) -> None:
        make_tree(template_root, {"services/postgres/init.sql": "select 1;\n"})
        (in_project / "services" / "docker-compose.yml").write_text("custom\n")

        result = runner.invoke(app, ["add", "service", "-n", "postgres"])

        assert result.exit_code == 0, result.output
        assert "Services configuration added" in result.output
        assert "all service configs copied" in result.output
        assert "up -d postgres" in result.output
        assert (in_project / "services" / "docker-compose.yml").read_text() == "custom\n"
        assert (in_project / "services" / "postgres" / "init.sql").exists()

    def test_missing_services_dir_declined(self, in_project: Path, template_root: Path) -> None:
        shutil.rmtree(in_project / "services")

        result = runner.invoke(app, ["add", "service", "-n", "redis"], input="n\n")

        assert result.exit_code == 0
        assert not (in_project / "services").exists()


def test_unknown_component(in_project: Path) -> None:
    result = runner.invoke(app, ["add", "plugin"])
    assert result.exit_code == 1
    assert "Unknown component type: plugin" in result.output


def test_add_outside_project(tmp_path: Path, monkeypatch: pytest.MonkeyPatch) -> None:
    monkeypatch.chdir(tmp_path)
    result = runner.invoke(app, ["add", "package", "-n", "cache"])
    assert result.exit_code == 1
    assert "does not appear to be a Nexu project" in result.output


def test_version_flag() -> None:
    result = runner.invoke(app, ["--version"])
    assert result.exit_code == 0
    assert f"create-nexu {__version__}" in result.output


def test_bare_invocation_shows_usage_hint() -> None:
    result = runner.invoke(app, [])
    assert result.exit_code == 0
    assert "Run 'create-nexu --help' for usage information" in result.output
