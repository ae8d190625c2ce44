"""Filesystem operations behind ``create-nexu init`` and ``create-nexu add``.

Everything here takes explicit directories and never prompts; the CLI
collects answers and decides what to call.
"""

from __future__ import annotations

import logging
import re
import shutil
import subprocess
from collections.abc import Iterable
from pathlib import Path

from create_nexu.core.constants import MANIFEST_FILE, SHARED_PACKAGES
from create_nexu.sync.manifest import load_manifest, write_manifest

logger = logging.getLogger(__name__)

PROJECT_NAME_PATTERN = re.compile(r"^[a-z0-9-]+$")
DEFAULT_PROJECT_NAME = "my-nexu-app"
WORKSPACE_GLOBS: tuple[str, ...] = ("apps/*", "packages/*")

FEATURES: dict[str, str] = {
    "services": "Docker services (PostgreSQL, Redis, etc.)",
    "workflows": "GitHub Actions workflows",
    "changesets": "Changesets (versioning)",
    "husky": "Husky (git hooks)",
    "vscode": "VSCode settings",
}

_FEATURE_PATHS: dict[str, tuple[str, ...]] = {
    "services": ("services",),
    "workflows": (".github/workflows", ".github/actions"),
    "changesets": (".changeset",),
    "husky": (".husky",),
    "vscode": (".vscode",),
}

# Manifest entries owned by a feature: (scripts, devDependencies, top-level keys)
_FEATURE_MANIFEST: dict[str, tuple[tuple[str, ...], tuple[str, ...], tuple[str, ...]]] = {
    "changesets": (("changeset", "version-packages", "release"), ("@changesets/cli",), ()),
    "husky": (("prepare",), ("husky", "lint-staged"), ("lint-staged",)),
}

_COPY_IGNORE = shutil.ignore_patterns("node_modules", ".turbo", "dist", ".DS_Store")


def is_valid_project_name(name: str) -> bool:
    return bool(PROJECT_NAME_PATTERN.match(name or ""))


def visible_entries(directory: Path) -> list[Path]:
    """Non-hidden entries of *directory* (empty when it does not exist)."""
    if not directory.is_dir():
        return []
    return [item for item in directory.iterdir() if not item.name.startswith(".")]


def copy_template(template_root: Path, project_dir: Path) -> None:
    """Copy the whole template into *project_dir*, merging into existing content."""
    logger.debug("Copying template %s -> %s", template_root, project_dir)
    shutil.copytree(template_root, project_dir, dirs_exist_ok=True, ignore=_COPY_IGNORE)


def customize_manifest(project_dir: Path, project_name: str, features: Iterable[str]) -> None:
    """Name the project and drop manifest entries of unselected features.

    The ``packageManager`` field is removed so any package manager can be used.
    """
    manifest_path = project_dir / MANIFEST_FILE
    document = load_manifest(manifest_path)
    document["name"] = project_name
    document.pop("packageManager", None)

    selected = set(features)
    for feature, (scripts, dev_dependencies, keys) in _FEATURE_MANIFEST.items():
        if feature in selected:
            continue
        for name in scripts:
            if isinstance(document.get("scripts"), dict):
                document["scripts"].pop(name, None)
        for name in dev_dependencies:
            if isinstance(document.get("devDependencies"), dict):
                document["devDependencies"].pop(name, None)
        for key in keys:
            document.pop(key, None)

    write_manifest(manifest_path, document)


def _remove(path: Path) -> bool:
    if path.is_dir() and not path.is_symlink():
        shutil.rmtree(path)
        return True
    if path.exists() or path.is_symlink():
        path.unlink()
        return True
    return False


def remove_unselected(
    project_dir: Path,
    packages: Iterable[str],
    features: Iterable[str],
) -> list[str]:
    """Delete shared packages and feature paths that were not selected.

    Returns the removed paths relative to *project_dir*.
    """
    kept_packages = set(packages)
    kept_features = set(features)
    removed: list[str] = []

    for name in SHARED_PACKAGES:
        if name not in kept_packages and _remove(project_dir / "packages" / name):
            removed.append(f"packages/{name}")

    for feature, paths in _FEATURE_PATHS.items():
        if feature in kept_features:
            continue
        for relative in paths:
            if _remove(project_dir / relative):
                removed.append(relative)

    return removed


def configure_workspaces(project_dir: Path, manager: str) -> bool:
    """Switch workspace configuration from pnpm to the manifest field.

    npm and yarn read ``workspaces`` from package.json; pnpm keeps
    ``pnpm-workspace.yaml``. Returns True when the project was rewritten.
    """
    if manager not in ("npm", "yarn"):
        return False

    for name in ("pnpm-workspace.yaml", ".npmrc"):
        (project_dir / name).unlink(missing_ok=True)

    manifest_path = project_dir / MANIFEST_FILE
    document = load_manifest(manifest_path)
    document["workspaces"] = list(WORKSPACE_GLOBS)
    write_manifest(manifest_path, document)
    return True


def init_git_repo(project_dir: Path, message: str = "Initial commit from create-nexu") -> bool:
    """Initialise a repository with one commit of everything; False on failure."""
    try:
        for command in (["git", "init"], ["git", "add", "."], ["git", "commit", "-m", message]):
            subprocess.run(command, cwd=project_dir, check=True, capture_output=True)
    except (subprocess.CalledProcessError, FileNotFoundError) as exc:
        logger.warning("git initialisation failed in %s: %s", project_dir, exc)
        return False
    return True


def missing_packages(project_dir: Path) -> list[str]:
    """Shared packages without a directory under ``packages/``."""
    return [name for name in SHARED_PACKAGES if not (project_dir / "packages" / name).is_dir()]


def add_packages(template_root: Path, project_dir: Path, names: Iterable[str]) -> list[str]:
    """Copy the named shared packages from the template; existing ones are left alone."""
    added: list[str] = []
    for name in names:
        source = template_root / "packages" / name
        dest = project_dir / "packages" / name
        if dest.exists() or not source.is_dir():
            continue
        shutil.copytree(source, dest, ignore=_COPY_IGNORE)
        added.append(name)
    return added


def add_services(template_root: Path, project_dir: Path) -> int:
    """Copy ``services/`` from the template without overwriting; returns files written."""
    source_root = template_root / "services"
    if not source_root.is_dir():
        return 0

    written = 0
    for source in sorted(source_root.rglob("*")):
        if not source.is_file():
            continue
        dest = project_dir / "services" / source.relative_to(source_root)
        if dest.exists():
            continue
        dest.parent.mkdir(parents=True, exist_ok=True)
        shutil.copy2(source, dest)
        written += 1
    return written


__all__ = [
    "DEFAULT_PROJECT_NAME",
    "FEATURES",
    "WORKSPACE_GLOBS",
    "add_packages",
    "add_services",
    "configure_workspaces",
    "copy_template",
    "customize_manifest",
    "init_git_repo",
    "is_valid_project_name",
    "missing_packages",
    "remove_unselected",
    "visible_entries",
]
