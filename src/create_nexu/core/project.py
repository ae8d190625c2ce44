"""Project detection and bundled template discovery."""

from __future__ import annotations

import json
import os
from importlib.resources import files
from pathlib import Path

from create_nexu.core.constants import DEFAULT_TEMPLATE, MANIFEST_FILE, TEMPLATE_ROOT_ENV
from create_nexu.errors import NotANexuProjectError, TemplateNotFoundError


def is_nexu_project(directory: Path) -> bool:
    """Return True if *directory* looks like the root of a Nexu monorepo.

    A project root has a ``package.json`` and either names itself ``nexu``
    or carries a ``turbo.json``. Unreadable manifests are not projects.
    """
    manifest = directory / MANIFEST_FILE
    if not manifest.is_file():
        return False
    try:
        data = json.loads(manifest.read_text(encoding="utf-8"))
    except (OSError, ValueError):
        return False
    if isinstance(data, dict) and data.get("name") == "nexu":
        return True
    return (directory / "turbo.json").exists()


def require_project(directory: Path) -> Path:
    """Return *directory* or raise if it is not a Nexu project root."""
    if not is_nexu_project(directory):
        raise NotANexuProjectError(directory)
    return directory


def locate_template_root(name: str = DEFAULT_TEMPLATE) -> Path:
    """Return the template directory to copy from.

    Resolution order:
    1. ``NEXU_TEMPLATE_ROOT`` environment variable (testing, local checkouts)
    2. ``templates/<name>`` bundled inside the installed package

    Raises:
        TemplateNotFoundError: If neither location is a directory.
    """
    if env_root := os.environ.get(TEMPLATE_ROOT_ENV):
        root = Path(env_root).expanduser()
        if root.is_dir():
            return root
        raise TemplateNotFoundError(f"{TEMPLATE_ROOT_ENV} path does not exist: {env_root}")

    bundled = Path(str(files("create_nexu"))) / "templates" / name
    if bundled.is_dir():
        return bundled

    raise TemplateNotFoundError(f"Template '{name}' not found.")


__all__ = ["is_nexu_project", "locate_template_root", "require_project"]
