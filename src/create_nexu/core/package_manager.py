"""Package manager detection and install runner.

Supports npm, yarn and pnpm.
"""

from __future__ import annotations

import json
import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from pathlib import Path

from create_nexu.core.constants import MANIFEST_FILE

logger = logging.getLogger(__name__)

PACKAGE_MANAGERS: tuple[str, ...] = ("pnpm", "npm", "yarn")

_LOCK_FILES: tuple[tuple[str, str], ...] = (
    ("pnpm-lock.yaml", "pnpm"),
    ("yarn.lock", "yarn"),
    ("package-lock.json", "npm"),
)


def detect_package_manager(project_dir: Path) -> str:
    """Detect which package manager a project uses.

    Lock files win, then the manifest's ``packageManager`` field, then the
    ``npm_config_user_agent`` variable set by a running package manager.
    Defaults to npm.
    """
    for lock_file, manager in _LOCK_FILES:
        if (project_dir / lock_file).exists():
            return manager

    manifest = project_dir / MANIFEST_FILE
    if manifest.is_file():
        try:
            declared = json.loads(manifest.read_text(encoding="utf-8")).get("packageManager", "")
        except (OSError, ValueError, AttributeError):
            declared = ""
        if isinstance(declared, str):
            for manager in PACKAGE_MANAGERS:
                if declared.startswith(manager):
                    return manager

    user_agent = os.environ.get("npm_config_user_agent", "")
    if "pnpm" in user_agent:
        return "pnpm"
    if "yarn" in user_agent:
        return "yarn"
    return "npm"


def get_install_command(manager: str, frozen: bool = False) -> str:
    if manager == "pnpm":
        return "pnpm install --frozen-lockfile" if frozen else "pnpm install"
    if manager == "yarn":
        return "yarn install --frozen-lockfile" if frozen else "yarn install"
    return "npm ci" if frozen else "npm install"


def get_run_command(manager: str) -> str:
    if manager in ("pnpm", "yarn"):
        return manager
    return "npm run"


@dataclass
class InstallResult:
    """Outcome of a dependency install."""

    success: bool
    command: str
    message: str = ""


def run_install(project_dir: Path, manager: str | None = None) -> InstallResult:
    """Run the install command in *project_dir*; never raises."""
    manager = manager or detect_package_manager(project_dir)
    command = get_install_command(manager)
    logger.debug("Running %s in %s", command, project_dir)
    try:
        completed = subprocess.run(shlex.split(command), cwd=project_dir, check=False)
    except FileNotFoundError:
        return InstallResult(False, command, f"{manager} executable not found on PATH")
    except OSError as exc:
        return InstallResult(False, command, str(exc))

    if completed.returncode != 0:
        return InstallResult(False, command, f"exit code {completed.returncode}")
    return InstallResult(True, command)


__all__ = [
    "InstallResult",
    "PACKAGE_MANAGERS",
    "detect_package_manager",
    "get_install_command",
    "get_run_command",
    "run_install",
]
