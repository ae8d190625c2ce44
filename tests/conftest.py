from __future__ import annotations

import json
import shutil
from collections.abc import Callable
from pathlib import Path

import pytest

TEMPLATE_MANIFEST = {
    "name": "nexu",
    "private": True,
    "scripts": {
        "build": "turbo run build",
        "dev": "turbo run dev",
        "lint": "turbo run lint",
    },
    "dependencies": {"zod": "^3.23.8"},
    "devDependencies": {
        "prettier": "^3.3.3",
        "turbo": "^2.2.3",
        "typescript": "^5.6.3",
    },
}

TEMPLATE_FILES = {
    "turbo.json": '{"tasks": {"build": {}}}\n',
    ".prettierrc": '{"semi": true}\n',
    "tsconfig.json": '{"compilerOptions": {"strict": true}}\n',
    ".husky/pre-commit": "npx lint-staged\n",
    ".vscode/settings.json": '{"editor.formatOnSave": true}\n',
    ".github/workflows/ci.yml": "name: CI\n",
    "services/docker-compose.yml": "services: {}\n",
    "scripts/setup.mjs": "console.log('setup');\n",
    "packages/utils/src/index.ts": "export const utils = 1;\n",
    "packages/utils/package.json": '{"name": "@repo/utils"}\n',
    "packages/logger/src/index.ts": "export const logger = 1;\n",
}


def write_tree(root: Path, files: dict[str, str]) -> Path:
    for relative, content in files.items():
        path = root / relative
        path.parent.mkdir(parents=True, exist_ok=True)
        path.write_text(content, encoding="utf-8")
    return root


def write_json(path: Path, data: dict) -> Path:
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")
    return path


@pytest.fixture()
def make_tree() -> Callable[[Path, dict[str, str]], Path]:
    """Return a helper writing ``{relative_path: content}`` below a root."""
    return write_tree


@pytest.fixture()
def template_root(tmp_path: Path) -> Path:
    root = tmp_path / "template"
    write_tree(root, TEMPLATE_FILES)
    write_json(root / "package.json", TEMPLATE_MANIFEST)
    return root


@pytest.fixture()
def project_root(tmp_path: Path, template_root: Path) -> Path:
    """A project that is fully in sync with ``template_root``."""
    root = tmp_path / "project"
    shutil.copytree(template_root, root)
    return root


@pytest.fixture()
def read_json() -> Callable[[Path], dict]:
    return lambda path: json.loads(path.read_text(encoding="utf-8"))


@pytest.fixture()
def wide_console(monkeypatch: pytest.MonkeyPatch) -> None:
    """Keep CLI output on one line per message regardless of tmp path length."""
    from create_nexu.cli.helpers import console

    monkeypatch.setattr(console, "width", 400)
