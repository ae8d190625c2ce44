"""Tests for create_nexu.core.config (.nexu.yaml)."""

from __future__ import annotations

from pathlib import Path

import pytest

from create_nexu.core.config import UpdateConfig, load_project_config
from create_nexu.core.constants import EXCLUDE_FROM_DELETION
from create_nexu.errors import ConfigError
from create_nexu.sync.manifest import ScriptPolicy


def test_absent_file_gives_defaults(tmp_path: Path) -> None:
    config = load_project_config(tmp_path)
    assert config == UpdateConfig()
    assert config.exclusions == EXCLUDE_FROM_DELETION
    assert config.script_policy is ScriptPolicy.PRESERVE


def test_exclusions_and_policy(tmp_path: Path) -> None:
    (tmp_path / ".nexu.yaml").write_text(
        "update:\n  exclude:\n    - .env.local\n    - apps\n  scripts: Overwrite\n",
        encoding="utf-8",
    )
    config = load_project_config(tmp_path)
    assert config.extra_exclusions == (".env.local", "apps")
    assert {".env.local", "apps", "node_modules"} <= config.exclusions
    assert config.script_policy is ScriptPolicy.OVERWRITE
    assert config.source == tmp_path / ".nexu.yaml"


def test_empty_file_gives_defaults(tmp_path: Path) -> None:
    (tmp_path / ".nexu.yaml").write_text("", encoding="utf-8")
    assert load_project_config(tmp_path) == UpdateConfig()


@pytest.mark.parametrize(
    "content, message",
    [
        ("- just\n- a list\n", "top-level value must be a mapping"),
        ("update: nope\n", "'update' must be a mapping"),
        ("update:\n  exclude: apps\n", "list of strings"),
        ("update:\n  scripts: replace\n", "must be one of"),
        ("update: [unclosed\n", "Failed to parse"),
    ],
)
def test_invalid_values_raise(tmp_path: Path, content: str, message: str) -> None:
    (tmp_path / ".nexu.yaml").write_text(content, encoding="utf-8")
    with pytest.raises(ConfigError, match=message):
        load_project_config(tmp_path)
