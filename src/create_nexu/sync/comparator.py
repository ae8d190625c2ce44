"""Tree comparison between a template directory and a project directory.

The template is the source of truth. Every file it holds that is missing
or byte-different in the project yields an ``add``/``modify`` record;
every non-excluded project file without a template counterpart yields a
``delete`` record. A path that is a directory on one side and a file on
the other is reported as a delete of the old kind plus an add of the new
kind.
"""

from __future__ import annotations

import filecmp
import logging
from collections.abc import Iterable
from pathlib import Path

from create_nexu.core.constants import EXCLUDE_FROM_DELETION
from create_nexu.errors import ComparisonError
from create_nexu.sync.classifier import should_exclude_from_deletion
from create_nexu.sync.models import Category, ChangeType, FileChange

logger = logging.getLogger(__name__)


def _join(base_path: str, name: str) -> str:
    return f"{base_path}/{name}" if base_path else name


def _list_dir(directory: Path, category: Category) -> list[Path]:
    try:
        return sorted(directory.iterdir(), key=lambda p: p.name)
    except OSError as exc:
        raise ComparisonError(category.value, directory, exc.strerror or str(exc)) from exc


def files_equal(source: Path, dest: Path, category: Category = Category.CONFIG) -> bool:
    """Return True when both paths are files with identical bytes."""
    if not source.is_file() or not dest.is_file():
        return False
    try:
        return filecmp.cmp(source, dest, shallow=False)
    except OSError as exc:
        raise ComparisonError(category.value, dest, exc.strerror or str(exc)) from exc


def is_real_dir(path: Path) -> bool:
    """True for a directory that is not reached through a symlink entry."""
    return path.is_dir() and not path.is_symlink()


def compare_file(
    source: Path,
    dest: Path,
    relative_path: str,
    category: Category,
) -> FileChange | None:
    """Compare a single template file against its project counterpart.

    A symlink in the project is never compared through; it is replaced.
    """
    if dest.is_symlink() or not dest.is_file():
        return FileChange(ChangeType.ADD, relative_path, source, dest, category)
    if not files_equal(source, dest, category):
        return FileChange(ChangeType.MODIFY, relative_path, source, dest, category)
    return None


def _same_kind(source: Path, dest: Path) -> bool:
    if not source.exists():
        return False
    return source.is_dir() == is_real_dir(dest)


def collect_changes(
    template_dir: Path,
    project_dir: Path,
    category: Category,
    base_path: str = "",
    exclusions: Iterable[str] = EXCLUDE_FROM_DELETION,
    check_deleted: bool = True,
) -> list[FileChange]:
    """Walk *template_dir* and *project_dir* in lock-step.

    Raises:
        ComparisonError: when a directory or file cannot be read.
    """
    exclusions = frozenset(exclusions)
    changes: list[FileChange] = []
    project_is_dir = is_real_dir(project_dir)

    if template_dir.is_dir():
        for source in _list_dir(template_dir, category):
            dest = project_dir / source.name
            relative = _join(base_path, source.name)
            if source.is_dir():
                changes.extend(
                    collect_changes(source, dest, category, relative, exclusions, check_deleted)
                )
                continue
            if project_is_dir:
                change = compare_file(source, dest, relative, category)
            else:
                change = FileChange(ChangeType.ADD, relative, source, dest, category)
            if change is not None:
                changes.append(change)

    if check_deleted and project_is_dir:
        for dest in _list_dir(project_dir, category):
            relative = _join(base_path, dest.name)
            if should_exclude_from_deletion(dest.name, relative, exclusions):
                continue
            if _same_kind(template_dir / dest.name, dest):
                continue
            if is_real_dir(dest):
                changes.extend(collect_deleted_files(dest, category, relative, exclusions))
            else:
                changes.append(FileChange(ChangeType.DELETE, relative, None, dest, category))

    logger.debug("%s: %d change(s) under %s", category.value, len(changes), base_path or ".")
    return changes


def collect_deleted_files(
    project_dir: Path,
    category: Category,
    base_path: str,
    exclusions: Iterable[str] = EXCLUDE_FROM_DELETION,
) -> list[FileChange]:
    """Mark every non-excluded file below *project_dir* as deleted."""
    exclusions = frozenset(exclusions)
    changes: list[FileChange] = []
    if not is_real_dir(project_dir):
        return changes

    for dest in _list_dir(project_dir, category):
        relative = _join(base_path, dest.name)
        if should_exclude_from_deletion(dest.name, relative, exclusions):
            continue
        if is_real_dir(dest):
            changes.extend(collect_deleted_files(dest, category, relative, exclusions))
        else:
            changes.append(FileChange(ChangeType.DELETE, relative, None, dest, category))
    return changes


__all__ = [
    "collect_changes",
    "collect_deleted_files",
    "compare_file",
    "files_equal",
    "is_real_dir",
]
