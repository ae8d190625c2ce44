"""Apply an approved subset of a change set to the project tree."""

from __future__ import annotations

import logging
import shutil
from collections.abc import Iterable
from pathlib import Path

from create_nexu.core.constants import EXCLUDE_FROM_DELETION, MANIFEST_FILE
from create_nexu.errors import ManifestError
from create_nexu.sync.classifier import should_exclude_from_deletion
from create_nexu.sync.manifest import ScriptPolicy, apply_manifest_merge
from create_nexu.sync.models import (
    ApplyFailure,
    ApplyResult,
    Category,
    ChangeType,
    FileChange,
    ManifestDiff,
)

logger = logging.getLogger(__name__)


def clean_empty_directories(
    root: Path,
    exclusions: Iterable[str] = EXCLUDE_FROM_DELETION,
) -> int:
    """Remove every empty directory below *root*, bottom-up.

    *root* itself is kept. Excluded directories (``.git``, ``node_modules``...)
    are not descended into. Returns the number of directories removed.
    """
    exclusions = frozenset(exclusions)
    return _clean(root, "", exclusions)


def _clean(directory: Path, base_path: str, exclusions: frozenset[str]) -> int:
    removed = 0
    if not directory.is_dir():
        return removed
    for entry in sorted(directory.iterdir(), key=lambda p: p.name):
        if not entry.is_dir() or entry.is_symlink():
            continue
        relative = f"{base_path}/{entry.name}" if base_path else entry.name
        if should_exclude_from_deletion(entry.name, relative, exclusions):
            continue
        removed += _clean(entry, relative, exclusions)
        if not any(entry.iterdir()):
            entry.rmdir()
            logger.debug("Removed empty directory %s", relative)
            removed += 1
    return removed


def _inside(project_root: Path, path: Path) -> bool:
    # The entry itself may be a symlink; only its parent must stay inside the project.
    return path.parent.resolve().is_relative_to(project_root.resolve())


def _make_room(change: FileChange) -> None:
    """Clear a symlink or an empty directory standing where a file goes."""
    dest = change.dest_path
    if dest.is_symlink():
        dest.unlink()
    elif dest.is_dir():
        if any(dest.iterdir()):
            raise ValueError(
                f"{change.relative_path}: a non-empty directory is in the way of the template file"
            )
        dest.rmdir()


def _apply_one(change: FileChange, project_root: Path) -> bool:
    """Apply a single change. Returns False when nothing had to be done."""
    if not _inside(project_root, change.dest_path):
        raise ValueError(f"{change.relative_path}: resolves outside the project")

    if change.type is ChangeType.DELETE:
        if not change.dest_path.exists() and not change.dest_path.is_symlink():
            return False
        change.dest_path.unlink()
        return True

    if change.source_path is None:
        raise ValueError(f"{change.relative_path}: no template source for {change.type.value}")
    _make_room(change)
    change.dest_path.parent.mkdir(parents=True, exist_ok=True)
    shutil.copy2(change.source_path, change.dest_path)
    return True


def apply_changes(
    changes: Iterable[FileChange],
    approved: Iterable[Category],
    project_root: Path,
    template_root: Path | None = None,
    manifest_diff: ManifestDiff | None = None,
    script_policy: ScriptPolicy = ScriptPolicy.PRESERVE,
    exclusions: Iterable[str] = EXCLUDE_FROM_DELETION,
) -> ApplyResult:
    """Apply every change whose category is approved.

    Deletions run first, then empty directories are collapsed, then
    additions and modifications are copied. Per-file failures are recorded
    and the batch continues. The manifest is merged last from fresh reads
    of both documents; a manifest failure leaves file changes in place.
    """
    approved_set = frozenset(approved)
    result = ApplyResult(approved=approved_set)
    selected = [c for c in changes if c.category in approved_set]

    def record_failure(change: FileChange, exc: Exception) -> None:
        logger.warning("Failed to apply %s %s: %s", change.type.value, change.relative_path, exc)
        result.failures.append(ApplyFailure(change.category, change.relative_path, str(exc)))

    for change in (c for c in selected if c.type is ChangeType.DELETE):
        try:
            if _apply_one(change, project_root):
                result.files_deleted += 1
                result.applied[change.category] = result.applied.get(change.category, 0) + 1
        except (OSError, ValueError) as exc:
            record_failure(change, exc)

    if result.files_deleted:
        try:
            result.directories_removed = clean_empty_directories(project_root, exclusions)
        except OSError as exc:
            logger.warning("Empty directory cleanup stopped: %s", exc)

    for change in (c for c in selected if c.type is not ChangeType.DELETE):
        try:
            _apply_one(change, project_root)
            result.files_written += 1
            result.applied[change.category] = result.applied.get(change.category, 0) + 1
        except (OSError, ValueError) as exc:
            record_failure(change, exc)

    if (
        Category.DEPENDENCIES in approved_set
        and manifest_diff is not None
        and manifest_diff.has_changes
    ):
        if template_root is None:
            result.manifest_error = "No template root given for manifest merge"
        else:
            try:
                apply_manifest_merge(
                    template_root / MANIFEST_FILE,
                    project_root / MANIFEST_FILE,
                    script_policy,
                )
                result.manifest_updated = True
            except ManifestError as exc:
                logger.warning("Manifest merge failed: %s", exc)
                result.manifest_error = str(exc)

    return result


__all__ = ["apply_changes", "clean_empty_directories"]
