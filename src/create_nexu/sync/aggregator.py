"""Aggregate per-category tree comparisons and the manifest diff."""

from __future__ import annotations

import logging
from collections.abc import Iterable
from pathlib import Path

from create_nexu.core.constants import EXCLUDE_FROM_DELETION, MANIFEST_FILE, SHARED_PACKAGES
from create_nexu.errors import ComparisonError, ManifestError
from create_nexu.sync.comparator import collect_changes, compare_file
from create_nexu.sync.manifest import ScriptPolicy, diff_manifests
from create_nexu.sync.models import Category, ChangeSet, ComparisonFailure, FileChange

logger = logging.getLogger(__name__)


def resolve_categories(
    *,
    packages: bool = False,
    config: bool = False,
    workflows: bool = False,
    services: bool = False,
    scripts: bool = False,
    dependencies: bool = False,
    all_: bool = False,
) -> frozenset[Category]:
    """Translate CLI category flags into the enabled category set.

    No flag at all behaves like ``--all``.
    """
    flags = {
        Category.PACKAGES: packages,
        Category.CONFIG: config,
        Category.WORKFLOWS: workflows,
        Category.SERVICES: services,
        Category.SCRIPTS: scripts,
        Category.DEPENDENCIES: dependencies,
    }
    if all_ or not any(flags.values()):
        return frozenset(Category)
    return frozenset(category for category, enabled in flags.items() if enabled)


def existing_shared_packages(project_root: Path) -> list[str]:
    """Shared packages that already have a directory under ``packages/``."""
    packages_dir = project_root / "packages"
    if not packages_dir.is_dir():
        return []
    return [name for name in SHARED_PACKAGES if (packages_dir / name).is_dir()]


def collect_category(
    category: Category,
    template_root: Path,
    project_root: Path,
    exclusions: Iterable[str] = EXCLUDE_FROM_DELETION,
) -> list[FileChange]:
    """Collect file changes for one category.

    Raises:
        ComparisonError: when part of the category's trees cannot be read.
    """
    changes: list[FileChange] = []

    for name in category.root_files:
        source = template_root / name
        if source.is_file():
            change = compare_file(source, project_root / name, name, category)
            if change is not None:
                changes.append(change)

    if category.existing_packages_only:
        roots = [f"packages/{name}" for name in existing_shared_packages(project_root)]
    else:
        roots = list(category.tree_roots)

    for root in roots:
        changes.extend(
            collect_changes(
                template_root / root,
                project_root / root,
                category,
                base_path=root,
                exclusions=exclusions,
            )
        )
    return changes


def aggregate(
    template_root: Path,
    project_root: Path,
    categories: Iterable[Category],
    exclusions: Iterable[str] = EXCLUDE_FROM_DELETION,
    script_policy: ScriptPolicy = ScriptPolicy.PRESERVE,
) -> ChangeSet:
    """Build the change set for every enabled category. Read-only.

    Script value updates are only reported under ``ScriptPolicy.OVERWRITE``,
    matching what ``apply_changes`` will merge for the same policy.
    """
    enabled = frozenset(categories)
    exclusions = frozenset(exclusions)
    change_set = ChangeSet()

    for category in Category:
        if category not in enabled or not category.has_files:
            continue
        try:
            change_set.changes.extend(
                collect_category(category, template_root, project_root, exclusions)
            )
        except ComparisonError as exc:
            logger.warning("Comparison aborted for %s: %s", category.value, exc)
            change_set.errors.append(ComparisonFailure(category, str(exc)))

    if Category.DEPENDENCIES in enabled:
        try:
            change_set.manifest_diff = diff_manifests(
                template_root / MANIFEST_FILE,
                project_root / MANIFEST_FILE,
                include_script_updates=script_policy is ScriptPolicy.OVERWRITE,
            )
        except ManifestError as exc:
            logger.warning("Manifest diff failed: %s", exc)
            change_set.errors.append(ComparisonFailure(Category.DEPENDENCIES, str(exc)))

    return change_set


__all__ = ["aggregate", "collect_category", "existing_shared_packages", "resolve_categories"]
