"""Data model for the template-sync engine.

A run produces one :class:`ChangeSet` (file changes plus the manifest diff),
the selection gate turns it into a set of approved :class:`Category`
members, and the applier reports back with an :class:`ApplyResult`.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from pathlib import Path

from create_nexu.core.constants import CONFIG_FILES


class ChangeType(str, Enum):
    """Kind of difference between a template file and a project file."""

    ADD = "add"
    MODIFY = "modify"
    DELETE = "delete"


class Category(str, Enum):
    """Independently selectable partition of a project tree."""

    CONFIG = "config"
    WORKFLOWS = "workflows"
    SERVICES = "services"
    SCRIPTS = "scripts"
    PACKAGES = "packages"
    DEPENDENCIES = "dependencies"

    @property
    def label(self) -> str:
        return _CATEGORY_LABELS[self]

    @property
    def tree_roots(self) -> tuple[str, ...]:
        """Directories walked recursively for this category."""
        return _CATEGORY_TREES[self]

    @property
    def root_files(self) -> tuple[str, ...]:
        """Individual root-level files compared for this category (never deleted)."""
        return CONFIG_FILES if self is Category.CONFIG else ()

    @property
    def existing_packages_only(self) -> bool:
        """Only subtrees that already exist in the project are compared."""
        return self is Category.PACKAGES

    @property
    def has_files(self) -> bool:
        return self is not Category.DEPENDENCIES


_CATEGORY_LABELS: dict[Category, str] = {
    Category.CONFIG: "Configuration files",
    Category.WORKFLOWS: "GitHub workflows",
    Category.SERVICES: "Docker services",
    Category.SCRIPTS: "Scripts",
    Category.PACKAGES: "Shared packages",
    Category.DEPENDENCIES: "Package.json dependencies",
}

_CATEGORY_TREES: dict[Category, tuple[str, ...]] = {
    Category.CONFIG: (".husky", ".vscode"),
    Category.WORKFLOWS: (".github",),
    Category.SERVICES: ("services", "docker"),
    Category.SCRIPTS: ("scripts",),
    Category.PACKAGES: ("packages",),
    Category.DEPENDENCIES: (),
}


@dataclass(frozen=True)
class FileChange:
    """One detected difference between template and project."""

    type: ChangeType
    relative_path: str
    source_path: Path | None
    dest_path: Path
    category: Category

    def to_dict(self) -> dict[str, str | None]:
        return {
            "type": self.type.value,
            "relative_path": self.relative_path,
            "source_path": str(self.source_path) if self.source_path else None,
            "dest_path": str(self.dest_path),
            "category": self.category.value,
        }


MANIFEST_GROUPS: tuple[str, ...] = ("dependencies", "devDependencies", "scripts")


@dataclass(frozen=True)
class VersionChange:
    """Previous and new value of a manifest entry."""

    from_value: str
    to_value: str


def _empty_groups() -> dict[str, dict]:
    return {group: {} for group in MANIFEST_GROUPS}


@dataclass
class ManifestDiff:
    """Structured comparison of the template and project manifests."""

    added: dict[str, dict[str, str]] = field(default_factory=_empty_groups)
    updated: dict[str, dict[str, VersionChange]] = field(default_factory=_empty_groups)

    @property
    def has_changes(self) -> bool:
        return any(self.added[g] or self.updated[g] for g in MANIFEST_GROUPS)

    def entry_count(self) -> int:
        return sum(len(self.added[g]) + len(self.updated[g]) for g in MANIFEST_GROUPS)

    def to_dict(self) -> dict[str, object]:
        return {
            "added": {g: dict(self.added[g]) for g in MANIFEST_GROUPS},
            "updated": {
                g: {
                    name: {"from": change.from_value, "to": change.to_value}
                    for name, change in self.updated[g].items()
                }
                for g in MANIFEST_GROUPS
            },
        }


@dataclass(frozen=True)
class ComparisonFailure:
    """A category whose comparison was aborted."""

    category: Category
    message: str


@dataclass
class ChangeSet:
    """All file changes plus the manifest diff for one aggregation run."""

    changes: list[FileChange] = field(default_factory=list)
    manifest_diff: ManifestDiff | None = None
    errors: list[ComparisonFailure] = field(default_factory=list)

    @property
    def has_manifest_changes(self) -> bool:
        return self.manifest_diff is not None and self.manifest_diff.has_changes

    @property
    def is_empty(self) -> bool:
        return not self.changes and not self.has_manifest_changes

    def of_type(self, change_type: ChangeType) -> list[FileChange]:
        return [c for c in self.changes if c.type is change_type]

    def by_category(self) -> dict[Category, list[FileChange]]:
        grouped: dict[Category, list[FileChange]] = {}
        for category in Category:
            matching = [c for c in self.changes if c.category is category]
            if matching:
                grouped[category] = matching
        return grouped

    def categories(self) -> list[Category]:
        """Categories with something to apply, in declaration order."""
        present = set(self.by_category())
        if self.has_manifest_changes:
            present.add(Category.DEPENDENCIES)
        return [category for category in Category if category in present]

    def to_dict(self) -> dict[str, object]:
        return {
            "changes": [c.to_dict() for c in self.changes],
            "manifest": self.manifest_diff.to_dict() if self.manifest_diff else None,
            "errors": [{"category": e.category.value, "message": e.message} for e in self.errors],
            "is_empty": self.is_empty,
        }


@dataclass(frozen=True)
class ApplyFailure:
    """A single file change that could not be applied."""

    category: Category
    relative_path: str
    message: str


@dataclass
class ApplyResult:
    """Outcome counters of an apply run."""

    approved: frozenset[Category] = frozenset()
    files_written: int = 0
    files_deleted: int = 0
    directories_removed: int = 0
    applied: dict[Category, int] = field(default_factory=dict)
    failures: list[ApplyFailure] = field(default_factory=list)
    manifest_updated: bool = False
    manifest_error: str | None = None

    @property
    def success(self) -> bool:
        return not self.failures and self.manifest_error is None

    def category_status(self) -> dict[Category, str]:
        """Map each approved category to ``ok``, ``warning`` or ``failed``."""
        statuses: dict[Category, str] = {}
        for category in Category:
            if category not in self.approved:
                continue
            if category is Category.DEPENDENCIES:
                statuses[category] = "failed" if self.manifest_error else "ok"
                continue
            failed = sum(1 for f in self.failures if f.category is category)
            if not failed:
                statuses[category] = "ok"
            elif self.applied.get(category, 0):
                statuses[category] = "warning"
            else:
                statuses[category] = "failed"
        return statuses


__all__ = [
    "ApplyFailure",
    "ApplyResult",
    "Category",
    "ChangeSet",
    "ChangeType",
    "ComparisonFailure",
    "FileChange",
    "MANIFEST_GROUPS",
    "ManifestDiff",
    "VersionChange",
]
