"""Template-sync engine used by ``create-nexu update``."""

from __future__ import annotations

from .aggregator import aggregate, resolve_categories
from .applier import apply_changes, clean_empty_directories
from .classifier import should_exclude_from_deletion
from .comparator import collect_changes
from .manifest import ScriptPolicy, diff_manifests, merge_manifests
from .models import (
    ApplyResult,
    Category,
    ChangeSet,
    ChangeType,
    FileChange,
    ManifestDiff,
)
from .selection import SelectionOutcome, SelectionState, StaticPromptProvider, select

__all__ = [
    "ApplyResult",
    "Category",
    "ChangeSet",
    "ChangeType",
    "FileChange",
    "ManifestDiff",
    "ScriptPolicy",
    "SelectionOutcome",
    "SelectionState",
    "StaticPromptProvider",
    "aggregate",
    "apply_changes",
    "clean_empty_directories",
    "collect_changes",
    "diff_manifests",
    "merge_manifests",
    "resolve_categories",
    "select",
    "should_exclude_from_deletion",
]
