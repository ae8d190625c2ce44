"""Manifest (package.json) loading, diffing and merging."""

from __future__ import annotations

import json
import logging
from enum import Enum
from pathlib import Path
from typing import Any

from create_nexu.errors import ManifestError
from create_nexu.sync.models import MANIFEST_GROUPS, ManifestDiff, VersionChange

logger = logging.getLogger(__name__)

DEPENDENCY_GROUPS: tuple[str, ...] = ("dependencies", "devDependencies")


class ScriptPolicy(str, Enum):
    """How template scripts are merged into the project's scripts."""

    PRESERVE = "preserve"  # project wins, template only fills gaps
    OVERWRITE = "overwrite"  # template wins


def load_manifest(path: Path) -> dict[str, Any]:
    """Read and validate a manifest document.

    Raises:
        ManifestError: If the file cannot be read, is not valid JSON, is not
            an object, or holds a non-object dependency/script group.
    """
    try:
        data = json.loads(path.read_text(encoding="utf-8"))
    except OSError as exc:
        raise ManifestError(path, exc.strerror or str(exc)) from exc
    except json.JSONDecodeError as exc:
        raise ManifestError(path, f"invalid JSON ({exc.msg} at line {exc.lineno})") from exc

    if not isinstance(data, dict):
        raise ManifestError(path, "top-level value must be an object")
    for group in MANIFEST_GROUPS:
        if group in data and not isinstance(data[group], dict):
            raise ManifestError(path, f'"{group}" must be an object')
    return data


def write_manifest(path: Path, document: dict[str, Any]) -> None:
    """Persist *document* as two-space indented JSON with a trailing newline."""
    try:
        path.write_text(json.dumps(document, indent=2, ensure_ascii=False) + "\n", encoding="utf-8")
    except OSError as exc:
        raise ManifestError(path, exc.strerror or str(exc)) from exc


def _group(document: dict[str, Any], group: str) -> dict[str, Any]:
    return document.get(group) or {}


def diff_documents(
    template_doc: dict[str, Any],
    project_doc: dict[str, Any],
    include_script_updates: bool = True,
) -> ManifestDiff:
    """Compute added/updated entries between two loaded manifests."""
    diff = ManifestDiff()
    for group in MANIFEST_GROUPS:
        project_group = _group(project_doc, group)
        for name, value in _group(template_doc, group).items():
            if name not in project_group:
                diff.added[group][name] = value
            elif project_group[name] != value:
                if group == "scripts" and not include_script_updates:
                    continue
                diff.updated[group][name] = VersionChange(
                    from_value=str(project_group[name]), to_value=str(value)
                )
    return diff


def diff_manifests(
    template_manifest: Path,
    project_manifest: Path,
    include_script_updates: bool = True,
) -> ManifestDiff | None:
    """Return the diff between two manifests, or ``None`` if either is missing."""
    if not template_manifest.is_file() or not project_manifest.is_file():
        logger.debug("Manifest missing, skipping dependency diff")
        return None
    return diff_documents(
        load_manifest(template_manifest),
        load_manifest(project_manifest),
        include_script_updates=include_script_updates,
    )


def sort_mapping(mapping: dict[str, Any]) -> dict[str, Any]:
    return {key: mapping[key] for key in sorted(mapping)}


def merge_manifests(
    template_doc: dict[str, Any],
    project_doc: dict[str, Any],
    script_policy: ScriptPolicy = ScriptPolicy.PRESERVE,
) -> dict[str, Any]:
    """Merge template dependency and script maps into the project document.

    Dependencies: template values win for keys the template defines.
    Scripts: governed by *script_policy*. Both dependency maps are sorted
    by key; every other key of the project document is kept as-is.
    """
    merged = dict(project_doc)

    for group in DEPENDENCY_GROUPS:
        template_group = _group(template_doc, group)
        if template_group:
            merged[group] = {**_group(project_doc, group), **template_group}
        if isinstance(merged.get(group), dict):
            merged[group] = sort_mapping(merged[group])

    template_scripts = _group(template_doc, "scripts")
    if template_scripts:
        project_scripts = _group(project_doc, "scripts")
        if script_policy is ScriptPolicy.OVERWRITE:
            merged["scripts"] = {**project_scripts, **template_scripts}
        else:
            missing = {k: v for k, v in template_scripts.items() if k not in project_scripts}
            merged["scripts"] = {**project_scripts, **missing}

    return merged


def apply_manifest_merge(
    template_manifest: Path,
    project_manifest: Path,
    script_policy: ScriptPolicy = ScriptPolicy.PRESERVE,
) -> dict[str, Any]:
    """Re-read both manifests, merge them and write the project manifest."""
    merged = merge_manifests(
        load_manifest(template_manifest),
        load_manifest(project_manifest),
        script_policy,
    )
    write_manifest(project_manifest, merged)
    return merged


__all__ = [
    "DEPENDENCY_GROUPS",
    "ScriptPolicy",
    "apply_manifest_merge",
    "diff_documents",
    "diff_manifests",
    "load_manifest",
    "merge_manifests",
    "sort_mapping",
    "write_manifest",
]
