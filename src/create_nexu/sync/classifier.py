"""Deletion exclusion predicate.

Deletion detection removes user files, so the gate is an explicit token
list rather than anything inferred from ignore files.
"""

from __future__ import annotations

import os
from collections.abc import Iterable

from create_nexu.core.constants import EXCLUDE_FROM_DELETION


def normalize_relative_path(relative_path: str) -> str:
    """Return *relative_path* with ``/`` separators and no leading ``./``."""
    normalized = relative_path.replace("\\", "/")
    if os.sep != "/":
        normalized = normalized.replace(os.sep, "/")
    while normalized.startswith("./"):
        normalized = normalized[2:]
    return normalized


def should_exclude_from_deletion(
    name: str,
    relative_path: str,
    exclusions: Iterable[str] = EXCLUDE_FROM_DELETION,
) -> bool:
    """Return True when *name*/*relative_path* must never be reported as deleted.

    Matches when the entry name equals a token, or the relative path equals
    a token or is nested under one. Non-string input is never excluded.
    """
    if not isinstance(name, str) or not isinstance(relative_path, str):
        return False

    tokens = [normalize_relative_path(t) for t in exclusions if isinstance(t, str) and t]
    if name and name in tokens:
        return True

    normalized = normalize_relative_path(relative_path)
    if not normalized:
        return False
    for token in tokens:
        if normalized == token or normalized.startswith(token + "/"):
            return True
    return False


__all__ = ["normalize_relative_path", "should_exclude_from_deletion"]
