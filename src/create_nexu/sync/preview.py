"""Line-level preview of modified files (display only)."""

from __future__ import annotations

import difflib
from pathlib import Path

from rich.console import Console
from rich.markup import escape

MAX_LINES_PER_HUNK = 5
MAX_LINE_WIDTH = 80


def _hunk_lines(marker: str, style: str, lines: list[str]) -> list[tuple[str, str]]:
    lines = [line for line in lines if line]
    rendered = [(style, f"  {marker} {line[:MAX_LINE_WIDTH]}") for line in lines[:MAX_LINES_PER_HUNK]]
    if len(lines) > MAX_LINES_PER_HUNK:
        rendered.append(("grey50", f"  ... and {len(lines) - MAX_LINES_PER_HUNK} more lines"))
    return rendered


def file_diff_lines(source: Path, dest: Path) -> list[tuple[str, str]]:
    """Return ``(style, text)`` pairs describing how *dest* would change.

    *source* is the template file, *dest* the current project file.
    """
    if not dest.exists():
        return [("green", "  (new file)")]

    old = dest.read_text(encoding="utf-8", errors="replace").splitlines()
    new = source.read_text(encoding="utf-8", errors="replace").splitlines()

    rendered: list[tuple[str, str]] = []
    matcher = difflib.SequenceMatcher(a=old, b=new, autojunk=False)
    for tag, i1, i2, j1, j2 in matcher.get_opcodes():
        if tag == "equal":
            continue
        if tag in ("replace", "delete"):
            rendered.extend(_hunk_lines("-", "red", old[i1:i2]))
        if tag in ("replace", "insert"):
            rendered.extend(_hunk_lines("+", "green", new[j1:j2]))

    if not rendered:
        return [("grey50", "  (no visible changes)")]
    return rendered


def render_file_diff(console: Console, source: Path, dest: Path) -> None:
    for style, text in file_diff_lines(source, dest):
        console.print(f"[{style}]{escape(text)}[/{style}]")


__all__ = ["MAX_LINES_PER_HUNK", "file_diff_lines", "render_file_diff"]
