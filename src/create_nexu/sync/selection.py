"""Selection gate: summarise a change set and decide which categories apply.

The gate is a small state machine::

    empty change set                 -> NO_CHANGES
    preview requested                -> show diff (optional) -> continue
    dry run                          -> DRY_RUN
    categories supplied by caller    -> APPROVED / CANCELLED (no prompts)
    checkbox: nothing chosen         -> CANCELLED
    confirm: declined                -> CANCELLED
    otherwise                        -> APPROVED

Prompts go through a :class:`PromptProvider` so headless callers and
tests never touch a terminal.
"""

from __future__ import annotations

from collections.abc import Iterable, Sequence
from dataclasses import dataclass, field
from enum import Enum
from typing import Protocol

from rich.console import Console
from rich.markup import escape

from create_nexu.sync.models import MANIFEST_GROUPS, Category, ChangeSet, ChangeType
from create_nexu.sync.preview import render_file_diff

MAX_LISTED_FILES = 10

_TYPE_DISPLAY = {
    ChangeType.ADD: ("green", "+", "New files"),
    ChangeType.MODIFY: ("yellow", "~", "Modified files"),
    ChangeType.DELETE: ("red", "-", "Deleted files"),
}


class PromptProvider(Protocol):
    """Checkbox and confirm primitives used by the gate."""

    def checkbox(self, message: str, choices: dict[str, str], defaults: Sequence[str]) -> list[str]:
        ...

    def confirm(self, message: str, default: bool) -> bool:
        ...


@dataclass
class StaticPromptProvider:
    """Prompt provider returning predetermined answers.

    ``selection`` of ``None`` accepts the defaults offered by the gate.
    ``confirmations`` are consumed in order; once exhausted every confirm
    returns ``default_confirm``.
    """

    selection: list[str] | None = None
    confirmations: list[bool] = field(default_factory=list)
    default_confirm: bool = True
    asked: list[str] = field(default_factory=list)

    def checkbox(self, message: str, choices: dict[str, str], defaults: Sequence[str]) -> list[str]:
        self.asked.append(message)
        if self.selection is None:
            return list(defaults)
        return [key for key in self.selection if key in choices]

    def confirm(self, message: str, default: bool) -> bool:
        self.asked.append(message)
        if self.confirmations:
            return self.confirmations.pop(0)
        return self.default_confirm


class SelectionState(str, Enum):
    NO_CHANGES = "no_changes"
    COMPARISON_FAILED = "comparison_failed"
    DRY_RUN = "dry_run"
    CANCELLED = "cancelled"
    APPROVED = "approved"


@dataclass(frozen=True)
class SelectionOutcome:
    state: SelectionState
    categories: frozenset[Category] = frozenset()

    @property
    def approved(self) -> bool:
        return self.state is SelectionState.APPROVED


def _count_label(change_set: ChangeSet, category: Category) -> str:
    if category is Category.DEPENDENCIES:
        count = change_set.manifest_diff.entry_count() if change_set.manifest_diff else 0
        return f"{category.label} ({count} entries)"
    count = sum(1 for c in change_set.changes if c.category is category)
    return f"{category.label} ({count} files)"


def print_change_summary(console: Console, change_set: ChangeSet) -> None:
    """Print changes grouped by category, at most ten paths per kind."""
    console.print("[bold]Changes to apply:[/bold]")

    for category, changes in change_set.by_category().items():
        console.print(f"\n[bold cyan]{category.label}:[/bold cyan]")
        for change_type, (style, marker, title) in _TYPE_DISPLAY.items():
            matching = [c for c in changes if c.type is change_type]
            if not matching:
                continue
            console.print(f"[{style}]  {title} ({len(matching)}):[/{style}]")
            for change in matching[:MAX_LISTED_FILES]:
                console.print(f"[{style}]    {marker} {escape(change.relative_path)}[/{style}]")
            if len(matching) > MAX_LISTED_FILES:
                console.print(f"[grey50]    ... and {len(matching) - MAX_LISTED_FILES} more files[/grey50]")

    if change_set.has_manifest_changes:
        console.print("\n[bold cyan]Package.json changes:[/bold cyan]")
        print_manifest_diff(console, change_set)

    for failure in change_set.errors:
        console.print(f"\n[red]✗ {failure.category.label}:[/red] {escape(failure.message)}")
    console.print()


def print_manifest_diff(console: Console, change_set: ChangeSet) -> None:
    diff = change_set.manifest_diff
    if diff is None:
        return
    for group in MANIFEST_GROUPS:
        if diff.added[group]:
            console.print(f"[cyan]  New {group}:[/cyan]")
            for name, value in diff.added[group].items():
                console.print(f"[green]    + {escape(name)}: {escape(str(value)[:60])}[/green]")
    for group in MANIFEST_GROUPS:
        if diff.updated[group]:
            console.print(f"[cyan]  Updated {group}:[/cyan]")
            for name, change in diff.updated[group].items():
                console.print(
                    f"[yellow]    ~ {escape(name)}: {escape(change.from_value[:60])} → "
                    f"{escape(change.to_value[:60])}[/yellow]"
                )


def show_previews(console: Console, change_set: ChangeSet) -> None:
    for change in change_set.of_type(ChangeType.MODIFY):
        if change.source_path is None:
            continue
        console.print(f"\n[bold]{escape(change.relative_path)}:[/bold]")
        render_file_diff(console, change.source_path, change.dest_path)


def select(
    change_set: ChangeSet,
    *,
    dry_run: bool = False,
    preview: bool = False,
    approved: Iterable[Category] | None = None,
    prompts: PromptProvider | None = None,
    console: Console | None = None,
) -> SelectionOutcome:
    """Run the selection state machine for *change_set*."""
    console = console or Console()

    if change_set.is_empty:
        if change_set.errors:
            for failure in change_set.errors:
                console.print(f"[red]✗ {failure.category.label}:[/red] {escape(failure.message)}")
            console.print(
                f"[red]Comparison failed for {len(change_set.errors)} category(ies); "
                "nothing else to update.[/red]"
            )
            return SelectionOutcome(SelectionState.COMPARISON_FAILED)
        console.print("[green]✓ Your project is up to date! No changes needed.[/green]")
        return SelectionOutcome(SelectionState.NO_CHANGES)

    print_change_summary(console, change_set)

    if preview and prompts is not None:
        if prompts.confirm("Show detailed file differences?", False):
            show_previews(console, change_set)

    if dry_run:
        console.print("[blue]i Dry run mode - no changes were made.[/blue]")
        return SelectionOutcome(SelectionState.DRY_RUN)

    available = change_set.categories()

    if approved is not None:
        chosen = frozenset(approved) & frozenset(available)
        if not chosen:
            return SelectionOutcome(SelectionState.CANCELLED)
        return SelectionOutcome(SelectionState.APPROVED, chosen)

    if prompts is None:
        raise ValueError("prompts are required when no categories are pre-approved")

    choices = {category.value: _count_label(change_set, category) for category in available}
    picked = prompts.checkbox("Select which changes to apply", choices, list(choices))
    chosen = frozenset(Category(value) for value in picked if value in choices)
    if not chosen:
        console.print("[yellow]! No changes selected. Update cancelled.[/yellow]")
        return SelectionOutcome(SelectionState.CANCELLED)

    if not prompts.confirm(f"Apply {len(chosen)} category(ies) of changes?", True):
        console.print("[yellow]! Update cancelled.[/yellow]")
        return SelectionOutcome(SelectionState.CANCELLED)

    return SelectionOutcome(SelectionState.APPROVED, chosen)


__all__ = [
    "PromptProvider",
    "SelectionOutcome",
    "SelectionState",
    "StaticPromptProvider",
    "print_change_summary",
    "select",
]
