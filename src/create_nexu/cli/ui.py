"""Reusable UI helpers for create-nexu interactions."""

from __future__ import annotations

from typing import Dict, List, Optional

import readchar
from rich.console import Console
from rich.live import Live
from rich.panel import Panel
from rich.table import Table
from rich.tree import Tree


class SelectionCancelled(Exception):
    """Raised when the user leaves a selection with Esc or Ctrl+C."""


class StepTracker:
    """Track and render a flat list of steps as a Rich tree."""

    def __init__(self, title: str):
        self.title = title
        self.steps = []  # list of dicts: {key, label, status, detail}

    def add(self, key: str, label: str):
        if key not in [s["key"] for s in self.steps]:
            self.steps.append({"key": key, "label": label, "status": "pending", "detail": ""})

    def start(self, key: str, detail: str = ""):
        self._update(key, status="running", detail=detail)

    def complete(self, key: str, detail: str = ""):
        self._update(key, status="done", detail=detail)

    def error(self, key: str, detail: str = ""):
        self._update(key, status="error", detail=detail)

    def skip(self, key: str, detail: str = ""):
        self._update(key, status="skipped", detail=detail)

    def _update(self, key: str, status: str, detail: str):
        for s in self.steps:
            if s["key"] == key:
                s["status"] = status
                if detail:
                    s["detail"] = detail
                return
        self.steps.append({"key": key, "label": key, "status": status, "detail": detail})

    def render(self) -> Tree:
        tree = Tree(f"[cyan]{self.title}[/cyan]", guide_style="grey50")
        symbols = {
            "done": "[green]●[/green]",
            "pending": "[green dim]○[/green dim]",
            "running": "[cyan]○[/cyan]",
            "error": "[red]●[/red]",
            "skipped": "[yellow]○[/yellow]",
        }
        for step in self.steps:
            label = step["label"]
            detail_text = step["detail"].strip() if step["detail"] else ""
            status = step["status"]
            symbol = symbols.get(status, " ")

            if status == "pending":
                suffix = f" ({detail_text})" if detail_text else ""
                line = f"{symbol} [bright_black]{label}{suffix}[/bright_black]"
            elif detail_text:
                line = f"{symbol} [white]{label}[/white] [bright_black]({detail_text})[/bright_black]"
            else:
                line = f"{symbol} [white]{label}[/white]"
            tree.add(line)
        return tree


def get_key() -> str:
    """Get a single keypress in a cross-platform way using readchar."""
    key = readchar.readkey()

    if key == readchar.key.UP or key == readchar.key.CTRL_P:
        return "up"
    if key == readchar.key.DOWN or key == readchar.key.CTRL_N:
        return "down"

    if key == readchar.key.ENTER:
        return "enter"

    if key == readchar.key.ESC or key == "\x1b":
        return "escape"

    if key == readchar.key.CTRL_C:
        raise KeyboardInterrupt

    return key


def _resolve_console(console: Optional[Console]) -> Console:
    return console or Console()


def select_with_arrows(
    options: Dict[str, str],
    prompt_text: str = "Select an option",
    default_key: str | None = None,
    console: Console | None = None,
) -> str:
    """Interactive single selection using arrow keys with Rich Live display.

    Raises:
        SelectionCancelled: on Esc or Ctrl+C.
    """
    console = _resolve_console(console)
    option_keys = list(options.keys())
    if default_key and default_key in option_keys:
        selected_index = option_keys.index(default_key)
    else:
        selected_index = 0

    def build_panel():
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", justify="left", width=3)
        table.add_column(style="white", justify="left")

        for i, key in enumerate(option_keys):
            pointer = "▶" if i == selected_index else " "
            table.add_row(pointer, f"[cyan]{key}[/cyan] [dim]({options[key]})[/dim]")

        table.add_row("", "")
        table.add_row("", "[dim]Use ↑/↓ to navigate, Enter to select, Esc to cancel[/dim]")

        return Panel(table, title=f"[bold]{prompt_text}[/bold]", border_style="cyan", padding=(1, 2))

    console.print()

    with Live(build_panel(), console=console, transient=True, auto_refresh=False) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                raise SelectionCancelled() from None
            if key == "up":
                selected_index = (selected_index - 1) % len(option_keys)
            elif key == "down":
                selected_index = (selected_index + 1) % len(option_keys)
            elif key == "enter":
                return option_keys[selected_index]
            elif key == "escape":
                raise SelectionCancelled()
            live.update(build_panel(), refresh=True)


def multi_select_with_arrows(
    options: Dict[str, str],
    prompt_text: str = "Select options",
    default_keys: Optional[List[str]] = None,
    console: Console | None = None,
    allow_empty: bool = False,
) -> List[str]:
    """Select zero or more options using arrow keys + space to toggle.

    With ``allow_empty`` an empty confirmation returns ``[]``; otherwise
    Enter is ignored until at least one option is checked.

    Raises:
        SelectionCancelled: on Esc or Ctrl+C.
    """
    console = _resolve_console(console)
    option_keys = list(options.keys())
    selected_indices: set[int] = set()
    for key in default_keys or []:
        if key in option_keys:
            selected_indices.add(option_keys.index(key))

    cursor_index = min(selected_indices) if selected_indices else 0

    def build_panel():
        table = Table.grid(padding=(0, 2))
        table.add_column(style="cyan", justify="left", width=3)
        table.add_column(style="white", justify="left")

        for i, key in enumerate(option_keys):
            indicator = "[cyan]☑" if i in selected_indices else "[bright_black]☐"
            pointer = "▶" if i == cursor_index else " "
            table.add_row(pointer, f"{indicator} [cyan]{key}[/cyan] [dim]({options[key]})[/dim]")

        table.add_row("", "")
        table.add_row(
            "",
            "[dim]Use ↑/↓ to move, Space to toggle, Enter to confirm, Esc to cancel[/dim]",
        )

        return Panel(table, title=f"[bold]{prompt_text}[/bold]", border_style="cyan", padding=(1, 2))

    console.print()

    with Live(build_panel(), console=console, transient=True, auto_refresh=False) as live:
        while True:
            try:
                key = get_key()
            except KeyboardInterrupt:
                raise SelectionCancelled() from None
            if key == "up":
                cursor_index = (cursor_index - 1) % len(option_keys)
            elif key == "down":
                cursor_index = (cursor_index + 1) % len(option_keys)
            elif key in (" ", readchar.key.SPACE):
                if cursor_index in selected_indices:
                    selected_indices.remove(cursor_index)
                else:
                    selected_indices.add(cursor_index)
            elif key == "enter":
                current = [option_keys[i] for i in range(len(option_keys)) if i in selected_indices]
                if current or allow_empty:
                    return current
            elif key == "escape":
                raise SelectionCancelled()
            live.update(build_panel(), refresh=True)


__all__ = [
    "SelectionCancelled",
    "StepTracker",
    "get_key",
    "multi_select_with_arrows",
    "select_with_arrows",
]
