"""Interactive prompt provider backed by the arrow-key widgets."""

from __future__ import annotations

from collections.abc import Sequence

import typer
from rich.console import Console

from create_nexu.cli.ui import SelectionCancelled, multi_select_with_arrows


class ConsolePromptProvider:
    """Turn terminal answers into plain values for the selection gate."""

    def __init__(self, console: Console | None = None):
        self.console = console

    def checkbox(self, message: str, choices: dict[str, str], defaults: Sequence[str]) -> list[str]:
        try:
            return multi_select_with_arrows(
                choices,
                prompt_text=message,
                default_keys=list(defaults),
                console=self.console,
                allow_empty=True,
            )
        except SelectionCancelled:
            return []

    def confirm(self, message: str, default: bool) -> bool:
        try:
            return typer.confirm(message, default=default)
        except typer.Abort:
            return False


__all__ = ["ConsolePromptProvider"]
