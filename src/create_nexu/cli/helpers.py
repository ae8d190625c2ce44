"""Shared console and banner for create-nexu commands."""

from __future__ import annotations

from rich.align import Align
from rich.console import Console
from rich.text import Text

BANNER = """
███╗   ██╗███████╗██╗  ██╗██╗   ██╗
████╗  ██║██╔════╝╚██╗██╔╝██║   ██║
██╔██╗ ██║█████╗   ╚███╔╝ ██║   ██║
██║╚██╗██║██╔══╝   ██╔██╗ ██║   ██║
██║ ╚████║███████╗██╔╝ ██╗╚██████╔╝
╚═╝  ╚═══╝╚══════╝╚═╝  ╚═╝ ╚═════╝
"""

TAGLINE = "create-nexu - create and update Nexu monorepo projects"

console = Console()


def show_banner() -> None:
    """Display the ASCII art banner."""
    banner_lines = BANNER.strip().split("\n")
    colors = ["bright_blue", "blue", "cyan", "bright_cyan", "white", "bright_white"]

    styled_banner = Text()
    for i, line in enumerate(banner_lines):
        styled_banner.append(line + "\n", style=colors[i % len(colors)])

    console.print(Align.center(styled_banner))
    console.print(Align.center(Text(TAGLINE, style="italic bright_yellow")))
    console.print()


def print_error(message: str, remediation: str | None = None) -> None:
    console.print(f"[red]Error:[/red] {message}")
    if remediation:
        console.print(f"[dim]{remediation}[/dim]")


__all__ = ["BANNER", "TAGLINE", "console", "print_error", "show_banner"]
