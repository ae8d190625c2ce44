"""
create-nexu - create and update Nexu monorepo projects.

Usage:
    create-nexu init <project-name>
    create-nexu update [--dry-run] [--all --yes]
    create-nexu add package|service [--name NAME]
"""

import logging
import sys

import typer
from rich.align import Align
from typer.core import TyperGroup

from create_nexu.cli.commands.add import add
from create_nexu.cli.commands.init import init
from create_nexu.cli.commands.update import update
from create_nexu.cli.helpers import console, show_banner

__version__ = "1.0.0"


class BannerGroup(TyperGroup):
    """Custom group that shows banner before help."""

    def format_help(self, ctx, formatter):
        show_banner()
        super().format_help(ctx, formatter)


app = typer.Typer(
    name="create-nexu",
    help="CLI to create and update Nexu monorepo projects",
    add_completion=False,
    invoke_without_command=True,
    cls=BannerGroup,
)


def _version_callback(value: bool):
    if value:
        console.print(f"create-nexu {__version__}")
        raise typer.Exit()


@app.callback()
def callback(
    ctx: typer.Context,
    version: bool = typer.Option(
        False, "--version", callback=_version_callback, is_eager=True, help="Show the version and exit"
    ),
    verbose: bool = typer.Option(False, "--verbose", help="Enable debug logging"),
):
    """Show banner when no subcommand is provided."""
    if verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(levelname)s %(name)s: %(message)s")

    if ctx.invoked_subcommand is None and "--help" not in sys.argv and "-h" not in sys.argv:
        show_banner()
        console.print(Align.center("[dim]Run 'create-nexu --help' for usage information[/dim]"))
        console.print()


app.command()(init)
app.command()(update)
app.command()(add)


def main():
    app()


if __name__ == "__main__":
    main()
