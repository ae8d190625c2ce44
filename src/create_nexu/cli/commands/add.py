"""Add command implementation for create-nexu."""

from __future__ import annotations

from enum import Enum
from pathlib import Path
from typing import Optional

import typer

from create_nexu.cli.helpers import console, print_error, show_banner
from create_nexu.cli.ui import SelectionCancelled, multi_select_with_arrows
from create_nexu.core.constants import SERVICES
from create_nexu.core.package_manager import detect_package_manager, get_install_command
from create_nexu.core.project import locate_template_root, require_project
from create_nexu.core.scaffold import add_packages, add_services, missing_packages
from create_nexu.errors import NexuError


class Component(str, Enum):
    PACKAGE = "package"
    SERVICE = "service"


def _pick(options: list[str], prompt_text: str) -> list[str]:
    try:
        return multi_select_with_arrows(
            {option: option for option in options}, prompt_text=prompt_text, console=console
        )
    except SelectionCancelled:
        return []


def _add_package(template_root: Path, project_root: Path, name: Optional[str]) -> None:
    available = missing_packages(project_root)
    if not available:
        console.print("[blue]i All packages are already installed.[/blue]")
        return

    if name and name in available:
        selected = [name]
    else:
        if name:
            console.print(f"[yellow]Package '{name}' is unknown or already installed.[/yellow]")
        selected = _pick(available, "Select packages to add")
    if not selected:
        console.print("[yellow]No packages selected.[/yellow]")
        return

    added = add_packages(template_root, project_root, selected)
    console.print(f"[green]✓ Added {len(added)} package(s):[/green] {', '.join(added)}")
    install = get_install_command(detect_package_manager(project_root))
    console.print(f"\nRun [cyan]{install}[/cyan] to install dependencies.")


def _add_service(template_root: Path, project_root: Path, name: Optional[str]) -> None:
    if not (project_root / "services").exists():
        if not typer.confirm("Services directory does not exist. Create it?", default=True):
            return

    if name and name in SERVICES:
        selected = [name]
    else:
        selected = _pick(list(SERVICES), "Select services to configure")
    if not selected:
        console.print("[yellow]No services selected.[/yellow]")
        return

    written = add_services(template_root, project_root)
    console.print(
        "[green]✓ Services configuration added[/green] "
        f"[dim](all service configs copied from the template, {written} new file(s))[/dim]"
    )
    console.print(
        "\nStart the selected services with: "
        f"[cyan]docker compose -f services/docker-compose.yml up -d {' '.join(selected)}[/cyan]"
    )


def add(
    component: str = typer.Argument(..., help="Component to add: package or service"),
    name: str = typer.Option(None, "--name", "-n", help="Name of the package or service"),
) -> None:
    """Add a shared package or the services configuration to a Nexu project.

    Examples:
        create-nexu add package --name logger
        create-nexu add service -n postgres
    """
    show_banner()

    try:
        kind = Component(component.lower())
    except ValueError:
        print_error(f"Unknown component type: {component}. Use 'package' or 'service'.")
        raise typer.Exit(1) from None

    project_root = Path.cwd()
    try:
        require_project(project_root)
        template_root = locate_template_root()
        if kind is Component.PACKAGE:
            _add_package(template_root, project_root, name)
        else:
            _add_service(template_root, project_root, name)
    except NexuError as exc:
        print_error(exc.message, exc.remediation)
        raise typer.Exit(1) from exc
    except OSError as exc:
        print_error(f"Failed to add {kind.value}: {exc}")
        raise typer.Exit(1) from exc


__all__ = ["add"]
