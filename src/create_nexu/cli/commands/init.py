"""Init command implementation for create-nexu."""

from __future__ import annotations

import shutil
from collections.abc import Callable
from pathlib import Path
from typing import Optional

import typer
from rich.live import Live
from rich.panel import Panel

from create_nexu.cli.helpers import console, print_error, show_banner
from create_nexu.cli.ui import SelectionCancelled, StepTracker, multi_select_with_arrows, select_with_arrows
from create_nexu.core.constants import SHARED_PACKAGES
from create_nexu.core.package_manager import PACKAGE_MANAGERS, get_install_command, get_run_command, run_install
from create_nexu.core.project import locate_template_root
from create_nexu.core.scaffold import (
    DEFAULT_PROJECT_NAME,
    FEATURES,
    configure_workspaces,
    copy_template,
    customize_manifest,
    init_git_repo,
    is_valid_project_name,
    remove_unselected,
    visible_entries,
)
from create_nexu.errors import NexuError

_MANAGER_LABELS = {
    "pnpm": "recommended",
    "npm": "Node's default",
    "yarn": "classic workspaces",
}


def _parse_list(raw: str, allowed: tuple[str, ...] | list[str], what: str) -> list[str]:
    names = [part.strip().lower() for part in raw.replace(";", ",").split(",") if part.strip()]
    invalid = [name for name in names if name not in allowed]
    if invalid:
        console.print(f"[red]Error:[/red] Unknown {what}: {', '.join(invalid)}")
        console.print(f"[dim]Choose from: {', '.join(allowed)}[/dim]")
        raise typer.Exit(1)
    return names


def _choose(
    given: Optional[str],
    options: dict[str, str],
    prompt_text: str,
    what: str,
    yes: bool,
) -> list[str]:
    """Resolve a multi-choice answer from a flag, ``--yes`` or the arrow-key menu."""
    if given is not None:
        return _parse_list(given, list(options), what)
    if yes:
        return list(options)
    try:
        return multi_select_with_arrows(
            options, prompt_text=prompt_text, default_keys=list(options), console=console, allow_empty=True
        )
    except SelectionCancelled:
        console.print("[yellow]Aborted.[/yellow]")
        raise typer.Exit(0) from None


def _resolve_target(project_name: Optional[str], yes: bool) -> tuple[Path, str, bool]:
    """Return (project path, project name, uses current dir); exits on abort."""
    if project_name == ".":
        project_path = Path.cwd()
        name = project_path.name.lower()
        if visible_entries(project_path) and not yes:
            if not typer.confirm("Current directory is not empty. Continue anyway?", default=False):
                console.print("[yellow]Aborted.[/yellow]")
                raise typer.Exit(0)
        return project_path, name, True

    if not project_name:
        project_name = DEFAULT_PROJECT_NAME if yes else typer.prompt("Project name", default=DEFAULT_PROJECT_NAME)

    if not is_valid_project_name(project_name):
        console.print(
            "[red]Error:[/red] Project name can only contain lowercase letters, numbers, and hyphens"
        )
        raise typer.Exit(1)

    project_path = Path(project_name).resolve()
    if project_path.exists():
        if not yes and not typer.confirm(f"Directory {project_name} already exists. Overwrite?", default=False):
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(0)
        shutil.rmtree(project_path)
    return project_path, project_name, False


def init(
    project_name: str = typer.Argument(
        None, help="Name of the project directory to create (or '.' for the current directory)"
    ),
    package_manager: str = typer.Option(
        None, "--package-manager", help="Package manager to configure: pnpm, npm or yarn"
    ),
    packages: str = typer.Option(
        None, "--packages", help=f"Comma-separated shared packages to keep ({','.join(SHARED_PACKAGES)})"
    ),
    features: str = typer.Option(
        None, "--features", help=f"Comma-separated optional features to keep ({','.join(FEATURES)})"
    ),
    skip_install: bool = typer.Option(False, "--skip-install", help="Skip dependency installation"),
    skip_git: bool = typer.Option(False, "--skip-git", help="Skip git initialization"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Accept defaults without prompting"),
) -> None:
    """Create a new Nexu monorepo from the bundled template.

    Examples:
        create-nexu init my-app
        create-nexu init my-app --package-manager npm --packages utils,logger
        create-nexu init . --yes --skip-install
    """
    show_banner()

    project_path, name, use_current_dir = _resolve_target(project_name, yes)

    if package_manager is not None:
        manager_name = package_manager.strip().lower()
        if manager_name not in PACKAGE_MANAGERS:
            console.print(f"[red]Error:[/red] Unknown package manager: {package_manager}")
            console.print(f"[dim]Choose from: {', '.join(PACKAGE_MANAGERS)}[/dim]")
            raise typer.Exit(1)
    elif yes:
        manager_name = "pnpm"
    else:
        try:
            manager_name = select_with_arrows(
                _MANAGER_LABELS, prompt_text="Select package manager", default_key="pnpm", console=console
            )
        except SelectionCancelled:
            console.print("[yellow]Aborted.[/yellow]")
            raise typer.Exit(0) from None

    selected_packages = _choose(
        packages,
        {pkg: f"@repo/{pkg}" for pkg in SHARED_PACKAGES},
        "Select packages to include",
        "package(s)",
        yes,
    )
    selected_features = _choose(features, FEATURES, "Select additional features", "feature(s)", yes)

    try:
        template_root = locate_template_root()
    except NexuError as exc:
        print_error(exc.message, exc.remediation)
        raise typer.Exit(1) from exc

    setup_lines = [
        "[cyan]Nexu Project Setup[/cyan]",
        "",
        f"{'Project':<17} [green]{name}[/green]",
        f"{'Target Path':<17} [dim]{project_path}[/dim]",
        f"{'Package manager':<17} {manager_name}",
    ]
    console.print(Panel("\n".join(setup_lines), border_style="cyan", padding=(1, 2)))

    tracker = StepTracker("Create Nexu Monorepo")
    for key, label in (
        ("copy", "Copy template"),
        ("manifest", "Update package.json"),
        ("prune", "Remove unselected packages and features"),
        ("workspaces", "Configure workspaces"),
        ("git", "Initialize git repository"),
    ):
        tracker.add(key, label)

    with Live(tracker.render(), console=console, refresh_per_second=8, transient=True) as live:

        def step(key: str, action: Callable[[], str]) -> None:
            tracker.start(key)
            live.update(tracker.render())
            try:
                detail = action()
            except (OSError, NexuError) as exc:
                tracker.error(key, str(exc))
                live.update(tracker.render())
                raise
            tracker.complete(key, detail)
            live.update(tracker.render())

        def copy() -> str:
            copy_template(template_root, project_path)
            return "template copied"

        def manifest() -> str:
            customize_manifest(project_path, name, selected_features)
            return f"name {name}"

        def prune() -> str:
            removed = remove_unselected(project_path, selected_packages, selected_features)
            return f"{len(removed)} removed"

        def workspaces() -> str:
            if configure_workspaces(project_path, manager_name):
                return "package.json workspaces"
            return "pnpm-workspace.yaml"

        try:
            step("copy", copy)
            step("manifest", manifest)
            step("prune", prune)
            step("workspaces", workspaces)
        except (OSError, NexuError) as exc:
            console.print(Panel(f"Initialization failed: {exc}", title="Failure", border_style="red"))
            if not use_current_dir and project_path.exists():
                shutil.rmtree(project_path)
            raise typer.Exit(1) from exc

        if skip_git:
            tracker.skip("git", "--skip-git flag")
        elif init_git_repo(project_path):
            tracker.complete("git", "initialized")
        else:
            tracker.error("git", "init failed")
        live.update(tracker.render())

    console.print(tracker.render())

    if not skip_install:
        console.print(f"\n[cyan]Installing dependencies with {manager_name}...[/cyan]\n")
        install = run_install(project_path, manager_name)
        if install.success:
            console.print("[green]✓ Dependencies installed[/green]")
        else:
            console.print(
                f"[yellow]! Failed to install dependencies. Run \"{install.command}\" manually.[/yellow]"
            )

    run_cmd = get_run_command(manager_name)
    steps_lines: list[str] = []
    if not use_current_dir:
        steps_lines.append(f"cd {project_path.name}")
    if skip_install:
        steps_lines.append(get_install_command(manager_name))
    steps_lines.append(f"{run_cmd} dev")
    next_steps = "\n".join(f"  [cyan]{line}[/cyan]" for line in steps_lines)
    console.print()
    console.print(
        Panel(
            f"{next_steps}\n\nTo update with latest features:\n  [cyan]npx create-nexu update[/cyan]",
            title="[bold green]✨ Project created successfully![/bold green]",
            border_style="green",
            padding=(1, 2),
        )
    )


__all__ = ["init"]
