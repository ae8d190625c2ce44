"""Update command implementation for create-nexu."""

from __future__ import annotations

import json
import tempfile
from pathlib import Path

import typer
from rich.markup import escape
from rich.table import Table

from create_nexu.cli.helpers import console, print_error, show_banner
from create_nexu.cli.prompts import ConsolePromptProvider
from create_nexu.core.config import UpdateConfig, load_project_config
from create_nexu.core.constants import REPO_BRANCH, REPO_URL
from create_nexu.core.package_manager import detect_package_manager, get_install_command, run_install
from create_nexu.core.project import locate_template_root, require_project
from create_nexu.core.remote import download_template
from create_nexu.errors import NexuError
from create_nexu.sync.aggregator import aggregate, resolve_categories
from create_nexu.sync.applier import apply_changes
from create_nexu.sync.manifest import ScriptPolicy
from create_nexu.sync.models import ApplyResult, Category, ChangeSet
from create_nexu.sync.selection import SelectionState, select

_STATUS_STYLE = {
    "ok": "[green]ok[/green]",
    "warning": "[yellow]warning[/yellow]",
    "failed": "[red]failed[/red]",
}


def _status_detail(result: ApplyResult, category: Category) -> str:
    if category is Category.DEPENDENCIES:
        if result.manifest_error:
            return result.manifest_error
        return "package.json merged" if result.manifest_updated else "nothing to merge"
    failed = [f for f in result.failures if f.category is category]
    detail = f"{result.applied.get(category, 0)} file(s) applied"
    if failed:
        detail += f", {len(failed)} failed"
    return detail


def _print_summary(result: ApplyResult) -> None:
    table = Table(title="Update Summary", show_lines=False, header_style="bold cyan")
    table.add_column("Category", style="bright_white")
    table.add_column("Status")
    table.add_column("Detail", style="dim")

    for category, status in result.category_status().items():
        table.add_row(category.label, _STATUS_STYLE[status], _status_detail(result, category))

    console.print()
    console.print(table)

    for failure in result.failures:
        console.print(f"[red]✗[/red] {escape(failure.relative_path)}: {escape(failure.message)}")
    if result.directories_removed:
        console.print(f"[dim]Removed {result.directories_removed} empty director(ies)[/dim]")


def _run_update(
    template_root: Path,
    project_root: Path,
    categories: frozenset[Category],
    settings: UpdateConfig,
    *,
    script_policy: ScriptPolicy,
    dry_run: bool,
    preview: bool,
    yes: bool,
    skip_install: bool,
    json_output: bool,
) -> None:
    change_set = aggregate(
        template_root,
        project_root,
        categories,
        exclusions=settings.exclusions,
        script_policy=script_policy,
    )

    if json_output:
        console.print_json(json.dumps(change_set.to_dict()))
        return

    outcome = select(
        change_set,
        dry_run=dry_run,
        preview=preview and not yes,
        approved=categories if yes else None,
        prompts=ConsolePromptProvider(console),
        console=console,
    )
    if outcome.state is SelectionState.COMPARISON_FAILED:
        console.print("\n[yellow]! Update finished with errors.[/yellow]")
        return
    if not outcome.approved:
        return

    result = _apply(change_set, outcome.categories, template_root, project_root, settings, script_policy)
    _print_summary(result)

    if result.manifest_updated and not skip_install:
        manager = detect_package_manager(project_root)
        console.print(f"\n[cyan]Installing dependencies with {manager}...[/cyan]")
        install = run_install(project_root, manager)
        if not install.success:
            console.print(
                f"[yellow]Warning:[/yellow] Dependency install failed ({install.message}). "
                f"Run '{get_install_command(manager)}' manually."
            )

    if result.success:
        console.print("\n[green]✓ Update complete![/green]")
    else:
        console.print("\n[yellow]! Update finished with errors.[/yellow]")


def _apply(
    change_set: ChangeSet,
    approved: frozenset[Category],
    template_root: Path,
    project_root: Path,
    settings: UpdateConfig,
    script_policy: ScriptPolicy,
) -> ApplyResult:
    console.print("\n[cyan]Applying changes...[/cyan]")
    return apply_changes(
        change_set.changes,
        approved,
        project_root,
        template_root=template_root,
        manifest_diff=change_set.manifest_diff,
        script_policy=script_policy,
        exclusions=settings.exclusions,
    )


def update(
    packages: bool = typer.Option(False, "--packages", "-p", help="Update shared packages"),
    config: bool = typer.Option(False, "--config", "-c", help="Update configuration files"),
    workflows: bool = typer.Option(False, "--workflows", "-w", help="Update GitHub workflows"),
    services: bool = typer.Option(False, "--services", "-s", help="Update Docker services"),
    scripts: bool = typer.Option(False, "--scripts", help="Update scripts"),
    dependencies: bool = typer.Option(
        False, "--dependencies", "-d", help="Update package.json dependencies"
    ),
    all_: bool = typer.Option(False, "--all", help="Update everything (default without flags)"),
    dry_run: bool = typer.Option(False, "--dry-run", help="Show changes without applying"),
    preview: bool = typer.Option(False, "--preview", help="Offer a line-level diff of modified files"),
    yes: bool = typer.Option(False, "--yes", "-y", help="Apply every category without prompting"),
    overwrite_scripts: bool = typer.Option(
        False, "--overwrite-scripts", help="Let template scripts replace project scripts"
    ),
    skip_install: bool = typer.Option(
        False, "--skip-install", help="Do not install dependencies after updating package.json"
    ),
    remote: bool = typer.Option(
        False, "--remote", help=f"Use the latest template from github.com/{REPO_URL}"
    ),
    branch: str = typer.Option(REPO_BRANCH, "--branch", help="Branch to fetch with --remote"),
    json_output: bool = typer.Option(
        False, "--json", help="Print the detected changes as JSON and exit"
    ),
) -> None:
    """Update a Nexu project with the latest template changes.

    Compares the project against the template per category, lets you pick
    which categories to apply, and merges new dependencies into package.json.

    Examples:
        create-nexu update                 # Interactive update of everything
        create-nexu update -c -w           # Only config files and workflows
        create-nexu update --dry-run       # Show what would change
        create-nexu update --all --yes     # Headless update
    """
    if not json_output:
        show_banner()

    project_root = Path.cwd()
    categories = resolve_categories(
        packages=packages,
        config=config,
        workflows=workflows,
        services=services,
        scripts=scripts,
        dependencies=dependencies,
        all_=all_,
    )

    try:
        require_project(project_root)
        settings = load_project_config(project_root)
        script_policy = ScriptPolicy.OVERWRITE if overwrite_scripts else settings.script_policy

        if not json_output:
            names = ", ".join(category.label for category in Category if category in categories)
            console.print(f"[cyan]Checking:[/cyan] {names}\n")

        run_options = dict(
            script_policy=script_policy,
            dry_run=dry_run,
            preview=preview,
            yes=yes,
            skip_install=skip_install,
            json_output=json_output,
        )
        if remote:
            with tempfile.TemporaryDirectory(prefix="create-nexu-") as tmp:
                if not json_output:
                    console.print(f"[cyan]Downloading {REPO_URL}@{branch}...[/cyan]")
                template_root = download_template(Path(tmp), REPO_URL, branch)
                _run_update(template_root, project_root, categories, settings, **run_options)
        else:
            template_root = locate_template_root()
            _run_update(template_root, project_root, categories, settings, **run_options)
    except NexuError as exc:
        if json_output:
            console.print(json.dumps({"error": exc.message}), soft_wrap=True)
        else:
            print_error(exc.message, exc.remediation)
        raise typer.Exit(1) from exc


__all__ = ["update"]
