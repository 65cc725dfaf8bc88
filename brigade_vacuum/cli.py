"""Thin CLI wrapper for brigade_vacuum.

This module provides the command-line interface using Typer.
All business logic is delegated to core modules.
"""

import json
import logging
from pathlib import Path
from typing import TYPE_CHECKING, Annotated

import typer
from pydantic import ValidationError
from rich.console import Console
from rich.logging import RichHandler
from rich.markup import escape

from brigade_vacuum import __version__
from brigade_vacuum.config import Settings, get_settings, print_settings_json
from brigade_vacuum.errors import VacuumError
from brigade_vacuum.types import CreatedBefore, PolicyReport, VacuumReport

if TYPE_CHECKING:
    from brigade_vacuum.resources.accessor import ResourceAccessor

app = typer.Typer(
    name="brigade-vacuum",
    help="Brigade Vacuum - prune expired Brigade builds from a namespace",
    no_args_is_help=True,
)
console = Console()
err_console = Console(stderr=True)


def setup_logging(level: str) -> None:
    """Send library logs to stderr through Rich."""
    logging.basicConfig(
        level=level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[RichHandler(console=err_console, show_path=False)],
        force=True,
    )


def build_accessor(settings: Settings) -> "ResourceAccessor":
    """Create the Kubernetes accessor for the configured namespace."""
    from brigade_vacuum.resources.kube import KubeResourceAccessor, load_core_v1

    core_v1 = load_core_v1(settings.kubeconfig, settings.kube_context)
    return KubeResourceAccessor(
        core_v1,
        settings.namespace,
        request_timeout=settings.request_timeout,
    )


def version_callback(value: bool) -> None:
    """Print version and exit."""
    if value:
        console.print(f"brigade-vacuum version {__version__}")
        raise typer.Exit()


@app.callback()
def main(
    version: Annotated[
        bool | None,
        typer.Option(
            "--version",
            "-V",
            help="Show version and exit",
            callback=version_callback,
            is_eager=True,
        ),
    ] = None,
) -> None:
    """Brigade Vacuum - prune expired Brigade builds from a namespace."""


@app.command()
def config(
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Show effective configuration."""
    settings = get_settings()
    if json_output:
        console.print(print_settings_json(settings), soft_wrap=True)
    else:
        max_age_display = str(settings.max_age) if settings.max_age else "(disabled)"
        max_builds_display = (
            "(unlimited)" if settings.max_builds < 0 else str(settings.max_builds)
        )
        console.print("[bold]Effective Configuration:[/bold]")
        console.print()
        console.print("[bold]Retention:[/bold]")
        console.print(f"  Namespace:           {settings.namespace}")
        console.print(f"  Max age:             {max_age_display}")
        console.print(f"  Max builds:          {max_builds_display}")
        console.print(f"  Skip running builds: {settings.skip_running_builds}")
        console.print()
        console.print("[bold]Operational:[/bold]")
        console.print(f"  Dry run:             {settings.dry_run}")
        console.print(f"  Log level:           {settings.log_level}")
        console.print()
        console.print("[bold]Cluster:[/bold]")
        console.print(f"  Kubeconfig:          {settings.kubeconfig or '(auto)'}")
        console.print(f"  Context:             {settings.kube_context or '(current)'}")
        console.print(f"  Request timeout:     {settings.request_timeout}")


def _print_policy(title: str, report: PolicyReport, detail: str) -> None:
    console.print(f"[bold]{title}:[/bold] {detail}")
    if not report.ran:
        return
    console.print(f"  Candidates: {report.considered}")
    if report.orphans:
        console.print(
            f"  [yellow]Orphaned records (no build label): "
            f"{', '.join(report.orphans)}[/yellow]"
        )
    if not report.evictions:
        console.print("  [green]Nothing to evict[/green]")
        return
    console.print(f"  Evicted {len(report.evictions)} build(s):")
    for eviction in report.evictions:
        console.print(
            f"    - {eviction.build_id}: "
            f"deleted {len(eviction.deleted)}, "
            f"skipped {len(eviction.skipped)}, "
            f"failed {len(eviction.failed)}"
        )
        for outcome in eviction.failed:
            console.print(
                f"      [red]{outcome.kind.value} {outcome.name}: "
                f"{escape(outcome.reason or '')}[/red]",
                markup=True,
                highlight=False,
            )


def _print_report(report: VacuumReport, settings: Settings, cutoff: str) -> None:
    if report.dry_run:
        console.print("[yellow][DRY RUN] No resources were deleted[/yellow]")
    _print_policy("Age policy", report.age, cutoff)
    count_detail = (
        f"keep newest {settings.max_builds}" if settings.max_builds >= 0 else "disabled"
    )
    _print_policy("Count policy", report.count, count_detail)
    if report.failures:
        console.print(f"[red]{len(report.failures)} deletion(s) failed; see log[/red]")


@app.command()
def run(
    namespace: Annotated[
        str | None,
        typer.Option("--namespace", "-n", help="Namespace to vacuum"),
    ] = None,
    max_age: Annotated[
        str | None,
        typer.Option(
            "--max-age", help="Delete builds older than this (e.g. 720h, 30d)"
        ),
    ] = None,
    max_builds: Annotated[
        int | None,
        typer.Option(
            "--max-builds", help="Keep at most this many builds (-1 = no limit)"
        ),
    ] = None,
    skip_running_builds: Annotated[
        bool | None,
        typer.Option(
            "--skip-running-builds/--no-skip-running-builds",
            help="Never delete Running or Pending worker pods",
        ),
    ] = None,
    dry_run: Annotated[
        bool,
        typer.Option("--dry-run", help="Show what would be deleted without deleting"),
    ] = False,
    kubeconfig: Annotated[
        Path | None,
        typer.Option("--kubeconfig", help="Path to kubeconfig file"),
    ] = None,
    context: Annotated[
        str | None,
        typer.Option("--context", help="Kubeconfig context"),
    ] = None,
    json_output: Annotated[
        bool,
        typer.Option("--json", help="Output as JSON"),
    ] = False,
) -> None:
    """Run one vacuum pass: age policy, then count policy."""
    from brigade_vacuum.vacuum import Vacuum

    overrides = {
        "namespace": namespace,
        "max_age": max_age,
        "max_builds": max_builds,
        "skip_running_builds": skip_running_builds,
        "dry_run": dry_run or None,
        "kubeconfig": kubeconfig,
        "kube_context": context,
    }
    try:
        settings = Settings(**{k: v for k, v in overrides.items() if v is not None})
    except ValidationError as e:
        console.print("[red]Invalid configuration:[/red]")
        console.print(str(e), markup=False)
        raise typer.Exit(code=1) from None

    setup_logging(settings.log_level)

    try:
        accessor = build_accessor(settings)
        vacuum = Vacuum.from_settings(accessor, settings)
        report = vacuum.run()
    except VacuumError as e:
        if json_output:
            console.print(
                json.dumps({"error": e.to_dict()}, indent=2),
                soft_wrap=True,
                markup=False,
            )
        else:
            console.print(f"[red]Error: {escape(str(e))}[/red]", highlight=False)
        raise typer.Exit(code=1) from None

    if json_output:
        output = {"namespace": settings.namespace, **report.to_dict()}
        console.print(
            json.dumps(output, indent=2),
            soft_wrap=True,
            markup=False,
            highlight=False,
        )
    else:
        if isinstance(vacuum.age_limit, CreatedBefore):
            cutoff = f"older than {vacuum.age_limit.cutoff.isoformat()}"
        else:
            cutoff = "disabled"
        console.print(f"[bold]Namespace:[/bold] {settings.namespace}")
        _print_report(report, settings, cutoff)


if __name__ == "__main__":
    app()
