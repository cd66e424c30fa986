"""Command line interface for running security audits on snapshot files."""

from __future__ import annotations
import asyncio
import json
import logging
from pathlib import Path
from typing import Annotated
import typer
from rich.console import Console
from flowaudit.audit import AuditError, build_default_categories, run_audit
from flowaudit.render import render_result, render_table
from flowaudit.sources import SnapshotError, load_snapshot


app = typer.Typer(help="Static security audit for workflows, credentials and runs.")

SnapshotArgument = Annotated[
    Path,
    typer.Argument(help="JSON snapshot with workflows, credentials and executions."),
]
CategoriesOption = Annotated[
    str | None,
    typer.Option(
        "--categories",
        "-c",
        help="Comma separated risk categories to run (default: all).",
    ),
]
DaysOption = Annotated[
    int | None,
    typer.Option(
        "--days-abandoned-workflow",
        min=1,
        help="Days without a finished run before a workflow counts as abandoned.",
    ),
]
TimeoutOption = Annotated[
    float | None,
    typer.Option("--timeout", min=0, help="Deadline in seconds; 0 disables it."),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print the reports as JSON."),
]


def _console(ctx: typer.Context) -> Console:
    console = ctx.obj
    if not isinstance(console, Console):  # pragma: no cover
        console = Console()
    return console


def _split_categories(value: str | None) -> list[str] | None:
    if value is None:
        return None
    return [item.strip() for item in value.split(",") if item.strip()]


def render_error(console: Console, message: str) -> None:
    """Print an error message in the CLI style."""
    console.print(f"[red]Error:[/red] {message}")


@app.callback()
def main(
    ctx: typer.Context,
    verbose: Annotated[
        bool,
        typer.Option("--verbose", "-v", help="Log progress to stderr."),
    ] = False,
) -> None:
    """Configure logging and shared console state."""
    logging.basicConfig(
        level=logging.DEBUG if verbose else logging.WARNING,
        format="%(levelname)s %(name)s: %(message)s",
    )
    ctx.obj = Console()


@app.command("audit", help="Audit a snapshot and report security risks.")
def audit(
    ctx: typer.Context,
    snapshot: SnapshotArgument,
    categories: CategoriesOption = None,
    days_abandoned_workflow: DaysOption = None,
    timeout: TimeoutOption = None,
    as_json: JsonOption = False,
) -> None:
    """Run the selected risk categories against a snapshot file."""
    console = _console(ctx)
    try:
        sources = load_snapshot(snapshot)
        result = asyncio.run(
            run_audit(
                _split_categories(categories),
                workflows=sources.workflows,
                credentials=sources.credentials,
                executions=sources.executions,
                days_abandoned_workflow=days_abandoned_workflow,
                timeout=timeout,
            )
        )
    except (AuditError, SnapshotError, ValueError) as exc:
        render_error(console, str(exc))
        raise typer.Exit(code=1) from exc

    if as_json:
        payload = {
            "reports": result.to_payload(),
            "warnings": [
                warning.model_dump(mode="json") for warning in result.warnings
            ],
        }
        typer.echo(json.dumps(payload, indent=2))
        return
    render_result(console, result)


@app.command("categories", help="List the available risk categories.")
def list_categories(ctx: typer.Context) -> None:
    """Render the registered categories in their report order."""
    console = _console(ctx)
    render_table(
        console,
        title="Risk categories",
        columns=("Name", "Description"),
        rows=(
            (category.name, category.description)
            for category in build_default_categories().list_categories()
        ),
    )


__all__ = ["app"]
