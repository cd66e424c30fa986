"""Rendering helpers for CLI output."""

from __future__ import annotations
from collections.abc import Iterable, Sequence
from rich.console import Console
from rich.panel import Panel
from rich.table import Table
from flowaudit.models import (
    AuditResult,
    AuditWarning,
    CommunityNodeLocation,
    CredentialLocation,
    CustomNodeLocation,
    Location,
    NodeLocation,
    RiskSection,
    SettingLocation,
    WorkflowLocation,
)


def render_table(
    console: Console,
    *,
    title: str,
    columns: Sequence[str],
    rows: Iterable[Sequence[str]],
    caption: str | None = None,
) -> None:
    """Render a simple table using :mod:`rich`."""
    table = Table(title=title, caption=caption, show_lines=False)
    for column in columns:
        table.add_column(column)
    for row in rows:
        table.add_row(*row)
    console.print(table)


def describe_location(location: Location) -> tuple[str, str, str]:
    """Return ``(kind, identifier, detail)`` columns for a location."""
    match location:
        case CredentialLocation() | WorkflowLocation():
            return location.kind, location.id, location.name
        case NodeLocation():
            detail = f"{location.node_name} [{location.node_type}]"
            workflow = f"{location.workflow_name} ({location.workflow_id})"
            return location.kind, location.node_id, f"{detail} in {workflow}"
        case CommunityNodeLocation():
            return location.kind, location.node_type, location.package_url or "-"
        case CustomNodeLocation():
            return location.kind, location.node_type, location.file_path or "-"
        case SettingLocation():
            return location.kind, location.key, location.value
    msg = f"Unsupported location: {location!r}"  # pragma: no cover
    raise TypeError(msg)  # pragma: no cover


def render_section(console: Console, *, risk: str, section: RiskSection) -> None:
    """Render one risk section as a table."""
    render_table(
        console,
        title=f"[{risk}] {section.title}",
        columns=("Kind", "Id", "Detail"),
        rows=(describe_location(location) for location in section.location),
        caption=section.recommendation,
    )


def render_warnings(console: Console, warnings: Sequence[AuditWarning]) -> None:
    """Render skipped entities in a bordered panel."""
    lines = []
    for warning in warnings:
        scope = f" (workflow {warning.workflow_id})" if warning.workflow_id else ""
        lines.append(
            f"[bold]{warning.entity_kind}[/] {warning.entity_id}{scope}: "
            f"{warning.message}"
        )
    panel = Panel(
        "\n".join(lines),
        title="Skipped malformed entities; findings may be incomplete",
        expand=False,
    )
    console.print(panel)


def render_result(console: Console, result: AuditResult) -> None:
    """Render every report of an audit result."""
    if not result.reports:
        console.print("[green]No security issues found.[/green]")
    for report in result.reports:
        for section in report.sections:
            render_section(console, risk=report.risk, section=section)
    if result.is_degraded:
        render_warnings(console, result.warnings)


__all__ = [
    "describe_location",
    "render_result",
    "render_section",
    "render_table",
    "render_warnings",
]
