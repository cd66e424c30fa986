"""Factories shared by the audit tests."""

from __future__ import annotations
from datetime import UTC, datetime, timedelta
from typing import Any
from uuid import uuid4
from flowaudit.models import (
    AuditResult,
    Credential,
    Execution,
    RiskSection,
    Workflow,
)


NOW = datetime(2024, 6, 1, 12, 0, tzinfo=UTC)
DAYS_ABANDONED = 90


def fixed_clock() -> datetime:
    return NOW


def days_ago(days: int) -> datetime:
    return NOW - timedelta(days=days)


def create_node(
    node_type: str,
    name: str = "My Node",
    node_id: str | None = None,
    parameters: dict[str, Any] | None = None,
    credentials: dict[str, dict[str, str]] | None = None,
) -> dict[str, Any]:
    node: dict[str, Any] = {
        "id": node_id or str(uuid4()),
        "name": name,
        "type": node_type,
        "parameters": parameters or {},
    }
    if credentials is not None:
        node["credentials"] = credentials
    return node


def create_workflow(
    nodes: list[Any],
    *,
    active: bool = False,
    workflow_id: str | None = None,
    name: str = "My Test Workflow",
    connections: dict[str, Any] | None = None,
) -> Workflow:
    return Workflow(
        id=workflow_id or str(uuid4()),
        name=name,
        active=active,
        nodes=nodes,
        connections=connections or {},
    )


def create_credential(
    name: str = "My Slack Credential",
    credential_type: str = "slackApi",
    credential_id: str | None = None,
) -> Credential:
    return Credential(
        id=credential_id or str(uuid4()),
        name=name,
        type=credential_type,
        data="U2FsdGVkX18WjITBG4IDqrGB1xE/uzVNjtwDAG3lP7E=",
    )


def credential_binding(credential: Credential) -> dict[str, dict[str, str]]:
    return {credential.type: {"id": credential.id, "name": credential.name}}


def create_execution(
    workflow: Workflow,
    *,
    stopped_at: datetime | None,
    finished: bool = True,
) -> Execution:
    return Execution(
        id=str(uuid4()),
        workflow_id=workflow.id,
        started_at=stopped_at or NOW,
        stopped_at=stopped_at,
        finished=finished,
        mode="manual",
    )


def get_risk_section(result: AuditResult, risk: str, title: str) -> RiskSection:
    report = result.get_report(risk)
    assert report is not None, f"Expected a {risk} report"
    section = report.get_section(title)
    assert section is not None, f"Expected section {title!r} in {risk} report"
    return section


def section_titles(result: AuditResult, risk: str) -> list[str]:
    report = result.get_report(risk)
    if report is None:
        return []
    return [section.title for section in report.sections]
