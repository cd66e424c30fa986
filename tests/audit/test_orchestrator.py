"""Tests for the audit orchestrator."""

from __future__ import annotations
import asyncio
import time
from typing import Any
import pytest
from flowaudit.audit import (
    AuditContext,
    AuditTimeoutError,
    Auditor,
    CategoryRegistry,
    CollaboratorFetchError,
    RiskCategory,
    UnknownCategoryError,
    build_default_categories,
    run_audit,
)
from flowaudit.audit.categories import build_section
from flowaudit.audit.constants import (
    CREDENTIALS,
    DATABASE,
    FILESYSTEM,
    INSTANCE,
    NODES,
    OFFICIAL_RISKY_NODES,
    RISK_CATEGORIES,
    SectionCopy,
)
from flowaudit.models import RiskSection, WorkflowLocation
from flowaudit.nodes import NodeTypeRegistry, node_type
from flowaudit.sources import (
    InMemoryCredentialStore,
    InMemoryExecutionStore,
    InMemoryWorkflowStore,
)
from tests.audit.helpers import (
    NOW,
    create_credential,
    create_execution,
    create_node,
    create_workflow,
    credential_binding,
    days_ago,
    fixed_clock,
    get_risk_section,
)


class _FailingWorkflowSource:
    def __init__(self) -> None:
        self.calls = 0

    async def fetch_workflows(self) -> list[Any]:
        self.calls += 1
        raise ConnectionError("database is down")


class _SlowWorkflowSource:
    async def fetch_workflows(self) -> list[Any]:
        await asyncio.sleep(5)
        return []


async def _populate_every_category(
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    settings: dict[str, Any],
) -> None:
    await credential_store.add(create_credential())
    await workflow_store.add(
        create_workflow(
            [
                create_node(
                    node_type("postgres"),
                    "Query",
                    parameters={
                        "operation": "executeQuery",
                        "query": "={{ $json.sql }}",
                    },
                ),
                create_node(node_type("executeCommand"), "Shell"),
                create_node(node_type("webhook"), "Webhook"),
                create_node(node_type("readBinaryFile"), "Read"),
            ],
            active=True,
        )
    )
    settings["PUBLIC_API_ENABLED"] = True


@pytest.mark.asyncio()
async def test_reports_follow_registration_order(
    auditor: Auditor,
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    settings: dict[str, Any],
) -> None:
    await _populate_every_category(workflow_store, credential_store, settings)

    everything = await auditor.run()
    reversed_selection = await auditor.run(list(reversed(RISK_CATEGORIES)))
    sentinel = await auditor.run("all")

    expected = [CREDENTIALS, DATABASE, NODES, INSTANCE, FILESYSTEM]
    assert [report.risk for report in everything] == expected
    assert [report.risk for report in reversed_selection] == expected
    assert [report.risk for report in sentinel] == expected


@pytest.mark.asyncio()
async def test_selection_is_normalised_and_subset_only(
    auditor: Auditor,
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    settings: dict[str, Any],
) -> None:
    await _populate_every_category(workflow_store, credential_store, settings)

    result = await auditor.run([" Filesystem", "NODES", "nodes"])

    assert [report.risk for report in result] == [NODES, FILESYSTEM]


@pytest.mark.asyncio()
async def test_empty_corpus_produces_empty_result(auditor: Auditor) -> None:
    result = await auditor.run()

    assert len(result) == 0
    assert result.to_payload() == []
    assert not result.is_degraded


@pytest.mark.asyncio()
async def test_unknown_category_is_rejected_before_fetching() -> None:
    source = _FailingWorkflowSource()
    auditor = Auditor(
        workflows=source,
        credentials=InMemoryCredentialStore(),
        executions=InMemoryExecutionStore(),
        settings={},
    )

    with pytest.raises(UnknownCategoryError) as exc_info:
        await auditor.run(["credentials", "secrets"])

    assert exc_info.value.category == "secrets"
    assert source.calls == 0


@pytest.mark.asyncio()
async def test_unknown_category_is_rejected_next_to_all() -> None:
    auditor = Auditor(
        workflows=InMemoryWorkflowStore(),
        credentials=InMemoryCredentialStore(),
        executions=InMemoryExecutionStore(),
        settings={},
    )

    with pytest.raises(UnknownCategoryError):
        await auditor.run(["all", "bogus"])


@pytest.mark.asyncio()
async def test_collaborator_failure_aborts_run() -> None:
    auditor = Auditor(
        workflows=_FailingWorkflowSource(),
        credentials=InMemoryCredentialStore(),
        executions=InMemoryExecutionStore(),
        settings={},
    )

    with pytest.raises(CollaboratorFetchError) as exc_info:
        await auditor.run()

    assert exc_info.value.collaborator == "workflows"
    assert isinstance(exc_info.value.__cause__, ConnectionError)


@pytest.mark.asyncio()
async def test_deadline_raises_timeout_error() -> None:
    auditor = Auditor(
        workflows=_SlowWorkflowSource(),
        credentials=InMemoryCredentialStore(),
        executions=InMemoryExecutionStore(),
        settings={},
    )

    with pytest.raises(AuditTimeoutError) as exc_info:
        await auditor.run(timeout=0.05)

    assert exc_info.value.timeout == pytest.approx(0.05)
    assert isinstance(exc_info.value, TimeoutError)


@pytest.mark.asyncio()
async def test_timeout_defaults_to_configured_value() -> None:
    auditor = Auditor(
        workflows=_SlowWorkflowSource(),
        credentials=InMemoryCredentialStore(),
        executions=InMemoryExecutionStore(),
        settings={"AUDIT_TIMEOUT_SECONDS": 0.05},
    )

    with pytest.raises(AuditTimeoutError):
        await auditor.run()


@pytest.mark.asyncio()
async def test_deadline_abandons_running_analyzers(
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    execution_store: InMemoryExecutionStore,
) -> None:
    categories = CategoryRegistry()
    finished: list[str] = []

    @categories.register("slow")
    def _slow(context: AuditContext) -> list[RiskSection]:
        time.sleep(0.5)
        finished.append(context.category)
        return []

    auditor = Auditor(
        workflows=workflow_store,
        credentials=credential_store,
        executions=execution_store,
        registry=NodeTypeRegistry(),
        settings={},
        categories=categories,
        clock=fixed_clock,
    )
    result = None

    with pytest.raises(AuditTimeoutError):
        result = await auditor.run(timeout=0.05)

    assert result is None
    assert finished == []


@pytest.mark.asyncio()
async def test_naive_clock_is_treated_as_utc(
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    execution_store: InMemoryExecutionStore,
) -> None:
    credential = await credential_store.add(create_credential())
    workflow = await workflow_store.add(
        create_workflow(
            [
                create_node(
                    node_type("slack"), credentials=credential_binding(credential)
                )
            ],
            active=True,
        )
    )
    await execution_store.add(create_execution(workflow, stopped_at=days_ago(3)))

    result = await run_audit(
        [CREDENTIALS],
        workflows=workflow_store,
        credentials=credential_store,
        executions=execution_store,
        settings={},
        clock=lambda: NOW.replace(tzinfo=None),
    )

    assert len(result) == 0


@pytest.mark.asyncio()
async def test_invalid_overrides_are_rejected(auditor: Auditor) -> None:
    with pytest.raises(ValueError, match="days_abandoned_workflow"):
        await auditor.run(days_abandoned_workflow=0)
    with pytest.raises(ValueError, match="timeout"):
        await auditor.run(timeout=-1)


@pytest.mark.asyncio()
async def test_runs_are_deterministic(
    auditor: Auditor,
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    settings: dict[str, Any],
) -> None:
    await _populate_every_category(workflow_store, credential_store, settings)

    first = await auditor.run()
    second = await auditor.run()

    assert first.to_payload() == second.to_payload()


@pytest.mark.asyncio()
async def test_concurrent_runs_share_one_auditor(
    auditor: Auditor,
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    settings: dict[str, Any],
) -> None:
    await _populate_every_category(workflow_store, credential_store, settings)

    results = await asyncio.gather(*(auditor.run() for _ in range(3)))

    payloads = [result.to_payload() for result in results]
    assert payloads[0] == payloads[1] == payloads[2]


@pytest.mark.asyncio()
async def test_malformed_node_is_skipped_with_warning(
    auditor: Auditor,
    workflow_store: InMemoryWorkflowStore,
) -> None:
    workflow = await workflow_store.add(
        create_workflow(
            [
                {"id": "broken", "name": "Broken", "parameters": {}},
                create_node(node_type("executeCommand"), "Shell", node_id="shell"),
            ]
        )
    )

    result = await auditor.run()

    section = get_risk_section(result, NODES, OFFICIAL_RISKY_NODES.title)
    assert [location.node_id for location in section.location] == ["shell"]
    assert result.is_degraded
    assert [warning.entity_id for warning in result.warnings] == ["broken"]
    assert result.warnings[0].workflow_id == workflow.id
    assert result.warnings[0].category is None


@pytest.mark.asyncio()
async def test_custom_category_runs_after_builtins(
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    execution_store: InMemoryExecutionStore,
    node_registry: NodeTypeRegistry,
    settings: dict[str, Any],
) -> None:
    categories = build_default_categories()
    copy = SectionCopy(
        title="Workflows without a name",
        description="Unnamed workflows are hard to review.",
        recommendation="Give every workflow a descriptive name.",
    )

    @categories.register("naming", description="Workflow naming hygiene")
    def _naming(context: AuditContext) -> list[RiskSection]:
        locations = [
            WorkflowLocation(id=graph.workflow.id, name=graph.workflow.name)
            for graph in context.snapshot.corpus
            if graph.workflow.name == graph.workflow.id
        ]
        section = build_section(copy, locations)
        return [section] if section else []

    await workflow_store.add(create_workflow([], workflow_id="wf-1", name=""))
    auditor = Auditor(
        workflows=workflow_store,
        credentials=credential_store,
        executions=execution_store,
        registry=node_registry,
        settings=settings,
        categories=categories,
        clock=fixed_clock,
    )

    result = await auditor.run()

    assert [report.risk for report in result] == ["naming"]
    section = get_risk_section(result, "naming", copy.title)
    assert section.location == [WorkflowLocation(id="wf-1", name="wf-1")]


def test_category_names_must_be_unique() -> None:
    categories = build_default_categories()

    with pytest.raises(ValueError, match="already registered"):
        categories.add(RiskCategory(name="Credentials", analyze=lambda _: []))
    with pytest.raises(ValueError, match="Invalid"):
        categories.add(RiskCategory(name="all", analyze=lambda _: []))


@pytest.mark.asyncio()
async def test_fan_in_ignores_completion_order(
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    execution_store: InMemoryExecutionStore,
) -> None:
    categories = CategoryRegistry()

    def _finding(name: str, delay: float) -> RiskCategory:
        def analyze(context: AuditContext) -> list[RiskSection]:
            time.sleep(delay)
            return [
                RiskSection(
                    title=f"{name} finding",
                    description="",
                    recommendation="",
                    location=[WorkflowLocation(id=name, name=name)],
                )
            ]

        return RiskCategory(name=name, analyze=analyze)

    categories.add(_finding("slow", 0.2))
    categories.add(_finding("fast", 0.0))

    auditor = Auditor(
        workflows=workflow_store,
        credentials=credential_store,
        executions=execution_store,
        registry=NodeTypeRegistry(),
        settings={},
        categories=categories,
        clock=fixed_clock,
    )

    result = await auditor.run()

    assert [report.risk for report in result] == ["slow", "fast"]


@pytest.mark.asyncio()
async def test_run_audit_uses_default_collaborators(
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    execution_store: InMemoryExecutionStore,
) -> None:
    credential = await credential_store.add(create_credential())

    result = await run_audit(
        [CREDENTIALS],
        workflows=workflow_store,
        credentials=credential_store,
        executions=execution_store,
        settings={},
        clock=fixed_clock,
    )

    assert [report.risk for report in result] == [CREDENTIALS]
    payload = result.to_payload()
    assert payload[0]["sections"][0]["location"] == [
        {"kind": "credential", "id": credential.id, "name": credential.name}
    ]
