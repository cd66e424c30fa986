"""Fixtures for audit engine tests."""

from __future__ import annotations
from typing import Any
import pytest
from flowaudit.audit import Auditor
from flowaudit.nodes import NodeTypeRegistry, build_default_registry
from flowaudit.sources import (
    InMemoryCredentialStore,
    InMemoryExecutionStore,
    InMemoryWorkflowStore,
)
from tests.audit.helpers import DAYS_ABANDONED, fixed_clock


@pytest.fixture()
def workflow_store() -> InMemoryWorkflowStore:
    return InMemoryWorkflowStore()


@pytest.fixture()
def credential_store() -> InMemoryCredentialStore:
    return InMemoryCredentialStore()


@pytest.fixture()
def execution_store() -> InMemoryExecutionStore:
    return InMemoryExecutionStore()


@pytest.fixture()
def node_registry() -> NodeTypeRegistry:
    return build_default_registry()


@pytest.fixture()
def settings() -> dict[str, Any]:
    """Hardened instance settings so only the rule under test reports."""
    return {
        "DAYS_ABANDONED_WORKFLOW": DAYS_ABANDONED,
        "AUDIT_TIMEOUT_SECONDS": 0,
        "PUBLIC_API_ENABLED": False,
        "EXECUTIONS_DATA_PRUNE": True,
        "BLOCK_FILE_ACCESS_TO_INTERNAL_PATHS": True,
        "EXCLUDED_NODE_TYPES": ["nodes-base.executeCommand"],
    }


@pytest.fixture()
def auditor(
    workflow_store: InMemoryWorkflowStore,
    credential_store: InMemoryCredentialStore,
    execution_store: InMemoryExecutionStore,
    node_registry: NodeTypeRegistry,
    settings: dict[str, Any],
) -> Auditor:
    return Auditor(
        workflows=workflow_store,
        credentials=credential_store,
        executions=execution_store,
        registry=node_registry,
        settings=settings,
        clock=fixed_clock,
    )
