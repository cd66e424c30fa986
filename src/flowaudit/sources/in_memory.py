"""Async-safe in-memory collaborator implementations."""

from __future__ import annotations
import asyncio
from collections.abc import Iterable, Mapping
from flowaudit.models import Credential, Execution, Workflow
from flowaudit.sources.base import CredentialRecord, ExecutionRecord, WorkflowRecord


def _workflow_id_of(execution: ExecutionRecord) -> str | None:
    if isinstance(execution, Mapping):
        value = execution.get("workflowId", execution.get("workflow_id"))
        return None if value is None else str(value)
    return execution.workflow_id


class InMemoryWorkflowStore:
    """Workflow corpus held in memory, used for tests and snapshot files."""

    def __init__(self, workflows: Iterable[WorkflowRecord] = ()) -> None:
        """Initialize the store with optional workflows."""
        self._lock = asyncio.Lock()
        self._workflows: list[WorkflowRecord] = list(workflows)

    async def add(self, workflow: Workflow) -> Workflow:
        """Append a workflow to the corpus."""
        async with self._lock:
            self._workflows.append(workflow)
            return workflow

    async def fetch_workflows(self) -> list[WorkflowRecord]:
        """Return workflows in insertion order."""
        async with self._lock:
            return list(self._workflows)

    async def clear(self) -> None:
        """Remove all workflows. Intended for testing only."""
        async with self._lock:
            self._workflows.clear()


class InMemoryCredentialStore:
    """Credential directory held in memory."""

    def __init__(self, credentials: Iterable[CredentialRecord] = ()) -> None:
        """Initialize the store with optional credentials."""
        self._lock = asyncio.Lock()
        self._credentials: list[CredentialRecord] = list(credentials)

    async def add(self, credential: Credential) -> Credential:
        """Append a credential to the directory."""
        async with self._lock:
            self._credentials.append(credential)
            return credential

    async def fetch_credentials(self) -> list[CredentialRecord]:
        """Return credentials in insertion order."""
        async with self._lock:
            return list(self._credentials)

    async def clear(self) -> None:
        """Remove all credentials. Intended for testing only."""
        async with self._lock:
            self._credentials.clear()


class InMemoryExecutionStore:
    """Execution history held in memory."""

    def __init__(self, executions: Iterable[ExecutionRecord] = ()) -> None:
        """Initialize the store with optional executions."""
        self._lock = asyncio.Lock()
        self._executions: list[ExecutionRecord] = list(executions)

    async def add(self, execution: Execution) -> Execution:
        """Record an execution."""
        async with self._lock:
            self._executions.append(execution)
            return execution

    async def fetch_executions(
        self, workflow_id: str | None = None
    ) -> list[ExecutionRecord]:
        """Return executions, optionally only those of ``workflow_id``."""
        async with self._lock:
            return [
                execution
                for execution in self._executions
                if workflow_id is None or _workflow_id_of(execution) == workflow_id
            ]

    async def clear(self) -> None:
        """Remove all executions. Intended for testing only."""
        async with self._lock:
            self._executions.clear()


__all__ = [
    "InMemoryCredentialStore",
    "InMemoryExecutionStore",
    "InMemoryWorkflowStore",
]
