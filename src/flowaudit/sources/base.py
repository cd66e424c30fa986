"""Collaborator interfaces consumed by the audit engine."""

from __future__ import annotations
from collections.abc import Iterable, Mapping
from typing import Any, Protocol
from flowaudit.models import Credential, Execution, Workflow
from flowaudit.nodes.registry import NodeCapability, NodeTypeMetadata


RawRecord = Mapping[str, Any]
"""Unvalidated entity as stored or exported; validated while indexing."""

WorkflowRecord = Workflow | RawRecord
CredentialRecord = Credential | RawRecord
ExecutionRecord = Execution | RawRecord


class WorkflowSource(Protocol):
    """Supplies the full workflow corpus including raw node definitions."""

    async def fetch_workflows(self) -> list[WorkflowRecord]:
        """Return every stored workflow."""


class CredentialSource(Protocol):
    """Supplies stored credential metadata without decrypting payloads."""

    async def fetch_credentials(self) -> list[CredentialRecord]:
        """Return every stored credential."""


class ExecutionSource(Protocol):
    """Supplies recorded executions."""

    async def fetch_executions(
        self, workflow_id: str | None = None
    ) -> list[ExecutionRecord]:
        """Return executions, optionally restricted to one workflow."""


class NodeTypeClassifier(Protocol):
    """Classifies node type identifiers into capability tags."""

    def classify(self, node_type: str) -> frozenset[str]:
        """Return the capability tags for ``node_type``."""

    def iter_tagged(self, tag: NodeCapability | str) -> Iterable[NodeTypeMetadata]:
        """Yield registered node types carrying ``tag``."""


class SettingsProvider(Protocol):
    """Read access to configuration values; satisfied by ``Dynaconf``."""

    def get(self, key: str, default: Any = None) -> Any:
        """Return the value stored for ``key``."""


__all__ = [
    "CredentialRecord",
    "CredentialSource",
    "ExecutionRecord",
    "ExecutionSource",
    "NodeTypeClassifier",
    "RawRecord",
    "SettingsProvider",
    "WorkflowRecord",
    "WorkflowSource",
]
