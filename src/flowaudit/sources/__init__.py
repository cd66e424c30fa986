"""Collaborator interfaces and bundled implementations."""

from flowaudit.sources.base import (
    CredentialRecord,
    CredentialSource,
    ExecutionRecord,
    ExecutionSource,
    NodeTypeClassifier,
    RawRecord,
    SettingsProvider,
    WorkflowRecord,
    WorkflowSource,
)
from flowaudit.sources.in_memory import (
    InMemoryCredentialStore,
    InMemoryExecutionStore,
    InMemoryWorkflowStore,
)
from flowaudit.sources.snapshot import (
    SnapshotError,
    SnapshotSources,
    dump_snapshot,
    load_snapshot,
    parse_snapshot,
)


__all__ = [
    "CredentialRecord",
    "CredentialSource",
    "ExecutionRecord",
    "ExecutionSource",
    "InMemoryCredentialStore",
    "InMemoryExecutionStore",
    "InMemoryWorkflowStore",
    "NodeTypeClassifier",
    "RawRecord",
    "SettingsProvider",
    "SnapshotError",
    "SnapshotSources",
    "WorkflowRecord",
    "WorkflowSource",
    "dump_snapshot",
    "load_snapshot",
    "parse_snapshot",
]
