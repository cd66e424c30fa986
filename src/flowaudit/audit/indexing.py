"""Traversal and indexing helpers shared by the risk categories."""

from __future__ import annotations
import logging
from collections.abc import Iterable, Iterator, Mapping
from dataclasses import dataclass
from datetime import datetime
from types import MappingProxyType
from typing import TypeVar
from pydantic import BaseModel, ValidationError
from flowaudit.audit.errors import DataIntegrityError
from flowaudit.models import (
    AuditWarning,
    Credential,
    Execution,
    Node,
    NodeLocation,
    Workflow,
)
from flowaudit.models.report import EntityKind
from flowaudit.sources.base import CredentialRecord, ExecutionRecord, WorkflowRecord


logger = logging.getLogger(__name__)

M = TypeVar("M", bound=BaseModel)


class WarningSink:
    """Collects data-integrity warnings raised while auditing.

    Each category task owns its own sink, so no locking is needed.
    """

    def __init__(self, category: str | None = None) -> None:
        """Create an empty sink attributed to ``category``."""
        self.category = category
        self._items: list[AuditWarning] = []

    @property
    def items(self) -> list[AuditWarning]:
        """Return recorded warnings in the order they were raised."""
        return list(self._items)

    def warn(
        self,
        *,
        entity_kind: EntityKind,
        entity_id: str,
        message: str,
        workflow_id: str | None = None,
    ) -> AuditWarning:
        """Record that an entity was skipped."""
        warning = AuditWarning(
            category=self.category,
            entity_kind=entity_kind,
            entity_id=entity_id,
            workflow_id=workflow_id,
            message=message,
        )
        self._items.append(warning)
        scope = f" in workflow {workflow_id}" if workflow_id else ""
        logger.warning(
            "Skipping malformed %s %s%s: %s", entity_kind, entity_id, scope, message
        )
        return warning


@dataclass(frozen=True, slots=True)
class NodeRef:
    """A parsed node together with the workflow that owns it."""

    workflow: Workflow
    node: Node

    def to_location(self) -> NodeLocation:
        """Return the node location pointing at this node."""
        return NodeLocation(
            workflow_id=self.workflow.id,
            workflow_name=self.workflow.name,
            node_id=self.node.id,
            node_name=self.node.name,
            node_type=self.node.type,
        )


@dataclass(frozen=True, slots=True)
class WorkflowGraph:
    """A workflow with its successfully parsed nodes."""

    workflow: Workflow
    nodes: tuple[Node, ...]

    def iter_refs(self) -> Iterator[NodeRef]:
        """Yield node references in workflow order."""
        for node in self.nodes:
            yield NodeRef(workflow=self.workflow, node=node)

    def children_of(self, node: Node) -> list[Node]:
        """Return the nodes directly connected downstream of ``node``."""
        by_name = {candidate.name: candidate for candidate in self.nodes}
        return [
            by_name[target]
            for target in self.workflow.connections.get(node.name, [])
            if target in by_name
        ]


def _describe_validation_error(exc: ValidationError) -> str:
    first = exc.errors()[0]
    field_path = ".".join(str(part) for part in first["loc"])
    if field_path:
        return f"{field_path}: {first['msg']}"
    return str(first["msg"])


def _raw_entity_id(raw: object, position: int) -> str:
    if isinstance(raw, Mapping) and raw.get("id") not in (None, ""):
        return str(raw["id"])
    return f"#{position}"


def _raw_workflow_id(raw: object) -> str | None:
    if not isinstance(raw, Mapping):
        return None
    value = raw.get("workflowId", raw.get("workflow_id"))
    return None if value in (None, "") else str(value)


def validate_records(
    model: type[M],
    records: Iterable[object],
    entity_kind: EntityKind,
    sink: WarningSink,
) -> list[M]:
    """Validate raw entity records, skipping malformed ones with a warning."""
    parsed: list[M] = []
    for position, raw in enumerate(records):
        if isinstance(raw, model):
            parsed.append(raw)
            continue
        try:
            parsed.append(model.model_validate(raw))
        except ValidationError as exc:
            sink.warn(
                entity_kind=entity_kind,
                entity_id=_raw_entity_id(raw, position),
                workflow_id=(
                    _raw_workflow_id(raw) if entity_kind == "execution" else None
                ),
                message=_describe_validation_error(exc),
            )
    return parsed


def parse_node(raw: object) -> Node:
    """Validate a raw node definition.

    Raises:
        DataIntegrityError: If the definition is not a valid node.
    """
    if isinstance(raw, Node):
        return raw
    if not isinstance(raw, Mapping):
        msg = f"Node definition must be a mapping, got {type(raw).__name__}"
        raise DataIntegrityError(msg)
    try:
        return Node.model_validate(raw)
    except ValidationError as exc:
        raise DataIntegrityError(_describe_validation_error(exc)) from exc


def build_workflow_graph(workflow: Workflow, sink: WarningSink) -> WorkflowGraph:
    """Parse the nodes of ``workflow``, skipping malformed ones."""
    nodes: list[Node] = []
    seen: set[str] = set()
    for position, raw in enumerate(workflow.nodes):
        try:
            node = parse_node(raw)
        except DataIntegrityError as exc:
            sink.warn(
                entity_kind="node",
                entity_id=_raw_entity_id(raw, position),
                workflow_id=workflow.id,
                message=str(exc),
            )
            continue
        if node.id in seen:
            sink.warn(
                entity_kind="node",
                entity_id=node.id,
                workflow_id=workflow.id,
                message="Duplicate node id within workflow",
            )
            continue
        seen.add(node.id)
        nodes.append(node)
    return WorkflowGraph(workflow=workflow, nodes=tuple(nodes))


def build_corpus(
    workflows: Iterable[Workflow], sink: WarningSink
) -> tuple[WorkflowGraph, ...]:
    """Parse every workflow, keeping the first occurrence of each id."""
    graphs: list[WorkflowGraph] = []
    seen: set[str] = set()
    for workflow in workflows:
        if workflow.id in seen:
            sink.warn(
                entity_kind="workflow",
                entity_id=workflow.id,
                message="Duplicate workflow id in corpus",
            )
            continue
        seen.add(workflow.id)
        graphs.append(build_workflow_graph(workflow, sink))
    return tuple(graphs)


def iter_node_refs(corpus: Iterable[WorkflowGraph]) -> Iterator[NodeRef]:
    """Yield every node of every workflow in corpus order."""
    for graph in corpus:
        yield from graph.iter_refs()


@dataclass(frozen=True, slots=True)
class CredentialUsage:
    """Nodes across the corpus that reference one credential."""

    credential_id: str
    references: tuple[NodeRef, ...]

    @property
    def workflow_ids(self) -> tuple[str, ...]:
        """Return referencing workflow ids in discovery order."""
        return tuple(dict.fromkeys(ref.workflow.id for ref in self.references))

    @property
    def in_active_workflow(self) -> bool:
        """Return whether any referencing workflow is active."""
        return any(ref.workflow.active for ref in self.references)


def build_credential_usage(
    corpus: Iterable[WorkflowGraph],
) -> Mapping[str, CredentialUsage]:
    """Map credential ids to their referencing nodes in one corpus scan.

    Keys keep first-discovery order.
    """
    references: dict[str, list[NodeRef]] = {}
    for ref in iter_node_refs(corpus):
        for credential_id in ref.node.credential_ids:
            references.setdefault(credential_id, []).append(ref)
    return MappingProxyType(
        {
            credential_id: CredentialUsage(
                credential_id=credential_id, references=tuple(items)
            )
            for credential_id, items in references.items()
        }
    )


class ExecutionIndex:
    """Finished executions grouped by workflow id."""

    def __init__(self, executions: Mapping[str, tuple[Execution, ...]]) -> None:
        """Wrap a prebuilt workflow id to executions mapping."""
        self._executions = MappingProxyType(dict(executions))

    @classmethod
    def from_executions(
        cls, executions: Iterable[Execution], sink: WarningSink
    ) -> ExecutionIndex:
        """Index finished executions, skipping inconsistent records."""
        grouped: dict[str, list[Execution]] = {}
        for execution in executions:
            if execution.finished and execution.stopped_at is None:
                sink.warn(
                    entity_kind="execution",
                    entity_id=execution.id,
                    workflow_id=execution.workflow_id,
                    message="Finished execution has no stop timestamp",
                )
                continue
            if not execution.finished:
                continue
            grouped.setdefault(execution.workflow_id, []).append(execution)
        return cls({key: tuple(items) for key, items in grouped.items()})

    def executed_since(self, workflow_ids: Iterable[str], threshold: datetime) -> bool:
        """Return whether any workflow finished an execution after ``threshold``."""
        return any(
            execution.stopped_after(threshold)
            for workflow_id in workflow_ids
            for execution in self._executions.get(workflow_id, ())
        )


@dataclass(frozen=True, slots=True)
class AuditSnapshot:
    """Immutable, pre-indexed view of the collaborator data for one run."""

    corpus: tuple[WorkflowGraph, ...]
    credentials: tuple[Credential, ...]
    executions: ExecutionIndex
    credential_usage: Mapping[str, CredentialUsage]
    warnings: tuple[AuditWarning, ...] = ()

    @classmethod
    def build(
        cls,
        *,
        workflows: Iterable[WorkflowRecord],
        credentials: Iterable[CredentialRecord],
        executions: Iterable[ExecutionRecord],
    ) -> AuditSnapshot:
        """Validate, parse and index fetched collaborator data."""
        sink = WarningSink()
        parsed_workflows = validate_records(Workflow, workflows, "workflow", sink)
        corpus = build_corpus(parsed_workflows, sink)
        unique_credentials: list[Credential] = []
        seen: set[str] = set()
        parsed_credentials = validate_records(
            Credential, credentials, "credential", sink
        )
        for credential in parsed_credentials:
            if credential.id in seen:
                sink.warn(
                    entity_kind="credential",
                    entity_id=credential.id,
                    message="Duplicate credential id in directory",
                )
                continue
            seen.add(credential.id)
            unique_credentials.append(credential)
        execution_index = ExecutionIndex.from_executions(
            validate_records(Execution, executions, "execution", sink), sink
        )
        return cls(
            corpus=corpus,
            credentials=tuple(unique_credentials),
            executions=execution_index,
            credential_usage=build_credential_usage(corpus),
            warnings=tuple(sink.items),
        )


__all__ = [
    "AuditSnapshot",
    "CredentialUsage",
    "ExecutionIndex",
    "NodeRef",
    "WarningSink",
    "WorkflowGraph",
    "build_corpus",
    "build_credential_usage",
    "build_workflow_graph",
    "iter_node_refs",
    "parse_node",
    "validate_records",
]
