"""Workflow, node and execution snapshot entities."""

from __future__ import annotations
from collections.abc import Mapping
from datetime import datetime
from typing import Any
from pydantic import Field, field_validator, model_validator
from flowaudit.models.base import Identifier, SnapshotModel, UtcDatetime, _utcnow


__all__ = [
    "CredentialReference",
    "Execution",
    "Node",
    "Workflow",
]


class CredentialReference(SnapshotModel):
    """Pointer from a node to a stored credential."""

    id: Identifier = Field(min_length=1)
    name: str = ""


class Node(SnapshotModel):
    """Single step of a workflow graph."""

    id: Identifier = Field(min_length=1)
    name: str = ""
    type: str = Field(min_length=1)
    parameters: dict[str, Any] = Field(default_factory=dict)
    credentials: dict[str, CredentialReference] = Field(default_factory=dict)

    @field_validator("parameters", "credentials", mode="before")
    @classmethod
    def _default_empty_mapping(cls, value: object) -> object:
        return {} if value is None else value

    @model_validator(mode="after")
    def _default_name(self) -> Node:
        if not self.name:
            object.__setattr__(self, "name", self.id)
        return self

    @property
    def credential_ids(self) -> list[str]:
        """Return referenced credential ids in declaration order, deduplicated."""
        seen: set[str] = set()
        ordered: list[str] = []
        for reference in self.credentials.values():
            if reference.id not in seen:
                seen.add(reference.id)
                ordered.append(reference.id)
        return ordered


def _flatten_connection_targets(value: object) -> list[str]:
    """Collect target node names from a nested connection structure."""
    if isinstance(value, str):
        return [value]
    if isinstance(value, Mapping):
        if "node" in value:
            return [str(value["node"])]
        targets: list[str] = []
        for nested in value.values():
            targets.extend(_flatten_connection_targets(nested))
        return targets
    if isinstance(value, list | tuple):
        targets = []
        for nested in value:
            targets.extend(_flatten_connection_targets(nested))
        return targets
    return []


class Workflow(SnapshotModel):
    """Saved workflow definition.

    ``nodes`` holds the raw node definitions exactly as stored. They are parsed
    into :class:`Node` values when the audit snapshot is indexed so that one
    malformed node does not invalidate the whole workflow.
    """

    id: Identifier = Field(min_length=1)
    name: str = ""
    active: bool = False
    nodes: list[Any] = Field(default_factory=list)
    connections: dict[str, list[str]] = Field(default_factory=dict)
    created_at: UtcDatetime = Field(default_factory=_utcnow)
    updated_at: UtcDatetime = Field(default_factory=_utcnow)

    @field_validator("nodes", mode="before")
    @classmethod
    def _default_nodes(cls, value: object) -> object:
        return [] if value is None else value

    @field_validator("connections", mode="before")
    @classmethod
    def _normalize_connections(cls, value: object) -> dict[str, list[str]]:
        """Reduce ``{source: {main: [[{node: target}]]}}`` to ``{source: [target]}``."""
        if value is None:
            return {}
        if not isinstance(value, Mapping):
            msg = "Workflow connections must be a mapping of node names."
            raise ValueError(msg)
        normalized: dict[str, list[str]] = {}
        for source, targets in value.items():
            seen: list[str] = []
            for target in _flatten_connection_targets(targets):
                if target not in seen:
                    seen.append(target)
            normalized[str(source)] = seen
        return normalized

    @model_validator(mode="after")
    def _default_name(self) -> Workflow:
        if not self.name:
            object.__setattr__(self, "name", self.id)
        return self


class Execution(SnapshotModel):
    """Persisted record of a single workflow execution."""

    id: Identifier = Field(min_length=1)
    workflow_id: Identifier = Field(min_length=1)
    started_at: UtcDatetime
    stopped_at: UtcDatetime | None = None
    finished: bool = False
    mode: str = "manual"

    def stopped_after(self, threshold: datetime) -> bool:
        """Return whether the execution finished after ``threshold``."""
        return (
            self.finished
            and self.stopped_at is not None
            and self.stopped_at > threshold
        )
