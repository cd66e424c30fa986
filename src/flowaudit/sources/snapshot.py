"""Load an audit snapshot from an exported JSON document."""

from __future__ import annotations
import json
import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any
from pydantic import BaseModel, ConfigDict, Field, ValidationError
from flowaudit.models import Credential, Execution, Workflow
from flowaudit.sources.in_memory import (
    InMemoryCredentialStore,
    InMemoryExecutionStore,
    InMemoryWorkflowStore,
)


logger = logging.getLogger(__name__)


class SnapshotError(ValueError):
    """Raised when a snapshot document cannot be read or validated."""


class SnapshotDocument(BaseModel):
    """Top-level layout of a snapshot file.

    Only the envelope is validated here. Each record is validated while the
    audit snapshot is indexed, so one malformed entity is skipped with a
    warning instead of rejecting the whole document.
    """

    model_config = ConfigDict(extra="ignore")

    workflows: list[Any] = Field(default_factory=list)
    credentials: list[Any] = Field(default_factory=list)
    executions: list[Any] = Field(default_factory=list)


@dataclass(slots=True)
class SnapshotSources:
    """Collaborators backed by a loaded snapshot document."""

    workflows: InMemoryWorkflowStore
    credentials: InMemoryCredentialStore
    executions: InMemoryExecutionStore


def parse_snapshot(payload: str | bytes) -> SnapshotSources:
    """Parse a JSON snapshot payload and wrap its records in in-memory stores."""
    try:
        document = SnapshotDocument.model_validate_json(payload)
    except ValidationError as exc:
        msg = f"Snapshot document is invalid: {exc.error_count()} validation error(s)"
        raise SnapshotError(msg) from exc
    logger.debug(
        "Loaded snapshot with %d workflow(s), %d credential(s), %d execution(s)",
        len(document.workflows),
        len(document.credentials),
        len(document.executions),
    )
    return SnapshotSources(
        workflows=InMemoryWorkflowStore(document.workflows),
        credentials=InMemoryCredentialStore(document.credentials),
        executions=InMemoryExecutionStore(document.executions),
    )


def load_snapshot(path: str | Path) -> SnapshotSources:
    """Read a snapshot file from disk."""
    snapshot_path = Path(path).expanduser()
    try:
        payload = snapshot_path.read_bytes()
    except OSError as exc:
        msg = f"Snapshot file {snapshot_path} could not be read: {exc}"
        raise SnapshotError(msg) from exc
    return parse_snapshot(payload)


def dump_snapshot(
    workflows: list[Workflow],
    credentials: list[Credential],
    executions: list[Execution],
) -> str:
    """Serialise entities into the snapshot document format."""
    document = {
        "workflows": [item.model_dump(mode="json") for item in workflows],
        "credentials": [item.model_dump(mode="json") for item in credentials],
        "executions": [item.model_dump(mode="json") for item in executions],
    }
    return json.dumps(document, indent=2)


__all__ = [
    "SnapshotDocument",
    "SnapshotError",
    "SnapshotSources",
    "dump_snapshot",
    "load_snapshot",
    "parse_snapshot",
]
