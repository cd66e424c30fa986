"""Risk report structures returned by the audit engine."""

from __future__ import annotations
from collections.abc import Iterator
from dataclasses import dataclass, field
from typing import Annotated, Any, Literal
from pydantic import BaseModel, ConfigDict, Field


class _LocationModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="forbid")


class CredentialLocation(_LocationModel):
    """Points at a stored credential."""

    kind: Literal["credential"] = "credential"
    id: str
    name: str


class WorkflowLocation(_LocationModel):
    """Points at a whole workflow."""

    kind: Literal["workflow"] = "workflow"
    id: str
    name: str


class NodeLocation(_LocationModel):
    """Points at a node inside a workflow."""

    kind: Literal["node"] = "node"
    workflow_id: str
    workflow_name: str
    node_id: str
    node_name: str
    node_type: str


class CommunityNodeLocation(_LocationModel):
    """Points at an installed community node package."""

    kind: Literal["community"] = "community"
    node_type: str
    package_url: str | None = None


class CustomNodeLocation(_LocationModel):
    """Points at a node type loaded from a local source file."""

    kind: Literal["custom"] = "custom"
    node_type: str
    file_path: str | None = None


class SettingLocation(_LocationModel):
    """Points at a configured instance setting."""

    kind: Literal["setting"] = "setting"
    key: str
    value: str


Location = Annotated[
    CredentialLocation
    | WorkflowLocation
    | NodeLocation
    | CommunityNodeLocation
    | CustomNodeLocation
    | SettingLocation,
    Field(discriminator="kind"),
]
"""Typed pointer to the entity that triggered a finding."""


class RiskSection(BaseModel):
    """One finding type within a risk category."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    title: str
    description: str
    recommendation: str
    location: list[Location] = Field(min_length=1)


class RiskReport(BaseModel):
    """Findings for a single risk category."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    risk: str
    sections: list[RiskSection] = Field(min_length=1)

    def get_section(self, title: str) -> RiskSection | None:
        """Return the section with ``title`` if the category reported it."""
        for section in self.sections:
            if section.title == title:
                return section
        return None


EntityKind = Literal["workflow", "node", "credential", "execution"]


class AuditWarning(BaseModel):
    """Malformed entity that was skipped while auditing."""

    model_config = ConfigDict(frozen=True, extra="forbid")

    category: str | None = None
    entity_kind: EntityKind
    entity_id: str
    workflow_id: str | None = None
    message: str


@dataclass(slots=True)
class AuditResult:
    """Ordered risk reports plus any data-integrity warnings for one run.

    Behaves as a read-only sequence of :class:`RiskReport` values.
    """

    reports: list[RiskReport] = field(default_factory=list)
    warnings: list[AuditWarning] = field(default_factory=list)

    def __len__(self) -> int:
        """Return the number of categories that reported findings."""
        return len(self.reports)

    def __iter__(self) -> Iterator[RiskReport]:
        """Iterate over reports in category registration order."""
        return iter(self.reports)

    def __getitem__(self, index: int) -> RiskReport:
        """Return the report at ``index``."""
        return self.reports[index]

    @property
    def is_degraded(self) -> bool:
        """Return ``True`` when malformed entities were skipped."""
        return bool(self.warnings)

    def get_report(self, risk: str) -> RiskReport | None:
        """Return the report for ``risk`` if that category found issues."""
        for report in self.reports:
            if report.risk == risk:
                return report
        return None

    def to_payload(self) -> list[dict[str, Any]]:
        """Return JSON-ready report dictionaries."""
        return [report.model_dump(mode="json") for report in self.reports]


__all__ = [
    "AuditResult",
    "AuditWarning",
    "CommunityNodeLocation",
    "CredentialLocation",
    "CustomNodeLocation",
    "EntityKind",
    "Location",
    "NodeLocation",
    "RiskReport",
    "RiskSection",
    "SettingLocation",
    "WorkflowLocation",
]
