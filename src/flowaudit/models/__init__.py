"""Domain models for audit snapshots and risk reports."""

from flowaudit.models.credential import Credential
from flowaudit.models.report import (
    AuditResult,
    AuditWarning,
    CommunityNodeLocation,
    CredentialLocation,
    CustomNodeLocation,
    Location,
    NodeLocation,
    RiskReport,
    RiskSection,
    SettingLocation,
    WorkflowLocation,
)
from flowaudit.models.workflow_entities import (
    CredentialReference,
    Execution,
    Node,
    Workflow,
)


__all__ = [
    "AuditResult",
    "AuditWarning",
    "CommunityNodeLocation",
    "Credential",
    "CredentialLocation",
    "CredentialReference",
    "CustomNodeLocation",
    "Execution",
    "Location",
    "Node",
    "NodeLocation",
    "RiskReport",
    "RiskSection",
    "SettingLocation",
    "Workflow",
    "WorkflowLocation",
]
